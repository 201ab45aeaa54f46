from django.apps import AppConfig


class FieldsConfig(AppConfig):
    name = "awesome_fields.apps.fields"
    label = "fields"
    verbose_name = "Awesome Fields"
