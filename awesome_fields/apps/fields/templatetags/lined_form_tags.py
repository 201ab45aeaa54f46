"""lined_form_for and lined_fields_for: form_for/fields_for with a LinedBuilder.

Usage:
    {% load field_tags lined_form_tags %}
    {% lined_form_for "machine" machine as f action=save_url errors=errors %}
        {% field f "name" label="Machine name" %}
        {% submit_button f "save" %}
    {% endlined_form_for %}
"""

from django import template

from awesome_fields.apps.fields.builders import LinedBuilder
from awesome_fields.apps.fields.templatetags.field_tags import parse_builder_tag

register = template.Library()


@register.tag(name="lined_form_for")
def do_lined_form_for(parser, token):
    return parse_builder_tag(parser, token, wrap_form=True, forced_builder=LinedBuilder)


@register.tag(name="lined_fields_for")
def do_lined_fields_for(parser, token):
    return parse_builder_tag(parser, token, wrap_form=False, forced_builder=LinedBuilder)
