"""Form builder template tags: form_for, fields_for and the field helpers.

Usage:
    {% load field_tags %}
    {% form_for "machine" machine as f action=save_url %}
        {% field f "name" %}
        {% field f "notes" long=True %}
        {% collection_field f "parts" multiple=True %}
        {% submit_button f "save" %}
    {% endform_for %}
"""

from django import template
from django.template.base import token_kwargs
from django.utils.module_loading import import_string

from awesome_fields.apps.fields.builders import FormBuilder
from awesome_fields.apps.fields.shortcuts import fields_for, form_for

register = template.Library()


class BuilderNode(template.Node):
    """Renders the tag body with a builder bound to ``var_name``."""

    def __init__(self, nodelist, object_name, obj, var_name, kwargs, wrap_form, forced_builder=None):
        self.nodelist = nodelist
        self.object_name = object_name
        self.obj = obj
        self.var_name = var_name
        self.kwargs = kwargs
        self.wrap_form = wrap_form
        self.forced_builder = forced_builder

    def render(self, context):
        kwargs = {key: value.resolve(context) for key, value in self.kwargs.items()}
        builder = kwargs.pop("builder", None) or FormBuilder
        if isinstance(builder, str):
            builder = import_string(builder)
        if self.forced_builder is not None:
            builder = self.forced_builder

        def content(f):
            with context.push({self.var_name: f}):
                return self.nodelist.render(context)

        object_name = self.object_name.resolve(context)
        obj = self.obj.resolve(context)
        if not self.wrap_form:
            return fields_for(object_name, obj, content, builder=builder, **kwargs)

        if "csrf_token" not in kwargs:
            token = context.get("csrf_token")
            if token and str(token) != "NOTPROVIDED":
                kwargs["csrf_token"] = str(token)
        return form_for(object_name, obj, content, builder=builder, **kwargs)


def parse_builder_tag(parser, token, *, wrap_form, forced_builder=None):
    """Parse ``{% tag <object_name> <object> as <var> [key=value ...] %}...{% endtag %}``."""
    bits = token.split_contents()
    tag_name = bits.pop(0)
    if len(bits) < 4 or bits[2] != "as":
        raise template.TemplateSyntaxError(
            f"'{tag_name}' expects: {tag_name} <object_name> <object> as <var> [key=value ...]"
        )
    object_name = parser.compile_filter(bits[0])
    obj = parser.compile_filter(bits[1])
    var_name = bits[3]

    remaining = bits[4:]
    kwargs = token_kwargs(remaining, parser)
    if remaining:
        raise template.TemplateSyntaxError(
            f"'{tag_name}' received an invalid argument: {remaining[0]!r}"
        )

    nodelist = parser.parse((f"end{tag_name}",))
    parser.delete_first_token()
    return BuilderNode(nodelist, object_name, obj, var_name, kwargs, wrap_form, forced_builder)


@register.tag(name="form_for")
def do_form_for(parser, token):
    return parse_builder_tag(parser, token, wrap_form=True)


@register.tag(name="fields_for")
def do_fields_for(parser, token):
    return parse_builder_tag(parser, token, wrap_form=False)


@register.simple_tag
def field(builder, attribute, attrs=None, **options):
    """Render the control inferred for ``attribute``."""
    return builder.field(attribute, attrs, **options)


@register.simple_tag
def collection_field(builder, attribute, attrs=None, **options):
    return builder.collection_field(attribute, attrs, **options)


@register.simple_tag
def string_field(builder, attribute, attrs=None, **options):
    return builder.string_field(attribute, attrs, **options)


@register.simple_tag
def time_field(builder, attribute, attrs=None, **options):
    return builder.time_field(attribute, attrs, **options)


@register.simple_tag
def submit_button(builder, label="submit"):
    return builder.submit_button(label)
