"""Entry points that bind a builder to an object and render its fields.

``content`` is a callable receiving the builder and returning markup::

    html = lined_form_for(
        "machine",
        machine,
        lambda f: f.field("name") + f.field("built_on") + f.submit_button("save"),
        action="/machines/1/",
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from django.core.exceptions import ValidationError
from django.forms.utils import flatatt
from django.utils.html import format_html

from awesome_fields.apps.fields.builders import FormBuilder, LinedBuilder

logger = logging.getLogger(__name__)

Content = Callable[[FormBuilder], str]


def fields_for(
    object_name: str,
    obj: Any,
    content: Content,
    builder: type[FormBuilder] = FormBuilder,
    errors: Any = None,
) -> str:
    """Render ``content`` with a builder, without a surrounding ``<form>``.

    Markup returned by ``content`` is escaped unless it is a safe string (builder
    output and concatenations of it are).
    """
    return format_html("{}", content(builder(object_name, obj, errors=errors)))


def form_for(
    object_name: str,
    obj: Any,
    content: Content,
    builder: type[FormBuilder] = FormBuilder,
    errors: Any = None,
    action: str = "",
    method: str = "post",
    csrf_token: str | None = None,
    attrs: dict | None = None,
) -> str:
    """Render a ``<form>`` around ``content``.

    A CSRF hidden input is included when ``csrf_token`` is given.
    """
    form_attrs = {"action": action, "method": method, **(attrs or {})}
    csrf_input = ""
    if csrf_token:
        csrf_input = format_html(
            '<input type="hidden" name="csrfmiddlewaretoken" value="{}">', csrf_token
        )
    return format_html(
        "<form{}>{}{}</form>",
        flatatt(form_attrs),
        csrf_input,
        fields_for(object_name, obj, content, builder=builder, errors=errors),
    )


def lined_form_for(object_name: str, obj: Any, content: Content, **kwargs) -> str:
    """:func:`form_for`, with the builder always a :class:`LinedBuilder`."""
    kwargs["builder"] = LinedBuilder
    return form_for(object_name, obj, content, **kwargs)


def lined_fields_for(object_name: str, obj: Any, content: Content, **kwargs) -> str:
    """:func:`fields_for`, with the builder always a :class:`LinedBuilder`."""
    kwargs["builder"] = LinedBuilder
    return fields_for(object_name, obj, content, **kwargs)


def errors_for(instance: Any) -> dict[str, list[str]]:
    """Validate a model instance and return its errors by field name.

    Returns an empty dict when ``full_clean()`` passes.
    """
    try:
        instance.full_clean()
    except ValidationError as err:
        logger.debug(
            "model_validation_failed",
            extra={"model": type(instance).__name__, "fields": sorted(err.message_dict)},
        )
        return err.message_dict
    return {}
