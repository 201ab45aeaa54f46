"""Form builders: render controls for the attributes of one object.

A builder is bound to an object name (the control-name prefix) and an
object. Every control method takes the attribute name, an optional dict of
HTML attributes, and builder options as keyword arguments, and returns a
safe HTML string rendered by a Django widget.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS, ObjectDoesNotExist, ValidationError
from django.db import models
from django.forms.utils import flatatt, pretty_name
from django.utils.html import format_html
from django.utils.safestring import SafeString
from django.utils.text import capfirst, get_text_list
from django.utils.translation import gettext as _

from awesome_fields.apps.fields.columns import column_for_attribute, is_plural
from awesome_fields.apps.fields.conf import get_setting
from awesome_fields.apps.fields.helpers import AwesomeFieldHelpers
from awesome_fields.apps.fields.widgets import (
    DATE_PARTS,
    SelectDateTimeWidget,
    default_years,
)


def humanize(name: str) -> str:
    """``"first_name"`` -> ``"First name"``, ``"owner_id"`` -> ``"Owner"``."""
    if name.endswith("_id") and name != "_id":
        name = name.removesuffix("_id")
    return pretty_name(name)


def normalize_errors(errors: Any) -> Any:
    """Return an attribute -> messages mapping from any supported error source."""
    if errors is None:
        return {}
    if isinstance(errors, ValidationError):
        if hasattr(errors, "error_dict"):
            return errors.message_dict
        return {NON_FIELD_ERRORS: errors.messages}
    return errors


class FormBuilder(AwesomeFieldHelpers):
    """Renders plain controls named ``<object_name>-<attribute>``.

    ``errors`` maps attribute names to lists of messages. A Django
    ``ErrorDict`` or a ``ValidationError`` from ``full_clean()`` work as-is.
    When omitted, the object's own ``errors`` attribute is used, if any.
    """

    def __init__(self, object_name: str, obj: Any = None, errors: Any = None):
        self.object_name = object_name
        self.object = obj
        if errors is None:
            errors = getattr(obj, "errors", None)
        self.errors = normalize_errors(errors)

    def __repr__(self):
        return f"<{type(self).__name__} {self.object_name!r}>"

    # -------------------------------------------------------------------
    # Naming and values
    # -------------------------------------------------------------------

    def html_name(self, attribute: str) -> str:
        if not self.object_name:
            return attribute
        return f"{self.object_name}-{attribute}"

    def auto_id(self, attribute: str) -> str:
        return f"id_{self.html_name(attribute)}"

    def value_for(self, attribute: str) -> Any:
        """Current value of ``attribute``; a missing related object reads as None.

        To-many relations of an unsaved record also read as None, since their
        managers can't be used before the record has a primary key.
        """
        if self.object is None:
            return None
        if isinstance(self.object, models.Model) and self.object.pk is None:
            if is_plural(column_for_attribute(self.object, attribute)):
                return None
        try:
            return getattr(self.object, attribute)
        except ObjectDoesNotExist:
            return None

    def label_text(self, attribute: str) -> str:
        """Model field verbose name when there is one, else the humanized attribute."""
        column = column_for_attribute(self.object, attribute)
        verbose_name = getattr(column, "verbose_name", None)
        if verbose_name and isinstance(column, models.Field):
            return capfirst(verbose_name)
        return humanize(attribute)

    def _render(self, widget: forms.Widget, attribute: str, attrs: dict | None, value: Any) -> SafeString:
        final_attrs = {"id": self.auto_id(attribute), **(attrs or {})}
        return widget.render(self.html_name(attribute), value, attrs=final_attrs)

    # -------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------

    def text_field(self, attribute: str, attrs: dict | None = None, **options) -> SafeString:
        return self._render(forms.TextInput(), attribute, attrs, self.value_for(attribute))

    def password_field(self, attribute: str, attrs: dict | None = None, **options) -> SafeString:
        return self._render(forms.PasswordInput(), attribute, attrs, self.value_for(attribute))

    def hidden_field(self, attribute: str, attrs: dict | None = None, **options) -> SafeString:
        return self._render(forms.HiddenInput(), attribute, attrs, self.value_for(attribute))

    def file_field(self, attribute: str, attrs: dict | None = None, **options) -> SafeString:
        return self._render(forms.FileInput(), attribute, attrs, None)

    def check_box(self, attribute: str, attrs: dict | None = None, **options) -> SafeString:
        return self._render(forms.CheckboxInput(), attribute, attrs, self.value_for(attribute))

    def text_area(self, attribute: str, attrs: dict | None = None, **options) -> SafeString:
        return self._render(forms.Textarea(), attribute, attrs, self.value_for(attribute))

    def select(
        self,
        attribute: str,
        choices,
        attrs: dict | None = None,
        selected=None,
        multiple: bool | None = None,
        include_blank: bool = False,
        prompt: str | None = None,
        **options,
    ) -> SafeString:
        """Render a select of ``(value, text)`` choices.

        ``selected`` holds the selected value(s); by default the attribute's
        current value (a model instance selects its primary key).
        """
        attrs = dict(attrs or {})
        multiple = bool(multiple or attrs.pop("multiple", False))

        choices = list(choices)
        if include_blank or prompt:
            choices.insert(0, ("", prompt or ""))

        if selected is None:
            selected = self.value_for(attribute)
            if isinstance(selected, models.Model):
                selected = selected.pk

        widget = forms.SelectMultiple(choices=choices) if multiple else forms.Select(choices=choices)
        return self._render(widget, attribute, attrs, selected)

    def date_select(
        self, attribute: str, attrs: dict | None = None, order=None, **options
    ) -> SafeString:
        """Month/day/year selects; ``order`` lists the parts to show and their order."""
        return self._date_time_select(attribute, tuple(order or DATE_PARTS), attrs, options)

    def time_select(
        self, attribute: str, attrs: dict | None = None, include_seconds: bool = False, **options
    ) -> SafeString:
        return self._date_time_select(attribute, self._time_parts(include_seconds), attrs, options)

    def datetime_select(
        self,
        attribute: str,
        attrs: dict | None = None,
        order=None,
        include_seconds: bool = False,
        **options,
    ) -> SafeString:
        parts = tuple(order or DATE_PARTS) + self._time_parts(include_seconds)
        return self._date_time_select(attribute, parts, attrs, options)

    def label(self, attribute: str, text: str | None = None, attrs: dict | None = None) -> SafeString:
        final_attrs = {"for": self.auto_id(attribute), **(attrs or {})}
        return format_html(
            "<label{}>{}</label>", flatatt(final_attrs), text or self.label_text(attribute)
        )

    def submit(self, value: str = "Save", attrs: dict | None = None) -> SafeString:
        final_attrs = {"type": "submit", "name": "commit", "value": value, **(attrs or {})}
        return format_html("<input{}>", flatatt(final_attrs))

    def submit_button(self, label: str = "submit", attrs: dict | None = None) -> SafeString:
        return self.submit(humanize(label), attrs)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------

    @staticmethod
    def _time_parts(include_seconds: bool) -> tuple[str, ...]:
        if include_seconds:
            return ("hour", "minute", "second")
        return ("hour", "minute")

    def _date_time_select(self, attribute: str, parts, attrs, options) -> SafeString:
        value = self.value_for(attribute)
        widget = SelectDateTimeWidget(
            parts=parts,
            years=self._years(value, options),
            minute_step=options.get("minute_step", 1),
            include_blank=options.get("include_blank", False),
        )
        return self._render(widget, attribute, attrs, value)

    @staticmethod
    def _years(value: Any, options: dict) -> range:
        around = value.year if isinstance(value, dt.date) else None
        years = default_years(around)
        start = options.get("start_year", years.start)
        end = options.get("end_year", years.stop - 1)
        step = 1 if end >= start else -1
        return range(start, end + step, step)


class LinedBuilder(FormBuilder):
    """Wraps each control in ``<div class="form_line">`` with a label and errors.

    Options understood by every control:
        label: Label text, instead of the field's verbose name.
        no_label: Omit the label.
        long: Bigger textarea, and a ``long`` class on the label.
        after: Markup appended after the control (escaped unless safe).

    When the attribute has errors the wrapper's class is
    ``form_line_with_errors`` and a ``field_error`` div comes first.
    """

    def text_field(self, attribute, attrs=None, **options):
        return self.labeled_field(attribute, options, super().text_field(attribute, attrs, **options))

    def password_field(self, attribute, attrs=None, **options):
        return self.labeled_field(
            attribute, options, super().password_field(attribute, attrs, **options)
        )

    def file_field(self, attribute, attrs=None, **options):
        return self.labeled_field(attribute, options, super().file_field(attribute, attrs, **options))

    def check_box(self, attribute, attrs=None, **options):
        return self.labeled_field(attribute, options, super().check_box(attribute, attrs, **options))

    def text_area(self, attribute, attrs=None, **options):
        sizes = get_setting("TEXTAREA_SIZES")["long" if options.get("long") else "short"]
        attrs = {**sizes, **(attrs or {})}
        return self.labeled_field(attribute, options, super().text_area(attribute, attrs, **options))

    def date_select(self, attribute, attrs=None, **options):
        options["order"] = tuple(get_setting("DATE_ORDER"))
        content = super().date_select(attribute, attrs, **options)
        return self.labeled_field(
            attribute, options, content, label_for=f"{self.auto_id(attribute)}_{options['order'][0]}"
        )

    def time_select(self, attribute, attrs=None, **options):
        content = super().time_select(attribute, attrs, **options)
        return self.labeled_field(
            attribute, options, content, label_for=f"{self.auto_id(attribute)}_hour"
        )

    def datetime_select(self, attribute, attrs=None, **options):
        first_part = (options.get("order") or DATE_PARTS)[0]
        content = super().datetime_select(attribute, attrs, **options)
        return self.labeled_field(
            attribute, options, content, label_for=f"{self.auto_id(attribute)}_{first_part}"
        )

    def select(self, attribute, choices, attrs=None, **options):
        if options.get("multiple") or (attrs or {}).get("multiple"):
            attrs = {"size": get_setting("SELECT_SIZE"), **(attrs or {})}
        content = super().select(attribute, choices, attrs, **options)
        return self.labeled_field(attribute, options, content)

    def submit_button(self, label: str = "submit", attrs: dict | None = None) -> SafeString:
        return format_html('<div class="form_buttons">{}</div>', self.submit(humanize(label), attrs))

    def labeled_field(
        self, attribute: str, options: dict, content: str, label_for: str | None = None
    ) -> SafeString:
        """Wrap rendered ``content`` with the error, label and ``after`` markup."""
        error = self.error_on(attribute, options)
        return format_html(
            '<div class="{}">{}{}{}{}</div>',
            "form_line_with_errors" if error else "form_line",
            error or "",
            self.label_tag(attribute, options, label_for),
            content,
            options.get("after", ""),
        )

    def label_tag(self, attribute: str, options: dict, label_for: str | None = None) -> str:
        """``<label>`` for the attribute, or an empty string with ``no_label``."""
        if options.get("no_label"):
            return ""
        attrs = {"for": label_for or self.auto_id(attribute)}
        if options.get("long"):
            attrs["class"] = "long"
        return format_html(
            "<label{}>{}:</label>", flatatt(attrs), options.get("label") or self.label_text(attribute)
        )

    def error_on(self, attribute: str, options: dict) -> SafeString | None:
        """``<div class="field_error">`` describing the attribute's errors, or None.

        The text is the label (or humanized attribute), the messages joined
        as a sentence, and a final period.
        """
        errors = self.errors.get(attribute)
        if not errors:
            return None

        if isinstance(errors, str):
            sentence = errors
        else:
            sentence = get_text_list([str(message).rstrip(".") for message in errors], _("and"))
        return format_html(
            '<div class="field_error">{} {}.</div>',
            options.get("label") or self.label_text(attribute),
            sentence.rstrip("."),
        )
