"""Field helpers: pick the right form control for an attribute.

The entry point is :meth:`AwesomeFieldHelpers.field`, which inspects the
attribute's current value (and, when the value is ``None``, the model field
behind it) and hands off to the matching control method of the builder.

Adding support for a new value class only takes a ``<type>_field`` method on
a builder subclass, where ``<type>`` is the class name in snake_case::

    class MyBuilder(FormBuilder):
        def money_field(self, attribute, attrs=None, **options):
            return self.text_field(attribute, attrs, **options)
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable
from typing import Any

from django.core.files import File
from django.db import models

from awesome_fields.apps.fields.columns import (
    column_for_attribute,
    is_plural,
    related_model,
    type_from_database,
    underscore,
)

logger = logging.getLogger(__name__)

# Type name (value class or column type) -> builder method
FIELD_HELPERS = {
    "str": "string_field",
    "string": "string_field",
    "int": "string_field",
    "integer": "string_field",
    "float": "string_field",
    "decimal": "string_field",
    "none_type": "string_field",
    "uuid": "string_field",
    "duration": "string_field",
    "timedelta": "string_field",
    "text": "text_area",
    "bool": "check_box",
    "boolean": "check_box",
    "date": "time_field",
    "datetime": "time_field",
    "time": "time_field",
    "field_file": "file_field",
    "image_field_file": "file_field",
    "file": "file_field",
    "association": "collection_field",
}


def is_collection(value: Any) -> bool:
    """True for values that should be rendered as a select of related objects.

    Strings, bytes and files are iterable but are not collections.
    """
    if isinstance(value, str | bytes | File):
        return False
    if isinstance(value, models.Model | models.Manager):
        return True
    return isinstance(value, Iterable)


def send(item: Any, method: str) -> Any:
    """Read ``method`` from ``item``, calling it when it's callable."""
    result = getattr(item, method)
    return result() if callable(result) else result


def text_method_for(obj: Any) -> str:
    """Display-text method for collection items like ``obj``."""
    return "name" if hasattr(obj, "name") else "__str__"


def value_method_for(obj: Any) -> str:
    """Option-value method for collection items like ``obj``."""
    return "pk" if isinstance(obj, models.Model) else "__str__"


class AwesomeFieldHelpers:
    """Mixin adding type-inferring field helpers to a form builder.

    The host class provides ``object``, ``value_for()`` and the control
    methods (``text_field``, ``select``, ``date_select``...).
    """

    field_helpers = FIELD_HELPERS

    def field(self, attribute: str, attrs: dict | None = None, **options) -> str:
        """Render the control that fits ``attribute``'s value or column type.

        The value's class decides first. A ``None`` value falls back to the
        model field, and a virtual attribute with no value falls back to a
        plain string field. Collections, related managers and model
        instances always get a :meth:`collection_field`.
        """
        value = self.value_for(attribute)

        if value is None:
            type_name = type_from_database(self.object, attribute)
            source = "column"
        else:
            type_name = underscore(type(value).__name__)
            source = "value"

        if type_name is None:
            type_name = "string"
            source = "default"

        if is_collection(value):
            helper_name = "collection_field"
        else:
            helper_name = self.helper_name_for(type_name)

        logger.debug(
            "field_helper_resolved",
            extra={
                "attribute": attribute,
                "type_name": type_name,
                "helper": helper_name,
                "source": source,
            },
        )
        return getattr(self, helper_name)(attribute, attrs, **options)

    field_for = field

    def helper_name_for(self, type_name: str) -> str:
        """Return the builder method that renders ``type_name`` values.

        Types missing from ``field_helpers`` map to ``<type>_field``; when the
        builder has no such method, rendering raises ``AttributeError``.
        """
        return self.field_helpers.get(type_name, f"{type_name}_field")

    def string_field(self, attribute: str, attrs: dict | None = None, **options) -> str:
        """Text input, or a textarea when ``long=True``."""
        if options.get("long"):
            return self.text_area(attribute, attrs, **options)
        return self.text_field(attribute, attrs, **options)

    def collection_field(self, attribute: str, attrs: dict | None = None, **options) -> str:
        """Render a select of objects, guessing as much as possible.

        With no options, the choices are every row of the model of the first
        selected object, option values are primary keys, and option text is
        the object's ``name`` (or ``str()`` when there is no ``name``).

        Options:
            collection: Objects to choose from, instead of every row.
            value_method: Attribute/method giving each option's value.
            text_method: Attribute/method giving each option's text.
            multiple: Render a multi-select. Defaults to True for to-many
                associations.

        Other options are passed on to :meth:`select`.
        """
        column = column_for_attribute(self.object, attribute)
        collection = options.pop("collection", None)
        value_method = options.pop("value_method", None)
        text_method = options.pop("text_method", None)

        value = self.value_for(attribute)
        selected = self._selected_objects(value)
        if collection is not None:
            collection = list(collection)
            reference = collection[0] if collection else None
        else:
            reference = selected[0] if selected else None
            collection = list(self._default_collection(attribute, reference, column))
            if reference is None and collection:
                reference = collection[0]

        value_method = value_method or value_method_for(reference)
        text_method = text_method or text_method_for(reference)

        choices = [(send(item, value_method), send(item, text_method)) for item in collection]
        selected_values = [send(item, value_method) for item in selected]

        if options.get("multiple") is None:
            options["multiple"] = self._is_plural_value(value, column)

        return self.select(attribute, choices, attrs, selected=selected_values, **options)

    collection_field_for = collection_field

    def time_field(self, attribute: str, attrs: dict | None = None, **options) -> str:
        """Date, datetime or time selects, according to the column type.

        The column wins over the value: a datetime stored in a ``TimeField``
        only gets hour and minute selects. Attributes without a column, and
        string/text columns (assumed to hold a serialized value), go by the
        value's class: a ``datetime`` value gets date and time selects, a
        ``date`` value date selects, and anything else a time select. A virtual
        ``datetime`` attribute therefore keeps its date part instead of being
        cut down to hour and minute selects.
        """
        db_type = type_from_database(self.object, attribute)
        if db_type not in ("date", "datetime", "time"):
            value = self.value_for(attribute)
            if isinstance(value, dt.datetime):
                db_type = "datetime"
            elif isinstance(value, dt.date):
                db_type = "date"
            else:
                db_type = "time"

        if db_type == "date":
            return self.date_select(attribute, attrs, **options)
        if db_type == "datetime":
            return self.datetime_select(attribute, attrs, **options)
        return self.time_select(attribute, attrs, **options)

    @staticmethod
    def _is_plural_value(value: Any, column: Any) -> bool:
        """Association cardinality from the column, else from the value's shape."""
        if related_model(column) is not None:
            return is_plural(column)
        return is_collection(value) and not isinstance(value, models.Model)

    @staticmethod
    def _selected_objects(selected: Any) -> list:
        if isinstance(selected, models.Manager):
            selected = selected.all()
        if selected is None:
            return []
        if not is_collection(selected) or isinstance(selected, models.Model):
            return [selected]
        return list(selected)

    def _default_collection(self, attribute: str, reference: Any, column: Any) -> Iterable:
        if isinstance(reference, models.Model):
            return type(reference)._default_manager.all()
        model = related_model(column)
        if model is not None:
            return model._default_manager.all()
        raise ValueError(
            f"Cannot infer choices for {attribute!r}: pass collection= with the objects to offer"
        )
