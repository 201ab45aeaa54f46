"""Schema introspection: find and classify the model field behind an attribute.

A "column" is whatever describes the stored type of an attribute. For Django
models that is the model field returned by ``_meta.get_field()``; objects
that are not models may provide their own ``column_for_attribute()`` method
returning anything with a ``type`` attribute (``"time"``, ``"date"``, ...).
"""

from __future__ import annotations

from typing import Any

from django.core.exceptions import FieldDoesNotExist
from django.utils.text import camel_case_to_spaces

# Django internal field type -> normalized column type
COLUMN_TYPES = {
    "CharField": "string",
    "SlugField": "string",
    "EmailField": "string",
    "URLField": "string",
    "UUIDField": "string",
    "GenericIPAddressField": "string",
    "IPAddressField": "string",
    "FilePathField": "string",
    "TextField": "text",
    "JSONField": "text",
    "AutoField": "integer",
    "BigAutoField": "integer",
    "SmallAutoField": "integer",
    "IntegerField": "integer",
    "BigIntegerField": "integer",
    "SmallIntegerField": "integer",
    "PositiveIntegerField": "integer",
    "PositiveBigIntegerField": "integer",
    "PositiveSmallIntegerField": "integer",
    "DecimalField": "decimal",
    "FloatField": "float",
    "BooleanField": "boolean",
    "NullBooleanField": "boolean",
    "DateField": "date",
    "DateTimeField": "datetime",
    "TimeField": "time",
    "DurationField": "duration",
    "FileField": "file",
    "ImageField": "file",
}


def underscore(name: str) -> str:
    """Convert a CamelCase class or type name to snake_case.

    ``"NoneType"`` -> ``"none_type"``, ``"ImageFieldFile"`` ->
    ``"image_field_file"``, ``"UUID"`` -> ``"uuid"``.
    """
    return camel_case_to_spaces(name).replace(" ", "_")


def column_for_attribute(obj: Any, attribute: str) -> Any | None:
    """Return the column backing ``attribute`` on ``obj``, or None.

    None means a virtual attribute: a property, a plain method, or an object
    that isn't a model at all.
    """
    if obj is None:
        return None

    custom = getattr(type(obj), "column_for_attribute", None)
    if callable(custom):
        return obj.column_for_attribute(attribute)

    meta = getattr(obj, "_meta", None)
    if meta is None:
        return None
    try:
        return meta.get_field(attribute)
    except FieldDoesNotExist:
        return None


def column_type(column: Any | None) -> str | None:
    """Return the normalized, lowercase type name of a column."""
    if column is None:
        return None

    if getattr(column, "is_relation", False):
        return "association"

    get_internal_type = getattr(column, "get_internal_type", None)
    if get_internal_type is None:
        declared = getattr(column, "type", None)
        return str(declared).lower() if declared is not None else None

    internal = get_internal_type()
    if internal in COLUMN_TYPES:
        return COLUMN_TYPES[internal]
    return underscore(internal.removesuffix("Field"))


def type_from_database(obj: Any, attribute: str) -> str | None:
    """Return the column type of ``attribute`` on ``obj`` (None when virtual)."""
    return column_type(column_for_attribute(obj, attribute))


def is_plural(column: Any | None) -> bool:
    """True when the column is a to-many association."""
    if column is None:
        return False
    return bool(getattr(column, "many_to_many", False) or getattr(column, "one_to_many", False))


def related_model(column: Any | None) -> type | None:
    """Return the model on the other side of an association column."""
    if column is None or not getattr(column, "is_relation", False):
        return None
    return getattr(column, "related_model", None)
