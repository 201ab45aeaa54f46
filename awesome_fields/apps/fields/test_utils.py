"""Shared test utilities: factories and HTML fragment inspection.

Usage:
    from awesome_fields.apps.fields.test_utils import create_machine, select_ids

    html = FormBuilder("model", create_machine()).field("built_on")
    self.assertEqual(select_ids(html), ["id_model-built_on_year", ...])
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import SimpleNamespace

from awesome_fields.apps.fields.tests.models import Machine, Manufacturer, Part

_SELECT_ID_RE = re.compile(r'<select\b[^>]*\bid="([^"]+)"')
_OPTION_RE = re.compile(r'<option value="([^"]*)"([^>]*)>([^<]*)</option>')
_INPUT_TYPE_RE = re.compile(r'<input\b[^>]*\btype="([^"]+)"')


@dataclass
class Option:
    """One rendered ``<option>``."""

    value: str
    text: str
    selected: bool


def select_ids(html: str) -> list[str]:
    """Ids of every ``<select>`` in the fragment, in document order."""
    return _SELECT_ID_RE.findall(html)


def options(html: str) -> list[Option]:
    """Every ``<option>`` in the fragment."""
    return [
        Option(value=value, text=text, selected=" selected" in attrs)
        for value, attrs, text in _OPTION_RE.findall(html)
    ]


def input_types(html: str) -> list[str]:
    """``type`` of every ``<input>`` in the fragment."""
    return _INPUT_TYPE_RE.findall(html)


def stub(**attributes) -> SimpleNamespace:
    """A plain, non-model object with the given attributes."""
    return SimpleNamespace(**attributes)


class StubColumn:
    """A column described only by a type name (``"time"``, ``"date"``...)."""

    def __init__(self, type):  # noqa: A002
        self.type = type


class ColumnStub(SimpleNamespace):
    """A plain object that reports the column type of its attributes.

    ``columns`` maps attribute names to type names; unknown attributes have
    no column.
    """

    def __init__(self, columns: dict[str, str] | None = None, **attributes):
        super().__init__(**attributes)
        self._columns = columns or {}

    def column_for_attribute(self, attribute):
        type_name = self._columns.get(attribute)
        return StubColumn(type_name) if type_name else None


# =============================================================================
# Factory Functions
# =============================================================================


def create_manufacturers(count: int = 6, name: str = "Maker #{n}") -> list[Manufacturer]:
    """Create ``count`` manufacturers named from the ``name`` template."""
    return [Manufacturer.objects.create(name=name.format(n=n)) for n in range(count)]


def create_parts(count: int = 6) -> list[Part]:
    """Create ``count`` parts with codes P0, P1, ..."""
    return [Part.objects.create(code=f"P{n}") for n in range(count)]


def create_machine(name: str = "Eight Ball Deluxe", **kwargs) -> Machine:
    """Create and save a machine with sensible defaults."""
    return Machine.objects.create(name=name, **kwargs)
