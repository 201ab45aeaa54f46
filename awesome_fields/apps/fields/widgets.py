"""Select-based widgets for date, time and datetime values."""

from __future__ import annotations

import datetime as dt

from django import forms
from django.utils import timezone
from django.utils.dates import MONTHS
from django.utils.dateparse import parse_date, parse_datetime, parse_time

from awesome_fields.apps.fields.conf import get_setting

DATE_PARTS = ("year", "month", "day")
TIME_PARTS = ("hour", "minute", "second")
ALL_PARTS = DATE_PARTS + TIME_PARTS


def default_years(around: int | None = None) -> range:
    """Years offered by the year select: ``around`` +/- YEAR_RANGE."""
    if around is None:
        around = dt.date.today().year
    span = get_setting("YEAR_RANGE")
    return range(around - span, around + span + 1)


def _part_choices(part: str, years, minute_step: int) -> list[tuple[int, str]]:
    if part == "year":
        return [(year, str(year)) for year in years]
    if part == "month":
        return list(MONTHS.items())
    if part == "day":
        return [(day, str(day)) for day in range(1, 32)]
    if part == "hour":
        return [(hour, f"{hour:02d}") for hour in range(24)]
    if part == "minute":
        return [(minute, f"{minute:02d}") for minute in range(0, 60, minute_step)]
    return [(second, f"{second:02d}") for second in range(60)]


class SelectDateTimeWidget(forms.MultiWidget):
    """One ``<select>`` per date/time part, in the order given by ``parts``.

    Sub-controls are named and identified with a ``_<part>`` suffix, so a
    widget named ``machine-built_on`` renders ``machine-built_on_month``,
    ``machine-built_on_day`` and ``machine-built_on_year``.
    """

    def __init__(
        self,
        parts=DATE_PARTS,
        attrs=None,
        years=None,
        minute_step: int = 1,
        include_blank: bool = False,
    ):
        unknown = set(parts) - set(ALL_PARTS)
        if unknown:
            raise ValueError(
                f"Invalid date/time part(s) {sorted(unknown)!r}. Valid parts: {', '.join(ALL_PARTS)}"
            )
        self.parts = tuple(parts)
        self.years = years if years is not None else default_years()
        self.minute_step = minute_step
        self.include_blank = include_blank

        widgets = {}
        for part in self.parts:
            choices = _part_choices(part, self.years, minute_step)
            if include_blank:
                choices = [("", ""), *choices]
            widgets[part] = forms.Select(choices=choices)
        super().__init__(widgets, attrs)

    def get_context(self, name, value, attrs):
        context = super().get_context(name, value, attrs)
        id_ = context["widget"]["attrs"].get("id")
        if id_:
            for part, subwidget in zip(self.parts, context["widget"]["subwidgets"], strict=True):
                subwidget["attrs"]["id"] = f"{id_}_{part}"
        return context

    def id_for_label(self, id_):
        if not id_:
            return id_
        return f"{id_}_{self.parts[0]}"

    def decompress(self, value):
        if isinstance(value, str):
            value = parse_datetime(value) or parse_date(value) or parse_time(value)
        if not value:
            return [None] * len(self.parts)
        if isinstance(value, dt.datetime) and timezone.is_aware(value):
            value = timezone.localtime(value)
        return [getattr(value, part, None) for part in self.parts]

    def value_from_datadict(self, data, files, name):
        """Reassemble a date, time or datetime from the submitted parts.

        Returns None when nothing was submitted, a part is missing or
        non-numeric, or the parts don't form a valid value (e.g. Feb 30).
        """
        raw = {part: data.get(f"{name}_{part}") for part in self.parts}
        if all(value in (None, "") for value in raw.values()):
            return None
        try:
            values = {part: int(value) for part, value in raw.items()}
        except (TypeError, ValueError):
            return None

        has_date = all(part in values for part in DATE_PARTS)
        has_time = "hour" in values and "minute" in values
        try:
            if has_time:
                time = dt.time(values["hour"], values["minute"], values.get("second", 0))
                if has_date:
                    return dt.datetime.combine(
                        dt.date(values["year"], values["month"], values["day"]), time
                    )
                return time
            if has_date:
                return dt.date(values["year"], values["month"], values["day"])
        except ValueError:
            return None
        return None

    def value_omitted_from_data(self, data, files, name):
        return all(f"{name}_{part}" not in data for part in self.parts)
