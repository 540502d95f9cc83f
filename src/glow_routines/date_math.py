"""Calendar arithmetic on local dates.

Everything here works on ``datetime.date`` values, never on instants, so there is
no timezone or DST ambiguity. Wire dates are always ``YYYY-MM-DD``.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Any


class InvalidDateError(ValueError):
    """Raised when a value is not a ``YYYY-MM-DD`` calendar date."""


class DayOfWeek(StrEnum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def short(self) -> str:
        return self.value[0].upper()

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Index matches date.weekday(): Monday == 0.
ALL_DAYS: tuple[DayOfWeek, ...] = tuple(DayOfWeek)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(raw: Any) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a ``date`` through).

    Raises InvalidDateError for anything else, including datetimes.
    """
    if isinstance(raw, date) and not isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str):
        raise InvalidDateError(f"Expected a YYYY-MM-DD string, got {type(raw).__name__}")
    text = raw.strip()
    if not _ISO_DATE_RE.match(text):
        raise InvalidDateError(f"Expected a YYYY-MM-DD string, got {raw!r}")
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid calendar date {raw!r}") from exc


def format_date(value: date) -> str:
    return value.isoformat()


def today_string(today: date | None = None) -> str:
    return format_date(today or date.today())


def days_between(start: date | str, end: date | str) -> int:
    """Whole days from ``start`` to ``end`` (negative when ``end`` precedes ``start``)."""
    return (parse_date(end) - parse_date(start)).days


def weekday_of(value: date | str) -> DayOfWeek:
    return ALL_DAYS[parse_date(value).weekday()]


def add_months(value: date | str, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's end."""
    base = parse_date(value)
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def week_dates(selected: date | str) -> list[date]:
    """The Sunday-to-Saturday week containing ``selected``."""
    day = parse_date(selected)
    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday starts the strip.
    offset = (day.weekday() + 1) % 7
    start = day - timedelta(days=offset)
    return [start + timedelta(days=i) for i in range(7)]


def format_date_ddmmyyyy(value: date | str) -> str:
    return parse_date(value).strftime("%d-%m-%Y")


def format_date_with_weekday(value: date | str) -> str:
    """E.g. ``Monday, 08-02-2026``."""
    day = parse_date(value)
    return f"{weekday_of(day).label}, {format_date_ddmmyyyy(day)}"


def format_date_short(value: date | str) -> str:
    """E.g. ``Mon, 08-02-2026``."""
    day = parse_date(value)
    return f"{weekday_of(day).label[:3]}, {format_date_ddmmyyyy(day)}"
