from __future__ import annotations

from datetime import date, datetime

import pytest

from glow_routines.date_math import (
    DayOfWeek,
    InvalidDateError,
    add_months,
    days_between,
    format_date_ddmmyyyy,
    format_date_short,
    format_date_with_weekday,
    parse_date,
    today_string,
    week_dates,
    weekday_of,
)


def test_parse_date_accepts_iso_strings_and_dates() -> None:
    assert parse_date("2024-01-05") == date(2024, 1, 5)
    assert parse_date(" 2024-01-05 ") == date(2024, 1, 5)
    assert parse_date(date(2024, 1, 5)) == date(2024, 1, 5)


@pytest.mark.parametrize("raw", ["05-01-2024", "2024-1-5", "2024-02-30", "", "yesterday", 20240105])
def test_parse_date_fails_fast_on_anything_else(raw: object) -> None:
    with pytest.raises(InvalidDateError):
        parse_date(raw)


def test_parse_date_rejects_datetimes() -> None:
    with pytest.raises(InvalidDateError):
        parse_date(datetime(2024, 1, 5, 8, 30))


def test_days_between_is_signed_whole_days() -> None:
    assert days_between("2024-01-01", "2024-01-05") == 4
    assert days_between("2024-01-01", "2023-12-31") == -1
    assert days_between("2024-02-28", "2024-03-01") == 2
    # DST change in most northern timezones; calendar dates are unaffected.
    assert days_between("2024-03-30", "2024-04-01") == 2


def test_weekday_of_maps_monday_to_sunday() -> None:
    assert weekday_of("2024-01-01") is DayOfWeek.MONDAY
    assert weekday_of("2024-01-03") is DayOfWeek.WEDNESDAY
    assert weekday_of("2024-01-07") is DayOfWeek.SUNDAY


def test_today_string_uses_iso_format() -> None:
    assert today_string(date(2024, 3, 9)) == "2024-03-09"
    assert len(today_string()) == 10


def test_add_months_clamps_to_month_end() -> None:
    assert add_months("2024-01-31", 1) == date(2024, 2, 29)
    assert add_months("2023-01-31", 1) == date(2023, 2, 28)
    assert add_months("2023-11-15", 3) == date(2024, 2, 15)
    assert add_months("2024-05-10", 12) == date(2025, 5, 10)


def test_week_dates_start_on_sunday() -> None:
    week = week_dates("2024-01-03")
    assert week[0] == date(2023, 12, 31)
    assert week[-1] == date(2024, 1, 6)
    assert len(week) == 7
    assert week_dates("2023-12-31")[0] == date(2023, 12, 31)


def test_display_formats() -> None:
    assert format_date_ddmmyyyy("2024-01-01") == "01-01-2024"
    assert format_date_with_weekday("2024-01-01") == "Monday, 01-01-2024"
    assert format_date_short("2024-01-06") == "Sat, 06-01-2024"


def test_day_of_week_short_and_label() -> None:
    assert DayOfWeek.THURSDAY.short == "T"
    assert DayOfWeek.THURSDAY.label == "Thursday"
