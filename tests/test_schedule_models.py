from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from glow_routines.date_math import ALL_DAYS, DayOfWeek
from glow_routines.schedule_models import (
    CycleSchedule,
    IntervalSchedule,
    WeeklySchedule,
    canonical_schedule_type,
    schedule_from_fields,
    schedule_to_fields,
)


class TestWeeklySchedule:
    def test_days_accept_names_and_short_tokens(self) -> None:
        schedule = WeeklySchedule(days=["Monday", "wed", "FRI"])
        assert schedule.days == (DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY, DayOfWeek.FRIDAY)

    def test_days_deduplicate_preserving_order(self) -> None:
        schedule = WeeklySchedule(days=["friday", "monday", "friday"])
        assert schedule.days == (DayOfWeek.FRIDAY, DayOfWeek.MONDAY)

    def test_missing_days_mean_every_day(self) -> None:
        assert WeeklySchedule().days == ALL_DAYS
        assert WeeklySchedule(days=None).days == ALL_DAYS

    def test_empty_days_stay_empty(self) -> None:
        assert WeeklySchedule(days=[]).days == ()

    def test_unknown_weekday_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown weekday"):
            WeeklySchedule(days=["monday", "funday"])


class TestCycleSchedule:
    def test_valid_cycle(self) -> None:
        schedule = CycleSchedule(cycle_length=4, cycle_days=[1, 2], cycle_start_date="2024-01-01")
        assert schedule.cycle_start_date == date(2024, 1, 1)
        assert schedule.cycle_days == (1, 2)

    def test_incomplete_cycle_is_allowed(self) -> None:
        schedule = CycleSchedule(cycle_length=4)
        assert schedule.cycle_days is None
        assert schedule.cycle_start_date is None

    def test_length_below_two_rejected(self) -> None:
        with pytest.raises(ValidationError, match="cycle_length must be at least 2"):
            CycleSchedule(cycle_length=1, cycle_days=[1], cycle_start_date="2024-01-01")

    def test_day_beyond_length_rejected(self) -> None:
        with pytest.raises(ValidationError, match="exceeds cycle_length"):
            CycleSchedule(cycle_length=3, cycle_days=[1, 4], cycle_start_date="2024-01-01")

    def test_zero_day_rejected(self) -> None:
        with pytest.raises(ValidationError, match="1-indexed"):
            CycleSchedule(cycle_length=3, cycle_days=[0], cycle_start_date="2024-01-01")

    def test_malformed_start_date_rejected(self) -> None:
        with pytest.raises(ValueError):
            CycleSchedule(cycle_length=3, cycle_days=[1], cycle_start_date="01/01/2024")


class TestIntervalSchedule:
    def test_interval_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="interval_days must be at least 1"):
            IntervalSchedule(interval_days=0, interval_start_date="2024-01-01")

    def test_incomplete_interval_is_allowed(self) -> None:
        assert IntervalSchedule(interval_days=3).interval_start_date is None


class TestFieldsRoundTrip:
    def test_weekly_fields_round_trip(self) -> None:
        fields = {"schedule_type": "weekly", "days": ["monday", "wednesday", "friday"]}
        assert schedule_to_fields(schedule_from_fields(fields)) == fields

    def test_cycle_fields_round_trip(self) -> None:
        fields = {
            "schedule_type": "cycle",
            "cycle_length": 4,
            "cycle_days": [2, 3],
            "cycle_start_date": "2024-01-01",
        }
        assert schedule_to_fields(schedule_from_fields(fields)) == fields

    def test_interval_fields_round_trip_with_prefix(self) -> None:
        fields = {
            "schedule_type": "interval",
            "schedule_interval_days": 3,
            "schedule_interval_start_date": "2024-01-01",
        }
        schedule = schedule_from_fields(fields, prefix="schedule_")
        assert isinstance(schedule, IntervalSchedule)
        assert schedule_to_fields(schedule, prefix="schedule_") == fields

    def test_columns_of_other_modes_are_ignored(self) -> None:
        schedule = schedule_from_fields(
            {"schedule_type": "weekly", "days": ["sunday"], "cycle_length": 4, "cycle_days": [1]}
        )
        assert schedule == WeeklySchedule(days=["sunday"])

    def test_legacy_type_names_accepted_on_read(self) -> None:
        assert isinstance(schedule_from_fields({"schedule_type": "rota", "cycle_length": 3}), CycleSchedule)
        assert isinstance(schedule_from_fields({"schedule_type": "regular", "interval_days": 2}), IntervalSchedule)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("weekly", "weekly"),
        ("cycle", "cycle"),
        ("interval", "interval"),
        ("rota", "cycle"),
        ("Regular", "interval"),
        ("monthly", "weekly"),
        (None, "weekly"),
        ("", "weekly"),
    ],
)
def test_canonical_schedule_type(raw: str | None, expected: str) -> None:
    assert canonical_schedule_type(raw) == expected
