from __future__ import annotations

from datetime import date

import pytest

from glow_routines.models import Product, RoutineStep
from glow_routines.schedule import (
    active_dates,
    describe_schedule,
    is_active_on,
    is_product_active_on,
    is_step_active_on,
)
from glow_routines.schedule_models import CycleSchedule, IntervalSchedule, WeeklySchedule

# 2024-01-01 is a Monday.
MON_WED_FRI = WeeklySchedule(days=["monday", "wednesday", "friday"])
CYCLE_4_DAYS_1_2 = CycleSchedule(cycle_length=4, cycle_days=[1, 2], cycle_start_date="2024-01-01")
EVERY_3_DAYS = IntervalSchedule(interval_days=3, interval_start_date="2024-01-01")


class TestWeekly:
    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            ("2024-01-01", True),
            ("2024-01-02", False),
            ("2024-01-03", True),
            ("2024-01-05", True),
            ("2024-01-06", False),
            ("2024-01-07", False),
        ],
    )
    def test_listed_weekdays(self, day: str, expected: bool) -> None:
        assert is_active_on(MON_WED_FRI, day) is expected

    def test_every_day_by_default(self) -> None:
        assert all(is_active_on(WeeklySchedule(), f"2024-01-0{d}") for d in range(1, 8))

    def test_empty_days_never_active(self) -> None:
        assert not any(is_active_on(WeeklySchedule(days=[]), f"2024-01-0{d}") for d in range(1, 8))


class TestCycle:
    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            ("2024-01-01", True),
            ("2024-01-02", True),
            ("2024-01-03", False),
            ("2024-01-04", False),
            ("2024-01-05", True),
            ("2024-01-06", True),
            ("2024-01-09", True),
        ],
    )
    def test_positions_repeat(self, day: str, expected: bool) -> None:
        assert is_active_on(CYCLE_4_DAYS_1_2, day) is expected

    def test_inactive_before_start(self) -> None:
        assert not is_active_on(CYCLE_4_DAYS_1_2, "2023-12-31")

    @pytest.mark.parametrize(
        "schedule",
        [
            CycleSchedule(cycle_length=4, cycle_days=[1]),
            CycleSchedule(cycle_days=[1], cycle_start_date="2024-01-01"),
            CycleSchedule(cycle_length=4, cycle_start_date="2024-01-01"),
            CycleSchedule(),
        ],
    )
    def test_incomplete_cycle_never_active(self, schedule: CycleSchedule) -> None:
        assert not is_active_on(schedule, "2024-01-01")


class TestInterval:
    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            ("2024-01-01", True),
            ("2024-01-02", False),
            ("2024-01-03", False),
            ("2024-01-04", True),
            ("2024-01-07", True),
        ],
    )
    def test_every_n_days(self, day: str, expected: bool) -> None:
        assert is_active_on(EVERY_3_DAYS, day) is expected

    def test_inactive_before_start(self) -> None:
        assert not is_active_on(EVERY_3_DAYS, "2023-12-29")

    def test_interval_of_one_is_daily_from_start(self) -> None:
        schedule = IntervalSchedule(interval_days=1, interval_start_date="2024-01-01")
        assert is_active_on(schedule, "2024-03-17")

    def test_missing_start_never_active(self) -> None:
        assert not is_active_on(IntervalSchedule(interval_days=3), "2024-01-01")


def test_malformed_target_date_raises() -> None:
    with pytest.raises(ValueError):
        is_active_on(MON_WED_FRI, "2024/01/01")


def test_step_uses_its_schedule() -> None:
    step = RoutineStep(id="s1", user_id="u1", time_of_day="evening", schedule=MON_WED_FRI)
    assert is_step_active_on(step, date(2024, 1, 3))
    assert not is_step_active_on(step, date(2024, 1, 2))


class TestProductActivity:
    def test_product_without_schedule_is_due_daily(self) -> None:
        product = Product(id="p1", user_id="u1", name="Serum")
        assert is_product_active_on(product, "2024-01-02")

    def test_stopped_product_never_due(self) -> None:
        product = Product(id="p1", user_id="u1", name="Serum", stopped_at="2024-01-01")
        assert not is_product_active_on(product, "2024-01-02")

    def test_product_schedule_applies(self) -> None:
        product = Product(id="p1", user_id="u1", name="Peel", schedule=EVERY_3_DAYS)
        assert is_product_active_on(product, "2024-01-04")
        assert not is_product_active_on(product, "2024-01-05")


def test_active_dates_window() -> None:
    assert active_dates(EVERY_3_DAYS, "2024-01-01", 10) == [
        date(2024, 1, 1),
        date(2024, 1, 4),
        date(2024, 1, 7),
        date(2024, 1, 10),
    ]
    assert active_dates(MON_WED_FRI, "2024-01-01", 0) == []


@pytest.mark.parametrize(
    ("schedule", "label"),
    [
        (None, "Daily"),
        (WeeklySchedule(), "Daily"),
        (WeeklySchedule(days=[]), "Daily"),
        (MON_WED_FRI, "M, W, F"),
        (CYCLE_4_DAYS_1_2, "2/4-day cycle"),
        (CycleSchedule(cycle_length=4), "Cycle"),
        (EVERY_3_DAYS, "Every 3d"),
        (IntervalSchedule(), "Interval"),
    ],
)
def test_describe_schedule(schedule, label: str) -> None:
    assert describe_schedule(schedule) == label
