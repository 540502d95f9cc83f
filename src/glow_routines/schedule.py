"""Schedule evaluation: is a step or product due on a given calendar date?

``is_active_on`` is a pure predicate, so callers can evaluate any past or future
date (date strip, journal history). Incomplete cycle/interval schedules are never
active instead of raising.
"""

from __future__ import annotations

from datetime import date, timedelta

from .date_math import days_between, parse_date, weekday_of
from .models import Product, RoutineStep
from .schedule_models import CycleSchedule, IntervalSchedule, Schedule, WeeklySchedule


def _weekly_active(schedule: WeeklySchedule, target: date) -> bool:
    return weekday_of(target) in schedule.days


def _cycle_active(schedule: CycleSchedule, target: date) -> bool:
    if not schedule.cycle_length or schedule.cycle_days is None or schedule.cycle_start_date is None:
        return False
    elapsed = days_between(schedule.cycle_start_date, target)
    if elapsed < 0:
        return False
    position = (elapsed % schedule.cycle_length) + 1
    return position in schedule.cycle_days


def _interval_active(schedule: IntervalSchedule, target: date) -> bool:
    if not schedule.interval_days or schedule.interval_start_date is None:
        return False
    elapsed = days_between(schedule.interval_start_date, target)
    if elapsed < 0:
        return False
    return elapsed % schedule.interval_days == 0


def is_active_on(schedule: Schedule, target: date | str) -> bool:
    day = parse_date(target)
    if isinstance(schedule, CycleSchedule):
        return _cycle_active(schedule, day)
    if isinstance(schedule, IntervalSchedule):
        return _interval_active(schedule, day)
    return _weekly_active(schedule, day)


def is_step_active_on(step: RoutineStep, target: date | str) -> bool:
    return is_active_on(step.schedule, target)


def is_product_active_on(product: Product, target: date | str) -> bool:
    """Whether an in-use product is due on ``target``. Stopped products never are."""
    if not product.is_active:
        return False
    if product.schedule is None:
        return True
    return is_active_on(product.schedule, target)


def active_dates(schedule: Schedule, start: date | str, days: int) -> list[date]:
    """Dates in ``[start, start + days)`` on which ``schedule`` is active."""
    first = parse_date(start)
    candidates = (first + timedelta(days=offset) for offset in range(max(days, 0)))
    return [day for day in candidates if is_active_on(schedule, day)]


def describe_schedule(schedule: Schedule | None) -> str:
    """Short label such as ``Daily``, ``M, W, F``, ``2/4-day cycle`` or ``Every 3d``."""
    if isinstance(schedule, CycleSchedule):
        if schedule.cycle_length and schedule.cycle_days is not None:
            return f"{len(schedule.cycle_days)}/{schedule.cycle_length}-day cycle"
        return "Cycle"
    if isinstance(schedule, IntervalSchedule):
        if schedule.interval_days:
            return f"Every {schedule.interval_days}d"
        return "Interval"
    if schedule is None or len(schedule.days) in (0, 7):
        return "Daily"
    return ", ".join(day.short for day in schedule.days)
