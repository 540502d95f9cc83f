"""Routine aggregation: the per-date step view, progress, and completion mutations.

Mutations do not write anything. Each returns a ``CompletionPlan`` (records to
upsert, keys to delete) that the store layer persists; ``apply_plan`` gives the
in-memory result with the same last-write-wins semantics the store has.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Iterable, Sequence

from .categories import StepCategory
from .date_math import ALL_DAYS, DayOfWeek, parse_date
from .models import CompletionRecord, CompletionStatus, RoutineStep, TimeOfDay, TimeOfDayUsage, TodayStep
from .schedule import is_step_active_on
from .schedule_models import WeeklySchedule

logger = logging.getLogger(__name__)

CompletionKey = tuple[str, date]


class ReorderMismatchError(ValueError):
    """The reordered ids are not exactly the steps of the requested window."""


@dataclass(frozen=True)
class RoutineProgress:
    completed: int
    skipped: int
    total: int

    @property
    def pending(self) -> int:
        return self.total - self.completed - self.skipped

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def fully_actioned(self) -> bool:
        return self.pending == 0


@dataclass(frozen=True)
class CompletionPlan:
    upserts: tuple[CompletionRecord, ...] = ()
    deletes: tuple[CompletionKey, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.upserts and not self.deletes

    def to_dict(self) -> dict[str, list]:
        return {
            "upserts": [record.to_record() for record in self.upserts],
            "deletes": [{"step_id": step_id, "date": day.isoformat()} for step_id, day in self.deletes],
        }


def in_window(step: RoutineStep, time_of_day: TimeOfDay | str | None) -> bool:
    """Steps stored as ``both`` show up in the morning and the evening view."""
    if time_of_day is None:
        return True
    return step.time_of_day in (TimeOfDayUsage(str(time_of_day)), TimeOfDayUsage.BOTH)


def completion_index(completions: Iterable[CompletionRecord]) -> dict[CompletionKey, CompletionRecord]:
    """Records keyed by (step_id, date); a later record for the same key wins."""
    return {record.key: record for record in completions}


def get_steps_for_date(
    steps: Iterable[RoutineStep],
    completions: Iterable[CompletionRecord],
    target: date | str,
    time_of_day: TimeOfDay | str | None = None,
) -> list[TodayStep]:
    day = parse_date(target)
    index = completion_index(completions)
    due = [step for step in steps if in_window(step, time_of_day) and is_step_active_on(step, day)]
    due.sort(key=lambda step: step.order)

    result: list[TodayStep] = []
    for step in due:
        record = index.get((step.id, day))
        result.append(
            TodayStep(
                step=step,
                date=day,
                is_completed=record is not None and record.status == CompletionStatus.COMPLETED,
                is_skipped=record is not None and record.status == CompletionStatus.SKIPPED,
                product_used=record.product_used if record is not None else None,
            )
        )
    return result


def routine_progress(today_steps: Sequence[TodayStep]) -> RoutineProgress:
    return RoutineProgress(
        completed=sum(1 for step in today_steps if step.is_completed),
        skipped=sum(1 for step in today_steps if step.is_skipped),
        total=len(today_steps),
    )


def _new_record(
    step_id: str,
    day: date,
    status: CompletionStatus,
    *,
    user_id: str | None,
    product_used: str | None = None,
    now: datetime | None = None,
) -> CompletionRecord:
    return CompletionRecord(
        id=str(uuid.uuid4()),
        user_id=user_id,
        step_id=step_id,
        date=day,
        status=status,
        product_used=product_used,
        completed_at=now or datetime.now(tz=UTC),
    )


def toggle_completion(
    completions: Iterable[CompletionRecord],
    step_id: str,
    target: date | str,
    *,
    product_used: str | None = None,
    user_id: str | None = None,
    now: datetime | None = None,
) -> CompletionPlan:
    """Check a step off, or un-check it when it is already completed."""
    day = parse_date(target)
    existing = completion_index(completions).get((step_id, day))
    if existing is not None and existing.status == CompletionStatus.COMPLETED:
        return CompletionPlan(deletes=((step_id, day),))
    record = _new_record(
        step_id,
        day,
        CompletionStatus.COMPLETED,
        user_id=user_id,
        product_used=product_used,
        now=now,
    )
    return CompletionPlan(upserts=(record,))


def skip_step(
    completions: Iterable[CompletionRecord],
    step_id: str,
    target: date | str,
    *,
    user_id: str | None = None,
    now: datetime | None = None,
) -> CompletionPlan:
    """Mark a step skipped, overwriting any record for that day. Re-skipping is a no-op."""
    day = parse_date(target)
    existing = completion_index(completions).get((step_id, day))
    if existing is not None and existing.status == CompletionStatus.SKIPPED:
        return CompletionPlan()
    return CompletionPlan(upserts=(_new_record(step_id, day, CompletionStatus.SKIPPED, user_id=user_id, now=now),))


def finish_routine(
    steps: Iterable[RoutineStep],
    completions: Iterable[CompletionRecord],
    time_of_day: TimeOfDay | str,
    target: date | str,
    *,
    now: datetime | None = None,
) -> CompletionPlan:
    """Skip every due, unactioned step of one window. Plan size is the number skipped."""
    day = parse_date(target)
    stamp = now or datetime.now(tz=UTC)
    pending = [today for today in get_steps_for_date(steps, completions, day, time_of_day) if not today.is_actioned]
    plan = CompletionPlan(
        upserts=tuple(
            _new_record(today.id, day, CompletionStatus.SKIPPED, user_id=today.step.user_id, now=stamp)
            for today in pending
        )
    )
    logger.info(
        "Finished %s routine for %s, skipped %d steps",
        time_of_day,
        day.isoformat(),
        len(plan.upserts),
        extra={"glow_count": len(plan.upserts)},
    )
    return plan


def apply_plan(completions: Iterable[CompletionRecord], plan: CompletionPlan) -> list[CompletionRecord]:
    """In-memory result of persisting ``plan``: at most one record per (step_id, date)."""
    index = completion_index(completions)
    for key in plan.deletes:
        index.pop(key, None)
    for record in plan.upserts:
        index[record.key] = record
    return list(index.values())


def reorder_steps(
    steps: Sequence[RoutineStep],
    time_of_day: TimeOfDayUsage | str,
    ordered_ids: Sequence[str],
) -> list[RoutineStep]:
    """Renumber the steps of one window to 0..n-1 following ``ordered_ids``.

    The morning and evening windows are the lists their views show, ``both`` steps
    included. Passing ``both`` reorders only the steps stored as ``both``. Steps
    outside the window keep their ``order``. Raises ReorderMismatchError when
    ``ordered_ids`` is not a permutation of the window's step ids.
    """
    window = TimeOfDayUsage(str(time_of_day))
    if window == TimeOfDayUsage.BOTH:
        window_ids = [step.id for step in steps if step.time_of_day == window]
    else:
        window_ids = [step.id for step in steps if in_window(step, window)]
    if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(window_ids):
        raise ReorderMismatchError(
            f"ordered ids {list(ordered_ids)!r} do not match the {window.value} steps {window_ids!r}"
        )

    new_order = {step_id: position for position, step_id in enumerate(ordered_ids)}
    result = [
        step.model_copy(update={"order": new_order[step.id]}) if step.id in new_order else step
        for step in steps
    ]
    logger.debug(
        "Reordered %d %s steps",
        len(new_order),
        window.value,
        extra={"glow_count": len(new_order)},
    )
    return result


DEFAULT_ROUTINE_TEMPLATE: tuple[tuple[str, StepCategory, TimeOfDay, tuple[DayOfWeek, ...]], ...] = (
    ("Gentle Cleanser", StepCategory.CLEANSER, TimeOfDay.MORNING, ALL_DAYS),
    ("Toner", StepCategory.TONER, TimeOfDay.MORNING, ALL_DAYS),
    ("Vitamin C Serum", StepCategory.SERUM, TimeOfDay.MORNING, ALL_DAYS),
    ("Moisturizer", StepCategory.MOISTURIZER, TimeOfDay.MORNING, ALL_DAYS),
    ("Sunscreen SPF 50", StepCategory.SUNSCREEN, TimeOfDay.MORNING, ALL_DAYS),
    ("Oil Cleanser", StepCategory.CLEANSER, TimeOfDay.EVENING, ALL_DAYS),
    ("Water Cleanser", StepCategory.CLEANSER, TimeOfDay.EVENING, ALL_DAYS),
    (
        "Retinol",
        StepCategory.TREATMENT,
        TimeOfDay.EVENING,
        (DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY, DayOfWeek.FRIDAY),
    ),
    ("Night Moisturizer", StepCategory.MOISTURIZER, TimeOfDay.EVENING, ALL_DAYS),
)


def default_routine_steps(user_id: str) -> list[RoutineStep]:
    """Starter routine seeded for a user with no steps yet."""
    return [
        RoutineStep(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            category=category,
            time_of_day=TimeOfDayUsage(time_of_day.value),
            order=position,
            schedule=WeeklySchedule(days=days),
        )
        for position, (name, category, time_of_day, days) in enumerate(DEFAULT_ROUTINE_TEMPLATE)
    ]
