"""Schedule models: a tagged union over the three recurrence modes.

- weekly: specific days of the week
- cycle: repeating N-day rota anchored on a start date (1-indexed active days)
- interval: every N days from a start date

Cycle and interval fields may be missing while a schedule is still being edited.
Such schedules validate, and the evaluator treats them as never active. Values that
are present must satisfy the range invariants.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from .date_math import ALL_DAYS, DayOfWeek, parse_date

_WEEKDAY_MAP: dict[str, DayOfWeek] = {
    "mon": DayOfWeek.MONDAY,
    "monday": DayOfWeek.MONDAY,
    "tue": DayOfWeek.TUESDAY,
    "tues": DayOfWeek.TUESDAY,
    "tuesday": DayOfWeek.TUESDAY,
    "wed": DayOfWeek.WEDNESDAY,
    "wednesday": DayOfWeek.WEDNESDAY,
    "thu": DayOfWeek.THURSDAY,
    "thur": DayOfWeek.THURSDAY,
    "thurs": DayOfWeek.THURSDAY,
    "thursday": DayOfWeek.THURSDAY,
    "fri": DayOfWeek.FRIDAY,
    "friday": DayOfWeek.FRIDAY,
    "sat": DayOfWeek.SATURDAY,
    "saturday": DayOfWeek.SATURDAY,
    "sun": DayOfWeek.SUNDAY,
    "sunday": DayOfWeek.SUNDAY,
}

# Stored values from before the rename, read-only.
LEGACY_SCHEDULE_TYPE_ALIASES: dict[str, str] = {
    "regular": "interval",
    "rota": "cycle",
}

SCHEDULE_FIELDS: dict[str, tuple[str, ...]] = {
    "weekly": ("days",),
    "cycle": ("cycle_length", "cycle_days", "cycle_start_date"),
    "interval": ("interval_days", "interval_start_date"),
}


def canonical_schedule_type(raw: Any) -> str:
    """Resolve a stored schedule_type; legacy names are renamed, anything else is weekly."""
    token = str(raw or "").strip().lower()
    token = LEGACY_SCHEDULE_TYPE_ALIASES.get(token, token)
    return token if token in SCHEDULE_FIELDS else "weekly"


def _optional_date(value: Any) -> date | None:
    if value is None:
        return None
    return parse_date(value)


class WeeklySchedule(BaseModel):
    """Active on the listed weekdays. An empty list is never active."""

    model_config = ConfigDict(frozen=True)

    schedule_type: Literal["weekly"] = "weekly"
    days: tuple[DayOfWeek, ...] = ALL_DAYS

    @field_validator("days", mode="before")
    @classmethod
    def normalize_days(cls, v: Any) -> tuple[DayOfWeek, ...]:
        if v is None:
            return ALL_DAYS
        if isinstance(v, str):
            tokens = [token.strip().lower() for token in v.replace(";", ",").split(",")]
        elif isinstance(v, (list, tuple, set, frozenset)):
            tokens = [str(token).strip().lower() for token in v]
        else:
            raise ValueError(f"days must be a list of weekday names, got {type(v).__name__}")

        result: list[DayOfWeek] = []
        for token in tokens:
            if not token:
                continue
            day = _WEEKDAY_MAP.get(token)
            if day is None:
                raise ValueError(f"Unknown weekday {token!r}")
            if day not in result:
                result.append(day)
        return tuple(result)


class CycleSchedule(BaseModel):
    """Repeating rota: day 1 is ``cycle_start_date``, active on ``cycle_days``."""

    model_config = ConfigDict(frozen=True)

    schedule_type: Literal["cycle"] = "cycle"
    cycle_length: int | None = None
    cycle_days: tuple[int, ...] | None = None
    cycle_start_date: date | None = None

    @field_validator("cycle_start_date", mode="before")
    @classmethod
    def parse_start(cls, v: Any) -> date | None:
        return _optional_date(v)

    @field_validator("cycle_length")
    @classmethod
    def length_at_least_two(cls, v: int | None) -> int | None:
        if v is not None and v < 2:
            raise ValueError("cycle_length must be at least 2")
        return v

    @field_validator("cycle_days")
    @classmethod
    def dedupe_days(cls, v: tuple[int, ...] | None) -> tuple[int, ...] | None:
        if v is None:
            return None
        return tuple(dict.fromkeys(v))

    @model_validator(mode="after")
    def days_within_cycle(self) -> "CycleSchedule":
        if self.cycle_days is None:
            return self
        for day in self.cycle_days:
            if day < 1:
                raise ValueError("cycle_days are 1-indexed")
            if self.cycle_length is not None and day > self.cycle_length:
                raise ValueError(f"cycle day {day} exceeds cycle_length {self.cycle_length}")
        return self


class IntervalSchedule(BaseModel):
    """Every ``interval_days`` days starting on ``interval_start_date``."""

    model_config = ConfigDict(frozen=True)

    schedule_type: Literal["interval"] = "interval"
    interval_days: int | None = None
    interval_start_date: date | None = None

    @field_validator("interval_start_date", mode="before")
    @classmethod
    def parse_start(cls, v: Any) -> date | None:
        return _optional_date(v)

    @field_validator("interval_days")
    @classmethod
    def interval_positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("interval_days must be at least 1")
        return v


Schedule = Annotated[
    Union[WeeklySchedule, CycleSchedule, IntervalSchedule],
    Field(discriminator="schedule_type"),
]

_schedule_adapter: TypeAdapter[Schedule] = TypeAdapter(Schedule)


def schedule_from_fields(fields: dict[str, Any], *, prefix: str = "") -> Schedule:
    """Build a schedule from flat record columns.

    Legacy field names must already be renamed (see legacy_compat).
    Columns belonging to other modes are ignored, since stored rows carry all of them.
    """
    schedule_type = canonical_schedule_type(fields.get("schedule_type"))
    data: dict[str, Any] = {"schedule_type": schedule_type}
    for name in SCHEDULE_FIELDS[schedule_type]:
        key = f"{prefix}{name}"
        if key in fields:
            data[name] = fields[key]
    return _schedule_adapter.validate_python(data)


def schedule_to_fields(schedule: Schedule, *, prefix: str = "") -> dict[str, Any]:
    """Inverse of ``schedule_from_fields``: the wire columns for one schedule."""
    dumped = schedule.model_dump(mode="json")
    result: dict[str, Any] = {"schedule_type": dumped.pop("schedule_type")}
    for name, value in dumped.items():
        result[f"{prefix}{name}"] = value
    return result
