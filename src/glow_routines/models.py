"""Record models exchanged with the store layer.

Stored rows are flat: schedule columns sit next to the other fields
(``days``/``cycle_*``/``interval_*`` on steps, ``schedule_*`` on products). The
models lift those columns into a typed ``Schedule`` on validation and flatten them
again in ``to_record()``. Legacy renames happen earlier, in ``legacy_compat``.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .categories import StepCategory, normalize_category
from .date_math import parse_date
from .schedule_models import SCHEDULE_FIELDS, Schedule, WeeklySchedule, schedule_from_fields, schedule_to_fields

PRODUCT_SCHEDULE_PREFIX = "schedule_"


class TimeOfDay(StrEnum):
    MORNING = "morning"
    EVENING = "evening"


class TimeOfDayUsage(StrEnum):
    MORNING = "morning"
    EVENING = "evening"
    BOTH = "both"


class CompletionStatus(StrEnum):
    COMPLETED = "completed"
    SKIPPED = "skipped"


def _optional_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    return parse_date(value)


def _lift_schedule(data: Any, *, prefix: str, optional: bool) -> Any:
    if not isinstance(data, dict) or "schedule" in data:
        return data
    if optional and not data.get("schedule_type"):
        return data
    flat_keys = {"schedule_type"} | {f"{prefix}{name}" for names in SCHEDULE_FIELDS.values() for name in names}
    lifted = {key: value for key, value in data.items() if key not in flat_keys}
    lifted["schedule"] = schedule_from_fields(data, prefix=prefix)
    return lifted


class RoutineStep(BaseModel):
    """A recurring routine action, e.g. "apply serum"."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    user_id: str
    name: str = ""
    product_id: str | None = None
    product_name: str | None = None
    category: StepCategory = StepCategory.OTHER
    time_of_day: TimeOfDayUsage
    order: int = Field(default=0, ge=0)
    notes: str | None = None
    schedule: Schedule = Field(default_factory=WeeklySchedule)

    @model_validator(mode="before")
    @classmethod
    def lift_flat_schedule(cls, data: Any) -> Any:
        return _lift_schedule(data, prefix="", optional=False)

    @field_validator("category", mode="before")
    @classmethod
    def known_category(cls, v: Any) -> StepCategory:
        return normalize_category(v)

    def to_record(self) -> dict[str, Any]:
        record = self.model_dump(mode="json", exclude={"schedule"})
        record.update(schedule_to_fields(self.schedule))
        return record


class CompletionRecord(BaseModel):
    """A step actioned on one calendar day. At most one per (step_id, date)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    step_id: str
    date: dt.date
    status: CompletionStatus = CompletionStatus.COMPLETED
    product_used: str | None = None
    id: str | None = None
    user_id: str | None = None
    completed_at: datetime | None = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_day(cls, v: Any) -> dt.date:
        return parse_date(v)

    @property
    def key(self) -> tuple[str, dt.date]:
        return (self.step_id, self.date)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class TodayStep(BaseModel):
    """A step joined with its completion state for one date. Never persisted."""

    model_config = ConfigDict(frozen=True)

    step: RoutineStep
    date: dt.date
    is_completed: bool = False
    is_skipped: bool = False
    product_used: str | None = None

    @property
    def id(self) -> str:
        return self.step.id

    @property
    def order(self) -> int:
        return self.step.order

    @property
    def is_actioned(self) -> bool:
        return self.is_completed or self.is_skipped

    @property
    def status(self) -> str:
        if self.is_completed:
            return CompletionStatus.COMPLETED.value
        if self.is_skipped:
            return CompletionStatus.SKIPPED.value
        return "pending"


class CatalogProduct(BaseModel):
    """Shared, read-only reference entry for a product."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    brand: str | None = None
    size: str | None = None
    image_url: str | None = None
    source_url: str | None = None
    step_category: StepCategory = StepCategory.OTHER
    active_ingredients: str | None = None
    full_ingredients: str | None = None
    times_added: int = 0
    created_by: str | None = None

    @field_validator("step_category", mode="before")
    @classmethod
    def known_category(cls, v: Any) -> StepCategory:
        return normalize_category(v)


class Product(BaseModel):
    """A physical item a user owns.

    ``stopped_at`` set means the product is on the shelf (inactive). ``schedule`` is
    optional; a product without one is in use every day.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    user_id: str
    catalog_id: str | None = None
    name: str | None = None
    brand: str | None = None
    size: str | None = None
    image_url: str | None = None
    source_url: str | None = None
    step_category: StepCategory = StepCategory.OTHER
    time_of_day: TimeOfDayUsage = TimeOfDayUsage.BOTH
    times_per_week: int | None = Field(default=None, ge=1, le=7)
    active_ingredients: str | None = None
    full_ingredients: str | None = None
    longevity_months: int | None = Field(default=None, ge=1)
    date_purchased: date | None = None
    date_opened: date | None = None
    notes: str | None = None
    started_at: date | None = None
    stopped_at: date | None = None
    schedule: Schedule | None = None

    @model_validator(mode="before")
    @classmethod
    def lift_flat_schedule(cls, data: Any) -> Any:
        return _lift_schedule(data, prefix=PRODUCT_SCHEDULE_PREFIX, optional=True)

    @field_validator("step_category", mode="before")
    @classmethod
    def known_category(cls, v: Any) -> StepCategory:
        return normalize_category(v)

    @field_validator("date_purchased", "date_opened", "started_at", "stopped_at", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> date | None:
        return _optional_date(v)

    @property
    def is_active(self) -> bool:
        return self.stopped_at is None

    def to_record(self) -> dict[str, Any]:
        record = self.model_dump(mode="json", exclude={"schedule"})
        if self.schedule is not None:
            record.update(schedule_to_fields(self.schedule, prefix=PRODUCT_SCHEDULE_PREFIX))
        return record
