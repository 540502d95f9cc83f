"""Compatibility adapter between legacy stored records and the current shape.

Older products were saved with ``schedule_type`` ``regular`` (now ``interval``) and
``rota`` (now ``cycle``) and with differently named columns. These functions run
once per record as it is loaded, before any schedule is evaluated.
"""

from __future__ import annotations

import logging
from typing import Any

from .date_math import ALL_DAYS
from .models import PRODUCT_SCHEDULE_PREFIX, CompletionRecord, CompletionStatus, Product, RoutineStep
from .schedule_models import LEGACY_SCHEDULE_TYPE_ALIASES, canonical_schedule_type

logger = logging.getLogger(__name__)

LEGACY_COMPAT_VERSION = "schedule_rename_compat.v1"

# Legacy column -> current column, keyed by the legacy schedule_type. Unprefixed
# names; products carry them behind PRODUCT_SCHEDULE_PREFIX.
LEGACY_FIELD_RENAMES: dict[str, dict[str, str]] = {
    "regular": {
        "start_date": "interval_start_date",
    },
    "rota": {
        "rota_length": "cycle_length",
        "rota_days": "cycle_days",
        "rota_start_date": "cycle_start_date",
    },
}


def _rename_legacy_fields(record: dict[str, Any], legacy_type: str, *, prefix: str) -> list[str]:
    renamed: list[str] = []
    for old, new in LEGACY_FIELD_RENAMES.get(legacy_type, {}).items():
        old_key = f"{prefix}{old}"
        new_key = f"{prefix}{new}"
        if old_key not in record:
            continue
        value = record.pop(old_key)
        if record.get(new_key) is None:
            record[new_key] = value
            renamed.append(f"{old_key}->{new_key}")
    return renamed


def _normalize_schedule_columns(
    row: dict[str, Any],
    *,
    prefix: str,
    record_kind: str,
) -> dict[str, Any]:
    record = dict(row)
    raw_type = str(record.get("schedule_type") or "").strip().lower()
    renamed: list[str] = []
    if raw_type in LEGACY_SCHEDULE_TYPE_ALIASES:
        renamed = _rename_legacy_fields(record, raw_type, prefix=prefix)

    canonical = canonical_schedule_type(raw_type)
    if raw_type and raw_type != canonical:
        logger.debug(
            "Normalized %s schedule_type %r -> %r",
            record_kind,
            raw_type,
            canonical,
            extra={
                "glow_record_id": record.get("id"),
                "glow_renamed_fields": renamed,
            },
        )
    record["schedule_type"] = canonical
    return record


def normalize_step_record(row: dict[str, Any]) -> dict[str, Any]:
    """Current-shape copy of a stored routine step row.

    A missing schedule_type means weekly; a weekly row without ``days`` means every day.
    """
    record = _normalize_schedule_columns(row, prefix="", record_kind="step")
    if record["schedule_type"] == "weekly" and record.get("days") is None:
        record["days"] = [day.value for day in ALL_DAYS]
    return record


def normalize_product_record(row: dict[str, Any]) -> dict[str, Any]:
    """Current-shape copy of a stored product row.

    Products without any schedule_type keep no schedule (in use every day).
    """
    if not row.get("schedule_type"):
        return dict(row)
    return _normalize_schedule_columns(row, prefix=PRODUCT_SCHEDULE_PREFIX, record_kind="product")


def normalize_completion_record(row: dict[str, Any]) -> dict[str, Any]:
    """Rows saved before skipping existed carry no status; they were completions."""
    record = dict(row)
    if not record.get("status"):
        record["status"] = CompletionStatus.COMPLETED.value
    return record


def load_step(row: dict[str, Any]) -> RoutineStep:
    return RoutineStep.model_validate(normalize_step_record(row))


def load_product(row: dict[str, Any]) -> Product:
    return Product.model_validate(normalize_product_record(row))


def load_completion(row: dict[str, Any]) -> CompletionRecord:
    return CompletionRecord.model_validate(normalize_completion_record(row))


def legacy_compat_contract_v1() -> dict[str, Any]:
    return {
        "version": LEGACY_COMPAT_VERSION,
        "schedule_type_aliases": dict(LEGACY_SCHEDULE_TYPE_ALIASES),
        "field_renames": {
            legacy_type: dict(renames) for legacy_type, renames in LEGACY_FIELD_RENAMES.items()
        },
        "product_field_prefix": PRODUCT_SCHEDULE_PREFIX,
        "defaults": {
            "schedule_type": "weekly",
            "weekly_days_when_missing": "all",
            "completion_status_when_missing": CompletionStatus.COMPLETED.value,
        },
        "migration_strategy": {
            "mode": "normalize_on_read",
            "unknown_schedule_type": "weekly",
            "replay_safe": True,
        },
    }
