"""Step categories and their display metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping


class StepCategory(StrEnum):
    CLEANSER = "cleanser"
    TONER = "toner"
    SERUM = "serum"
    MOISTURIZER = "moisturizer"
    SUNSCREEN = "sunscreen"
    EXFOLIANT = "exfoliant"
    MASK = "mask"
    EYE_CREAM = "eye_cream"
    LIP_CARE = "lip_care"
    TREATMENT = "treatment"
    OTHER = "other"


@dataclass(frozen=True)
class CategoryInfo:
    label: str
    icon: str
    color: str


CATEGORY_INFO: Mapping[StepCategory, CategoryInfo] = MappingProxyType(
    {
        StepCategory.CLEANSER: CategoryInfo("Cleanser", "water", "#7B9AAF"),
        StepCategory.TONER: CategoryInfo("Toner", "flask", "#9B8BB4"),
        StepCategory.SERUM: CategoryInfo("Serum", "eyedrop", "#C4A87C"),
        StepCategory.MOISTURIZER: CategoryInfo("Moisturizer", "water-outline", "#7BAFA0"),
        StepCategory.SUNSCREEN: CategoryInfo("Sunscreen", "sunny", "#D4B85A"),
        StepCategory.EXFOLIANT: CategoryInfo("Exfoliant", "sparkles", "#C49A7B"),
        StepCategory.MASK: CategoryInfo("Mask", "happy", "#8B9A6B"),
        StepCategory.EYE_CREAM: CategoryInfo("Eye Cream", "eye", "#8B7BAF"),
        StepCategory.LIP_CARE: CategoryInfo("Lip Care", "heart", "#C48B8B"),
        StepCategory.TREATMENT: CategoryInfo("Treatment", "medkit", "#AF7B7B"),
        StepCategory.OTHER: CategoryInfo("Other", "ellipsis-horizontal", "#9A9A8B"),
    }
)


_CATEGORY_BY_VALUE: dict[str, StepCategory] = {category.value: category for category in StepCategory}


def normalize_category(raw: Any) -> StepCategory:
    """Map a stored category value onto the enum; unknown values become ``other``."""
    if isinstance(raw, StepCategory):
        return raw
    if isinstance(raw, str):
        token = raw.strip().lower().replace("-", "_").replace(" ", "_")
        return _CATEGORY_BY_VALUE.get(token, StepCategory.OTHER)
    return StepCategory.OTHER


def category_info(raw: Any) -> CategoryInfo:
    return CATEGORY_INFO[normalize_category(raw)]
