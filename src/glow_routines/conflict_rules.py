"""Ingredient conflict rules: Pydantic validation plus the curated default table.

A rule pairs two keyword groups. It fires between two products when one product's
ingredient text contains a keyword from ``group_a`` and the other's contains a
keyword from ``group_b`` (either direction).

Rule sets are immutable values handed to the detector, so tests and deployments
can swap in their own table (see ``Config.conflict_rules_path``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConflictSeverity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, lowest first: high=0, medium=1, low=2."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[ConflictSeverity, int] = {
    ConflictSeverity.HIGH: 0,
    ConflictSeverity.MEDIUM: 1,
    ConflictSeverity.LOW: 2,
}


class ConflictRule(BaseModel):
    """Two ingredient groups that should not be layered in the same routine window."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    group_a: tuple[str, ...] = Field(alias="groupA")
    group_b: tuple[str, ...] = Field(alias="groupB")
    severity: ConflictSeverity
    title: str
    explanation: str = ""
    suggestion: str = ""

    @field_validator("id", "title")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("group_a", "group_b")
    @classmethod
    def keywords_not_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        keywords = tuple(dict.fromkeys(k.strip().lower() for k in v if k.strip()))
        if not keywords:
            raise ValueError("keyword group must not be empty")
        return keywords


@dataclass(frozen=True)
class ConflictRuleSet:
    """Ordered, immutable collection of rules with unique ids."""

    rules: tuple[ConflictRule, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for rule in self.rules:
            if rule.id in seen:
                raise ValueError(f"Duplicate conflict rule id: {rule.id!r}")
            seen.add(rule.id)

    def __iter__(self) -> Iterator[ConflictRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, rule_id: str) -> ConflictRule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None


def validate_rule_set(data: Any) -> ConflictRuleSet:
    """Parse ``[{...}, ...]`` or ``{"rules": [...]}`` into a rule set.

    Raises pydantic.ValidationError on invalid rules, ValueError on bad shape or
    duplicate ids.
    """
    if isinstance(data, dict):
        data = data.get("rules")
    if not isinstance(data, list):
        raise ValueError("Conflict rules must be a list or an object with a 'rules' list")
    return ConflictRuleSet(tuple(ConflictRule.model_validate(item) for item in data))


def load_rule_set(path: str | Path) -> ConflictRuleSet:
    with open(path, encoding="utf-8") as f:
        return validate_rule_set(json.load(f))


_RETINOIDS = ("retinol", "retinal", "retinoid", "retinoic acid", "tretinoin", "adapalene", "tazarotene")
_EXFOLIATING_ACIDS = (
    "glycolic acid",
    "lactic acid",
    "mandelic acid",
    "salicylic acid",
    "aha",
    "bha",
    "alpha hydroxy",
    "beta hydroxy",
)
_VITAMIN_C = ("ascorbic acid", "vitamin c", "l-ascorbic", "ascorbyl")

DEFAULT_CONFLICT_RULES = ConflictRuleSet(
    (
        ConflictRule(
            id="retinol-aha-bha",
            group_a=_RETINOIDS,
            group_b=_EXFOLIATING_ACIDS,
            severity=ConflictSeverity.HIGH,
            title="Retinoid + Exfoliating Acid",
            explanation=(
                "Using retinoids together with AHAs or BHAs can cause excessive irritation, "
                "peeling, and compromise your skin barrier."
            ),
            suggestion="Use them on alternate nights, or apply acids in the morning and retinoid in the evening.",
        ),
        ConflictRule(
            id="retinol-benzoyl-peroxide",
            group_a=_RETINOIDS,
            group_b=("benzoyl peroxide",),
            severity=ConflictSeverity.HIGH,
            title="Retinoid + Benzoyl Peroxide",
            explanation=(
                "Benzoyl peroxide can oxidise and deactivate retinol, making both products less "
                "effective. It can also increase irritation."
            ),
            suggestion="Apply benzoyl peroxide in the morning and retinoid in the evening.",
        ),
        ConflictRule(
            id="retinol-vitamin-c",
            group_a=("retinol", "retinal", "retinoid", "retinoic acid", "tretinoin"),
            group_b=_VITAMIN_C,
            severity=ConflictSeverity.MEDIUM,
            title="Retinoid + Vitamin C",
            explanation=(
                "Both are potent actives that can cause irritation when layered. They also work "
                "best at different pH levels."
            ),
            suggestion="Use vitamin C in the morning and retinoid in the evening for best results.",
        ),
        ConflictRule(
            id="vitamin-c-niacinamide",
            group_a=("ascorbic acid", "l-ascorbic acid"),
            group_b=("niacinamide", "nicotinamide"),
            severity=ConflictSeverity.LOW,
            title="Vitamin C (L-Ascorbic) + Niacinamide",
            explanation=(
                "Older research suggested these cancel each other out, though modern formulations "
                "are generally fine together. Some people may experience flushing."
            ),
            suggestion=(
                "If you notice redness, apply them at different times of day. Most people can use "
                "both without issues."
            ),
        ),
        ConflictRule(
            id="aha-bha-vitamin-c",
            group_a=_EXFOLIATING_ACIDS,
            group_b=_VITAMIN_C,
            severity=ConflictSeverity.MEDIUM,
            title="Exfoliating Acid + Vitamin C",
            explanation=(
                "Both are active at low pH. Layering them can over-exfoliate and irritate skin, "
                "especially if your skin is sensitive."
            ),
            suggestion="Use vitamin C in the morning and acids in the evening, or on alternate days.",
        ),
        ConflictRule(
            id="aha-bha-benzoyl-peroxide",
            group_a=("glycolic acid", "lactic acid", "mandelic acid", "salicylic acid", "aha", "bha"),
            group_b=("benzoyl peroxide",),
            severity=ConflictSeverity.MEDIUM,
            title="Exfoliating Acid + Benzoyl Peroxide",
            explanation=(
                "Combining exfoliating acids with benzoyl peroxide can cause excessive dryness, "
                "peeling, and irritation."
            ),
            suggestion="Use on alternate days or at different times of day.",
        ),
        ConflictRule(
            id="retinol-vitamin-c-acid",
            group_a=("retinol", "retinal", "tretinoin"),
            group_b=("azelaic acid",),
            severity=ConflictSeverity.LOW,
            title="Retinoid + Azelaic Acid",
            explanation=(
                "Both can cause irritation on their own. Together they may be too much for "
                "sensitive skin, though many people tolerate the combination."
            ),
            suggestion="Introduce the combination gradually, or use them at different times of day.",
        ),
        ConflictRule(
            id="multiple-retinoids",
            group_a=("retinol",),
            group_b=("tretinoin", "adapalene", "tazarotene", "retinal"),
            severity=ConflictSeverity.HIGH,
            title="Multiple Retinoids",
            explanation=(
                "Using more than one retinoid at the same time will almost certainly cause "
                "irritation, peeling, and barrier damage."
            ),
            suggestion="Pick one retinoid and stick with it. Stronger prescription retinoids replace OTC retinol.",
        ),
        ConflictRule(
            id="aha-aha-stacking",
            group_a=("glycolic acid",),
            group_b=("lactic acid", "mandelic acid"),
            severity=ConflictSeverity.MEDIUM,
            title="Multiple AHAs",
            explanation="Stacking multiple alpha-hydroxy acids increases the risk of over-exfoliation and irritation.",
            suggestion=(
                "Choose one AHA product per routine. Alternate between them on different days if "
                "you want variety."
            ),
        ),
        ConflictRule(
            id="copper-peptides-acids",
            group_a=("copper peptide", "ghk-cu", "copper tripeptide"),
            group_b=("ascorbic acid", "vitamin c", "glycolic acid", "salicylic acid", "aha", "bha"),
            severity=ConflictSeverity.MEDIUM,
            title="Copper Peptides + Acids / Vitamin C",
            explanation=(
                "Copper peptides can be deactivated by low-pH environments (acids, vitamin C), "
                "reducing their effectiveness."
            ),
            suggestion="Use copper peptides and acids/vitamin C at different times of day.",
        ),
        ConflictRule(
            id="benzoyl-peroxide-hydroquinone",
            group_a=("benzoyl peroxide",),
            group_b=("hydroquinone",),
            severity=ConflictSeverity.HIGH,
            title="Benzoyl Peroxide + Hydroquinone",
            explanation="Together these can cause temporary dark staining of the skin.",
            suggestion="Do not use these at the same time. Use at different times of day.",
        ),
    )
)
