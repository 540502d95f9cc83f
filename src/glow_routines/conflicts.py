"""Pairwise ingredient conflict detection over a user's products."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .conflict_rules import DEFAULT_CONFLICT_RULES, ConflictRule, ConflictRuleSet
from .ingredients import ingredient_text, match_group
from .models import Product, TimeOfDayUsage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectedConflict:
    """A rule firing between two products.

    ``matched_a`` is the ``group_a`` keyword that matched and ``matched_b`` the
    ``group_b`` one, whichever product each was found in.
    """

    rule: ConflictRule
    product_a: Product
    product_b: Product
    matched_a: str
    matched_b: str

    @property
    def key(self) -> tuple[str, ...]:
        return dedup_key(self.rule, self.product_a, self.product_b)

    def involves(self, product_id: str) -> bool:
        return product_id in (self.product_a.id, self.product_b.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule.id,
            "severity": self.rule.severity.value,
            "title": self.rule.title,
            "explanation": self.rule.explanation,
            "suggestion": self.rule.suggestion,
            "product_a": {"id": self.product_a.id, "name": self.product_a.name},
            "product_b": {"id": self.product_b.id, "name": self.product_b.name},
            "matched_a": self.matched_a,
            "matched_b": self.matched_b,
        }


def dedup_key(rule: ConflictRule, product_a: Product, product_b: Product) -> tuple[str, ...]:
    return tuple(sorted((rule.id, product_a.id, product_b.id)))


def time_windows_overlap(a: TimeOfDayUsage, b: TimeOfDayUsage) -> bool:
    """Products share a routine window when either is ``both`` or they are equal."""
    if a == TimeOfDayUsage.BOTH or b == TimeOfDayUsage.BOTH:
        return True
    return a == b


def _match_rule(rule: ConflictRule, text_a: str, text_b: str) -> tuple[str, str] | None:
    """(group_a keyword, group_b keyword) when the rule fires in either direction."""
    forward_a = match_group(text_a, rule.group_a)
    forward_b = match_group(text_b, rule.group_b)
    if forward_a and forward_b:
        return forward_a, forward_b

    reverse_a = match_group(text_a, rule.group_b)
    reverse_b = match_group(text_b, rule.group_a)
    if reverse_a and reverse_b:
        return reverse_b, reverse_a
    return None


class ConflictDetector:
    """Detects conflicts using an injected, immutable rule set."""

    def __init__(self, rule_set: ConflictRuleSet = DEFAULT_CONFLICT_RULES) -> None:
        self.rule_set = rule_set

    def _scan(self, products: Sequence[Product]) -> list[DetectedConflict]:
        conflicts: list[DetectedConflict] = []
        seen: set[tuple[str, ...]] = set()
        texts = [ingredient_text(product) for product in products]

        for i in range(len(products)):
            for j in range(i + 1, len(products)):
                product_a = products[i]
                product_b = products[j]
                if not time_windows_overlap(product_a.time_of_day, product_b.time_of_day):
                    continue

                for rule in self.rule_set:
                    matched = _match_rule(rule, texts[i], texts[j])
                    if matched is None:
                        continue
                    key = dedup_key(rule, product_a, product_b)
                    if key in seen:
                        continue
                    seen.add(key)
                    conflicts.append(
                        DetectedConflict(
                            rule=rule,
                            product_a=product_a,
                            product_b=product_b,
                            matched_a=matched[0],
                            matched_b=matched[1],
                        )
                    )

        conflicts.sort(key=lambda conflict: conflict.rule.severity.rank)
        return conflicts

    def detect(self, products: Iterable[Product]) -> list[DetectedConflict]:
        """Conflicts among in-use products, high severity first."""
        active = [product for product in products if product.is_active]
        conflicts = self._scan(active)
        logger.debug(
            "Detected %d conflicts among %d active products",
            len(conflicts),
            len(active),
            extra={"glow_count": len(conflicts)},
        )
        return conflicts

    def detect_for_product(self, product: Product, all_products: Iterable[Product]) -> list[DetectedConflict]:
        """Conflicts between ``product`` and the other in-use products.

        ``product`` itself is included even when stopped, so a shelved product can be
        previewed before restarting it.
        """
        others = [p for p in all_products if p.id != product.id and p.is_active]
        return [conflict for conflict in self._scan([product, *others]) if conflict.involves(product.id)]


def detect_conflicts(
    products: Iterable[Product],
    rule_set: ConflictRuleSet = DEFAULT_CONFLICT_RULES,
) -> list[DetectedConflict]:
    return ConflictDetector(rule_set).detect(products)


def detect_conflicts_for_product(
    product: Product,
    all_products: Iterable[Product],
    rule_set: ConflictRuleSet = DEFAULT_CONFLICT_RULES,
) -> list[DetectedConflict]:
    return ConflictDetector(rule_set).detect_for_product(product, all_products)
