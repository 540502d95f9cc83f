"""Loading a store export into typed records.

An export is a JSON object with optional ``steps``, ``completions``, ``products``
and ``catalog`` lists of raw rows, as the store layer returns them. Every row goes
through ``legacy_compat`` on the way in.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .legacy_compat import load_completion, load_product, load_step
from .models import CatalogProduct, CompletionRecord, Product, RoutineStep
from .products import resolve_catalog_fields

logger = logging.getLogger(__name__)

SNAPSHOT_SECTIONS = ("steps", "completions", "products", "catalog")


class SnapshotError(ValueError):
    """The export is not an object of record lists."""


@dataclass(frozen=True)
class Snapshot:
    steps: list[RoutineStep] = field(default_factory=list)
    completions: list[CompletionRecord] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)
    catalog: dict[str, CatalogProduct] = field(default_factory=dict)

    def step(self, step_id: str) -> RoutineStep | None:
        return next((step for step in self.steps if step.id == step_id), None)

    def product(self, product_id: str) -> Product | None:
        return next((product for product in self.products if product.id == product_id), None)


def _rows(data: dict[str, Any], section: str) -> list[dict[str, Any]]:
    rows = data.get(section) or []
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise SnapshotError(f"'{section}' must be a list of objects")
    return rows


def load_snapshot(data: Any) -> Snapshot:
    """Validate raw export data. Products come back with catalog fields resolved."""
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    catalog = {entry.id: entry for entry in (CatalogProduct.model_validate(row) for row in _rows(data, "catalog"))}
    snapshot = Snapshot(
        steps=[load_step(row) for row in _rows(data, "steps")],
        completions=[load_completion(row) for row in _rows(data, "completions")],
        products=[resolve_catalog_fields(load_product(row), catalog) for row in _rows(data, "products")],
        catalog=catalog,
    )
    logger.info(
        "Loaded snapshot: %d steps, %d completions, %d products, %d catalog entries",
        len(snapshot.steps),
        len(snapshot.completions),
        len(snapshot.products),
        len(snapshot.catalog),
    )
    return snapshot


def read_snapshot(path: str | Path) -> Snapshot:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"{path}: invalid JSON ({exc})") from exc
    return load_snapshot(data)
