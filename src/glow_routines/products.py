"""Product lifecycle, catalog field resolution, and period-after-opening expiry."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping

from .date_math import add_months, days_between, parse_date
from .models import CatalogProduct, Product
from .schedule import is_product_active_on

logger = logging.getLogger(__name__)

DEFAULT_PAO_WARNING_DAYS = 30
_PAO_MONTHS_LABEL_DAYS = 90

# Display fields read from the catalog entry when a product links to one.
CATALOG_DISPLAY_FIELDS: tuple[str, ...] = (
    "name",
    "brand",
    "size",
    "image_url",
    "source_url",
    "step_category",
    "active_ingredients",
    "full_ingredients",
)


def active_products(products: Iterable[Product]) -> list[Product]:
    """In-use products, most recently started first."""
    active = [product for product in products if product.is_active]
    active.sort(key=lambda product: product.started_at or date.min, reverse=True)
    return active


def inactive_products(products: Iterable[Product]) -> list[Product]:
    """Shelved products, most recently stopped first."""
    inactive = [product for product in products if not product.is_active]
    inactive.sort(key=lambda product: product.stopped_at or date.min, reverse=True)
    return inactive


def products_for_date(products: Iterable[Product], target: date | str) -> list[Product]:
    day = parse_date(target)
    return [product for product in active_products(products) if is_product_active_on(product, day)]


def stop_product(product: Product, today: date | str) -> Product:
    return product.model_copy(update={"stopped_at": parse_date(today)})


def restart_product(product: Product, today: date | str) -> Product:
    return product.model_copy(update={"stopped_at": None, "started_at": parse_date(today)})


def resolve_catalog_fields(product: Product, catalog: Mapping[str, CatalogProduct]) -> Product:
    """Product with display fields taken from its catalog entry.

    Catalog values win whenever the product links to an entry that exists; without
    a link (or with a dangling one) the product's own fields are used.
    """
    if not product.catalog_id:
        return product
    entry = catalog.get(product.catalog_id)
    if entry is None:
        logger.warning(
            "Product %s links to missing catalog entry %s",
            product.id,
            product.catalog_id,
            extra={"glow_product_id": product.id},
        )
        return product
    return product.model_copy(update={field: getattr(entry, field) for field in CATALOG_DISPLAY_FIELDS})


def is_in_my_list(products: Iterable[Product], catalog_id: str) -> bool:
    return any(product.catalog_id == catalog_id for product in products)


@dataclass(frozen=True)
class ExpiryInfo:
    label: str
    is_warning: bool
    days_left: int
    expires_on: date


def expiry_info(
    product: Product,
    today: date | str,
    *,
    warning_days: int = DEFAULT_PAO_WARNING_DAYS,
) -> ExpiryInfo | None:
    """PAO status from ``date_opened`` + ``longevity_months``; None when either is missing."""
    if product.date_opened is None or not product.longevity_months:
        return None
    expires_on = add_months(product.date_opened, product.longevity_months)
    days_left = days_between(today, expires_on)
    if days_left < 0:
        return ExpiryInfo("Expired", True, days_left, expires_on)
    if days_left <= warning_days:
        return ExpiryInfo(f"{days_left}d left", True, days_left, expires_on)
    if days_left <= _PAO_MONTHS_LABEL_DAYS:
        months = max(1, math.floor(days_left / 30 + 0.5))
        return ExpiryInfo(f"{months}mo left", False, days_left, expires_on)
    return ExpiryInfo(f"{product.longevity_months}M PAO", False, days_left, expires_on)
