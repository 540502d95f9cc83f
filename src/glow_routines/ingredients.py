"""Ingredient text helpers and the known active-ingredient vocabulary.

Matching is plain case-insensitive substring containment; there is no INCI parsing.
"""

from __future__ import annotations

from typing import Iterable

from .models import CatalogProduct, Product

INGREDIENT_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Acids",
        (
            "Azelaic Acid",
            "Ferulic Acid",
            "Glycolic Acid (AHA)",
            "Hyaluronic Acid",
            "Kojic Acid",
            "Lactic Acid (AHA)",
            "Mandelic Acid (AHA)",
            "Salicylic Acid (BHA)",
            "Tranexamic Acid",
        ),
    ),
    ("Brightening & Pigmentation", ("Arbutin", "Licorice Root Extract")),
    (
        "Ceramides & Barrier Repair",
        ("Ceramide AP", "Ceramide NP", "Ceramides", "Cholesterol", "Fatty Acids", "Squalane", "Squalene"),
    ),
    ("Exfoliants", ("Gluconolactone", "Lactobionic Acid", "PHA (Polyhydroxy Acids)")),
    ("Moisturising & Hydrating", ("Glycerin", "Sodium Hyaluronate", "Urea")),
    (
        "Peptides & Growth Factors",
        (
            "Argireline",
            "Copper Peptides",
            "Matrixyl",
            "Palmitoyl Tetrapeptide-7",
            "Palmitoyl Tripeptide-1",
            "Peptides",
        ),
    ),
    (
        "Soothing & Anti-inflammatory",
        (
            "Allantoin",
            "Aloe Vera",
            "Centella Asiatica",
            "Chamomile Extract",
            "Green Tea Extract",
            "Madecassoside",
            "Zinc PCA",
        ),
    ),
    ("Sun Protection", ("Avobenzone", "Octinoxate", "Octocrylene", "Titanium Dioxide", "Zinc Oxide")),
    (
        "Vitamins & Antioxidants",
        (
            "L-Ascorbic Acid",
            "Niacin",
            "Niacinamide",
            "Panthenol (Vitamin B5)",
            "Retinaldehyde",
            "Retinoids",
            "Retinyl Palmitate",
            "Vitamin A (Retinol)",
            "Vitamin C",
            "Vitamin C (Ascorbic Acid)",
            "Vitamin E (Tocopherol)",
        ),
    ),
    (
        "Other Actives",
        (
            "Adenosine",
            "Bakuchiol",
            "Coenzyme Q10",
            "Collagen",
            "Elastin",
            "Honey",
            "Propolis",
            "Resveratrol",
            "Snail Mucin",
        ),
    ),
)

ACTIVE_INGREDIENTS: tuple[str, ...] = tuple(name for _, names in INGREDIENT_SECTIONS for name in names)


def ingredient_text(product: Product | CatalogProduct) -> str:
    """Lowercased ``active_ingredients``, ``full_ingredients`` and ``name``, space-joined."""
    parts = [part for part in (product.active_ingredients, product.full_ingredients, product.name) if part]
    return " ".join(parts).lower()


def match_group(text: str, group: Iterable[str]) -> str | None:
    """First keyword of ``group`` contained in ``text``, or None. Empty text never matches."""
    if not text:
        return None
    for keyword in group:
        if keyword and keyword.lower() in text:
            return keyword
    return None


def _search_terms(name: str) -> list[str]:
    base, _, rest = name.partition(" (")
    terms = [base.strip().lower()]
    qualifier = rest.rstrip(")").strip()
    # Short all-caps qualifiers (AHA, BHA, PHA) are classes, not ingredient names.
    if qualifier and not (qualifier.isupper() and len(qualifier) <= 3):
        terms.append(qualifier.lower())
    return terms


def find_active_ingredients(text: str | None) -> list[str]:
    """Known actives mentioned in ``text``, in vocabulary order."""
    haystack = (text or "").lower()
    if not haystack:
        return []
    return [name for name in ACTIVE_INGREDIENTS if any(term in haystack for term in _search_terms(name))]
