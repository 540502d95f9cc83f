from __future__ import annotations

import pytest

from glow_routines.categories import CATEGORY_INFO, StepCategory, category_info, normalize_category


def test_every_category_has_display_info() -> None:
    assert set(CATEGORY_INFO) == set(StepCategory)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("serum", StepCategory.SERUM),
        (" Eye Cream ", StepCategory.EYE_CREAM),
        ("lip-care", StepCategory.LIP_CARE),
        (StepCategory.MASK, StepCategory.MASK),
        ("essence", StepCategory.OTHER),
        (None, StepCategory.OTHER),
        (3, StepCategory.OTHER),
    ],
)
def test_normalize_category(raw, expected: StepCategory) -> None:
    assert normalize_category(raw) is expected


def test_category_info_lookup() -> None:
    info = category_info("sunscreen")
    assert info.label == "Sunscreen"
    assert info.color.startswith("#")
    assert category_info("unknown").label == "Other"
