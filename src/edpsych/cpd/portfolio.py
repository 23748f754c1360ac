"""
Portfolio Scoring

Completeness score and link maintenance for professional portfolios.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

SECTION_WEIGHT = 20
ITEM_POINTS = {"achievements": 5, "evidence": 4, "reflections": 5, "qualifications": 5}


def portfolio_completeness(has_profile: bool, counts: dict[str, int]) -> int:
    """0-100: each of the five sections (profile plus the four item types) is worth 20."""
    score = SECTION_WEIGHT if has_profile else 0
    for section, per_item in ITEM_POINTS.items():
        score += min(SECTION_WEIGHT, counts.get(section, 0) * per_item)
    return score


def link_ids(ids: Iterable[UUID]) -> list[str]:
    """Stored form of a link list (de-duplicated, order kept)."""
    return list(dict.fromkeys(str(i) for i in ids))


def without_link(ids: Iterable[str], removed: UUID) -> list[str]:
    return [i for i in ids if i != str(removed)]
