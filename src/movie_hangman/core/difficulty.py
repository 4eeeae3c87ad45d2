from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

# TMDB rejects discover requests for pages beyond 500.
MAX_DISCOVER_PAGE = 500

# Hard games skip vote filters and jump deep into the unsorted catalog.
HARD_PAGE_MIN = 10
HARD_PAGE_MAX = 50


class InvalidDifficultyError(ValueError):
    pass


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# (vote_average.gte, vote_count.gte) for the vote-filtered difficulties.
_VOTE_THRESHOLDS: dict[Difficulty, tuple[str, str]] = {
    Difficulty.EASY: ("5", "5"),
    Difficulty.MEDIUM: ("1", "1"),
}


class PageCounter(Protocol):
    def total_pages(self, filters: dict[str, str]) -> int: ...


def parse_difficulty(value: str | None) -> Difficulty:
    try:
        return Difficulty((value or "").strip().lower())
    except ValueError as e:
        raise InvalidDifficultyError("Invalid difficulty level") from e


def base_filters(difficulty: Difficulty, language: str | None) -> dict[str, str]:
    filters: dict[str, str] = {}
    if language:
        filters["with_original_language"] = language

    thresholds = _VOTE_THRESHOLDS.get(difficulty)
    if thresholds is not None:
        vote_average, vote_count = thresholds
        filters["vote_average.gte"] = vote_average
        filters["vote_count.gte"] = vote_count
        filters["sort_by"] = "vote_average.desc"
    return filters


def clamp_total_pages(total_pages: int) -> int:
    return max(1, min(total_pages, MAX_DISCOVER_PAGE))


def build_filters(
    difficulty: Difficulty,
    language: str | None,
    catalog: PageCounter,
    *,
    rng: random.Random | None = None,
) -> dict[str, str]:
    """Return the discover filters for one game, including a random page.

    Easy and medium probe the catalog for the page count first; hard picks
    from a fixed page range without probing.
    """

    rng = rng or random.Random()
    filters = base_filters(difficulty, language)

    if difficulty is Difficulty.HARD:
        page = rng.randint(HARD_PAGE_MIN, HARD_PAGE_MAX)
    else:
        total = clamp_total_pages(catalog.total_pages(filters))
        page = rng.randint(1, total)

    filters["page"] = str(page)
    logger.debug("Difficulty %s -> filters %s", difficulty.value, filters)
    return filters
