"""String and tag similarity helpers used by duplicate detection."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Set

import jellyfish

from .helpers import normalize_string
from .logging import get_logger, verbose_text_logging_enabled

_LOGGER = get_logger(module=__name__)

# Taxonomy labels repeat heavily across candidates of one category.
_NORMALIZE_CACHE_SIZE = 4096


@lru_cache(maxsize=_NORMALIZE_CACHE_SIZE)
def _normalized(text: str) -> str:
    return normalize_string(text)


def levenshtein_distance(text1: str, text2: str) -> int:
    """Unit-cost insert/delete/substitute edit distance between two strings."""

    return jellyfish.levenshtein_distance(text1, text2)


def string_similarity(text1: str | None, text2: str | None) -> float:
    """Return normalized edit-distance closeness in ``[0, 1]``.

    Absent or empty inputs score ``0.0``. Strings that normalize identically
    score exactly ``1.0`` without computing a distance; otherwise the score is
    ``1 - distance / max(len(a), len(b))`` over the normalized forms.
    """

    if not text1 or not text2:
        return 0.0
    normalized_1 = _normalized(text1)
    normalized_2 = _normalized(text2)
    if verbose_text_logging_enabled():
        _LOGGER.debug(
            "Normalized comparison texts",
            left=normalized_1[:120],
            right=normalized_2[:120],
        )
    if normalized_1 == normalized_2:
        return 1.0

    max_length = max(len(normalized_1), len(normalized_2))
    distance = levenshtein_distance(normalized_1, normalized_2)
    score = 1.0 - distance / max_length
    _LOGGER.debug(
        "Computed string similarity",
        score=score,
        distance=distance,
        max_length=max_length,
    )
    return score


def _casefolded(tags: Iterable[str]) -> Set[str]:
    return {tag.lower() for tag in tags}


def tag_overlap(tags1: Iterable[str] | None, tags2: Iterable[str] | None) -> float:
    """Case-insensitive Jaccard similarity of two tag collections.

    Returns exactly ``0.0`` when either collection is empty.
    """

    set_a = _casefolded(tags1 or ())
    set_b = _casefolded(tags2 or ())
    if not set_a or not set_b:
        return 0.0
    intersection = sum(1 for tag in set_b if tag in set_a)
    union = len(set_a | set_b)
    score = intersection / union
    _LOGGER.debug(
        "Computed tag overlap",
        score=score,
        intersection=intersection,
        union=union,
    )
    return score


__all__ = ["levenshtein_distance", "string_similarity", "tag_overlap"]
