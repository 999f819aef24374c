"""
Query Normalizer
================

Turns raw `/search` query-string values into a canonical SearchQuery.

The search endpoint never rejects filter values: every field goes through
the coercion layer below, which maps missing, non-numeric and out-of-range
input to a documented default.

    field        default   range
    -----------  --------  ---------------------------
    q            ""        first 6 tokens, `"` and control chars removed
    cuisine      ""        trimmed, exact match
    diet         ""        trimmed, exact match
    min_rating   0         [0, 5]       (0 = no filter)
    max_minutes  0         [0, 1e9]     (0 = no filter)
    page         1         [1, 1e9]
    page_size    20        [1, 50]
    sort         relevance SortOrder values, else relevance
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

DEFAULT_MAX_TERMS = 6
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50
MAX_RATING = 5.0
# Keeps OFFSET and bound integers inside SQLite's 64-bit range.
MAX_INT = 10**9
# FTS5 rejects NUL and other control characters inside a quoted phrase.
_UNSAFE_CHARS = re.compile(r"[\"\x00-\x1f\x7f]")


class SortOrder(str, Enum):
    RELEVANCE = "relevance"
    RATING = "rating"
    MINUTES_ASC = "minutes-asc"
    MINUTES_DESC = "minutes-desc"
    POPULARITY = "popularity"

    @classmethod
    def parse(cls, raw: Any) -> "SortOrder":
        value = str(raw or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return cls.RELEVANCE


@dataclass(frozen=True)
class SearchQuery:
    """Canonical, request-scoped search input."""

    terms: tuple[str, ...] = ()
    cuisine: str = ""
    diet: str = ""
    min_rating: float = 0.0
    max_minutes: int = 0
    sort: SortOrder = SortOrder.RELEVANCE
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def has_text(self) -> bool:
        return bool(self.terms)

    @property
    def has_filters(self) -> bool:
        return bool(self.cuisine or self.diet or self.min_rating or self.max_minutes)

    @property
    def is_empty(self) -> bool:
        """No free text and no filters: nothing was asked."""
        return not self.has_text and not self.has_filters


# ----------------------------------------------------------------------------
# Coercion layer
# ----------------------------------------------------------------------------

def coerce_float(raw: Any, default: float) -> float:
    """Parse a number permissively; anything unusable becomes `default`."""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def coerce_int(raw: Any, default: int) -> int:
    value = coerce_float(raw, float(default))
    return int(value)


def clamp(value, low, high=None):
    if value < low:
        return low
    if high is not None and value > high:
        return high
    return value


def tokenize(text: Optional[str], max_terms: int = DEFAULT_MAX_TERMS) -> tuple[str, ...]:
    """Whitespace tokens, first `max_terms` only, double quotes and control characters removed."""
    words = str(text or "").strip().split()[:max_terms]
    cleaned = (_UNSAFE_CHARS.sub("", w) for w in words)
    return tuple(w for w in cleaned if w)


def normalize_search_query(
    q: Any = None,
    *,
    cuisine: Any = None,
    diet: Any = None,
    min_rating: Any = None,
    max_minutes: Any = None,
    page: Any = None,
    page_size: Any = None,
    sort: Any = None,
    max_terms: int = DEFAULT_MAX_TERMS,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> SearchQuery:
    """Build a SearchQuery from raw request values. Never raises."""
    return SearchQuery(
        terms=tokenize(q, max_terms),
        cuisine=str(cuisine or "").strip(),
        diet=str(diet or "").strip(),
        min_rating=clamp(coerce_float(min_rating, 0.0), 0.0, MAX_RATING),
        max_minutes=clamp(coerce_int(max_minutes, 0), 0, MAX_INT),
        sort=SortOrder.parse(sort),
        page=clamp(coerce_int(page, 1), 1, MAX_INT),
        page_size=clamp(coerce_int(page_size, default_page_size), 1, max_page_size),
    )
