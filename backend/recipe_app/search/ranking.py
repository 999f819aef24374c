"""
Ranking & Pagination
====================

Ordering table and page arithmetic for `/search`.

Relevance sorts by bm25 score ASCENDING: FTS5 returns more negative
scores for better matches, so lower is better. Callers rely on this
convention.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .query import SortOrder

ORDER_BY = {
    SortOrder.RATING: "ORDER BY r.rating DESC",
    SortOrder.MINUTES_ASC: "ORDER BY r.minutes ASC",
    SortOrder.MINUTES_DESC: "ORDER BY r.minutes DESC",
    SortOrder.POPULARITY: "ORDER BY r.popularity DESC",
    SortOrder.RELEVANCE: "ORDER BY score ASC",
}


def order_clause(sort: SortOrder) -> str:
    return ORDER_BY.get(sort, ORDER_BY[SortOrder.RELEVANCE])


@dataclass(frozen=True)
class PageWindow:
    limit: int
    offset: int


def page_window(page: int, page_size: int) -> PageWindow:
    return PageWindow(limit=page_size, offset=(page - 1) * page_size)


def page_count(total: int, page_size: int) -> int:
    """ceil(total / page_size); 0 when there is nothing to show."""
    if total <= 0:
        return 0
    return math.ceil(total / page_size)
