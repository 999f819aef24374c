"""
Search Predicate Builder
========================

Composes the full-text match and the equality / range filters of a
SearchQuery into one WHERE expression.

The predicate text only ever contains named placeholders (`:match`,
`:cuisine`, ...); values travel separately in `params`. The same
SearchPredicate is used for the page query and for the count query, so
`total` and `items` always see the same candidate set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from .query import SearchQuery

# FTS5 NEAR distance: tokens must all appear within this many tokens of each other.
NEAR_DISTANCE = 10

ALWAYS_TRUE = "1=1"

FTS_FROM = "recipes_fts JOIN recipes AS r ON recipes_fts.rowid = r.id"
PLAIN_FROM = "recipes AS r"


@dataclass(frozen=True)
class SearchPredicate:
    """WHERE clause + bound values + the FROM it must run against."""

    where: str
    params: Dict[str, Any] = field(default_factory=dict)
    source: str = PLAIN_FROM
    full_text: bool = False

    def score_expression(self, weights: Sequence[float]) -> str:
        """bm25 rank when a MATCH is present, a constant otherwise."""
        if not self.full_text:
            return "0.0"
        args = ", ".join(repr(float(w)) for w in weights)
        return f"bm25(recipes_fts, {args})" if args else "bm25(recipes_fts)"


def build_match_expression(terms: Sequence[str]) -> str:
    """
    FTS5 expression requiring every term, close together.

    ["garlic"]            -> "garlic"
    ["garlic", "butter"]  -> NEAR("garlic" "butter", 10)

    Terms arrive without double quotes (see query.tokenize), so wrapping each
    one in quotes turns FTS operators and punctuation into plain phrase text.
    """
    phrases = [f'"{t}"' for t in terms if t]
    if not phrases:
        return ""
    if len(phrases) == 1:
        return phrases[0]
    return f"NEAR({' '.join(phrases)}, {NEAR_DISTANCE})"


def build_predicate(query: SearchQuery) -> SearchPredicate:
    clauses: list[str] = []
    params: Dict[str, Any] = {}

    match = build_match_expression(query.terms)
    if match:
        clauses.append("recipes_fts MATCH :match")
        params["match"] = match
    else:
        clauses.append(ALWAYS_TRUE)

    if query.cuisine:
        clauses.append("r.cuisine = :cuisine")
        params["cuisine"] = query.cuisine
    if query.diet:
        clauses.append("r.diet = :diet")
        params["diet"] = query.diet
    if query.min_rating:
        clauses.append("r.rating >= :min_rating")
        params["min_rating"] = query.min_rating
    if query.max_minutes:
        clauses.append("r.minutes <= :max_minutes")
        params["max_minutes"] = query.max_minutes

    return SearchPredicate(
        where=" AND ".join(clauses),
        params=params,
        source=FTS_FROM if match else PLAIN_FROM,
        full_text=bool(match),
    )
