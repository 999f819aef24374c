"""
Facet Aggregator
================

Top cuisines and diets with occurrence counts, used to seed filter
suggestions. Independent of any active query: no filters, no paging.
"""

from __future__ import annotations

import sqlite3
from typing import List

from ..schemas.recipe import FacetCount, Facets

CUISINE_LIMIT = 40
DIET_LIMIT = 20

# Column names come from FACET_COLUMNS only, never from the request.
FACET_COLUMNS = ("cuisine", "diet")


def top_values(conn: sqlite3.Connection, column: str, limit: int) -> List[FacetCount]:
    """Distinct non-empty values of `column`, most frequent first."""
    if column not in FACET_COLUMNS:
        raise ValueError(f"Unknown facet column: {column}")

    rows = conn.execute(
        f"""
        SELECT r.{column} AS name, COUNT(*) AS count
        FROM recipes AS r
        WHERE r.{column} IS NOT NULL AND r.{column} <> ''
        GROUP BY r.{column}
        ORDER BY count DESC
        LIMIT :limit
        """,
        {"limit": limit},
    ).fetchall()
    return [FacetCount(name=row[0], count=row[1]) for row in rows]


def compute_facets(
    conn: sqlite3.Connection,
    *,
    cuisine_limit: int = CUISINE_LIMIT,
    diet_limit: int = DIET_LIMIT,
) -> Facets:
    return Facets(
        cuisines=top_values(conn, "cuisine", cuisine_limit),
        diets=top_values(conn, "diet", diet_limit),
    )
