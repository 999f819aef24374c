"""
Recipe Store
============

Read-only access to the SQLite recipe dataset.

The connection is opened once at startup (`mode=ro`) and shared by every
request; SQLite serializes access internally and nothing here writes, so
handlers read concurrently without extra locking. Nothing is cached:
each search recomputes from the database.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..core.errors import NotFoundError, StorageError
from ..schemas.recipe import Facets, Recipe, RecipeSummary, SearchResult
from .facets import CUISINE_LIMIT, DIET_LIMIT, compute_facets
from .predicate import SearchPredicate, build_predicate
from .query import SearchQuery
from .ranking import order_clause, page_count, page_window

logger = logging.getLogger(__name__)

DEFAULT_BM25_WEIGHTS = (1.5, 1.2, 1.1, 1.3, 0.5, 0.8, 0.6)

SUMMARY_COLUMNS = """
    r.id          AS id,
    r.name        AS name,
    r.minutes     AS minutes,
    r.rating      AS rating,
    r.popularity  AS popularity,
    r.cuisine     AS cuisine,
    r.diet        AS diet,
    r.description AS description,
    r.steps       AS steps,
    r.ingredients AS ingredients
"""

DETAIL_SQL = """
    SELECT
        r.id, r.name, r.minutes, r.rating, r.popularity, r.cuisine, r.diet,
        r.description, r.steps, r.ingredients, r.nutrition,
        r.n_ingredients, r.n_steps, r.submitted
    FROM recipes AS r
    WHERE r.id = :id
"""


def decode_json_list(raw: Any) -> List[Any]:
    """Stored JSON text -> list. Missing or malformed encodings become []."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Malformed JSON column value: %r", str(raw)[:80])
        return []
    return value if isinstance(value, list) else []


FTS5_SYNTAX_MARKERS = ("fts5:", "syntax error", "unterminated string", "malformed match")


def is_match_syntax_error(error: sqlite3.OperationalError) -> bool:
    """True when SQLite rejected the MATCH expression itself, not the database."""
    message = str(error).lower()
    return any(marker in message for marker in FTS5_SYNTAX_MARKERS)


class RecipeStore:
    """Search, detail lookup and facets over the recipe dataset."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        db_path: str = ":memory:",
        bm25_weights: Sequence[float] = DEFAULT_BM25_WEIGHTS,
        cuisine_facet_limit: int = CUISINE_LIMIT,
        diet_facet_limit: int = DIET_LIMIT,
    ):
        conn.row_factory = sqlite3.Row
        self.conn = conn
        self.db_path = db_path
        self.bm25_weights = tuple(bm25_weights)
        self.cuisine_facet_limit = cuisine_facet_limit
        self.diet_facet_limit = diet_facet_limit

    @classmethod
    def open(cls, db_path: str, **kwargs) -> "RecipeStore":
        """Open the dataset read-only. Raises StorageError if it is missing."""
        path = Path(db_path)
        if not path.exists():
            raise StorageError(f"Recipe database not found: {db_path}")
        try:
            conn = sqlite3.connect(
                f"file:{path.resolve()}?mode=ro", uri=True, check_same_thread=False
            )
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open recipe database {db_path}: {e}") from e
        logger.info("Recipe database opened read-only: %s", db_path)
        return cls(conn, db_path=db_path, **kwargs)

    def close(self) -> None:
        self.conn.close()

    def ping(self) -> bool:
        row = self.conn.execute("SELECT 1 AS ok").fetchone()
        return bool(row and row["ok"])

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def count(self, predicate: SearchPredicate) -> int:
        row = self.conn.execute(
            f"SELECT COUNT(*) AS c FROM {predicate.source} WHERE {predicate.where}",
            predicate.params,
        ).fetchone()
        return int(row["c"]) if row else 0

    def fetch_page(self, predicate: SearchPredicate, query: SearchQuery) -> List[RecipeSummary]:
        window = page_window(query.page, query.page_size)
        sql = f"""
            SELECT {SUMMARY_COLUMNS},
                {predicate.score_expression(self.bm25_weights)} AS score
            FROM {predicate.source}
            WHERE {predicate.where}
            {order_clause(query.sort)}
            LIMIT :limit OFFSET :offset
        """
        params = {**predicate.params, "limit": window.limit, "offset": window.offset}
        rows = self.conn.execute(sql, params).fetchall()

        items: List[RecipeSummary] = []
        for row in rows:
            data = dict(row)
            data["ingredients"] = decode_json_list(data.get("ingredients"))
            data["score"] = float(data.get("score") or 0.0)
            items.append(RecipeSummary(**data))
        return items

    def search(self, query: SearchQuery) -> SearchResult:
        """
        Run a normalized query.

        An empty query (no text, no filters) returns an empty page without
        touching the database.
        """
        if query.is_empty:
            return SearchResult(page=query.page, page_size=query.page_size, total=0, pages=0, items=[])

        predicate = build_predicate(query)
        try:
            total = self.count(predicate)
            items = self.fetch_page(predicate, query) if total else []
        except sqlite3.OperationalError as e:
            if predicate.full_text and is_match_syntax_error(e):
                # User text FTS5 cannot parse matches nothing.
                logger.info("Unparseable search terms=%r: %s", query.terms, e)
                return SearchResult(page=query.page, page_size=query.page_size, total=0, pages=0, items=[])
            logger.warning("Search failed for terms=%s: %s", query.terms, e)
            raise StorageError(str(e)) from e

        logger.debug(
            "search terms=%s sort=%s page=%d total=%d", query.terms, query.sort.value, query.page, total
        )
        return SearchResult(
            page=query.page,
            page_size=query.page_size,
            total=total,
            pages=page_count(total, query.page_size),
            items=items,
        )

    # ------------------------------------------------------------------
    # Detail / facets
    # ------------------------------------------------------------------

    def get_recipe(self, recipe_id: int) -> Recipe:
        row = self.conn.execute(DETAIL_SQL, {"id": recipe_id}).fetchone()
        if row is None:
            raise NotFoundError("Not found")
        data = dict(row)
        data["ingredients"] = decode_json_list(data.get("ingredients"))
        data["nutrition"] = decode_json_list(data.get("nutrition"))
        return Recipe(**data)

    def find_recipe(self, recipe_id: int) -> Optional[Recipe]:
        try:
            return self.get_recipe(recipe_id)
        except NotFoundError:
            return None

    def facets(self) -> Facets:
        return compute_facets(
            self.conn,
            cuisine_limit=self.cuisine_facet_limit,
            diet_limit=self.diet_facet_limit,
        )
