"""
Recipe Dataset Schema
=====================

SQLite layout of the read-only recipe dataset:

- `recipes`: one row per recipe; list-typed columns (ingredients, tags,
  nutrition) are stored as JSON text.
- `recipes_fts`: external-content FTS5 index over the searchable text
  columns, keyed by `recipes.id`. Column order matches the bm25 weights in
  settings.

Used offline by `scripts/build_recipe_db.py` and by the test fixtures.
The API only ever opens the database read-only.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Iterable, Mapping

RECIPE_COLUMNS = (
    "id",
    "name",
    "description",
    "minutes",
    "rating",
    "popularity",
    "cuisine",
    "diet",
    "tags",
    "ingredients",
    "steps",
    "nutrition",
    "n_ingredients",
    "n_steps",
    "submitted",
)

JSON_COLUMNS = ("tags", "ingredients", "nutrition")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS recipes (
    id            INTEGER PRIMARY KEY,
    name          TEXT,
    description   TEXT,
    minutes       INTEGER,
    rating        REAL,
    popularity    INTEGER DEFAULT 0,
    cuisine       TEXT,
    diet          TEXT,
    tags          TEXT,
    ingredients   TEXT,
    steps         TEXT,
    nutrition     TEXT,
    n_ingredients INTEGER,
    n_steps       INTEGER,
    submitted     TEXT
);

CREATE INDEX IF NOT EXISTS idx_recipes_cuisine ON recipes (cuisine);
CREATE INDEX IF NOT EXISTS idx_recipes_diet ON recipes (diet);

CREATE VIRTUAL TABLE IF NOT EXISTS recipes_fts USING fts5(
    name, description, ingredients, steps, tags, cuisine, diet,
    content='recipes', content_rowid='id'
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)


def _encode(column: str, value: Any) -> Any:
    if column in JSON_COLUMNS and value is not None and not isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if column == "steps" and isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False)
    return value


def insert_recipes(conn: sqlite3.Connection, rows: Iterable[Mapping[str, Any]]) -> int:
    """Insert recipe dicts (missing columns become NULL). Returns the row count."""
    placeholders = ", ".join(f":{c}" for c in RECIPE_COLUMNS)
    sql = f"INSERT INTO recipes ({', '.join(RECIPE_COLUMNS)}) VALUES ({placeholders})"
    count = 0
    for row in rows:
        conn.execute(sql, {c: _encode(c, row.get(c)) for c in RECIPE_COLUMNS})
        count += 1
    return count


def rebuild_index(conn: sqlite3.Connection) -> None:
    """Repopulate the FTS index from the `recipes` content table."""
    conn.execute("INSERT INTO recipes_fts(recipes_fts) VALUES ('rebuild')")
