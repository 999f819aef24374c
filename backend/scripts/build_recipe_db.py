"""
Recipe Database Builder
=======================

Builds the read-only SQLite dataset (recipes table + FTS5 index) served
by the API from a Food.com-style export.

Recipes CSV columns (RAW_recipes.csv):
  - name, id, minutes, contributor_id, submitted
  - tags, nutrition, steps, ingredients: Python-literal lists
  - n_steps, n_ingredients, description

Interactions CSV (optional, RAW_interactions.csv):
  - user_id, recipe_id, date, rating, review
  Used for the average `rating` and the `popularity` (review count).

Cuisine and diet are derived from the tags.

Usage:
    python scripts/build_recipe_db.py RAW_recipes.csv --interactions RAW_interactions.csv --output recipes.db
"""

from __future__ import annotations

import argparse
import ast
import csv
import logging
import sqlite3
import sys
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipe_app.search.schema import create_schema, insert_recipes, rebuild_index  # noqa: E402

logger = logging.getLogger("build_recipe_db")


# ============================================================================
# TAG MAPPING
# ============================================================================

# First matching tag wins; order is most-specific first.
CUISINE_TAGS = {
    "italian": "Italian",
    "mexican": "Mexican",
    "chinese": "Chinese",
    "japanese": "Japanese",
    "thai": "Thai",
    "indian": "Indian",
    "french": "French",
    "greek": "Greek",
    "spanish": "Spanish",
    "german": "German",
    "korean": "Korean",
    "vietnamese": "Vietnamese",
    "moroccan": "Moroccan",
    "lebanese": "Lebanese",
    "middle-eastern": "Middle Eastern",
    "caribbean": "Caribbean",
    "southern-united-states": "Southern US",
    "tex-mex": "Tex-Mex",
    "american": "American",
    "european": "European",
    "asian": "Asian",
}

DIET_TAGS = {
    "vegan": "Vegan",
    "vegetarian": "Vegetarian",
    "gluten-free": "Gluten-Free",
    "low-carb": "Low-Carb",
    "dairy-free": "Dairy-Free",
    "low-fat": "Low-Fat",
    "low-sodium": "Low-Sodium",
    "kosher": "Kosher",
}


def parse_list(raw: Optional[str]) -> List[Any]:
    """"['a', 'b']" -> ['a', 'b']; anything unparseable -> []."""
    if not raw:
        return []
    try:
        value = ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return []
    return list(value) if isinstance(value, (list, tuple)) else []


def first_tag(tags: List[str], mapping: Dict[str, str]) -> Optional[str]:
    present = set(tags)
    for tag, label in mapping.items():
        if tag in present:
            return label
    return None


def to_int(raw: Any) -> Optional[int]:
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return None


def load_ratings(path: Path) -> Dict[int, Tuple[float, int]]:
    """recipe_id -> (average rating rounded to 2dp, review count)."""
    totals: Dict[int, List[float]] = defaultdict(lambda: [0.0, 0])
    with open(path, "r", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            recipe_id = to_int(row.get("recipe_id"))
            rating = to_int(row.get("rating"))
            if recipe_id is None or rating is None:
                continue
            bucket = totals[recipe_id]
            bucket[0] += rating
            bucket[1] += 1
    return {rid: (round(s / n, 2), int(n)) for rid, (s, n) in totals.items() if n}


def convert_row(row: Dict[str, str], ratings: Dict[int, Tuple[float, int]]) -> Optional[Dict[str, Any]]:
    """One CSV row -> recipe dict for `insert_recipes`. None if the row has no id."""
    recipe_id = to_int(row.get("id"))
    if recipe_id is None:
        return None

    tags = [str(t) for t in parse_list(row.get("tags"))]
    ingredients = [str(i) for i in parse_list(row.get("ingredients"))]
    steps = [str(s) for s in parse_list(row.get("steps"))]
    rating, popularity = ratings.get(recipe_id, (None, 0))

    return {
        "id": recipe_id,
        "name": (row.get("name") or "").strip() or None,
        "description": (row.get("description") or "").strip() or None,
        "minutes": to_int(row.get("minutes")),
        "rating": rating,
        "popularity": popularity,
        "cuisine": first_tag(tags, CUISINE_TAGS),
        "diet": first_tag(tags, DIET_TAGS),
        "tags": tags,
        "ingredients": ingredients,
        "steps": steps,
        "nutrition": parse_list(row.get("nutrition")),
        "n_ingredients": to_int(row.get("n_ingredients")) or len(ingredients),
        "n_steps": to_int(row.get("n_steps")) or len(steps),
        "submitted": row.get("submitted") or None,
    }


def iter_recipes(csv_path: Path, ratings: Dict[int, Tuple[float, int]]) -> Iterator[Dict[str, Any]]:
    # utf-8-sig handles a BOM in exported CSV files
    with open(csv_path, "r", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            recipe = convert_row(row, ratings)
            if recipe is None:
                logger.warning("Skipping row without id: %s", row.get("name", "Unknown"))
                continue
            yield recipe


def build_database(
    csv_path: Path,
    output_path: Path,
    interactions_path: Optional[Path] = None,
    limit: Optional[int] = None,
) -> int:
    """Write a fresh database at `output_path`. Returns the recipe count."""
    ratings = load_ratings(interactions_path) if interactions_path else {}
    logger.info("Loaded ratings for %d recipes", len(ratings))

    if output_path.exists():
        output_path.unlink()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(output_path)
    try:
        create_schema(conn)
        recipes = iter_recipes(csv_path, ratings)
        if limit:
            recipes = (r for i, r in enumerate(recipes) if i < limit)
        count = insert_recipes(conn, recipes)
        rebuild_index(conn)
        conn.commit()
    finally:
        conn.close()

    logger.info("Wrote %d recipes to %s", count, output_path)
    return count


# ============================================================================
# MAIN
# ============================================================================

def main() -> int:
    parser = argparse.ArgumentParser(description="Build the SQLite recipe dataset")
    parser.add_argument("csv", help="Recipes CSV (RAW_recipes.csv)")
    parser.add_argument("--interactions", default=None, help="Interactions CSV for ratings/popularity")
    parser.add_argument("--output", default="recipes.db", help="SQLite output path")
    parser.add_argument("--limit", type=int, default=None, help="Only import the first N recipes")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    csv_path = Path(args.csv)
    if not csv_path.exists():
        logger.error("CSV file not found: %s", csv_path)
        return 1
    interactions = Path(args.interactions) if args.interactions else None
    if interactions and not interactions.exists():
        logger.error("Interactions file not found: %s", interactions)
        return 1

    count = build_database(csv_path, Path(args.output), interactions, args.limit)
    print(f"\nDone! {count} recipes indexed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
