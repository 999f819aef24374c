"""
Tests for the offline dataset builder script.
"""

import csv
import importlib.util
import sqlite3
from pathlib import Path

import pytest

from recipe_app.search.query import normalize_search_query
from recipe_app.search.store import RecipeStore

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "build_recipe_db.py"


@pytest.fixture(scope="module")
def builder():
    spec = importlib.util.spec_from_file_location("build_recipe_db", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


RECIPE_ROWS = [
    {
        "name": "arriba baked winter squash mexican style",
        "id": "137739",
        "minutes": "55",
        "submitted": "2005-09-16",
        "tags": "['60-minutes-or-less', 'mexican', 'vegetarian', 'vegan']",
        "nutrition": "[51.5, 0.0, 13.0]",
        "n_steps": "3",
        "steps": "['make a choice', 'cut squash', 'bake']",
        "description": "autumn is my favorite time of year to cook!",
        "ingredients": "['winter squash', 'mexican seasoning', 'honey']",
        "n_ingredients": "3",
    },
    {
        "name": "plain toast",
        "id": "42",
        "minutes": "5",
        "submitted": "",
        "tags": "not a list",
        "nutrition": "",
        "n_steps": "",
        "steps": "['toast bread']",
        "description": "",
        "ingredients": "['bread']",
        "n_ingredients": "",
    },
    {"name": "no id", "id": "", "minutes": "1"},
]

INTERACTION_ROWS = [
    {"user_id": "1", "recipe_id": "137739", "date": "2010-01-01", "rating": "5", "review": "great"},
    {"user_id": "2", "recipe_id": "137739", "date": "2010-01-02", "rating": "4", "review": "good"},
    {"user_id": "3", "recipe_id": "137739", "date": "2010-01-03", "rating": "", "review": "meh"},
]


def write_csv(path: Path, rows):
    fields = sorted({key for row in rows for key in row})
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fields)
        writer.writeheader()
        writer.writerows(rows)
    return path


class TestConvertRow:
    def test_tags_map_to_cuisine_and_diet(self, builder):
        recipe = builder.convert_row(RECIPE_ROWS[0], {137739: (4.5, 2)})
        assert recipe["id"] == 137739
        assert recipe["cuisine"] == "Mexican"
        # "vegan" is checked before "vegetarian"
        assert recipe["diet"] == "Vegan"
        assert recipe["rating"] == 4.5
        assert recipe["popularity"] == 2
        assert recipe["steps"] == ["make a choice", "cut squash", "bake"]
        assert recipe["nutrition"] == [51.5, 0.0, 13.0]

    def test_missing_values(self, builder):
        recipe = builder.convert_row(RECIPE_ROWS[1], {})
        assert recipe["tags"] == []
        assert recipe["cuisine"] is None
        assert recipe["rating"] is None
        assert recipe["popularity"] == 0
        assert recipe["description"] is None
        assert recipe["n_steps"] == 1

    def test_row_without_id(self, builder):
        assert builder.convert_row(RECIPE_ROWS[2], {}) is None

    @pytest.mark.parametrize("raw", [None, "", "oops", "{'a': 1}", "[1,"])
    def test_parse_list_rejects_non_lists(self, builder, raw):
        assert builder.parse_list(raw) == []


def test_load_ratings(builder, tmp_path):
    path = write_csv(tmp_path / "interactions.csv", INTERACTION_ROWS)
    assert builder.load_ratings(path) == {137739: (4.5, 2)}


def test_build_database_is_searchable(builder, tmp_path):
    recipes_csv = write_csv(tmp_path / "recipes.csv", RECIPE_ROWS)
    interactions = write_csv(tmp_path / "interactions.csv", INTERACTION_ROWS)
    output = tmp_path / "out" / "recipes.db"

    assert builder.build_database(recipes_csv, output, interactions) == 2

    conn = sqlite3.connect(output)
    try:
        assert conn.execute("SELECT COUNT(*) FROM recipes").fetchone()[0] == 2
    finally:
        conn.close()

    store = RecipeStore.open(str(output))
    try:
        result = store.search(normalize_search_query("squash"))
        assert [item.id for item in result.items] == [137739]
        assert result.items[0].rating == 4.5
        assert [f.name for f in store.facets().cuisines] == ["Mexican"]
    finally:
        store.close()


def test_build_database_limit(builder, tmp_path):
    recipes_csv = write_csv(tmp_path / "recipes.csv", RECIPE_ROWS)
    assert builder.build_database(recipes_csv, tmp_path / "one.db", limit=1) == 1
