"""
Tests for the SQLite recipe store: search, pagination, detail and facets.

Run: pytest tests/test_search_store.py -v
"""

import math
import sqlite3

import pytest

from recipe_app.core.errors import NotFoundError, StorageError
from recipe_app.search.predicate import build_predicate
from recipe_app.search.query import SearchQuery, normalize_search_query
from recipe_app.search.store import RecipeStore, decode_json_list


def search(store, q=None, **kwargs):
    return store.search(normalize_search_query(q, **kwargs))


class TestSearch:
    def test_empty_query_returns_nothing(self, store):
        result = search(store)
        assert result.total == 0
        assert result.pages == 0
        assert result.items == []

    def test_quote_only_query_is_empty(self, store):
        assert search(store, '"" """').total == 0

    def test_all_terms_must_match(self, store):
        result = search(store, "garlic butter")
        assert {item.id for item in result.items} == {2, 9}
        assert result.total == 2

    def test_relevance_scores_ascending(self, store):
        result = search(store, "garlic")
        scores = [item.score for item in result.items]
        assert len(scores) >= 3
        assert scores == sorted(scores)
        # bm25: better matches are more negative
        assert all(s < 0 for s in scores)

    def test_filters_without_text_still_apply(self, store):
        result = search(store, cuisine="Italian")
        assert result.total == 5
        assert all(item.cuisine == "Italian" for item in result.items)
        assert all(item.score == 0.0 for item in result.items)

    def test_text_and_filters_combined(self, store):
        result = search(store, "tacos", cuisine="Mexican", sort="rating")
        assert [item.id for item in result.items] == [6, 8]

    def test_min_rating_and_max_minutes(self, store):
        assert {i.id for i in search(store, cuisine="Italian", min_rating="4.5").items} == {1, 3, 5}
        assert {i.id for i in search(store, max_minutes="20").items} == {2, 7, 9, 10}

    def test_minutes_ascending(self, store):
        result = search(store, max_minutes="20", sort="minutes-asc")
        minutes = [item.minutes for item in result.items]
        assert minutes == sorted(minutes)

    def test_popularity_descending(self, store):
        result = search(store, cuisine="Italian", sort="popularity")
        assert [item.id for item in result.items] == [3, 5, 1, 2, 4]

    def test_diet_is_exact_match(self, store):
        assert search(store, diet="vegan").total == 0
        assert {i.id for i in search(store, diet="Vegan").items} == {7, 10}

    def test_fts_operators_are_plain_text(self, store):
        result = search(store, "pasta OR")
        assert result.total == 0

    def test_control_characters_never_reach_fts(self, store):
        assert search(store, "\x00").total == 0
        assert {i.id for i in search(store, "garl\x00ic butter").items} == {2, 9}

    def test_unparseable_match_is_an_empty_result(self, store):
        # Bypasses the normalizer: FTS5 reports an unterminated string.
        result = store.search(SearchQuery(terms=("\x00",), page_size=5))
        assert (result.total, result.pages, result.items) == (0, 0, [])
        assert result.page_size == 5

    def test_ingredients_decoded(self, store):
        item = search(store, "carbonara").items[0]
        assert item.ingredients == ["spaghetti", "eggs", "pecorino", "guanciale"]

    def test_malformed_json_column_becomes_empty(self, store):
        item = search(store, "mystery").items[0]
        assert item.id == 11
        assert item.ingredients == []


class TestPagination:
    @pytest.mark.parametrize("page_size", [1, 2, 3, 5, 50])
    def test_pages_and_item_count(self, store, page_size):
        result = search(store, cuisine="Italian", page_size=str(page_size))
        assert len(result.items) <= page_size
        assert result.pages == math.ceil(result.total / page_size)

    def test_pages_cover_every_counted_item(self, store):
        seen = []
        for page in (1, 2, 3):
            result = search(store, cuisine="Italian", page=str(page), page_size="2")
            seen.extend(item.id for item in result.items)
        assert sorted(seen) == [1, 2, 3, 4, 5]

    def test_page_past_the_end(self, store):
        result = search(store, cuisine="Italian", page="10", page_size="2")
        assert result.total == 5
        assert result.pages == 3
        assert result.items == []

    def test_count_and_page_share_the_predicate(self, store):
        query = normalize_search_query("garlic", max_minutes="25")
        predicate = build_predicate(query)
        total = store.count(predicate)
        items = store.fetch_page(predicate, query)
        assert total == len(items)
        assert all(item.minutes <= 25 for item in items)


class TestDetail:
    def test_get_recipe(self, store):
        recipe = store.get_recipe(1)
        assert recipe.name == "Spaghetti Carbonara"
        assert recipe.ingredients[0] == "spaghetti"
        assert recipe.nutrition == [520.0, 30.0, 4.0]

    def test_missing_recipe(self, store):
        with pytest.raises(NotFoundError):
            store.get_recipe(999)
        assert store.find_recipe(999) is None

    def test_malformed_nutrition(self, store):
        assert store.get_recipe(11).nutrition == []


class TestFacets:
    def test_excludes_empty_and_orders_by_count(self, store):
        facets = store.facets()
        assert [(f.name, f.count) for f in facets.cuisines] == [("Italian", 5), ("Mexican", 3)]

    def test_diets(self, store):
        diets = {f.name: f.count for f in store.facets().diets}
        assert diets == {"Vegetarian": 3, "Vegan": 2}

    def test_limits(self, recipe_db):
        limited = RecipeStore.open(str(recipe_db), cuisine_facet_limit=1)
        try:
            assert [f.name for f in limited.facets().cuisines] == ["Italian"]
        finally:
            limited.close()


class TestConnection:
    def test_missing_database(self, tmp_path):
        with pytest.raises(StorageError):
            RecipeStore.open(str(tmp_path / "nope.db"))

    def test_read_only(self, store):
        with pytest.raises(sqlite3.OperationalError):
            store.conn.execute("DELETE FROM recipes")

    def test_ping(self, store):
        assert store.ping() is True


@pytest.mark.parametrize(
    "raw,expected",
    [(None, []), ("", []), ("[1, 2]", [1, 2]), ("not json", []), ('{"a": 1}', []), (["x"], ["x"])],
)
def test_decode_json_list(raw, expected):
    assert decode_json_list(raw) == expected
