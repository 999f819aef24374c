"""
Tests for the query normalizer and predicate builder.

Run: pytest tests/test_query_normalizer.py -v
"""

import pytest

from recipe_app.search.predicate import (
    ALWAYS_TRUE,
    FTS_FROM,
    PLAIN_FROM,
    build_match_expression,
    build_predicate,
)
from recipe_app.search.query import (
    MAX_INT,
    SearchQuery,
    SortOrder,
    coerce_float,
    coerce_int,
    normalize_search_query,
    tokenize,
)
from recipe_app.search.ranking import order_clause, page_count, page_window


class TestTokenize:
    def test_keeps_first_six_tokens(self):
        assert tokenize("a b c d e f g h") == ("a", "b", "c", "d", "e", "f")

    def test_strips_double_quotes(self):
        assert tokenize('"garlic" bu"tter') == ("garlic", "butter")

    def test_drops_tokens_that_were_only_quotes(self):
        assert tokenize('"" garlic """') == ("garlic",)

    def test_strips_control_characters(self):
        assert tokenize("gar\x00lic \x01 butter\x7f") == ("garlic", "butter")

    def test_blank_text(self):
        assert tokenize("   ") == ()
        assert tokenize(None) == ()


class TestCoercion:
    @pytest.mark.parametrize("raw", [None, "", "abc", "nan", "inf", True])
    def test_unusable_values_fall_back(self, raw):
        assert coerce_float(raw, 7.0) == 7.0

    def test_numeric_strings(self):
        assert coerce_float(" 4.5 ", 0.0) == 4.5
        assert coerce_int("12.9", 1) == 12


class TestNormalizeSearchQuery:
    def test_defaults(self):
        query = normalize_search_query()
        assert query == SearchQuery()
        assert query.is_empty

    def test_page_size_clamped(self):
        assert normalize_search_query(page_size="500").page_size == 50
        assert normalize_search_query(page_size="0").page_size == 1
        assert normalize_search_query(page_size="-3").page_size == 1
        assert normalize_search_query(page_size="abc").page_size == 20

    def test_page_clamped(self):
        assert normalize_search_query(page="0").page == 1
        assert normalize_search_query(page="-7").page == 1
        assert normalize_search_query(page="x").page == 1
        assert normalize_search_query(page="1e30").page == MAX_INT

    def test_thresholds_default_to_zero(self):
        query = normalize_search_query(min_rating="great", max_minutes="soon")
        assert query.min_rating == 0.0
        assert query.max_minutes == 0
        assert not query.has_filters

    def test_min_rating_clamped_to_scale(self):
        assert normalize_search_query(min_rating="9").min_rating == 5.0
        assert normalize_search_query(min_rating="-1").min_rating == 0.0

    def test_text_filters_trimmed(self):
        query = normalize_search_query(cuisine="  Italian ", diet=" Vegan")
        assert query.cuisine == "Italian"
        assert query.diet == "Vegan"
        assert query.has_filters

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("rating", SortOrder.RATING),
            ("MINUTES-ASC", SortOrder.MINUTES_ASC),
            ("minutes-desc", SortOrder.MINUTES_DESC),
            ("popularity", SortOrder.POPULARITY),
            ("newest", SortOrder.RELEVANCE),
            (None, SortOrder.RELEVANCE),
        ],
    )
    def test_sort_parsing(self, raw, expected):
        assert normalize_search_query(sort=raw).sort is expected


class TestPredicate:
    def test_single_term_is_a_phrase(self):
        assert build_match_expression(["garlic"]) == '"garlic"'

    def test_multiple_terms_must_be_near(self):
        assert build_match_expression(["garlic", "butter"]) == 'NEAR("garlic" "butter", 10)'

    def test_no_text_is_always_true_without_fts(self):
        predicate = build_predicate(normalize_search_query(cuisine="Italian"))
        assert predicate.where == f"{ALWAYS_TRUE} AND r.cuisine = :cuisine"
        assert predicate.source == PLAIN_FROM
        assert predicate.score_expression([1.0]) == "0.0"

    def test_filters_added_only_when_set(self):
        predicate = build_predicate(normalize_search_query("pasta"))
        assert predicate.where == "recipes_fts MATCH :match"
        assert predicate.params == {"match": '"pasta"'}
        assert predicate.source == FTS_FROM

    def test_all_filters(self):
        query = normalize_search_query(
            "pasta", cuisine="Italian", diet="Vegan", min_rating="4", max_minutes="30"
        )
        predicate = build_predicate(query)
        assert predicate.where == (
            "recipes_fts MATCH :match AND r.cuisine = :cuisine AND r.diet = :diet "
            "AND r.rating >= :min_rating AND r.minutes <= :max_minutes"
        )
        assert predicate.params == {
            "match": '"pasta"',
            "cuisine": "Italian",
            "diet": "Vegan",
            "min_rating": 4.0,
            "max_minutes": 30,
        }

    def test_values_never_reach_the_predicate_text(self):
        hostile = "x' OR 1=1; DROP TABLE recipes; --"
        query = normalize_search_query(hostile, cuisine=hostile, diet=hostile)
        predicate = build_predicate(query)
        assert "DROP" not in predicate.where
        assert "1=1" not in predicate.where
        assert predicate.params["cuisine"] == hostile

    def test_bm25_weights_rendered(self):
        predicate = build_predicate(normalize_search_query("pasta"))
        assert predicate.score_expression([1.5, 1]) == "bm25(recipes_fts, 1.5, 1.0)"


class TestRanking:
    def test_relevance_is_ascending_score(self):
        assert order_clause(SortOrder.RELEVANCE) == "ORDER BY score ASC"

    def test_order_table(self):
        assert order_clause(SortOrder.RATING) == "ORDER BY r.rating DESC"
        assert order_clause(SortOrder.MINUTES_ASC) == "ORDER BY r.minutes ASC"
        assert order_clause(SortOrder.MINUTES_DESC) == "ORDER BY r.minutes DESC"
        assert order_clause(SortOrder.POPULARITY) == "ORDER BY r.popularity DESC"

    def test_page_window(self):
        window = page_window(3, 20)
        assert (window.limit, window.offset) == (20, 40)

    @pytest.mark.parametrize(
        "total,size,expected", [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (5, 2, 3)]
    )
    def test_page_count(self, total, size, expected):
        assert page_count(total, size) == expected
