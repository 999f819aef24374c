"""
Recipe Search
=============

normalize (query) -> predicate -> rank/paginate (store) ; facets.
"""

from .predicate import SearchPredicate, build_match_expression, build_predicate
from .query import SearchQuery, SortOrder, normalize_search_query
from .store import RecipeStore

__all__ = [
    "RecipeStore",
    "SearchPredicate",
    "SearchQuery",
    "SortOrder",
    "build_match_expression",
    "build_predicate",
    "normalize_search_query",
]
