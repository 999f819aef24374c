"""
Recipe Schemas
==============

Read-only projections of the recipe dataset, as returned by the
search, detail and facet endpoints.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class RecipeSummary(BaseModel):
    """One search hit: a subset of recipe fields plus its relevance score."""

    id: int
    name: Optional[str] = None
    minutes: Optional[int] = None
    rating: Optional[float] = None
    popularity: Optional[int] = None
    cuisine: Optional[str] = None
    diet: Optional[str] = None
    description: Optional[str] = None
    # Stored as free text or as a JSON-ish list; returned as stored.
    steps: Optional[Union[str, List[str]]] = None
    ingredients: List[Any] = Field(default_factory=list)
    score: float = 0.0


class Recipe(BaseModel):
    """Full recipe row for `/recipes/{id}`."""

    id: int
    name: Optional[str] = None
    minutes: Optional[int] = None
    rating: Optional[float] = None
    popularity: Optional[int] = None
    cuisine: Optional[str] = None
    diet: Optional[str] = None
    description: Optional[str] = None
    steps: Optional[Union[str, List[str]]] = None
    ingredients: List[Any] = Field(default_factory=list)
    nutrition: List[Any] = Field(default_factory=list)
    n_ingredients: Optional[int] = None
    n_steps: Optional[int] = None
    submitted: Optional[str] = None


class SearchResult(BaseModel):
    page: int
    page_size: int
    total: int
    pages: int
    items: List[RecipeSummary] = Field(default_factory=list)


class FacetCount(BaseModel):
    name: str
    count: int


class Facets(BaseModel):
    cuisines: List[FacetCount] = Field(default_factory=list)
    diets: List[FacetCount] = Field(default_factory=list)
