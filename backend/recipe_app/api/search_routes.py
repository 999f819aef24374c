"""
Recipe Search Routes
====================

Endpoints:
  - GET /health
  - GET /search
  - GET /recipes/{recipe_id}
  - GET /facets

Handlers are plain `def`: SQLite calls block, so FastAPI runs them in its
threadpool. Query parameters arrive as raw strings and are clamped by the
normalizer instead of being rejected.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..core.config import Settings
from ..core.errors import ValidationError
from ..schemas.recipe import Facets, Recipe, SearchResult
from ..search.query import normalize_search_query
from ..search.store import RecipeStore
from .dependencies import get_app_settings, get_recipe_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.get("/health")
def health(request: Request):
    store: Optional[RecipeStore] = getattr(request.app.state, "recipe_store", None)
    if store is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": "Recipe database unavailable"},
        )
    try:
        ok = store.ping()
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": str(e)},
        )
    return {"ok": ok, "db": store.db_path}


@router.get("/search", response_model=SearchResult)
def search(
    q: Optional[str] = None,
    cuisine: Optional[str] = None,
    diet: Optional[str] = None,
    min_rating: Optional[str] = None,
    max_minutes: Optional[str] = None,
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    sort: Optional[str] = None,
    store: RecipeStore = Depends(get_recipe_store),
    settings: Settings = Depends(get_app_settings),
):
    query = normalize_search_query(
        q,
        cuisine=cuisine,
        diet=diet,
        min_rating=min_rating,
        max_minutes=max_minutes,
        page=page,
        page_size=page_size,
        sort=sort,
        max_terms=settings.max_query_terms,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    return store.search(query)


@router.get("/recipes/{recipe_id}", response_model=Recipe)
def get_recipe(recipe_id: str, store: RecipeStore = Depends(get_recipe_store)):
    try:
        numeric_id = int(recipe_id)
    except ValueError:
        raise ValidationError("invalid id") from None
    return store.get_recipe(numeric_id)


@router.get("/facets", response_model=Facets)
def facets(store: RecipeStore = Depends(get_recipe_store)):
    return store.facets()
