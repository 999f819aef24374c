"""
Request-scoped access to the collaborators built in the app lifespan.

Tests swap the `app.state` entries for in-memory stores and stub providers.
"""

from __future__ import annotations

from fastapi import Request

from ..core.config import Settings, get_settings
from ..core.errors import StorageError
from ..images.service import RecipeImageService
from ..llm.generator import RecipeGenerator
from ..search.store import RecipeStore
from ..storage.pantry import PantryRepository
from ..storage.saved import SavedRecipeRepository
from ..storage.shopping import ShoppingListRepository


def get_app_settings() -> Settings:
    return get_settings()


def get_recipe_store(request: Request) -> RecipeStore:
    store = getattr(request.app.state, "recipe_store", None)
    if store is None:
        raise StorageError("Recipe database unavailable")
    return store


def get_generator(request: Request) -> RecipeGenerator:
    return request.app.state.generator


def get_image_service(request: Request) -> RecipeImageService:
    return request.app.state.image_service


def get_saved_repository(request: Request) -> SavedRecipeRepository:
    return request.app.state.saved


def get_pantry_repository(request: Request) -> PantryRepository:
    return request.app.state.pantry


def get_shopping_repository(request: Request) -> ShoppingListRepository:
    return request.app.state.shopping
