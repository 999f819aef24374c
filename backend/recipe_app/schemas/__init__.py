"""
Recipe App Schemas
==================

Pydantic schemas for structured data.

- recipe: Recipe, RecipeSummary, SearchResult, Facets
- ai_recipe: AiRecipe (normalized LLM output)
- saved: SavedRecipe, PantryItem, ShoppingItem
- requests: request bodies for the AI / image / CRUD endpoints
"""

from .ai_recipe import AiRecipe
from .recipe import FacetCount, Facets, Recipe, RecipeSummary, SearchResult
from .saved import HydratedSavedRecipe, PantryItem, SavedRecipe, ShoppingItem

__all__ = [
    "AiRecipe",
    "FacetCount",
    "Facets",
    "Recipe",
    "RecipeSummary",
    "SearchResult",
    "SavedRecipe",
    "HydratedSavedRecipe",
    "PantryItem",
    "ShoppingItem",
]
