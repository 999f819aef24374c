"""
Saved / Pantry / Shopping Schemas
=================================

Rows owned by the hosted document store.

`favorites` table (saved recipes):
    id            uuid PK
    recipe_id     integer   local dataset id (null for AI recipes)
    name          text      AI recipe name
    ingredients   jsonb     strings or ingredient objects
    instructions  jsonb     step strings (null for local recipes)
    image_url     text
    is_ai_recipe  boolean
    created_at    timestamptz
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SavedRecipe(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[str, int]] = None
    recipe_id: Optional[int] = None
    is_ai_recipe: bool = False
    name: Optional[str] = None
    description: Optional[str] = None
    ingredients: Optional[List[Any]] = None
    instructions: Optional[Any] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None


class HydratedSavedRecipe(SavedRecipe):
    """Saved row merged with its local recipe (when recipe-backed)."""

    steps: List[str] = Field(default_factory=list)
    minutes: Optional[int] = None
    rating: Optional[float] = None
    cuisine: Optional[str] = None
    diet: Optional[str] = None
    local_error: Optional[str] = None


class PantryItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[str, int]] = None
    name: str
    qty: str = ""
    notes: str = ""
    created_at: Optional[str] = None


class ShoppingItem(PantryItem):
    checked: bool = False
