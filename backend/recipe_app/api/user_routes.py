"""
Saved Recipes / Pantry / Shopping List Routes
=============================================

Endpoints:
  - GET    /saved
  - POST   /saved/local/{recipe_id}/toggle
  - POST   /saved/ai/toggle
  - DELETE /saved/{saved_id}
  - GET/POST/DELETE  /pantry,   PATCH/DELETE /pantry/{item_id}
  - GET/POST/DELETE  /shopping, PATCH/DELETE /shopping/{item_id}
  - POST   /shopping/bulk
  - POST   /shopping/{item_id}/to-pantry
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from ..schemas.requests import (
    PantryItemCreate,
    PantryItemUpdate,
    ShoppingBulkRequest,
    ShoppingItemCreate,
    ShoppingItemUpdate,
)
from ..schemas.saved import HydratedSavedRecipe, PantryItem, ShoppingItem
from ..storage.pantry import PantryRepository
from ..storage.saved import SavedRecipeRepository
from ..storage.shopping import ShoppingListRepository
from .dependencies import get_pantry_repository, get_saved_repository, get_shopping_repository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["user-data"])


# ============================================================================
# SAVED RECIPES
# ============================================================================

@router.get("/saved", response_model=List[HydratedSavedRecipe])
async def list_saved(saved: SavedRecipeRepository = Depends(get_saved_repository)):
    return await saved.list_hydrated()


@router.post("/saved/local/{recipe_id}/toggle")
async def toggle_saved_local(recipe_id: int, saved: SavedRecipeRepository = Depends(get_saved_repository)):
    return {"saved": await saved.toggle_local(recipe_id)}


@router.post("/saved/ai/toggle")
async def toggle_saved_ai(
    recipe: Dict[str, Any] = Body(...),
    saved: SavedRecipeRepository = Depends(get_saved_repository),
):
    return {"saved": await saved.toggle_ai(recipe)}


@router.delete("/saved/{saved_id}")
async def delete_saved(saved_id: str, saved: SavedRecipeRepository = Depends(get_saved_repository)):
    await saved.delete_by_id(saved_id)
    return {"ok": True}


# ============================================================================
# PANTRY
# ============================================================================

@router.get("/pantry", response_model=List[PantryItem])
async def list_pantry(pantry: PantryRepository = Depends(get_pantry_repository)):
    return await pantry.list()


@router.post("/pantry", response_model=PantryItem)
async def add_pantry_item(body: PantryItemCreate, pantry: PantryRepository = Depends(get_pantry_repository)):
    return await pantry.add(body)


@router.patch("/pantry/{item_id}", response_model=PantryItem)
async def update_pantry_item(
    item_id: str,
    body: PantryItemUpdate,
    pantry: PantryRepository = Depends(get_pantry_repository),
):
    return await pantry.update(item_id, body)


@router.delete("/pantry/{item_id}")
async def remove_pantry_item(item_id: str, pantry: PantryRepository = Depends(get_pantry_repository)):
    await pantry.remove(item_id)
    return {"ok": True}


@router.delete("/pantry")
async def clear_pantry(pantry: PantryRepository = Depends(get_pantry_repository)):
    return {"ok": True, "removed": await pantry.clear()}


# ============================================================================
# SHOPPING LIST
# ============================================================================

@router.get("/shopping", response_model=List[ShoppingItem])
async def list_shopping(shopping: ShoppingListRepository = Depends(get_shopping_repository)):
    return await shopping.list()


@router.post("/shopping", response_model=ShoppingItem)
async def add_shopping_item(
    body: ShoppingItemCreate,
    shopping: ShoppingListRepository = Depends(get_shopping_repository),
):
    return await shopping.add(body)


@router.post("/shopping/bulk", response_model=List[ShoppingItem])
async def add_shopping_bulk(
    body: ShoppingBulkRequest,
    shopping: ShoppingListRepository = Depends(get_shopping_repository),
):
    return await shopping.add_bulk(body.items)


@router.patch("/shopping/{item_id}", response_model=ShoppingItem)
async def update_shopping_item(
    item_id: str,
    body: ShoppingItemUpdate,
    shopping: ShoppingListRepository = Depends(get_shopping_repository),
):
    return await shopping.update(item_id, body)


@router.delete("/shopping/{item_id}")
async def remove_shopping_item(
    item_id: str,
    shopping: ShoppingListRepository = Depends(get_shopping_repository),
):
    await shopping.remove(item_id)
    return {"ok": True}


@router.delete("/shopping")
async def clear_shopping(
    checked: bool = False,
    shopping: ShoppingListRepository = Depends(get_shopping_repository),
):
    removed = await shopping.clear(checked_only=checked)
    return {"ok": True, "removed": len(removed)}


@router.post("/shopping/{item_id}/to-pantry", response_model=PantryItem)
async def move_shopping_to_pantry(
    item_id: str,
    shopping: ShoppingListRepository = Depends(get_shopping_repository),
):
    return await shopping.move_to_pantry(item_id)
