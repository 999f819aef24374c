"""
Saved Recipes
=============

Bookmarks in the `favorites` table. A row is either recipe-backed
(`recipe_id` set, `is_ai_recipe` false) or an AI snapshot (name,
ingredients and instructions copied in, `is_ai_recipe` true).

Local rows are deduplicated by `recipe_id`, AI rows by `name`; adding an
already-saved recipe returns the existing row.

Hydration merges recipe-backed rows with the local dataset so the saved
page can render them without a second round-trip per row.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core.errors import NotFoundError, ValidationError
from ..llm.normalizer import normalize_instructions
from ..schemas.saved import HydratedSavedRecipe, SavedRecipe
from ..search.store import RecipeStore
from .documents import DocumentStore

logger = logging.getLogger(__name__)

RowId = Union[str, int]

NEWEST_FIRST = (("created_at", False),)


class SavedRecipeRepository:
    def __init__(
        self,
        documents: DocumentStore,
        recipes: Optional[RecipeStore] = None,
        table: str = "favorites",
        limit: int = 200,
    ):
        self.documents = documents
        self.recipes = recipes
        self.table = table
        self.limit = limit

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _select(self, filters: Optional[Mapping[str, Any]] = None, limit: Optional[int] = None) -> List[SavedRecipe]:
        rows = await self.documents.select(
            self.table, filters, order=NEWEST_FIRST, limit=limit or self.limit
        )
        return [SavedRecipe(**row) for row in rows]

    async def list(self, limit: Optional[int] = None) -> List[SavedRecipe]:
        return await self._select(limit=limit)

    async def list_local(self, limit: Optional[int] = None) -> List[SavedRecipe]:
        return await self._select({"is_ai_recipe": False}, limit)

    async def list_ai(self, limit: Optional[int] = None) -> List[SavedRecipe]:
        return await self._select({"is_ai_recipe": True}, limit)

    async def is_saved_local(self, recipe_id: int) -> bool:
        row = await self.documents.select_one(
            self.table, {"is_ai_recipe": False, "recipe_id": recipe_id}
        )
        return row is not None

    async def is_saved_ai_by_name(self, name: str) -> bool:
        row = await self.documents.select_one(self.table, {"is_ai_recipe": True, "name": name})
        return row is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add_local(self, recipe_id: int) -> SavedRecipe:
        existing = await self.documents.select_one(
            self.table, {"is_ai_recipe": False, "recipe_id": recipe_id}
        )
        if existing:
            return SavedRecipe(**existing)

        rows = await self.documents.insert(
            self.table,
            [{
                "recipe_id": recipe_id,
                "is_ai_recipe": False,
                "name": None,
                "ingredients": None,
                "instructions": None,
            }],
        )
        logger.info("Saved local recipe %s", recipe_id)
        return SavedRecipe(**rows[0])

    async def remove_local(self, recipe_id: int) -> None:
        await self.documents.delete(self.table, {"is_ai_recipe": False, "recipe_id": recipe_id})

    async def add_ai_snapshot(self, recipe: Mapping[str, Any]) -> SavedRecipe:
        """Copy an AI recipe into the table. Unnamed recipes cannot be saved."""
        name = str(recipe.get("name") or "").strip()
        if not name:
            raise ValidationError("AI recipe name required")

        existing = await self.documents.select_one(self.table, {"is_ai_recipe": True, "name": name})
        if existing:
            return SavedRecipe(**existing)

        rows = await self.documents.insert(
            self.table,
            [{
                "recipe_id": None,
                "is_ai_recipe": True,
                "name": name,
                "description": recipe.get("description") or None,
                "ingredients": recipe.get("ingredients") or [],
                "instructions": normalize_instructions(
                    recipe.get("steps") or recipe.get("instructions")
                ),
                "image_url": recipe.get("image_url") or None,
            }],
        )
        logger.info("Saved AI recipe %r", name)
        return SavedRecipe(**rows[0])

    async def remove_ai_by_name(self, name: str) -> None:
        await self.documents.delete(self.table, {"is_ai_recipe": True, "name": name or None})

    async def toggle_local(self, recipe_id: int) -> bool:
        """True if the recipe is now saved, False if it was removed."""
        if await self.is_saved_local(recipe_id):
            await self.remove_local(recipe_id)
            return False
        await self.add_local(recipe_id)
        return True

    async def toggle_ai(self, recipe: Mapping[str, Any]) -> bool:
        name = str(recipe.get("name") or "").strip()
        if not name:
            raise ValidationError("AI recipe name required")
        if await self.is_saved_ai_by_name(name):
            await self.remove_ai_by_name(name)
            return False
        await self.add_ai_snapshot(recipe)
        return True

    async def delete_by_id(self, saved_id: RowId) -> None:
        await self.documents.delete(self.table, {"id": saved_id})

    async def set_image_url(self, saved_id: RowId, image_url: str) -> SavedRecipe:
        rows = await self.documents.update(self.table, {"image_url": image_url}, {"id": saved_id})
        if not rows:
            raise NotFoundError(f"Saved recipe {saved_id} not found")
        return SavedRecipe(**rows[0])

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    def hydrate(self, rows: List[SavedRecipe]) -> List[HydratedSavedRecipe]:
        """Merge recipe-backed rows with their dataset recipe; AI rows pass through."""
        cache: Dict[int, Any] = {}
        hydrated: List[HydratedSavedRecipe] = []

        for row in rows:
            data = row.model_dump()
            saved_steps = normalize_instructions(row.instructions)

            if row.is_ai_recipe or row.recipe_id is None:
                data.update(instructions=saved_steps, steps=saved_steps)
                hydrated.append(HydratedSavedRecipe(**data))
                continue

            if row.recipe_id not in cache:
                cache[row.recipe_id] = self.recipes.find_recipe(row.recipe_id) if self.recipes else None
            recipe = cache[row.recipe_id]

            if recipe is None:
                logger.warning("Saved row %s points at missing recipe %s", row.id, row.recipe_id)
                data.update(
                    instructions=saved_steps,
                    steps=saved_steps,
                    local_error=f"Failed to load recipe #{row.recipe_id}",
                )
                hydrated.append(HydratedSavedRecipe(**data))
                continue

            steps = normalize_instructions(recipe.steps) or saved_steps
            data.update(
                name=recipe.name or row.name,
                description=recipe.description or row.description,
                ingredients=recipe.ingredients or row.ingredients or [],
                instructions=steps,
                steps=steps,
                minutes=recipe.minutes,
                rating=recipe.rating,
                cuisine=recipe.cuisine,
                diet=recipe.diet,
            )
            hydrated.append(HydratedSavedRecipe(**data))

        return hydrated

    async def list_hydrated(self, limit: Optional[int] = None) -> List[HydratedSavedRecipe]:
        rows = await self.list(limit)
        # Recipe lookups are blocking SQLite reads.
        return await asyncio.to_thread(self.hydrate, rows)
