"""Pantry items: what the user already has at home."""

from __future__ import annotations

import logging
from typing import List, Union

from ..core.errors import NotFoundError, ValidationError
from ..schemas.requests import PantryItemCreate, PantryItemUpdate
from ..schemas.saved import PantryItem
from .documents import DocumentStore

logger = logging.getLogger(__name__)

RowId = Union[str, int]


class PantryRepository:
    def __init__(self, documents: DocumentStore, table: str = "pantry_items"):
        self.documents = documents
        self.table = table

    async def list(self) -> List[PantryItem]:
        rows = await self.documents.select(self.table, order=(("created_at", False),))
        return [PantryItem(**row) for row in rows]

    async def names(self) -> List[str]:
        return [item.name for item in await self.list() if item.name]

    async def add(self, item: PantryItemCreate) -> PantryItem:
        name = item.name.strip()
        if not name:
            raise ValidationError("name required")
        rows = await self.documents.insert(
            self.table, [{"name": name, "qty": item.qty, "notes": item.notes}]
        )
        return PantryItem(**rows[0])

    async def update(self, item_id: RowId, patch: PantryItemUpdate) -> PantryItem:
        values = patch.model_dump(exclude_none=True)
        if "name" in values and not values["name"].strip():
            raise ValidationError("name required")
        if not values:
            raise ValidationError("nothing to update")

        rows = await self.documents.update(self.table, values, {"id": item_id})
        if not rows:
            raise NotFoundError(f"Pantry item {item_id} not found")
        return PantryItem(**rows[0])

    async def remove(self, item_id: RowId) -> None:
        await self.documents.delete(self.table, {"id": item_id})

    async def clear(self) -> int:
        """Delete every item; returns how many were removed."""
        ids = [row["id"] for row in await self.documents.select(self.table) if row.get("id")]
        if not ids:
            return 0
        await self.documents.delete(self.table, {"id": ids})
        logger.info("Cleared %d pantry items", len(ids))
        return len(ids)
