"""
Shopping List
=============

Items to buy, shown unchecked-first then newest-first. Bulk adds accept
the ingredient lists of any recipe (plain strings or structured
ingredient objects) so "add all to shopping list" works for dataset and
AI recipes alike.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..core.errors import NotFoundError, ValidationError
from ..schemas.requests import ShoppingItemCreate, ShoppingItemUpdate
from ..schemas.saved import PantryItem, ShoppingItem
from .documents import DocumentStore

logger = logging.getLogger(__name__)

RowId = Union[str, int]

NAME_KEYS = ("name", "ingredient", "item", "food", "title")
QTY_KEYS = ("qty", "quantity", "amount")
UNIT_KEYS = ("unit", "measure")
NOTE_KEYS = ("notes", "prep", "preparation", "detail", "description")

LIST_ORDER = (("checked", True), ("created_at", False))


def _first_present(entry: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def coerce_shopping_entry(entry: Any) -> Optional[Dict[str, str]]:
    """
    One bulk entry -> `{name, qty, notes}` row, or None to skip it.

    Objects: name from the first present of name/ingredient/item/food/title,
    qty from quantity + unit, notes from the first non-blank note-like field.
    """
    if not entry:
        return None
    if isinstance(entry, str):
        name = entry.strip()
        return {"name": name, "qty": "", "notes": ""} if name else None
    if not isinstance(entry, dict):
        return None

    base = _first_present(entry, NAME_KEYS)
    name = base.strip() if isinstance(base, str) else ""
    if not name:
        return None

    qty_parts = [_first_present(entry, QTY_KEYS), _first_present(entry, UNIT_KEYS)]
    qty = " ".join(s for s in (str(v).strip() for v in qty_parts if v is not None) if s)

    notes = next(
        (v.strip() for v in (entry.get(k) for k in NOTE_KEYS) if isinstance(v, str) and v.strip()),
        "",
    )
    return {"name": name, "qty": qty, "notes": notes}


class ShoppingListRepository:
    def __init__(
        self,
        documents: DocumentStore,
        table: str = "shopping_items",
        pantry_table: str = "pantry_items",
    ):
        self.documents = documents
        self.table = table
        self.pantry_table = pantry_table

    async def list(self) -> List[ShoppingItem]:
        rows = await self.documents.select(self.table, order=LIST_ORDER)
        return [ShoppingItem(**row) for row in rows]

    async def add(self, item: ShoppingItemCreate) -> ShoppingItem:
        name = item.name.strip()
        if not name:
            raise ValidationError("name required")
        rows = await self.documents.insert(
            self.table, [{"name": name, "qty": item.qty, "notes": item.notes, "checked": False}]
        )
        return ShoppingItem(**rows[0])

    async def add_bulk(self, entries: List[Any]) -> List[ShoppingItem]:
        rows = [r for r in (coerce_shopping_entry(e) for e in entries or []) if r]
        if not rows:
            return []
        for row in rows:
            row["checked"] = False
        stored = await self.documents.insert(self.table, rows)
        logger.info("Added %d shopping items (%d entries skipped)", len(stored), len(entries) - len(rows))
        return [ShoppingItem(**row) for row in stored]

    async def update(self, item_id: RowId, patch: ShoppingItemUpdate) -> ShoppingItem:
        values = patch.model_dump(exclude_none=True)
        if "name" in values and not values["name"].strip():
            raise ValidationError("name required")
        if not values:
            raise ValidationError("nothing to update")

        rows = await self.documents.update(self.table, values, {"id": item_id})
        if not rows:
            raise NotFoundError(f"Shopping item {item_id} not found")
        return ShoppingItem(**rows[0])

    async def set_checked(self, item_id: RowId, checked: bool) -> ShoppingItem:
        return await self.update(item_id, ShoppingItemUpdate(checked=checked))

    async def remove(self, item_id: RowId) -> None:
        await self.documents.delete(self.table, {"id": item_id})

    async def clear(self, checked_only: bool = False) -> List[RowId]:
        """Delete checked items (or all of them); returns the removed ids."""
        filters = {"checked": True} if checked_only else None
        ids = [row["id"] for row in await self.documents.select(self.table, filters) if row.get("id")]
        if ids:
            await self.documents.delete(self.table, {"id": ids})
            logger.info("Cleared %d shopping items (checked_only=%s)", len(ids), checked_only)
        return ids

    async def move_to_pantry(self, item_id: RowId) -> PantryItem:
        item = await self.documents.select_one(self.table, {"id": item_id})
        if item is None:
            raise NotFoundError(f"Shopping item {item_id} not found")

        rows = await self.documents.insert(
            self.pantry_table,
            [{"name": item["name"], "qty": item.get("qty") or "", "notes": item.get("notes") or ""}],
        )
        await self.documents.delete(self.table, {"id": item_id})
        return PantryItem(**rows[0])
