"""
Document store abstraction for user-owned rows (saved recipes, pantry,
shopping list).

Filters are equality predicates: `{"col": value}`. A None value means
`IS NULL`, a list means `IN (...)`. Orders are `(column, ascending)` pairs
applied left to right.

Two implementations:
  - SupabaseDocumentStore: Supabase tables through the async SDK client
  - InMemoryDocumentStore: dict-backed, for tests and local runs
"""

from __future__ import annotations

import copy
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from supabase import AsyncClient, PostgrestAPIError

from ..core.errors import StorageError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Filters = Mapping[str, Any]
Order = Sequence[Tuple[str, bool]]


class DocumentStore(ABC):
    """Abstract base class for the hosted row store."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order: Order = (),
        limit: Optional[int] = None,
    ) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        """Insert rows and return them as stored (ids, defaults)."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> List[Row]:
        raise NotImplementedError

    async def select_one(self, table: str, filters: Filters) -> Optional[Row]:
        rows = await self.select(table, filters, limit=1)
        return rows[0] if rows else None


# ----------------------------------------------------------------------------
# Supabase (postgrest through the supabase SDK)
# ----------------------------------------------------------------------------

def _literal(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def apply_filters(query: Any, filters: Optional[Filters]) -> Any:
    """`{"a": 1, "b": None, "c": [1, 2]}` -> .eq("a", 1).is_("b", "null").in_("c", [1, 2])"""
    for column, value in (filters or {}).items():
        if value is None:
            query = query.is_(column, "null")
        elif isinstance(value, (list, tuple, set)):
            query = query.in_(column, [_literal(v) for v in value])
        else:
            query = query.eq(column, _literal(value))
    return query


class SupabaseDocumentStore(DocumentStore):
    def __init__(self, client: AsyncClient):
        self.client = client

    async def _execute(self, action: str, table: str, query: Any) -> List[Row]:
        try:
            response = await query.execute()
        except PostgrestAPIError as e:
            message = e.message or str(e)
            logger.error("%s %s failed: %s", action, table, message)
            raise StorageError(message) from e

        data = response.data or []
        return data if isinstance(data, list) else [data]

    async def select(self, table, filters=None, order=(), limit=None):
        query = apply_filters(self.client.table(table).select("*"), filters)
        for column, ascending in order:
            query = query.order(column, desc=not ascending)
        if limit is not None:
            query = query.limit(limit)
        return await self._execute("select", table, query)

    async def insert(self, table, rows):
        if not rows:
            return []
        return await self._execute("insert", table, self.client.table(table).insert(rows))

    async def update(self, table, values, filters):
        query = apply_filters(self.client.table(table).update(values), filters)
        return await self._execute("update", table, query)

    async def delete(self, table, filters):
        if not filters:
            # PostgREST (safeupdate) refuses unfiltered deletes.
            raise StorageError(f"Refusing unfiltered delete on {table}")
        query = apply_filters(self.client.table(table).delete(), filters)
        return await self._execute("delete", table, query)


# ----------------------------------------------------------------------------
# In-memory
# ----------------------------------------------------------------------------

def _matches(row: Row, filters: Optional[Filters]) -> bool:
    for column, value in (filters or {}).items():
        actual = row.get(column)
        if value is None:
            if actual is not None:
                return False
        elif isinstance(value, (list, tuple, set)):
            if actual not in value:
                return False
        elif actual != value:
            return False
    return True


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store with PostgREST-like semantics.

    Inserted rows get a uuid `id` and a strictly increasing `created_at`
    unless provided, so "newest first" ordering is deterministic.
    """

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None):
        self.tables: Dict[str, List[Row]] = tables or {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    async def select(self, table, filters=None, order=(), limit=None):
        rows = [copy.deepcopy(r) for r in self.tables.get(table, []) if _matches(r, filters)]
        # Stable sorts applied last-key-first give a multi-key order.
        for column, ascending in reversed(list(order)):
            rows.sort(
                key=lambda r: (r.get(column) is None, r.get(column)),
                reverse=not ascending,
            )
        return rows[:limit] if limit is not None else rows

    async def insert(self, table, rows):
        stored = []
        for row in rows:
            record = copy.deepcopy(row)
            record.setdefault("id", str(uuid.uuid4()))
            record.setdefault("created_at", self._tick())
            self.tables.setdefault(table, []).append(record)
            stored.append(copy.deepcopy(record))
        return stored

    async def update(self, table, values, filters):
        updated = []
        for row in self.tables.get(table, []):
            if _matches(row, filters):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table, filters):
        rows = self.tables.get(table, [])
        removed = [r for r in rows if _matches(r, filters)]
        self.tables[table] = [r for r in rows if not _matches(r, filters)]
        return removed


def get_document_store(client: Optional[AsyncClient] = None) -> DocumentStore:
    """Factory returning the Supabase store, or an in-memory one without a client."""
    if client is not None:
        return SupabaseDocumentStore(client)

    logger.warning("No Supabase client; saved recipes, pantry and shopping list are kept in memory.")
    return InMemoryDocumentStore()
