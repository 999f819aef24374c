"""
Shared Supabase async client.

Built once in the app lifespan and handed to both the document store and
the blob store. Returns None when Supabase is not configured, in which
case the factories fall back to in-memory stores.
"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from ..core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def supabase_configured(settings: Settings) -> bool:
    return bool(settings.supabase_url and settings.supabase_service_role_key)


async def create_supabase_client(settings: Optional[Settings] = None) -> Optional[AsyncClient]:
    settings = settings or get_settings()
    if not supabase_configured(settings):
        logger.warning("Supabase is not configured; user data and images are kept in memory.")
        return None

    client = await acreate_client(settings.supabase_url, settings.supabase_service_role_key)
    logger.info("Supabase client ready: %s", settings.supabase_url)
    return client
