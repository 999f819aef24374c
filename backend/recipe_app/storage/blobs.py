"""
Blob storage: store bytes at a path, get back a public URL.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from supabase import AsyncClient, StorageException

from ..core.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_BUCKET = "recipe-images"


class BlobStore(ABC):
    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store (upsert) the blob and return its public URL."""
        raise NotImplementedError


class SupabaseBlobStore(BlobStore):
    """Supabase Storage bucket (public)."""

    def __init__(self, client: AsyncClient, bucket: str = DEFAULT_BUCKET):
        self.client = client
        self.bucket = bucket

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        bucket = self.client.storage.from_(self.bucket)
        try:
            await bucket.upload(
                path, data, file_options={"content-type": content_type, "upsert": "true"}
            )
            public_url = await bucket.get_public_url(path)
        except StorageException as e:
            logger.error("Upload to %s/%s failed: %s", self.bucket, path, e)
            raise StorageError(str(e)) from e

        logger.info("Uploaded %d bytes to %s/%s", len(data), self.bucket, path)
        return public_url


class InMemoryBlobStore(BlobStore):
    def __init__(self, base_url: str = "memory://blobs"):
        self.base_url = base_url.rstrip("/")
        self.blobs: Dict[str, Tuple[bytes, str]] = {}

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        self.blobs[path] = (data, content_type)
        return f"{self.base_url}/{path}"


def get_blob_store(client: Optional[AsyncClient] = None, bucket: str = DEFAULT_BUCKET) -> BlobStore:
    """Factory returning the Supabase bucket, or an in-memory store without a client."""
    if client is not None:
        return SupabaseBlobStore(client, bucket)
    logger.warning("No Supabase client; generated images are kept in memory.")
    return InMemoryBlobStore()
