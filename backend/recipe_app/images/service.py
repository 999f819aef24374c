"""
Recipe image service.

`/ai-image` returns the generated image inline as a `data:` URL;
`/saved-image` uploads it to blob storage under `saved/{id}.{ext}` and
points the saved row at the public URL. An upload that succeeds followed
by a failed row update is not rolled back: the next attempt overwrites
the same path.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Awaitable, Callable, Optional

from ..core.errors import ValidationError
from ..schemas.requests import RecipeImageRequest
from ..storage.blobs import BlobStore
from ..storage.saved import SavedRecipeRepository
from .provider import ImagePayload, ImageProvider
from .retry import DEFAULT_BASE_DELAY, DEFAULT_MAX_ATTEMPTS, ImageGenerationController, build_image_prompt

logger = logging.getLogger(__name__)


def to_data_url(payload: ImagePayload) -> str:
    encoded = base64.b64encode(payload.data).decode("ascii")
    return f"data:{payload.mime_type};base64,{encoded}"


def saved_image_path(saved_id: Any, payload: ImagePayload) -> str:
    return f"saved/{saved_id}.{payload.extension}"


class RecipeImageService:
    def __init__(
        self,
        provider: ImageProvider,
        blobs: Optional[BlobStore] = None,
        saved: Optional[SavedRecipeRepository] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.provider = provider
        self.blobs = blobs
        self.saved = saved
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

    def new_controller(self) -> ImageGenerationController:
        return ImageGenerationController(
            self.provider,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            sleep=self.sleep,
        )

    async def generate(self, name: Optional[str], ingredients: Any) -> ImagePayload:
        return await self.new_controller().run(build_image_prompt(name, ingredients))

    async def ai_image(self, request: RecipeImageRequest) -> str:
        """Image for an unsaved AI recipe, as a data URL."""
        if not request.name and not isinstance(request.ingredients, list):
            raise ValidationError("name or ingredients required")

        payload = await self.generate(request.name, request.ingredients)
        return to_data_url(payload)

    async def saved_image(self, request: RecipeImageRequest) -> str:
        """Image for a saved recipe, persisted; returns the public URL."""
        if request.saved_id is None or str(request.saved_id).strip() == "":
            raise ValidationError("saved_id required")
        if self.blobs is None or self.saved is None:
            raise RuntimeError("Image persistence is not configured")

        payload = await self.generate(request.name, request.ingredients)

        path = saved_image_path(request.saved_id, payload)
        url = await self.blobs.upload(path, payload.data, payload.mime_type)
        await self.saved.set_image_url(request.saved_id, url)
        logger.info("Saved recipe %s image stored at %s", request.saved_id, path)
        return url
