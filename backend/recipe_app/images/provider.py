"""
Image provider abstraction.

`generate(prompt)` returns the first inline image of the response, or
None when the model answered without one (retryable, see retry.py).
Transport and API failures raise UpstreamProviderError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..core.config import Settings, get_settings
from ..core.errors import UpstreamProviderError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class ImagePayload:
    mime_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return "png" if self.mime_type == "image/png" else "jpg"


class ImageProvider(ABC):
    """Abstract base class for image generation providers."""

    @abstractmethod
    async def generate(self, prompt: str) -> Optional[ImagePayload]:
        raise NotImplementedError


class StaticImageProvider(ImageProvider):
    """
    Replays a fixed sequence of outcomes, one per call.

    Entries are ImagePayload, None (no payload) or an exception instance to
    raise. The last entry repeats once the sequence is used up.
    """

    def __init__(self, outcomes: Iterable[object] = ()):
        self.outcomes: List[object] = list(outcomes) or [None]
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> Optional[ImagePayload]:
        index = min(len(self.prompts), len(self.outcomes) - 1)
        self.prompts.append(prompt)
        outcome = self.outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome  # type: ignore[return-value]


class GeminiImageProvider(ImageProvider):
    """Image generation backed by Gemini (`response_modalities=["IMAGE"]`)."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.image_model
        self.client = genai.Client(api_key=self.api_key) if self.api_key else None

    async def generate(self, prompt: str) -> Optional[ImagePayload]:
        if self.client is None:
            raise UpstreamProviderError("GEMINI_API_KEY is not configured.")

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except genai_errors.APIError as e:
            logger.error("Gemini image call failed: %s", e)
            raise UpstreamProviderError(str(e)) from e

        return first_inline_image(response)


def first_inline_image(response: types.GenerateContentResponse) -> Optional[ImagePayload]:
    """First part carrying inline image bytes, if any."""
    candidates = response.candidates or []
    if not candidates or candidates[0].content is None:
        return None

    for part in candidates[0].content.parts or []:
        blob = part.inline_data
        if blob is not None and blob.data:
            return ImagePayload(mime_type=blob.mime_type or DEFAULT_MIME_TYPE, data=blob.data)
    return None


def get_image_provider(settings: Optional[Settings] = None) -> ImageProvider:
    """Factory returning the configured image provider."""
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set. Image endpoints will fail.")
    return GeminiImageProvider(api_key=settings.gemini_api_key, model=settings.image_model)
