"""
Image Generation Retry Controller
=================================

Drives one image request through an explicit state machine:

    IDLE -> REQUESTING -> SUCCESS
                       -> NO_PAYLOAD -> REQUESTING   (attempts left)
                                     -> EXHAUSTED    (attempts used up)
                       -> EXHAUSTED                  (transport error)

A response without image bytes is the only retryable outcome. Backoff is
linear, `attempt * base_delay` seconds, and only between attempts.

A controller holds the state of a single run; build one per request.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from ..core.errors import ImageGenerationExhausted, RecipeAppError, UpstreamProviderError
from .provider import ImagePayload, ImageProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0

IMAGE_PROMPT_TEMPLATE = """Generate a high-quality, realistic photo-style image of the FINAL cooked dish.

Recipe name: "{name}"
Key ingredients: {ingredients}

Requirements:
- Show a single plated serving of the finished dish.
- Neutral, soft background (no text, no logos, no hands).
- Bright, appetizing lighting.
- No text overlays or watermarks."""


class ImageGenState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCESS = "success"
    NO_PAYLOAD = "no_payload"
    EXHAUSTED = "exhausted"


def ingredient_names(ingredients: Any) -> List[str]:
    """Flatten strings / ingredient objects into unique names, first spelling wins."""
    if not isinstance(ingredients, list):
        return []

    seen = set()
    names: List[str] = []
    for entry in ingredients:
        if isinstance(entry, dict):
            entry = entry.get("ingredient") or entry.get("name") or ""
        name = str(entry).strip() if isinstance(entry, (str, int, float)) else ""
        key = name.lower()
        if name and key not in seen:
            seen.add(key)
            names.append(name)
    return names


def build_image_prompt(name: Optional[str], ingredients: Any) -> str:
    return IMAGE_PROMPT_TEMPLATE.format(
        name=(name or "").strip() or "Unknown dish",
        ingredients=", ".join(ingredient_names(ingredients)) or "not specified",
    )


class ImageGenerationController:
    def __init__(
        self,
        provider: ImageProvider,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.provider = provider
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

        self.state = ImageGenState.IDLE
        self.transitions: List[ImageGenState] = [ImageGenState.IDLE]
        self.attempts = 0
        self.delays: List[float] = []

    def _enter(self, state: ImageGenState) -> None:
        self.state = state
        self.transitions.append(state)

    async def run(self, prompt: str) -> ImagePayload:
        """
        Request an image until one arrives or attempts run out.

        Raises ImageGenerationExhausted when every attempt came back empty,
        UpstreamProviderError on the first transport/API failure.
        """
        for attempt in range(1, self.max_attempts + 1):
            self._enter(ImageGenState.REQUESTING)
            self.attempts = attempt
            try:
                payload = await self.provider.generate(prompt)
            except RecipeAppError:
                self._enter(ImageGenState.EXHAUSTED)
                raise
            except Exception as e:
                self._enter(ImageGenState.EXHAUSTED)
                raise UpstreamProviderError(str(e)) from e

            if payload is not None and payload.data:
                self._enter(ImageGenState.SUCCESS)
                logger.info("Image generated on attempt %d/%d", attempt, self.max_attempts)
                return payload

            self._enter(ImageGenState.NO_PAYLOAD)
            if attempt < self.max_attempts:
                delay = attempt * self.base_delay
                logger.info(
                    "No image data returned, retrying in %.1fs (attempt %d/%d)",
                    delay, attempt, self.max_attempts,
                )
                self.delays.append(delay)
                await self._sleep(delay)

        self._enter(ImageGenState.EXHAUSTED)
        logger.warning("Image generation exhausted after %d attempts", self.max_attempts)
        raise ImageGenerationExhausted(self.max_attempts)
