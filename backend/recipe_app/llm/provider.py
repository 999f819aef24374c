"""
LLM text provider abstraction.

One stateless provider is built at startup and handed to every AI
endpoint, so tests can swap in a static stub.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from ..core.config import Settings, get_settings
from ..core.errors import UpstreamProviderError

logger = logging.getLogger(__name__)

Message = Dict[str, str]


def system_message(content: str) -> Message:
    return {"role": "system", "content": content}


def user_message(content: str) -> Message:
    return {"role": "user", "content": content}


class LLMTextProvider(ABC):
    """Given chat messages, return the model's text."""

    @abstractmethod
    async def invoke(self, messages: List[Message]) -> str:
        raise NotImplementedError


class StaticTextProvider(LLMTextProvider):
    """
    Returns canned text and records the messages it was given.

    Used by tests and the offline smoke run.
    """

    def __init__(self, text: str = "[]"):
        self.text = text
        self.calls: List[List[Message]] = []

    async def invoke(self, messages: List[Message]) -> str:
        self.calls.append(list(messages))
        return self.text


class OpenAIChatProvider(LLMTextProvider):
    """Chat completions backed by OpenAI."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.temperature = temperature if temperature is not None else settings.openai_temperature
        self.client = AsyncOpenAI(api_key=self.api_key) if self.api_key else None

    async def invoke(self, messages: List[Message]) -> str:
        if self.client is None:
            raise UpstreamProviderError("OPENAI_API_KEY is not configured.")

        kwargs = {"model": self.model, "messages": messages}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error("OpenAI call failed: %s", e)
            raise UpstreamProviderError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        return content or ""


def get_text_provider(settings: Optional[Settings] = None) -> LLMTextProvider:
    """Factory returning the configured text provider."""
    settings = settings or get_settings()
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set. AI recipe endpoints will fail.")
    return OpenAIChatProvider(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
    )
