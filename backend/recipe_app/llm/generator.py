"""
Recipe Generator
================

One stateless service object shared by every AI endpoint.

`/ai-recipes` and `/ai-search` proxy the raw model text back to the
caller (`{text}`); the dinner, identify and remix surfaces run the text
through `parse_ai_recipes` and return validated recipes.

Required-input checks happen here, before any provider call.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..core.errors import ValidationError
from ..schemas.ai_recipe import AiRecipe
from ..schemas.requests import (
    AiDinnerRequest,
    AiIdentifyRequest,
    AiRecipesRequest,
    AiRemixRequest,
    AiSearchRequest,
)
from .normalizer import parse_ai_recipes
from .prompts import (
    RECIPES_SYSTEM_PROMPT,
    dinner_prompt,
    identify_prompt,
    remix_prompt,
    search_system_prompt,
    search_user_prompt,
)
from .provider import LLMTextProvider, system_message, user_message
from .trace_logger import AiTraceLogger, get_trace_logger

logger = logging.getLogger(__name__)

IDENTIFY_FALLBACK_NAME = "Generated Recipe"
REMIX_FALLBACK_NAME = "AI Remix"


class RecipeGenerator:
    def __init__(self, provider: LLMTextProvider, trace_logger: Optional[AiTraceLogger] = None):
        self.provider = provider
        self._trace_logger = trace_logger

    @property
    def trace_logger(self) -> AiTraceLogger:
        return self._trace_logger or get_trace_logger()

    async def _complete(self, endpoint: str, system_prompt: str, prompt: str) -> str:
        messages = [system_message(system_prompt), user_message(prompt)]
        text = await self.provider.invoke(messages)
        logger.info("%s: model returned %d chars", endpoint, len(text))
        return text

    # ------------------------------------------------------------------
    # Raw text surfaces
    # ------------------------------------------------------------------

    async def recipes_text(self, request: AiRecipesRequest) -> str:
        """Free-form generation. Raises ValidationError('Missing prompt')."""
        prompt = (request.prompt or "").strip()
        if not prompt:
            raise ValidationError("Missing prompt")

        text = await self._complete(
            "ai-recipes", request.system_prompt or RECIPES_SYSTEM_PROMPT, prompt
        )
        self.trace_logger.log_generation("ai-recipes", prompt, text)
        return text

    async def search_text(self, request: AiSearchRequest) -> str:
        """Search assist: exactly-3-recipes prompt built from the filters and pantry."""
        system_prompt = request.system_prompt or search_system_prompt(request.pantry)
        prompt = search_user_prompt(
            q=request.q,
            diet=request.diet,
            cuisine=request.cuisine,
            ingredients=request.ingredients,
            pantry=request.pantry,
            prompt=request.prompt,
        )
        text = await self._complete("ai-search", system_prompt, prompt)
        self.trace_logger.log_generation(
            "ai-search", prompt, text, metadata={"pantry_size": len(request.pantry)}
        )
        return text

    # ------------------------------------------------------------------
    # Normalized surfaces
    # ------------------------------------------------------------------

    async def _recipes(
        self,
        endpoint: str,
        system_prompt: str,
        prompt: str,
        fallback_name: Optional[str] = None,
    ) -> List[AiRecipe]:
        text = await self._complete(endpoint, system_prompt, prompt)
        recipes = parse_ai_recipes(text, fallback_name=fallback_name)
        if not recipes:
            logger.warning("%s: no usable recipes in model response", endpoint)
        self.trace_logger.log_generation(endpoint, prompt, text, recipe_count=len(recipes))
        return recipes

    async def dinner(self, request: AiDinnerRequest) -> Tuple[str, List[AiRecipe]]:
        prompt = (request.prompt or "").strip() or dinner_prompt(request.pantry)
        recipes = await self._recipes(
            "ai-dinner", request.system_prompt or RECIPES_SYSTEM_PROMPT, prompt
        )
        return prompt, recipes

    async def identify(self, request: AiIdentifyRequest) -> List[AiRecipe]:
        food_name = request.food_name.strip()
        if not food_name:
            raise ValidationError("food_name required")

        recipes = await self._recipes(
            "ai-identify",
            RECIPES_SYSTEM_PROMPT,
            identify_prompt(food_name),
            fallback_name=IDENTIFY_FALLBACK_NAME,
        )
        return recipes[:1]

    async def remix(self, request: AiRemixRequest) -> List[AiRecipe]:
        if not request.recipe:
            raise ValidationError("recipe required")

        base_name = str(request.recipe.get("name") or "").strip()
        recipes = await self._recipes(
            "ai-remix",
            RECIPES_SYSTEM_PROMPT,
            remix_prompt(request.recipe, request.notes),
            fallback_name=f"{base_name} Remix" if base_name else REMIX_FALLBACK_NAME,
        )
        return recipes[:1]
