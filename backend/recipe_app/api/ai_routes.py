"""
AI Routes
=========

Endpoints:
  - POST /ai-recipes     {prompt, systemPrompt?}            -> {text}
  - POST /ai-search      {q, diet, cuisine, ingredients, pantry, systemPrompt?, prompt?} -> {text}
  - POST /ai-dinner      {pantry?, prompt?}                  -> {prompt, recipes} (stored pantry when omitted)
  - POST /ai-identify    {food_name}                         -> {recipes}
  - POST /ai-remix       {recipe, notes?}                    -> {recipes}
  - POST /ai-image       {name?, ingredients?}               -> {image_url: data URL}
  - POST /saved-image    {saved_id, name?, ingredients?}     -> {image_url: public URL}

Domain errors propagate to the handlers registered in main.py.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..images.service import RecipeImageService
from ..llm.generator import RecipeGenerator
from ..schemas.ai_recipe import AiRecipe
from ..schemas.requests import (
    AiDinnerRequest,
    AiIdentifyRequest,
    AiRecipesRequest,
    AiRemixRequest,
    AiSearchRequest,
    RecipeImageRequest,
)
from ..storage.pantry import PantryRepository
from .dependencies import get_generator, get_image_service, get_pantry_repository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


class TextResponse(BaseModel):
    text: str


class RecipesResponse(BaseModel):
    recipes: List[AiRecipe]


class DinnerResponse(RecipesResponse):
    prompt: str


class ImageResponse(BaseModel):
    image_url: str


@router.post("/ai-recipes", response_model=TextResponse)
async def ai_recipes(body: AiRecipesRequest, generator: RecipeGenerator = Depends(get_generator)):
    return TextResponse(text=await generator.recipes_text(body))


@router.post("/ai-search", response_model=TextResponse)
async def ai_search(body: AiSearchRequest, generator: RecipeGenerator = Depends(get_generator)):
    return TextResponse(text=await generator.search_text(body))


@router.post("/ai-dinner", response_model=DinnerResponse)
async def ai_dinner(
    body: AiDinnerRequest,
    generator: RecipeGenerator = Depends(get_generator),
    pantry: PantryRepository = Depends(get_pantry_repository),
):
    # No pantry in the request: use the stored one, then the default staples.
    if not body.pantry:
        body = body.model_copy(update={"pantry": await pantry.names()})
    prompt, recipes = await generator.dinner(body)
    return DinnerResponse(prompt=prompt, recipes=recipes)


@router.post("/ai-identify", response_model=RecipesResponse)
async def ai_identify(body: AiIdentifyRequest, generator: RecipeGenerator = Depends(get_generator)):
    return RecipesResponse(recipes=await generator.identify(body))


@router.post("/ai-remix", response_model=RecipesResponse)
async def ai_remix(body: AiRemixRequest, generator: RecipeGenerator = Depends(get_generator)):
    return RecipesResponse(recipes=await generator.remix(body))


@router.post("/ai-image", response_model=ImageResponse)
async def ai_image(body: RecipeImageRequest, images: RecipeImageService = Depends(get_image_service)):
    return ImageResponse(image_url=await images.ai_image(body))


@router.post("/saved-image", response_model=ImageResponse)
async def saved_image(body: RecipeImageRequest, images: RecipeImageService = Depends(get_image_service)):
    return ImageResponse(image_url=await images.saved_image(body))
