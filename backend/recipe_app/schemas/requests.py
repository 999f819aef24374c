"""
Request Schemas
===============

Request bodies for the AI, image, saved-recipe, pantry and shopping
endpoints. Required-field checks that must produce a specific `{error}`
message (missing prompt, missing saved_id) are done in the services so
they fail before any external call.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _names(value: Any) -> List[str]:
    """Accept a list of strings or of `{name}` objects; keep non-empty names."""
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for entry in value:
        if isinstance(entry, dict):
            entry = entry.get("name") or entry.get("ingredient") or ""
        text = str(entry).strip() if entry is not None else ""
        if text:
            out.append(text)
    return out


class AiRecipesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")


class AiSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    q: str = ""
    diet: str = ""
    cuisine: str = ""
    ingredients: List[str] = Field(default_factory=list)
    pantry: List[str] = Field(default_factory=list)
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
    prompt: Optional[str] = None

    @field_validator("q", "diet", "cuisine", mode="before")
    @classmethod
    def _blank(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("ingredients", "pantry", mode="before")
    @classmethod
    def _name_list(cls, v: Any) -> List[str]:
        return _names(v)


class AiDinnerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pantry: List[str] = Field(default_factory=list)
    prompt: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")

    @field_validator("pantry", mode="before")
    @classmethod
    def _name_list(cls, v: Any) -> List[str]:
        return _names(v)


class AiIdentifyRequest(BaseModel):
    food_name: str = ""


class AiRemixRequest(BaseModel):
    recipe: Dict[str, Any] = Field(default_factory=dict)
    notes: str = ""


class RecipeImageRequest(BaseModel):
    """Body of `/ai-image` and `/saved-image`."""

    saved_id: Optional[Union[str, int]] = None
    name: Optional[str] = None
    # Strings or structured ingredient objects; anything else is "not provided".
    ingredients: Optional[Any] = None


class PantryItemCreate(BaseModel):
    name: str
    qty: str = ""
    notes: str = ""


class PantryItemUpdate(BaseModel):
    name: Optional[str] = None
    qty: Optional[str] = None
    notes: Optional[str] = None


class ShoppingItemCreate(PantryItemCreate):
    pass


class ShoppingItemUpdate(PantryItemUpdate):
    checked: Optional[bool] = None


class ShoppingBulkRequest(BaseModel):
    items: List[Any] = Field(default_factory=list)
