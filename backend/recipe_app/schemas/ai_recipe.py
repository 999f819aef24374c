"""
AI Recipe Schema
================

Strict shape of a recipe produced by the LLM, after normalization.

Ingredients are kept as plain dicts: bare strings from the model are
wrapped into the canonical `{ingredient, quantity, unit, prep, notes}`
shape, structured entries pass through untouched.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AiRecipe(BaseModel):
    """Recipe sourced from one LLM response. Ephemeral unless saved."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    description: str = ""
    servings: Optional[float] = None
    total_time_minutes: Optional[float] = None
    diet: Optional[str] = None
    cuisine: Optional[str] = None
    ingredients: List[Dict[str, Any]] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("diet", "cuisine", "image_url", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if isinstance(v, list):
            v = ", ".join(str(x) for x in v if x)
        return str(v).strip() or None

    @field_validator("servings", "total_time_minutes", mode="before")
    @classmethod
    def _loose_number(cls, v: Any) -> Optional[float]:
        # Models sometimes answer "4 servings" or "about 30"; keep only clean numbers.
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return v
        try:
            return float(str(v).strip())
        except ValueError:
            return None

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, v: Any) -> List[str]:
        if not isinstance(v, list):
            return []
        return [str(t).strip() for t in v if t is not None and str(t).strip()]
