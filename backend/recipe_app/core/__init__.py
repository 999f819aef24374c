"""
Recipe App Core
===============

Configuration, settings and the error taxonomy.
"""

from .config import Settings, get_settings
from .errors import (
    ImageGenerationExhausted,
    InvalidAiRecipe,
    NotFoundError,
    ParseError,
    RecipeAppError,
    StorageError,
    UpstreamProviderError,
    ValidationError,
)

__all__ = [
    "Settings",
    "get_settings",
    "RecipeAppError",
    "ValidationError",
    "NotFoundError",
    "UpstreamProviderError",
    "ImageGenerationExhausted",
    "StorageError",
    "ParseError",
    "InvalidAiRecipe",
]
