"""
Recipe App Images
=================

Image provider, retry controller and the persistence service.
"""

from .provider import GeminiImageProvider, ImagePayload, ImageProvider, StaticImageProvider, get_image_provider
from .retry import ImageGenerationController, ImageGenState, build_image_prompt
from .service import RecipeImageService, to_data_url

__all__ = [
    "GeminiImageProvider",
    "ImagePayload",
    "ImageProvider",
    "StaticImageProvider",
    "get_image_provider",
    "ImageGenerationController",
    "ImageGenState",
    "build_image_prompt",
    "RecipeImageService",
    "to_data_url",
]
