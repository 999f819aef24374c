"""
Recipe App LLM Components
=========================

Text provider, prompt builders, the AI response normalizer and the
generator service that ties them together.
"""

from .generator import RecipeGenerator
from .normalizer import normalize_instructions, parse_ai_recipes
from .provider import LLMTextProvider, OpenAIChatProvider, StaticTextProvider, get_text_provider
from .trace_logger import AiTraceLogger, get_trace_logger, set_trace_logger

__all__ = [
    "RecipeGenerator",
    "LLMTextProvider",
    "OpenAIChatProvider",
    "StaticTextProvider",
    "get_text_provider",
    "normalize_instructions",
    "parse_ai_recipes",
    "AiTraceLogger",
    "get_trace_logger",
    "set_trace_logger",
]
