"""
Recipe App Configuration
========================

Centralized application settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App info
    app_name: str = "Recipe App"
    app_version: str = "1.0.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    api_prefix: str = "/api"

    # CORS - the request origin is echoed back
    cors_origin_regex: str = ".*"
    cors_allow_credentials: bool = False
    cors_allow_methods: list = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
    cors_allow_headers: list = ["Content-Type"]

    # Read-only recipe dataset (SQLite + FTS5)
    recipe_db_path: str = "recipes.db"

    # OpenAI (recipe text generation)
    openai_api_key: str = ""
    openai_model: str = "gpt-4.1"
    openai_temperature: Optional[float] = None

    # Gemini (recipe image generation)
    gemini_api_key: str = ""
    image_model: str = "gemini-2.5-flash-image"
    image_max_attempts: int = 3
    image_retry_base_delay: float = 1.0

    # Supabase (saved recipes, pantry, shopping list, image storage)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    storage_bucket: str = "recipe-images"
    saved_table: str = "favorites"
    pantry_table: str = "pantry_items"
    shopping_table: str = "shopping_items"
    saved_list_limit: int = 200

    # Search settings
    max_query_terms: int = 6
    default_page_size: int = 20
    max_page_size: int = 50
    cuisine_facet_limit: int = 40
    diet_facet_limit: int = 20
    # bm25 column weights: name, description, ingredients, steps, tags, cuisine, diet
    bm25_weights: list[float] = [1.5, 1.2, 1.1, 1.3, 0.5, 0.8, 0.6]

    # AI call traces (JSONL)
    enable_ai_traces: bool = False
    ai_trace_path: str = "logs/ai_traces.jsonl"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
