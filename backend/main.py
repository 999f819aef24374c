"""
Recipe App API
==============

Main entry point for the recipe discovery backend.

Features:
- Full-text recipe search (SQLite FTS5, bm25 ranking) with facets
- AI recipe generation (OpenAI) with tolerant response normalization
- Recipe images (Gemini) with bounded retries
- Saved recipes, pantry and shopping list (Supabase)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recipe_app.api import ai_router, search_router, user_router
from recipe_app.core.config import get_settings
from recipe_app.core.errors import StorageError, register_exception_handlers
from recipe_app.images.provider import get_image_provider
from recipe_app.images.service import RecipeImageService
from recipe_app.llm.generator import RecipeGenerator
from recipe_app.llm.provider import get_text_provider
from recipe_app.search.store import RecipeStore
from recipe_app.storage.blobs import get_blob_store
from recipe_app.storage.client import create_supabase_client
from recipe_app.storage.documents import get_document_store
from recipe_app.storage.pantry import PantryRepository
from recipe_app.storage.saved import SavedRecipeRepository
from recipe_app.storage.shopping import ShoppingListRepository

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def open_recipe_store():
    try:
        return RecipeStore.open(
            settings.recipe_db_path,
            bm25_weights=settings.bm25_weights,
            cuisine_facet_limit=settings.cuisine_facet_limit,
            diet_facet_limit=settings.diet_facet_limit,
        )
    except StorageError as e:
        logger.error("Search endpoints disabled: %s", e)
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared collaborators once; handlers read them from app.state."""
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)

    store = open_recipe_store()
    supabase = await create_supabase_client(settings)
    documents = get_document_store(supabase)
    saved = SavedRecipeRepository(
        documents, store, table=settings.saved_table, limit=settings.saved_list_limit
    )

    app.state.recipe_store = store
    app.state.generator = RecipeGenerator(get_text_provider(settings))
    app.state.saved = saved
    app.state.pantry = PantryRepository(documents, table=settings.pantry_table)
    app.state.shopping = ShoppingListRepository(
        documents, table=settings.shopping_table, pantry_table=settings.pantry_table
    )
    app.state.image_service = RecipeImageService(
        get_image_provider(settings),
        blobs=get_blob_store(supabase, settings.storage_bucket),
        saved=saved,
        max_attempts=settings.image_max_attempts,
        base_delay=settings.image_retry_base_delay,
    )
    logger.info("Text model: %s, image model: %s", settings.openai_model, settings.image_model)

    yield

    if store is not None:
        store.close()
    logger.info("Shutting down %s.", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Recipe search, AI recipe generation and pantry management",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url=None,
)

# CORS: echo the request origin
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

register_exception_handlers(app)

app.include_router(search_router, prefix=settings.api_prefix)
app.include_router(ai_router, prefix=settings.api_prefix)
app.include_router(user_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
