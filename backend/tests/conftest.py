"""
Shared fixtures: a small on-disk recipe dataset, in-memory stores and
stubbed AI providers wired into the FastAPI app.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest
from fastapi.testclient import TestClient

from recipe_app.core.config import get_settings
from recipe_app.images.provider import ImagePayload, StaticImageProvider
from recipe_app.images.service import RecipeImageService
from recipe_app.llm.generator import RecipeGenerator
from recipe_app.llm.provider import StaticTextProvider
from recipe_app.llm.trace_logger import AiTraceLogger
from recipe_app.search.schema import create_schema, insert_recipes, rebuild_index
from recipe_app.search.store import RecipeStore
from recipe_app.storage.blobs import InMemoryBlobStore
from recipe_app.storage.documents import InMemoryDocumentStore
from recipe_app.storage.pantry import PantryRepository
from recipe_app.storage.saved import SavedRecipeRepository
from recipe_app.storage.shopping import ShoppingListRepository

# Cuisines: Italian x5, Mexican x3, "" x2
SAMPLE_RECIPES = [
    {"id": 1, "name": "Spaghetti Carbonara", "minutes": 25, "rating": 4.8, "popularity": 120,
     "cuisine": "Italian", "diet": "", "description": "Classic Roman pasta with eggs and crispy guanciale",
     "tags": ["pasta", "dinner"], "ingredients": ["spaghetti", "eggs", "pecorino", "guanciale"],
     "steps": ["Boil the spaghetti", "Whisk eggs with pecorino", "Toss with guanciale"],
     "nutrition": [520.0, 30.0, 4.0]},
    {"id": 2, "name": "Garlic Butter Pasta", "minutes": 15, "rating": 4.2, "popularity": 90,
     "cuisine": "Italian", "diet": "Vegetarian", "description": "Quick weeknight pasta",
     "tags": ["pasta", "quick"], "ingredients": ["pasta", "garlic", "butter", "parsley"],
     "steps": ["Cook pasta", "Melt butter with garlic", "Toss and serve"]},
    {"id": 3, "name": "Margherita Pizza", "minutes": 45, "rating": 4.6, "popularity": 200,
     "cuisine": "Italian", "diet": "Vegetarian", "description": "Tomato, mozzarella and basil",
     "tags": ["pizza"], "ingredients": ["pizza dough", "tomato", "mozzarella", "basil"],
     "steps": ["Stretch dough", "Top and bake"]},
    {"id": 4, "name": "Mushroom Risotto", "minutes": 50, "rating": 4.4, "popularity": 70,
     "cuisine": "Italian", "diet": "Vegetarian", "description": "Creamy arborio rice with mushrooms",
     "tags": ["rice"], "ingredients": ["arborio rice", "mushrooms", "parmesan", "broth"],
     "steps": ["Toast rice", "Add broth slowly", "Stir in parmesan"]},
    {"id": 5, "name": "Tiramisu", "minutes": 30, "rating": 4.9, "popularity": 150,
     "cuisine": "Italian", "diet": "", "description": "Coffee soaked ladyfingers with mascarpone",
     "tags": ["dessert"], "ingredients": ["mascarpone", "coffee", "ladyfingers", "cocoa"],
     "steps": ["Dip ladyfingers", "Layer with cream", "Chill"]},
    {"id": 6, "name": "Chicken Tacos", "minutes": 30, "rating": 4.5, "popularity": 80,
     "cuisine": "Mexican", "diet": "", "description": "Grilled chicken tacos with lime",
     "tags": ["tacos"], "ingredients": ["chicken", "tortillas", "salsa", "lime"],
     "steps": ["Grill chicken", "Warm tortillas", "Assemble tacos"]},
    {"id": 7, "name": "Black Bean Burrito", "minutes": 20, "rating": 4.1, "popularity": 40,
     "cuisine": "Mexican", "diet": "Vegan", "description": "Hearty beans and rice wrapped up",
     "tags": ["burrito"], "ingredients": ["black beans", "rice", "tortillas", "salsa"],
     "steps": ["Warm beans", "Fill tortillas", "Roll"]},
    {"id": 8, "name": "Garlic Shrimp Tacos", "minutes": 25, "rating": 3.9, "popularity": 60,
     "cuisine": "Mexican", "diet": "", "description": "Seared shrimp with cabbage slaw",
     "tags": ["tacos", "seafood"], "ingredients": ["shrimp", "garlic", "tortillas", "cabbage"],
     "steps": ["Sear shrimp", "Make slaw", "Assemble tacos"]},
    {"id": 9, "name": "Garlic Butter Toast", "minutes": 10, "rating": 3.5, "popularity": 30,
     "cuisine": "", "diet": "", "description": "Crunchy toast for soup night",
     "tags": ["side"], "ingredients": ["bread", "garlic", "butter"],
     "steps": ["Spread butter", "Toast"]},
    {"id": 10, "name": "Overnight Oats", "minutes": 5, "rating": None, "popularity": 10,
     "cuisine": "", "diet": "Vegan", "description": "Make-ahead breakfast",
     "tags": ["breakfast"], "ingredients": ["oats", "almond milk", "chia seeds"],
     "steps": "Mix everything\nRefrigerate overnight"},
]

AI_RECIPES_TEXT = json.dumps([
    {"name": "Pantry Pasta", "ingredients": ["pasta", "garlic", "olive oil"],
     "steps": ["1. Boil pasta", "2. Toss with garlic oil"]},
    {"name": "Broken Recipe", "ingredients": [], "steps": []},
])

PNG = ImagePayload(mime_type="image/png", data=b"\x89PNG-fake-bytes")


def build_recipe_db(path: Path, recipes: List[dict] = SAMPLE_RECIPES) -> Path:
    conn = sqlite3.connect(path)
    try:
        create_schema(conn)
        insert_recipes(conn, recipes)
        # One row with a corrupted JSON column.
        conn.execute(
            "INSERT INTO recipes (id, name, minutes, cuisine, ingredients, nutrition) "
            "VALUES (11, 'Mystery Stew', 60, NULL, 'not json', '{broken')"
        )
        rebuild_index(conn)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def recipe_db(tmp_path: Path) -> Path:
    return build_recipe_db(tmp_path / "recipes.db")


@pytest.fixture
def store(recipe_db: Path):
    recipe_store = RecipeStore.open(str(recipe_db))
    yield recipe_store
    recipe_store.close()


@pytest.fixture
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def saved_repo(documents, store) -> SavedRecipeRepository:
    return SavedRecipeRepository(documents, store)


@pytest.fixture
def pantry_repo(documents) -> PantryRepository:
    return PantryRepository(documents)


@pytest.fixture
def shopping_repo(documents) -> ShoppingListRepository:
    return ShoppingListRepository(documents)


@pytest.fixture
def recorded_sleeps() -> list:
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps):
    async def _sleep(delay: float) -> None:
        recorded_sleeps.append(delay)

    return _sleep


@pytest.fixture
def services(tmp_path, store, documents, saved_repo, pantry_repo, shopping_repo, fake_sleep):
    """Every collaborator the app reads from `app.state`, with stubs for the AI providers."""
    text_provider = StaticTextProvider(AI_RECIPES_TEXT)
    image_provider = StaticImageProvider([PNG])
    blobs = InMemoryBlobStore()
    trace_logger = AiTraceLogger(log_path=tmp_path / "ai_traces.jsonl", enabled=False)
    return SimpleNamespace(
        recipe_store=store,
        text_provider=text_provider,
        image_provider=image_provider,
        blobs=blobs,
        documents=documents,
        generator=RecipeGenerator(text_provider, trace_logger=trace_logger),
        image_service=RecipeImageService(
            image_provider, blobs=blobs, saved=saved_repo, sleep=fake_sleep
        ),
        saved=saved_repo,
        pantry=pantry_repo,
        shopping=shopping_repo,
    )


@pytest.fixture
def api_client(monkeypatch, tmp_path, services):
    """TestClient with the app's state swapped for the test services."""
    monkeypatch.setenv("RECIPE_DB_PATH", str(tmp_path / "missing.db"))
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("SUPABASE_URL", "")
    get_settings.cache_clear()

    from main import app

    with TestClient(app) as client:
        for name in ("recipe_store", "generator", "image_service", "saved", "pantry", "shopping"):
            setattr(app.state, name, getattr(services, name))
        yield client

    get_settings.cache_clear()
