"""
Smoke Test (offline-friendly)
=============================

Runs the FastAPI app via TestClient against a throwaway recipe database
and canned AI providers, and prints concise outputs.
This does NOT require a running server or any API key.
"""

from __future__ import annotations

import json
import os
import sqlite3
import sys
import tempfile
from pathlib import Path

from fastapi.testclient import TestClient

SAMPLE_RECIPES = [
    {"id": 1, "name": "Spaghetti Carbonara", "minutes": 25, "rating": 4.8, "popularity": 120,
     "cuisine": "Italian", "diet": "", "description": "Roman pasta with eggs and pecorino",
     "ingredients": ["spaghetti", "eggs", "pecorino", "guanciale"], "steps": ["Boil pasta", "Mix eggs"]},
    {"id": 2, "name": "Chicken Tacos", "minutes": 30, "rating": 4.5, "popularity": 80,
     "cuisine": "Mexican", "diet": "", "description": "Weeknight tacos",
     "ingredients": ["chicken", "tortillas", "salsa"], "steps": ["Grill chicken", "Assemble tacos"]},
    {"id": 3, "name": "Chickpea Curry", "minutes": 40, "rating": 4.6, "popularity": 60,
     "cuisine": "Indian", "diet": "Vegan", "description": "Creamy coconut chickpea curry",
     "ingredients": ["chickpeas", "coconut milk", "curry paste"], "steps": ["Simmer everything"]},
]

CANNED_AI_TEXT = json.dumps([
    {"name": "Pantry Pasta", "ingredients": ["pasta", "garlic", "olive oil"],
     "steps": ["1. Boil pasta", "2. Toss with garlic oil"]},
])


def main() -> int:
    # Ensure `recipe_app` is importable when running as a script
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

    from recipe_app.search.schema import create_schema, insert_recipes, rebuild_index

    db_path = Path(tempfile.mkdtemp()) / "smoke_recipes.db"
    conn = sqlite3.connect(db_path)
    create_schema(conn)
    insert_recipes(conn, SAMPLE_RECIPES)
    rebuild_index(conn)
    conn.commit()
    conn.close()

    # Force offline deterministic mode
    os.environ["RECIPE_DB_PATH"] = str(db_path)
    os.environ["OPENAI_API_KEY"] = ""
    os.environ["GEMINI_API_KEY"] = ""
    os.environ["SUPABASE_URL"] = ""

    from recipe_app.core.config import get_settings

    get_settings.cache_clear()

    from main import app
    from recipe_app.llm.generator import RecipeGenerator
    from recipe_app.llm.provider import StaticTextProvider

    with TestClient(app) as client:
        app.state.generator = RecipeGenerator(StaticTextProvider(CANNED_AI_TEXT))

        print("=== Smoke Test (TestClient, offline mode) ===")
        print("health:", client.get("/api/health").json())

        for params in ({"q": "pasta"}, {"q": "chicken", "sort": "rating"}, {"cuisine": "Indian"}):
            data = client.get("/api/search", params=params).json()
            names = [item["name"] for item in data.get("items", [])]
            print(f"\nsearch {params}: total={data.get('total')} -> {names}")

        print("\nfacets:", client.get("/api/facets").json())
        print("recipe 1:", client.get("/api/recipes/1").json().get("name"))
        print("recipe abc:", client.get("/api/recipes/abc").json())

        dinner = client.post("/api/ai-dinner", json={"pantry": ["pasta", "garlic"]}).json()
        print("\nai-dinner:", [r["name"] for r in dinner.get("recipes", [])])

        print("toggle saved 1:", client.post("/api/saved/local/1/toggle").json())
        print("saved:", [row.get("name") for row in client.get("/api/saved").json()])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
