"""
Prompt builders for the AI recipe surfaces.

Every prompt asks for a JSON array of recipe objects so that one parser
(`normalizer.parse_ai_recipes`) handles all responses.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from .normalizer import normalize_instructions

RECIPES_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates recipes based on dietary preferences, "
    "description and ingredients. Return a JSON array of recipes with fields: name, "
    "description, ingredients (array of strings), steps (array of strings)."
)

SEARCH_SYSTEM_PROMPT = """You are a strict recipe generator.

CONTEXT:
- USER PANTRY (available for substitutions): {pantry_json}

OUTPUT FORMAT:
- Respond with a JSON ARRAY of EXACTLY 3 recipes.
- No markdown, no prose, no backticks. JSON only.
- If nothing was input, return no recipes.

EACH RECIPE OBJECT MUST HAVE:
{{
  "name": string,
  "description": string,
  "servings": number,
  "total_time_minutes": number,
  "diet": string,
  "cuisine": string,
  "ingredients": [
    {{ "ingredient": string, "quantity": number, "unit": string, "prep": string|null, "notes": string|null }}
  ],
  "steps": [string],
  "tags": [string]
}}

CONSTRAINTS:
- Use ONLY user-provided ingredients if given. If something essential is missing, FIRST try to substitute using items in USER PANTRY above. If still missing, you may add minimal common staples (salt, pepper, water, neutral oil, garlic/onion, lemon/vinegar).
- Respect diet and cuisine strictly.
- Prefer consistent units; default to US units.
- If the user inputs just a recipe name, return recipes that are similar to that name.
- Always give measured quantities (estimate if needed). For "to taste" items, name the ingredient, do not give a quantity of 0, and put "to taste" in notes.
- Steps must be actionable and detailed (temps, times, pans, doneness cues).

VALIDATION:
- Return JSON that parses. Exactly 3 recipes. No comments. No trailing commas.

EXAMPLE INGREDIENT ENTRY:
{{ "ingredient": "broccoli florets", "quantity": 300, "unit": "g", "prep": "bite-size", "notes": null }}"""

DINNER_STAPLES = (
    "chicken breast", "ground beef", "onion", "garlic", "olive oil", "salt",
    "black pepper", "butter", "potatoes", "rice", "pasta", "tomatoes", "carrots",
    "bell peppers", "cheese", "eggs", "flour", "broth", "soy sauce", "herbs",
)

REMIX_DEFAULT_REQUEST = "Give it a fresh twist while keeping it practical for home cooks."

REMIX_SUGGESTIONS = (
    "Make it vegetarian and protein-packed",
    "Give it bold, spicy flavors",
    "Turn it into a 20-minute weeknight meal",
    "Keep it low-carb but comforting",
)


def search_system_prompt(pantry: Sequence[str]) -> str:
    return SEARCH_SYSTEM_PROMPT.format(pantry_json=json.dumps(list(pantry)))


def search_user_prompt(
    *,
    q: str = "",
    diet: str = "",
    cuisine: str = "",
    ingredients: Sequence[str] = (),
    pantry: Sequence[str] = (),
    prompt: Optional[str] = None,
) -> str:
    """User turn for `/ai-search`: pantry line + either the caller's prompt or one built from filters."""
    if prompt:
        body = prompt
    else:
        lines = []
        if diet:
            lines.append(f"Diet: {diet}")
        if cuisine:
            lines.append(f"Cuisine: {cuisine}")
        if ingredients:
            lines.append(f"User-required ingredients: {', '.join(ingredients)}")
        if q:
            lines.append(f"User query: {q}")
        if lines:
            body = "Create exactly 3 recipes that satisfy ALL of the following:\n" + "\n".join(lines)
        else:
            body = "No filters provided. Propose 3 popular recipes."

    pantry_line = (
        f"Pantry items available for substitution: {', '.join(pantry)}"
        if pantry
        else "Pantry items available for substitution: (none)"
    )
    return f"{pantry_line}\n\n{body}"


def dinner_prompt(pantry: Sequence[str] = ()) -> str:
    staples = ", ".join(pantry or DINNER_STAPLES)
    return (
        f"Generate 3 balanced dinner recipes using the following pantry staples: {staples}.\n"
        "Focus on flavorful, practical meals that feel achievable on a weeknight.\n"
        "Return JSON array like: [{name, description, ingredients, steps}]"
    )


def identify_prompt(food_name: str) -> str:
    return (
        f'Create a detailed recipe for "{food_name}".\n'
        "Return a JSON array with a single object of this exact structure:\n"
        "[{\n"
        '  "name": "Recipe name",\n'
        '  "description": "Brief description of the dish",\n'
        '  "ingredients": ["ingredient 1", "ingredient 2", ...],\n'
        '  "steps": ["step 1", "step 2", ...]\n'
        "}]\n"
        "Make the recipe practical, well-detailed, and suitable for home cooking."
    )


def format_ingredient_line(entry: Any) -> Optional[str]:
    """"2 cup rice (rinsed)" style line from a string or ingredient object."""
    if isinstance(entry, str):
        return entry.strip() or None
    if not isinstance(entry, dict):
        return None

    name = next(
        (entry[k] for k in ("ingredient", "name", "item", "food", "title") if entry.get(k)),
        "",
    )
    if not name:
        return None
    qty = " ".join(
        str(v) for v in (entry.get("quantity") or entry.get("amount"), entry.get("unit") or entry.get("measure")) if v
    ).strip()
    prep = entry.get("prep") or entry.get("preparation") or entry.get("notes") or ""
    base = " ".join(p for p in (qty, str(name)) if p).strip()
    return f"{base} ({prep})" if prep else base


def remix_prompt(recipe: Dict[str, Any], notes: str = "") -> str:
    """Prompt for ONE new recipe inspired by a saved or dataset recipe."""
    title = recipe.get("name") or "this recipe"
    description = recipe.get("description") or ""

    meta = []
    if recipe.get("cuisine"):
        meta.append(f"Cuisine: {recipe['cuisine']}")
    if recipe.get("diet"):
        meta.append(f"Diet: {recipe['diet']}")
    if recipe.get("minutes"):
        meta.append(f"Ready in ~{recipe['minutes']} minutes")
    if isinstance(recipe.get("rating"), (int, float)):
        meta.append(f"Rating: {recipe['rating']}")

    lines = [format_ingredient_line(x) for x in (recipe.get("ingredients") or [])]
    ingredients: List[str] = [x for x in lines if x][:20]
    steps = normalize_instructions(recipe.get("instructions") or recipe.get("steps"))[:12]
    request = notes.strip() or REMIX_DEFAULT_REQUEST

    parts = [
        "You are an inventive but practical chef.",
        f'Create exactly ONE new recipe inspired by "{title}".',
        f"Context: {' · '.join(meta)}" if meta else "",
        "",
        "Existing description:",
        description or "No description provided.",
        "",
        "Ingredients:",
        "\n".join(f"- {x}" for x in ingredients) if ingredients else "- (not provided)",
        "",
        "Steps:",
        "\n".join(f"{i}. {s}" for i, s in enumerate(steps, start=1)) if steps else "1. (no steps provided)",
        "",
        "User request / constraints:",
        request,
        "",
        "Return JSON array with a single object in this shape:",
        '[{ "name": string, "description": string, "ingredients": array, "steps": array }]',
        "Keep instructions concise, numbered implicitly by their array order.",
    ]
    # Drop the optional context line when empty but keep intentional blank lines.
    return "\n".join(p for i, p in enumerate(parts) if p or i != 2)
