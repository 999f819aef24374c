"""
AI Response Normalizer
======================

Turns raw LLM text into validated AiRecipe objects.

Models are asked for a JSON array of recipes but answer with code fences,
Python-style single quotes, or half-broken lists. Parsing is an ordered
chain of strategies; each one is total (returns None instead of raising)
so the chain simply moves on:

  1) strict JSON
  2) single-quote repair, then JSON       (bracketed text only)
  3) double-quoted substrings as strings  (bracketed text only)
  4) comma split of the bracket contents  (bracketed text only)

Every AI surface (search assist, dinner ideas, identify, remix) and the
saved-recipe hydration go through this module; there is no per-caller
parsing.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import InvalidAiRecipe, ParseError
from ..schemas.ai_recipe import AiRecipe

logger = logging.getLogger(__name__)

FENCE_OPEN = re.compile(r"^```[\w+-]*")
FENCE_CLOSE = re.compile(r"```$")
SINGLE_QUOTED = re.compile(r"'((?:\\'|[^'])*)'")
DOUBLE_QUOTED = re.compile(r'"((?:\\.|[^"])*)"')
COMMA = re.compile(r"\s*,\s*")
# "1." / "1)" / "-" at the start of a step
ORDINAL = re.compile(r"^\s*(?:\d+[.)]|-)\s*")
LINE_BREAKS = re.compile(r"\r?\n+")

STEP_TEXT_KEYS = ("text", "description", "body", "step", "instruction", "value")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```lang and a trailing ``` marker, if present."""
    trimmed = (text or "").strip()
    if not trimmed.startswith("```"):
        return trimmed
    trimmed = FENCE_OPEN.sub("", trimmed, count=1)
    trimmed = FENCE_CLOSE.sub("", trimmed.rstrip(), count=1)
    return trimmed.strip()


def _is_bracketed(text: str) -> bool:
    return text.startswith("[") and text.endswith("]")


def _as_list(value: Any) -> Optional[List[Any]]:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        # {"recipes": [...]} envelope, otherwise a single recipe object
        inner = value.get("recipes")
        return inner if isinstance(inner, list) else [value]
    return None


def _requote(text: str) -> str:
    def _swap(match: re.Match) -> str:
        inner = match.group(1).replace("\\", "\\\\").replace('"', '\\"')
        return f'"{inner}"'

    return SINGLE_QUOTED.sub(_swap, text)


def _unescape(text: str) -> str:
    return text.replace('\\"', '"').replace("\\'", "'").strip()


# ----------------------------------------------------------------------------
# Parser chain
# ----------------------------------------------------------------------------

def parse_strict(text: str) -> Optional[List[Any]]:
    try:
        return _as_list(json.loads(text))
    except (TypeError, ValueError):
        return None


def parse_requoted(text: str) -> Optional[List[Any]]:
    if not _is_bracketed(text):
        return None
    repaired = _requote(text)
    if repaired == text:
        return None
    try:
        value = json.loads(repaired)
    except ValueError:
        return None
    return value if isinstance(value, list) else None


def parse_quoted_strings(text: str) -> Optional[List[Any]]:
    if not _is_bracketed(text):
        return None
    found = [_unescape(m.group(1)) for m in DOUBLE_QUOTED.finditer(_requote(text))]
    found = [s for s in found if s]
    return found or None


def parse_comma_split(text: str) -> Optional[List[Any]]:
    if not _is_bracketed(text):
        return None
    entries = []
    for entry in COMMA.split(text[1:-1]):
        entry = re.sub(r"^['\"]|['\"]$", "", entry)
        entry = _unescape(entry)
        if entry:
            entries.append(entry)
    return entries


PARSER_CHAIN: tuple[Callable[[str], Optional[List[Any]]], ...] = (
    parse_strict,
    parse_requoted,
    parse_quoted_strings,
    parse_comma_split,
)


def decode_payload(text: str) -> List[Any]:
    """Run the parser chain over fence-stripped text. Raises ParseError."""
    cleaned = strip_code_fence(text)
    for parser in PARSER_CHAIN:
        result = parser(cleaned)
        if result is not None:
            return result
    raise ParseError(f"Unparseable AI payload: {cleaned[:80]!r}")


# ----------------------------------------------------------------------------
# Field normalizers
# ----------------------------------------------------------------------------

def clean_step(text: str) -> str:
    return ORDINAL.sub("", text, count=1).strip()


def _step_text(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        for key in STEP_TEXT_KEYS:
            value = entry.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return ""


def normalize_instructions(value: Any) -> List[str]:
    """
    Steps as a clean list of strings.

    Accepts a list (strings or step objects), a bracketed string such as
    "['Preheat oven', 'Mix']", or newline-separated free text.
    """
    if not value:
        return []
    if isinstance(value, str):
        parsed: Optional[List[Any]] = None
        stripped = value.strip()
        if _is_bracketed(stripped):
            try:
                parsed = decode_payload(stripped)
            except ParseError:
                parsed = None
        value = parsed if parsed else LINE_BREAKS.split(value)
    if not isinstance(value, list):
        return []

    steps = []
    for entry in value:
        text = clean_step(_step_text(entry))
        if text:
            steps.append(text)
    return steps


def wrap_ingredient(name: str) -> Dict[str, Any]:
    return {"ingredient": name, "quantity": 0, "unit": "", "prep": None, "notes": None}


def normalize_ingredients(value: Any) -> List[Dict[str, Any]]:
    """Bare strings are wrapped; structured entries pass through unchanged."""
    if isinstance(value, str):
        value = normalize_instructions(value)
    if not isinstance(value, list):
        return []

    out: List[Dict[str, Any]] = []
    for entry in value:
        if isinstance(entry, dict):
            out.append(entry)
        elif isinstance(entry, str):
            name = entry.strip()
            if name:
                out.append(wrap_ingredient(name))
        elif isinstance(entry, (int, float)) and not isinstance(entry, bool):
            out.append(wrap_ingredient(str(entry)))
    return out


def normalize_recipe(candidate: Any, *, fallback_name: Optional[str] = None) -> AiRecipe:
    """Validate one candidate. Raises InvalidAiRecipe."""
    if not isinstance(candidate, dict):
        raise InvalidAiRecipe("AI recipe entry is not an object")

    raw_steps = candidate.get("steps") or candidate.get("instructions")
    steps = normalize_instructions(raw_steps)
    ingredients = normalize_ingredients(candidate.get("ingredients"))
    if not ingredients or not steps:
        raise InvalidAiRecipe(
            f"AI recipe {candidate.get('name')!r} has no ingredients or no steps"
        )

    data = {k: v for k, v in candidate.items() if k != "instructions"}
    data["steps"] = steps
    data["ingredients"] = ingredients
    if fallback_name and not str(data.get("name") or "").strip():
        data["name"] = fallback_name

    try:
        return AiRecipe(**data)
    except PydanticValidationError as e:
        raise InvalidAiRecipe(f"AI recipe failed validation: {e}") from e


def parse_ai_recipes(text: Optional[str], *, fallback_name: Optional[str] = None) -> List[AiRecipe]:
    """
    Raw LLM text -> validated recipes.

    Unparseable text and invalid entries are logged and dropped: an empty
    list is a normal outcome, the caller decides how to present it.
    """
    if not text or not text.strip():
        return []

    try:
        candidates = decode_payload(text)
    except ParseError as e:
        logger.warning("AI response could not be parsed: %s", e)
        return []

    recipes: List[AiRecipe] = []
    for candidate in candidates:
        try:
            recipes.append(normalize_recipe(candidate, fallback_name=fallback_name))
        except InvalidAiRecipe as e:
            logger.info("Dropping AI recipe: %s", e)
    return recipes
