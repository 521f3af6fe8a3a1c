"""
Parse AI-generated recipe text into structured recipe records.

Python-first parser - heuristic regular expressions, no LLM call.
Uses the fixed tag vocabulary from recipe_tags.py.

The model is asked for markdown like:

    # Lemon Garlic Chicken

    **Ingredients:**
    - 2 chicken breasts
    - 1 lemon

    **Instructions:**
    1. Season the chicken.
    2. Bake for 25 minutes.

    **Nutrition (per serving):** 450 calories, 35g protein

but responses drift, so every extractor degrades to "not found" instead of
raising. parse_recipe_from_ai() always returns a storable record.
"""

import logging
import re
from typing import Dict, Iterator, List, Optional

from .data.models import (
    ParsedRecipe,
    ParsedRecipeForDB,
    RecipeContent,
    RecipeNutrition,
)
from .recipe_tags import FALLBACK_TAG, generate_tags, has_recipe_indicators

logger = logging.getLogger(__name__)


FALLBACK_TITLE = "Delicious Recipe"
FALLBACK_INGREDIENTS = ["Recipe parsing failed - please regenerate"]
FALLBACK_INSTRUCTIONS = ["Please try generating again"]

# Accepted title length is exclusive on both ends
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 100

# Tried in order; the first capture that survives clean_title() and the
# length check wins
TITLE_PATTERNS = [
    re.compile(r"^#\s+(.+)$", re.MULTILINE),                          # # Title
    re.compile(r"^\*\*(.+)\*\*$", re.MULTILINE),                      # **Title**
    re.compile(r"^##?\s*(.+)$", re.MULTILINE),                        # ## Title
    re.compile(r"^[ \t]*\*\*([^*\n]+)\*\*[ \t]*$", re.MULTILINE),    # **Title** on its own line
    re.compile(r"Recipe:[ \t]*([^\n]+)", re.IGNORECASE),              # Recipe: Title
    re.compile(r"^(.*\S)[ \t]+Recipe", re.MULTILINE | re.IGNORECASE),  # Title Recipe
]
# The last candidate is the first line of text, taken without a regex

# Captures end on a non-blank character so a run of spaces is scanned once
CONTENT_TITLE_PATTERNS = [
    re.compile(r"(?:recipe for|making|how to make)[ \t]+([^\n]+)", re.IGNORECASE),
    re.compile(r"^([^\n]*?\S)\s*recipe", re.MULTILINE | re.IGNORECASE),
    re.compile(r"\*\*(.+?)\*\*"),
]

_TITLE_PREFIX = re.compile(r"^(?:Recipe|Cook|Make)\b:?\s*", re.IGNORECASE)
_TITLE_SUFFIX = re.compile(r"(?<!\s)\s+Recipe\s*$", re.IGNORECASE)
_MARKUP_EDGES = re.compile(r"^[#*\s]+|(?<![#*\s])[#*\s]+$")

# A section runs until the next bold word, a blank line or the end of text
_SECTION_END = r"(?=\*\*\w|\n\n|\Z)"


def _section_pattern(label: str) -> "re.Pattern[str]":
    return re.compile(
        rf"\*\*(?:{label}):?\*\*:?(.*?){_SECTION_END}",
        re.IGNORECASE | re.DOTALL,
    )


INGREDIENTS_SECTION = _section_pattern(r"ingredients?")
INSTRUCTIONS_SECTION = _section_pattern(r"instructions?")
TIPS_SECTION = _section_pattern(r"tips?|variations?|notes?")
NUTRITION_SECTION = re.compile(
    rf"\*\*nutrition.*?\*\*:?(.*?){_SECTION_END}",
    re.IGNORECASE | re.DOTALL,
)

_LIST_ENTRY = re.compile(r"^(?:[-*•]|\d+\.)\s+(.+)$")

SERVINGS_PATTERNS = [
    re.compile(r"servings?:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"serves?\s+(\d+)", re.IGNORECASE),
]

_DURATION = r"(\d+\s*(?:minutes?|mins?|hours?|hrs?|hr))"
TIME_PATTERNS = {
    "prep_time": re.compile(rf"prep(?:aration)?\s*time:?\s*{_DURATION}", re.IGNORECASE),
    "cook_time": re.compile(rf"cook(?:ing)?\s*time:?\s*{_DURATION}", re.IGNORECASE),
    "total_time": re.compile(rf"total\s*time:?\s*{_DURATION}", re.IGNORECASE),
}

NUTRIENT_PATTERNS = {
    "calories": re.compile(r"(?<!\d)(\d+)\s*(?:kcal|calories|calorie|cal)", re.IGNORECASE),
    "protein": re.compile(r"(?<!\d)(\d+)\s*g?\s*protein", re.IGNORECASE),
    "carbs": re.compile(r"(?<!\d)(\d+)\s*g?\s*carbs?", re.IGNORECASE),
    "fat": re.compile(r"(?<!\d)(\d+)\s*g?\s*fat", re.IGNORECASE),
    "fiber": re.compile(r"(?<!\d)(\d+)\s*g?\s*fiber", re.IGNORECASE),
    "sugar": re.compile(r"(?<!\d)(\d+)\s*g?\s*sugar", re.IGNORECASE),
}


# =============================================================================
# Title
# =============================================================================

def clean_title(title: str) -> str:
    """Strip Recipe:/Cook:/Make: prefixes and a trailing ' Recipe'."""
    title = title.strip()
    title = _TITLE_PREFIX.sub("", title)
    title = _TITLE_SUFFIX.sub("", title)
    return title.strip()


def _is_acceptable_title(title: str) -> bool:
    return MIN_TITLE_LENGTH < len(title) < MAX_TITLE_LENGTH


def extract_title(text: str) -> str:
    """
    Pick the best title candidate from recipe text.

    Examples:
        extract_title("# Lemon Chicken\\n...") -> "Lemon Chicken"
        extract_title("Recipe: Beef Stew\\n...") -> "Beef Stew"
        extract_title("Pancakes Recipe\\n...") -> "Pancakes"
    """
    for candidate in _title_candidates(text):
        if not candidate or not candidate.strip():
            continue

        candidate = clean_title(candidate)
        if _is_acceptable_title(candidate):
            return candidate

    return extract_title_from_content(text)


def _title_candidates(text: str) -> Iterator[str]:
    for pattern in TITLE_PATTERNS:
        match = pattern.search(text)
        if match:
            yield match.group(1)
    # First line, skipping leading empty lines
    yield text.lstrip("\n").split("\n", 1)[0]


def extract_title_from_content(text: str) -> str:
    """Secondary title lookup used when no heading-style title was usable."""
    for pattern in CONTENT_TITLE_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()

    first_line = _first_non_blank_line(text)
    if first_line:
        return first_line[:50]
    return "Recipe"


def _first_non_blank_line(text: str) -> Optional[str]:
    for line in text.split("\n"):
        if line.strip():
            return line.strip()
    return None


# =============================================================================
# Sections
# =============================================================================

def _find_section(text: str, pattern: "re.Pattern[str]") -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def _extract_list_entries(section: Optional[str]) -> List[str]:
    """Bullet and numbered lines of a section, markers removed, in order."""
    if not section:
        return []

    entries = []
    for line in section.split("\n"):
        match = _LIST_ENTRY.match(line.strip())
        if match:
            entry = match.group(1).strip()
            if entry:
                entries.append(entry)
    return entries


def extract_ingredients(text: str) -> List[str]:
    """Ingredient lines from the **Ingredients** section."""
    return _extract_list_entries(_find_section(text, INGREDIENTS_SECTION))


def extract_instructions(text: str) -> List[str]:
    """Steps from the **Instructions** section, in cooking order."""
    return _extract_list_entries(_find_section(text, INSTRUCTIONS_SECTION))


def extract_tips(text: str) -> List[str]:
    """Entries from a **Tips**, **Variations** or **Notes** section."""
    return _extract_list_entries(_find_section(text, TIPS_SECTION))


# =============================================================================
# Servings, times, nutrition
# =============================================================================

def _to_int(digits: str) -> Optional[int]:
    # int() refuses very long digit strings
    try:
        return int(digits)
    except ValueError:
        return None


def extract_servings(text: str) -> Optional[int]:
    for pattern in SERVINGS_PATTERNS:
        match = pattern.search(text)
        if match:
            servings = _to_int(match.group(1))
            return servings if servings else None
    return None


def extract_times(text: str) -> Dict[str, Optional[str]]:
    """
    Find prep, cook and total times.

    Returns:
        {"prep_time": ..., "cook_time": ..., "total_time": ...}
        with the duration text as written ("20 minutes") or None
    """
    times: Dict[str, Optional[str]] = {}
    for key, pattern in TIME_PATTERNS.items():
        match = pattern.search(text)
        times[key] = match.group(1) if match else None
    return times


def extract_nutrition(text: str) -> Optional[RecipeNutrition]:
    """
    Read nutrient amounts from the **Nutrition** section.

    Only nutrients that are mentioned get a value; returns None when the
    section is missing or mentions none of them.
    """
    section = _find_section(text, NUTRITION_SECTION)
    if section is None:
        return None

    values = {}
    for key, pattern in NUTRIENT_PATTERNS.items():
        match = pattern.search(section)
        value = _to_int(match.group(1)) if match else None
        if value is not None:
            values[key] = value

    if not values:
        return None
    return RecipeNutrition(**values)


# =============================================================================
# Assembly
# =============================================================================

def parse_recipe_from_text(text: str) -> Optional[ParsedRecipe]:
    """
    Parse model output into a ParsedRecipe.

    Args:
        text: Raw response text

    Returns:
        ParsedRecipe, possibly partial, or None when the text has no
        recipe keywords at all
    """
    if not has_recipe_indicators(text):
        return None

    title = extract_title(text)
    ingredients = extract_ingredients(text)
    instructions = extract_instructions(text)

    if not ingredients and not instructions:
        # Keep the partial recipe rather than dropping the response
        logger.warning(f"Recipe parsing: no ingredients or instructions found for '{title}'")

    times = extract_times(text)

    content = RecipeContent(
        title=title,
        ingredients=ingredients,
        instructions=instructions,
        tips=extract_tips(text),
        servings=extract_servings(text),
        prep_time=times["prep_time"],
        cook_time=times["cook_time"],
        total_time=times["total_time"],
    )

    return ParsedRecipe(
        title=title,
        content=content,
        nutrition=extract_nutrition(text),
        tags=generate_tags(text),
    )


def fallback_title(text: str) -> str:
    """Title for the fallback record: cleaned first line, or FALLBACK_TITLE."""
    first_line = _first_non_blank_line(text)
    if first_line:
        cleaned = _MARKUP_EDGES.sub("", first_line)
        if _is_acceptable_title(cleaned):
            return cleaned
    return FALLBACK_TITLE


def build_fallback_record(text: str) -> ParsedRecipeForDB:
    """Placeholder record for responses that do not look like recipes."""
    title = fallback_title(text)
    return ParsedRecipeForDB(
        title=title,
        content_json=RecipeContent(
            title=title,
            ingredients=list(FALLBACK_INGREDIENTS),
            instructions=list(FALLBACK_INSTRUCTIONS),
        ),
        nutrition=None,
        tags=[FALLBACK_TAG],
    )


def parse_recipe_from_ai(text: str) -> ParsedRecipeForDB:
    """
    Parse model output into a record ready for the recipe store.

    Never raises: text that is not recipe-like, empty, or garbage yields
    the fallback record tagged "ai-generated".

    Args:
        text: Raw response text

    Returns:
        ParsedRecipeForDB
    """
    if text is None:
        text = ""
    elif not isinstance(text, str):
        text = str(text)

    logger.debug(f"Parsing AI recipe text: {text[:200]}...")

    parsed = parse_recipe_from_text(text)

    if parsed is None:
        record = build_fallback_record(text)
        logger.warning(f"Recipe parsing failed, using fallback title: {record.title}")
        return record

    logger.info(f"Successfully parsed recipe: {parsed.title}")
    return parsed.to_db_record()
