"""
Fixed tag vocabulary for AI-generated recipes.

This file provides the vocabulary used when tagging parsed recipe text:
- Cuisine tags
- Meal-type tags
- Dietary tags (hyphenated terms also match with a space or no separator)
- Cooking-method tags

It also holds the keyword list used to decide whether a model response
looks like a recipe at all.
"""

import re
from typing import List, Tuple

# =============================================================================
# TAG VOCABULARIES (scan order matters: it is the output order)
# =============================================================================
CUISINES: Tuple[str, ...] = (
    "italian",
    "chinese",
    "mexican",
    "indian",
    "french",
    "thai",
    "japanese",
    "mediterranean",
    "american",
)

MEAL_TYPES: Tuple[str, ...] = (
    "breakfast",
    "lunch",
    "dinner",
    "snack",
    "dessert",
    "appetizer",
)

DIETARY: Tuple[str, ...] = (
    "vegetarian",
    "vegan",
    "gluten-free",
    "keto",
    "paleo",
    "dairy-free",
)

COOKING_METHODS: Tuple[str, ...] = (
    "baked",
    "grilled",
    "fried",
    "steamed",
    "roasted",
    "sautéed",
)

# Tag given to records that could not be parsed
FALLBACK_TAG = "ai-generated"

# =============================================================================
# RECIPE DETECTION
# =============================================================================
# Any of these (substring, case-insensitive) marks text as recipe-like
RECIPE_INDICATORS: Tuple[str, ...] = (
    "ingredient",
    "instructions",
    "steps",
    "recipe",
    "cook",
    "preparation",
    "make",
    "directions",
    "method",
    "serves",
    "serving",
    "cal",
    "calories",
    "protein",
    "carb",
    "fat",
)


def _dietary_pattern(term: str) -> "re.Pattern[str]":
    # "gluten-free" also matches "gluten free" and "glutenfree"
    parts = [re.escape(p) for p in term.split("-")]
    return re.compile(r"[-\s]?".join(parts), re.IGNORECASE)


_LITERAL_PATTERNS = [
    re.compile(re.escape(term), re.IGNORECASE)
    for term in CUISINES + MEAL_TYPES
]
_DIETARY_PATTERNS = [_dietary_pattern(term) for term in DIETARY]
_METHOD_PATTERNS = [re.compile(re.escape(term), re.IGNORECASE) for term in COOKING_METHODS]

_SCAN_TABLE = list(zip(CUISINES + MEAL_TYPES, _LITERAL_PATTERNS)) + \
    list(zip(DIETARY, _DIETARY_PATTERNS)) + \
    list(zip(COOKING_METHODS, _METHOD_PATTERNS))


def generate_tags(text: str) -> List[str]:
    """
    Tag recipe text against the fixed vocabularies.

    Matching is a plain substring search, so "thai" also fires on
    "Thailand". Tags come back in vocabulary order (cuisines, meal types,
    dietary, methods) without duplicates.

    Examples:
        generate_tags("Grilled Italian chicken for dinner")
        -> ["italian", "dinner", "grilled"]
        generate_tags("A gluten free snack")
        -> ["snack", "gluten-free"]
    """
    if not text:
        return []

    tags: List[str] = []
    for tag, pattern in _SCAN_TABLE:
        if tag not in tags and pattern.search(text):
            tags.append(tag)
    return tags


def has_recipe_indicators(text: str) -> bool:
    """Check whether text mentions any recipe keyword."""
    if not text:
        return False
    lower = text.lower()
    return any(keyword in lower for keyword in RECIPE_INDICATORS)
