"""
Meal recipe generation.

Asks the LLM for a single-serving meal recipe, parses the reply with
recipe_parser, and only accepts it once calories and macros could be read
from the nutrition section. Accepted recipes are stored when a database is
configured.
"""

import logging
import time
from typing import Callable, List, Optional, Union

from .data.database import DatabaseInterface
from .data.models import ParsedRecipeForDB, StoredRecipe
from .llm_provider import LLMProvider
from .recipe_parser import parse_recipe_from_ai

logger = logging.getLogger(__name__)


MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")

MAX_ATTEMPTS = 3
RETRY_DELAY = 1.0  # seconds
LLM_TIMEOUT = 25.0  # seconds

DEFAULT_GOAL_MESSAGE = "Generate a balanced, nutritious meal."

SYSTEM_PROMPT = """You are a concise, friendly cooking assistant.

When you write a recipe, use exactly this markdown layout:

# <Recipe title>

Servings: 1
Prep time: <n> minutes
Cook time: <n> minutes

**Ingredients:**
- <quantity in metric units> <ingredient>

**Instructions:**
1. <step>

**Tips:**
- <tip>

**Nutrition (per serving):** <n> calories, <n>g protein, <n>g carbs, <n>g fat

Keep ingredient lines to quantity and name only; preparation such as
chopping or dicing belongs in the instructions. Use 5-10 short steps,
metric units and oven temperatures in °C. Respect dietary restrictions
strictly. Do not add anecdotes."""


class RecipeGenerationError(Exception):
    """Raised when the LLM did not produce a usable recipe."""


class InvalidMealTypeError(ValueError):
    """Raised for meal types outside MEAL_TYPES."""


def build_meal_prompt(
    meal_type: str,
    dietary_restrictions: Optional[List[str]] = None,
    preferences: Optional[str] = None,
    goal_message: Optional[str] = None,
) -> str:
    """
    Build the user prompt for a single-serving meal recipe.

    Args:
        meal_type: One of MEAL_TYPES
        dietary_restrictions: e.g. ["vegetarian", "nut-free"]
        preferences: Free-text preferences from the user
        goal_message: Nutrition goal context (defaults to a balanced meal)

    Returns:
        Prompt text
    """
    parts = [goal_message or DEFAULT_GOAL_MESSAGE]
    parts.append(f"Create a {meal_type} recipe for exactly 1 serving.")

    if dietary_restrictions:
        parts.append(f"Dietary restrictions: {', '.join(dietary_restrictions)}.")
    if preferences:
        parts.append(f"User preferences: {preferences}.")

    parts.append(
        "The recipe MUST end with a **Nutrition (per serving):** line giving "
        "calories, protein, carbs and fat, for example: "
        "**Nutrition (per serving):** 650 calories, 35g protein, 48g carbs, 22g fat. "
        "Recipes without this line cannot be saved."
    )
    return " ".join(parts)


class RecipeGenerator:
    """Generates, validates and stores meal recipes."""

    def __init__(
        self,
        llm: LLMProvider,
        db: Optional[DatabaseInterface] = None,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
        timeout: float = LLM_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the generator.

        Args:
            llm: LLM provider used for generation
            db: Recipe store; generated recipes are not persisted without one
            max_attempts: Total generation attempts per request
            retry_delay: Seconds to wait before a retry
            timeout: Per-attempt LLM timeout in seconds
            sleep: Sleep function (replaceable in tests)
        """
        self.llm = llm
        self.db = db
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._sleep = sleep
        logger.info(f"RecipeGenerator initialized (null_llm={llm.is_null})")

    def generate_meal_recipe(
        self,
        meal_type: str,
        dietary_restrictions: Optional[List[str]] = None,
        preferences: Optional[str] = None,
        goal_message: Optional[str] = None,
    ) -> Union[StoredRecipe, ParsedRecipeForDB]:
        """
        Generate a meal recipe with complete nutrition data.

        Returns:
            StoredRecipe when a database is configured, otherwise the
            parsed record

        Raises:
            InvalidMealTypeError: meal_type is not one of MEAL_TYPES
            RecipeGenerationError: no valid recipe after max_attempts
        """
        if meal_type not in MEAL_TYPES:
            raise InvalidMealTypeError(
                f"Invalid meal type. Must be one of: {', '.join(MEAL_TYPES)}"
            )

        prompt = build_meal_prompt(meal_type, dietary_restrictions, preferences, goal_message)
        record = self._generate_with_validation(prompt)

        if self.db is None:
            return record
        return self.db.create_recipe(record)

    def _generate_with_validation(self, prompt: str) -> ParsedRecipeForDB:
        for attempt in range(1, self.max_attempts + 1):
            try:
                text = self.llm.generate_text(prompt, system=SYSTEM_PROMPT, timeout=self.timeout)
            except TimeoutError as e:
                logger.warning(f"Recipe generation attempt {attempt}/{self.max_attempts} timed out")
                if attempt == self.max_attempts:
                    raise RecipeGenerationError(
                        f"Recipe generation timed out after {self.max_attempts} attempts"
                    ) from e
                self._sleep(self.retry_delay)
                continue

            if not text or not text.strip():
                raise RecipeGenerationError("AI service returned empty response")

            record = parse_recipe_from_ai(text)
            if record.nutrition is not None and record.nutrition.is_complete():
                logger.info(f"Parsed recipe with nutrition: {record.nutrition.calories} cal")
                return record

            logger.warning(
                f"Attempt {attempt}/{self.max_attempts}: missing or invalid nutrition data: "
                f"{record.nutrition}"
            )
            if attempt < self.max_attempts:
                self._sleep(self.retry_delay)

        raise RecipeGenerationError(
            f"Failed to generate recipe with valid nutrition data after {self.max_attempts} attempts"
        )
