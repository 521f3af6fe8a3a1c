"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import sys
import shutil
import tempfile
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from recipe_assistant.data.database import DatabaseInterface
from recipe_assistant.data.models import ParsedRecipeForDB, RecipeContent, RecipeNutrition


SAMPLE_RECIPE_TEXT = """# Baked Lemon Garlic Chicken

A quick dinner for busy weeknights.

Servings: 2
Prep time: 10 minutes
Cook time: 25 minutes

**Ingredients:**
- 2 chicken breasts
- 1 lemon, juiced
- 3 cloves garlic, minced

**Instructions:**
1. Preheat the oven to 200°C.
2. Rub the chicken with lemon juice and garlic.
3. Bake for 25 minutes until cooked through.

**Tips:**
- Rest the chicken for 5 minutes before slicing.

**Nutrition (per serving):** 450 calories, 35g protein, 12g carbs, 18g fat
"""

INCOMPLETE_NUTRITION_TEXT = """# Plain Rice Bowl

**Ingredients:**
- 150g rice

**Instructions:**
1. Cook the rice.

**Nutrition:** 350 calories
"""


@pytest.fixture
def temp_db_dir():
    """
    Create a temporary database directory for testing.

    This fixture is automatically cleaned up after each test.
    """
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def db(temp_db_dir):
    """
    Create a fresh DatabaseInterface for each test.

    Usage in tests:
        def test_something(db):
            db.create_recipe(...)
    """
    return DatabaseInterface(db_dir=temp_db_dir)


@pytest.fixture
def sample_recipe_text():
    """Well-formed model output for a single recipe."""
    return SAMPLE_RECIPE_TEXT


@pytest.fixture
def incomplete_nutrition_text():
    """Recipe whose nutrition section only has calories."""
    return INCOMPLETE_NUTRITION_TEXT


@pytest.fixture
def sample_record():
    """Sample parsed recipe record for storage tests."""
    return ParsedRecipeForDB(
        title="Honey Ginger Chicken",
        content_json=RecipeContent(
            title="Honey Ginger Chicken",
            ingredients=["2 chicken breasts", "3 tbsp honey", "2 tbsp ginger"],
            instructions=["Marinate chicken", "Cook on high heat", "Add sauce"],
            servings=2,
            cook_time="20 minutes",
        ),
        nutrition=RecipeNutrition(calories=520, protein=40, carbs=35, fat=14),
        tags=["chinese", "dinner"],
    )
