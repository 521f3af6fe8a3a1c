"""
Unit tests for recipe_parser.py

Tests the regex-based parser that turns model output into recipe records.
"""

import time

import pytest

from recipe_assistant.data.models import ParsedRecipeForDB
from recipe_assistant.recipe_parser import (
    FALLBACK_INGREDIENTS,
    FALLBACK_INSTRUCTIONS,
    FALLBACK_TITLE,
    clean_title,
    extract_ingredients,
    extract_instructions,
    extract_nutrition,
    extract_servings,
    extract_times,
    extract_tips,
    extract_title,
    extract_title_from_content,
    parse_recipe_from_ai,
    parse_recipe_from_text,
)


class TestTitleExtraction:
    """Test title candidates, cleaning and length limits."""

    def test_markdown_heading(self):
        assert extract_title("# Lemon Chicken\n\n**Ingredients:**\n- chicken") == "Lemon Chicken"

    def test_bold_line(self):
        assert extract_title("**Chocolate Mousse**\n\nIngredients...") == "Chocolate Mousse"

    def test_recipe_colon_prefix(self):
        assert extract_title("Recipe: Beef Stew\nSimmer for two hours.") == "Beef Stew"

    def test_trailing_recipe_word(self):
        assert extract_title("Pancakes Recipe\n- flour\n- milk") == "Pancakes"

    @pytest.mark.parametrize("heading,expected", [
        ("# Recipe: Tomato Soup", "Tomato Soup"),
        ("# Cook: Fried Rice", "Fried Rice"),
        ("# Make Banana Bread", "Banana Bread"),
        ("# Tomato Soup Recipe", "Tomato Soup"),
        ("# Recipe: Tomato Soup Recipe", "Tomato Soup"),
        ("# Cookies and Cream", "Cookies and Cream"),
        ("# Makeover Salad", "Makeover Salad"),
        ("# Recipes for Winter", "Recipes for Winter"),
    ])
    def test_prefix_and_suffix_removed(self, heading, expected):
        """Recipe:/Cook:/Make: prefixes and ' Recipe' suffix never survive."""
        title = extract_title(heading + "\n\n**Ingredients:**\n- tomatoes")

        assert title == expected
        assert 3 < len(title) < 100

    def test_too_short_candidate_skipped(self):
        """A two-letter heading is rejected and the next pattern is tried."""
        text = "# Hi\n\n**Spicy Bean Chili**\n\n**Ingredients:**\n- beans"

        assert extract_title(text) == "Spicy Bean Chili"

    def test_clean_title(self):
        assert clean_title("  Recipe: Pad Thai Recipe  ") == "Pad Thai"
        assert clean_title("Quiche") == "Quiche"

    def test_content_fallback_truncates_first_line(self):
        """Without any usable candidate the first line is cut to 50 chars."""
        text = "# " + "A" * 150 + "\nmore text"

        title = extract_title(text)

        assert title == ("# " + "A" * 150)[:50]

    def test_content_fallback_recipe_for(self):
        assert extract_title_from_content("Here is a recipe for garlic bread\n...") == "garlic bread"

    def test_content_fallback_empty(self):
        assert extract_title_from_content("") == "Recipe"


class TestSectionExtraction:
    """Test ingredient, instruction and tip sections."""

    def test_list_order_preserved(self):
        """Bulleted and numbered entries keep their order, markers removed."""
        text = "**Ingredients:**\n- a\n- b\n1. c\n"

        assert extract_ingredients(text) == ["a", "b", "c"]

    def test_ingredients_do_not_leak_into_instructions(self):
        """A section stops at the next bold heading even without a blank line."""
        text = (
            "**Ingredients:**\n- flour\n- eggs\n"
            "**Instructions:**\n1. Mix\n2. Bake"
        )

        assert extract_ingredients(text) == ["flour", "eggs"]
        assert extract_instructions(text) == ["Mix", "Bake"]

    def test_bold_headings_separated_by_blank_line(self):
        text = "**Ingredients**\n- flour\n- sugar\n\n**Instructions**\n1. Mix\n2. Bake"

        assert extract_ingredients(text) == ["flour", "sugar"]
        assert extract_instructions(text) == ["Mix", "Bake"]

    def test_section_ends_at_blank_line(self):
        text = "**Ingredients:**\n- flour\n\n- not an ingredient"

        assert extract_ingredients(text) == ["flour"]

    def test_colon_after_bold_markers(self):
        assert extract_ingredients("**Ingredients**:\n- rice") == ["rice"]

    def test_heading_without_colon(self):
        assert extract_instructions("**Instructions**\n1. Boil water") == ["Boil water"]

    def test_alternate_bullets(self):
        text = "**Ingredients:**\n* flour\n• sugar\n- butter"

        assert extract_ingredients(text) == ["flour", "sugar", "butter"]

    def test_multi_digit_step_numbers(self):
        steps = "\n".join(f"{n}. Step {n}" for n in range(1, 12))

        result = extract_instructions("**Instructions:**\n" + steps)

        assert result[0] == "Step 1"
        assert result[-1] == "Step 11"
        assert len(result) == 11

    def test_non_list_lines_ignored(self):
        text = "**Ingredients:**\nYou will need:\n- flour\nand some patience"

        assert extract_ingredients(text) == ["flour"]

    def test_missing_section(self):
        assert extract_ingredients("Just some text") == []
        assert extract_instructions("Just some text") == []

    @pytest.mark.parametrize("label", ["Tips", "Variations", "Notes", "Tip"])
    def test_tip_labels(self, label):
        text = f"**{label}:**\n- Add chili for heat"

        assert extract_tips(text) == ["Add chili for heat"]


class TestServingsAndTimes:
    """Test servings and time extraction."""

    @pytest.mark.parametrize("text,expected", [
        ("Servings: 4", 4),
        ("Serving 2", 2),
        ("Serves 6 people", 6),
        ("serves 3", 3),
    ])
    def test_servings(self, text, expected):
        assert extract_servings(text) == expected

    def test_servings_missing(self):
        assert extract_servings("Feeds the whole family") is None

    def test_zero_servings_treated_as_missing(self):
        assert extract_servings("Servings: 0") is None

    def test_all_times(self):
        text = "Prep time: 15 mins\nCook time: 1 hour\nTotal time: 75 minutes"

        assert extract_times(text) == {
            "prep_time": "15 mins",
            "cook_time": "1 hour",
            "total_time": "75 minutes",
        }

    def test_long_form_labels(self):
        text = "Preparation time: 20 minutes\nCooking time: 2 hrs"

        times = extract_times(text)

        assert times["prep_time"] == "20 minutes"
        assert times["cook_time"] == "2 hrs"
        assert times["total_time"] is None

    def test_missing_times_are_none(self):
        assert extract_times("No timing here") == {
            "prep_time": None,
            "cook_time": None,
            "total_time": None,
        }


class TestNutritionExtraction:
    """Test nutrition section parsing."""

    def test_full_macros(self, sample_recipe_text):
        nutrition = extract_nutrition(sample_recipe_text)

        assert nutrition.calories == 450
        assert nutrition.protein == 35
        assert nutrition.carbs == 12
        assert nutrition.fat == 18
        assert nutrition.is_complete()

    def test_partial_nutrition(self):
        """Only mentioned nutrients get a value."""
        nutrition = extract_nutrition("**Nutrition:** 350 calories")

        assert nutrition.calories == 350
        assert nutrition.protein is None
        assert nutrition.carbs is None
        assert nutrition.fat is None
        assert nutrition.to_dict() == {"calories": 350}
        assert not nutrition.is_complete()

    def test_kcal_fiber_and_sugar(self):
        nutrition = extract_nutrition("**Nutrition Facts:** 520 kcal, 30g protein, 8g fiber, 5g sugar")

        assert nutrition.to_dict() == {
            "calories": 520,
            "protein": 30,
            "fiber": 8,
            "sugar": 5,
        }

    def test_no_section(self):
        assert extract_nutrition("450 calories, 35g protein") is None

    def test_section_without_numbers(self):
        assert extract_nutrition("**Nutrition:** not available") is None


class TestParseRecipeFromText:
    """Test assembly of a ParsedRecipe."""

    def test_full_recipe(self, sample_recipe_text):
        parsed = parse_recipe_from_text(sample_recipe_text)

        assert parsed.title == "Baked Lemon Garlic Chicken"
        assert parsed.content.ingredients == [
            "2 chicken breasts",
            "1 lemon, juiced",
            "3 cloves garlic, minced",
        ]
        assert len(parsed.content.instructions) == 3
        assert parsed.content.instructions[0] == "Preheat the oven to 200°C."
        assert parsed.content.tips == ["Rest the chicken for 5 minutes before slicing."]
        assert parsed.content.servings == 2
        assert parsed.content.prep_time == "10 minutes"
        assert parsed.content.cook_time == "25 minutes"
        assert parsed.content.total_time is None
        assert parsed.tags == ["dinner", "baked"]

    def test_non_recipe_returns_none(self):
        assert parse_recipe_from_text("Hello! How can I help you today?") is None

    def test_partial_recipe_kept(self):
        """Recipe-like text without lists still yields a record."""
        parsed = parse_recipe_from_text("Here's a recipe idea: just toast bread.")

        assert parsed is not None
        assert parsed.content.ingredients == []
        assert parsed.content.instructions == []
        assert parsed.tags == []


class TestParseRecipeFromAi:
    """Test the outer entry point used by the API and generator."""

    def test_returns_db_record(self, sample_recipe_text):
        record = parse_recipe_from_ai(sample_recipe_text)

        assert isinstance(record, ParsedRecipeForDB)
        assert record.title == "Baked Lemon Garlic Chicken"
        assert record.content_json.title == record.title
        assert record.nutrition.calories == 450

    def test_content_json_shape(self, sample_recipe_text):
        data = parse_recipe_from_ai(sample_recipe_text).to_dict()

        assert data["content_json"]["prepTime"] == "10 minutes"
        assert data["content_json"]["cookTime"] == "25 minutes"
        assert "totalTime" not in data["content_json"]
        assert data["nutrition"] == {"calories": 450, "protein": 35, "carbs": 12, "fat": 18}

    def test_missing_optional_fields_absent(self):
        """Servings and times that were not found are omitted, not defaulted."""
        text = "# Quick Salad\n\n**Ingredients:**\n- lettuce\n\n**Instructions:**\n1. Toss"

        record = parse_recipe_from_ai(text)
        content = record.to_dict()["content_json"]

        assert set(content) == {"title", "ingredients", "instructions"}
        assert record.content_json.servings is None
        assert record.nutrition is None
        assert "nutrition" not in record.to_dict()

    def test_non_recipe_gives_fallback_record(self):
        record = parse_recipe_from_ai("Hello! How can I help you today?")

        assert record.tags == ["ai-generated"]
        assert record.title == "Hello! How can I help you today?"
        assert record.content_json.ingredients == FALLBACK_INGREDIENTS
        assert record.content_json.instructions == FALLBACK_INSTRUCTIONS
        assert record.nutrition is None

    def test_fallback_title_strips_markdown(self):
        record = parse_recipe_from_ai("## Hello there friend **\nnothing else")

        assert record.title == "Hello there friend"
        assert record.tags == ["ai-generated"]

    @pytest.mark.parametrize("text", ["", "   \n\t ", None, "ok"])
    def test_fallback_title_default(self, text):
        record = parse_recipe_from_ai(text)

        assert record.title == FALLBACK_TITLE
        assert record.tags == ["ai-generated"]

    @pytest.mark.parametrize("text", [
        "\x00\xff�",
        "**" * 500,
        "#",
        "1. ",
        "**Ingredients:**",
        "**Nutrition:** " + "9" * 5000 + " calories",
        "9" * 5000 + " calories",
        "Servings: " + "7" * 5000,
        "*" * 1000 + "\n" + "recipe " * 200,
        "🍕🍝 recipe 🍣",
    ])
    def test_never_raises(self, text):
        """Any string produces a storable record."""
        record = parse_recipe_from_ai(text)

        assert isinstance(record, ParsedRecipeForDB)
        assert isinstance(record.title, str)
        assert record.title


class TestLongInput:
    """Parsing time stays proportional to input size."""

    TIME_LIMIT = 2.0

    @pytest.mark.parametrize("text", [
        "cook" + " " * 50_000 + "x",
        "\n" * 50_000 + "cook",
        "hello" + " " * 50_000 + "x",
        "Pancakes" + " " * 50_000 + "recipes",
        "**Nutrition:** " + "1" * 50_000 + " protein",
        "# Stew" + " " * 50_000 + "x Recipe",
    ])
    def test_long_whitespace_runs(self, text):
        start = time.perf_counter()
        record = parse_recipe_from_ai(text)
        elapsed = time.perf_counter() - start

        assert isinstance(record, ParsedRecipeForDB)
        assert elapsed < self.TIME_LIMIT
