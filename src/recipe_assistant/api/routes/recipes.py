"""
Recipe routes for the FastAPI application.

Provides endpoints for:
- Storing, listing, fetching and deleting recipes
- Parsing model output into a recipe record
- Generating a meal recipe with the LLM
"""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ...data.database import DatabaseInterface
from ...data.models import ParsedRecipeForDB
from ...recipe_generator import InvalidMealTypeError, RecipeGenerationError, RecipeGenerator
from ...recipe_parser import parse_recipe_from_ai
from ..dependencies import get_db, get_generator

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class RecipeContentBody(BaseModel):
    """content_json of a stored recipe; keys match RecipeContent.to_dict()."""
    title: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    servings: Optional[int] = None
    prepTime: Optional[str] = None
    cookTime: Optional[str] = None
    totalTime: Optional[str] = None


class CreateRecipeRequest(BaseModel):
    """Request body for storing a recipe."""
    title: str = Field(min_length=1)
    content_json: Optional[RecipeContentBody] = None
    nutrition: Optional[Dict[str, int]] = None
    tags: List[str] = Field(default_factory=list)


class ParseRecipeRequest(BaseModel):
    """Request body for parsing model output."""
    text: str
    save: bool = False


class GenerateRecipeRequest(BaseModel):
    """Request body for generating a meal recipe."""
    meal_type: str
    dietary_restrictions: Optional[List[str]] = None
    preferences: Optional[str] = None


@router.post("/recipes", status_code=201)
def create_recipe(
    recipe_request: CreateRecipeRequest,
    db: DatabaseInterface = Depends(get_db),
):
    """Store a recipe record and return it with its id."""
    record = ParsedRecipeForDB.from_dict(recipe_request.model_dump(exclude_none=True))
    return db.create_recipe(record).to_dict()


@router.get("/recipes")
def list_recipes(
    limit: int = Query(50, ge=1, le=500),
    tag: Optional[str] = None,
    db: DatabaseInterface = Depends(get_db),
):
    """
    List stored recipes, newest first.

    Args:
        limit: Maximum number of recipes
        tag: Only recipes carrying this tag
    """
    return [recipe.to_dict() for recipe in db.list_recipes(limit=limit, tag=tag)]


@router.get("/recipes/{recipe_id}")
def get_recipe(recipe_id: str, db: DatabaseInterface = Depends(get_db)):
    """Get a recipe by ID."""
    recipe = db.get_recipe(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe.to_dict()


@router.delete("/recipes/{recipe_id}")
def delete_recipe(recipe_id: str, db: DatabaseInterface = Depends(get_db)):
    """Delete a recipe by ID."""
    if not db.delete_recipe(recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"success": True, "id": recipe_id}


@router.post("/recipes/parse")
def parse_recipe(
    parse_request: ParseRecipeRequest,
    db: DatabaseInterface = Depends(get_db),
):
    """
    Parse model output into a recipe record.

    Any text yields a record (non-recipe text gives the fallback record).
    With save=true the record is stored and returned with its id.
    """
    record = parse_recipe_from_ai(parse_request.text)
    if parse_request.save:
        return db.create_recipe(record).to_dict()
    return record.to_dict()


@router.post("/recipes/generate", status_code=201)
def generate_recipe(
    generate_request: GenerateRecipeRequest,
    generator: RecipeGenerator = Depends(get_generator),
):
    """
    Generate a single-serving meal recipe with nutrition data.

    Returns:
        The generated recipe (stored when the generator has a database)
    """
    try:
        recipe = generator.generate_meal_recipe(
            meal_type=generate_request.meal_type,
            dietary_restrictions=generate_request.dietary_restrictions,
            preferences=generate_request.preferences,
        )
    except InvalidMealTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecipeGenerationError as e:
        logger.error(f"Recipe generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return recipe.to_dict()
