"""
Database interface for the Recipe Assistant.

Stores parsed recipe records in a SQLite database (recipes.db). The store
assigns each record an id and a creation timestamp; content, nutrition and
tags are kept as JSON columns.
"""

import sqlite3
import json
import logging
import uuid
from typing import List, Optional
from datetime import datetime, timezone
from pathlib import Path

from .models import ParsedRecipeForDB, RecipeContent, RecipeNutrition, StoredRecipe

logger = logging.getLogger(__name__)


class DatabaseInterface:
    """Interface for interacting with the recipe database."""

    def __init__(self, db_dir: str = "data"):
        """
        Initialize database interface.

        Args:
            db_dir: Directory containing database files
        """
        self.db_dir = Path(db_dir)
        self.db_dir.mkdir(parents=True, exist_ok=True)

        self.recipes_db = self.db_dir / "recipes.db"

        self._init_database()

    def _init_database(self):
        """Initialize recipe database schema."""
        with sqlite3.connect(self.recipes_db) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    content_json TEXT NOT NULL,
                    nutrition_json TEXT,
                    tags_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_recipes_created_at
                ON recipes(created_at)
            """)

            conn.commit()

    # ==================== Recipe Operations ====================

    def create_recipe(self, record: ParsedRecipeForDB) -> StoredRecipe:
        """
        Store a parsed recipe record.

        Args:
            record: Output of the recipe parser (or an API body)

        Returns:
            StoredRecipe with assigned id and created_at
        """
        recipe_id = str(uuid.uuid4())
        created_at = datetime.now(timezone.utc).isoformat()

        nutrition = record.nutrition
        nutrition_json = None
        if nutrition is not None and not nutrition.is_empty():
            nutrition_json = json.dumps(nutrition.to_dict())

        with sqlite3.connect(self.recipes_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO recipes
                (id, title, content_json, nutrition_json, tags_json, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    recipe_id,
                    record.title,
                    json.dumps(record.content_json.to_dict()),
                    nutrition_json,
                    json.dumps(list(record.tags)),
                    created_at,
                ),
            )
            conn.commit()

        logger.info(f"Saved recipe {recipe_id}: {record.title}")

        return StoredRecipe(
            id=recipe_id,
            created_at=created_at,
            title=record.title,
            content_json=record.content_json,
            nutrition=nutrition if nutrition_json else None,
            tags=list(record.tags),
        )

    def get_recipe(self, recipe_id: str) -> Optional[StoredRecipe]:
        """
        Get a specific recipe by ID.

        Args:
            recipe_id: Recipe ID

        Returns:
            StoredRecipe or None if not found
        """
        with sqlite3.connect(self.recipes_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()

            cursor.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,))
            row = cursor.fetchone()

            if row:
                return self._row_to_recipe(row)
            return None

    def list_recipes(self, limit: int = 50, tag: Optional[str] = None) -> List[StoredRecipe]:
        """
        Get recently created recipes, newest first.

        Args:
            limit: Maximum number of recipes to return
            tag: Only return recipes carrying this tag

        Returns:
            List of StoredRecipe
        """
        with sqlite3.connect(self.recipes_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()

            if tag:
                # LIKE narrows the scan, the exact check happens below
                cursor.execute(
                    "SELECT * FROM recipes WHERE tags_json LIKE ? ORDER BY created_at DESC, rowid DESC",
                    (f'%{json.dumps(tag)}%',),
                )
            else:
                cursor.execute(
                    "SELECT * FROM recipes ORDER BY created_at DESC, rowid DESC LIMIT ?",
                    (limit,),
                )

            recipes = [self._row_to_recipe(row) for row in cursor.fetchall()]

        if tag:
            recipes = [r for r in recipes if tag in r.tags][:limit]
        return recipes

    def delete_recipe(self, recipe_id: str) -> bool:
        """
        Delete a recipe.

        Returns:
            True if a recipe was deleted
        """
        with sqlite3.connect(self.recipes_db) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted recipe {recipe_id}")
        return deleted

    def _row_to_recipe(self, row: sqlite3.Row) -> StoredRecipe:
        """Convert database row to StoredRecipe object."""
        nutrition = None
        if row["nutrition_json"]:
            try:
                nutrition = RecipeNutrition.from_dict(json.loads(row["nutrition_json"]))
            except (json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Failed to parse nutrition for recipe {row['id']}: {e}")

        return StoredRecipe(
            id=row["id"],
            created_at=row["created_at"],
            title=row["title"],
            content_json=RecipeContent.from_dict(json.loads(row["content_json"])),
            nutrition=nutrition,
            tags=json.loads(row["tags_json"]) if row["tags_json"] else [],
        )
