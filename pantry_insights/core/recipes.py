"""Recipe catalogue access — read snapshots for analytics, plus seeding helpers.

Each recipe has an embedded ordered list of Ingredient items and an ordered
list of instruction steps, stored in child tables keyed by recipe_id.
"""

from typing import Optional

from pantry_insights.db.database import get_connection
from pantry_insights.db.models import Recipe, Ingredient


def normalise_owner_id(value) -> str:
    """Trim and upper-case an owner id; empty string means 'no owner filter'."""
    if not value:
        return ""
    return str(value).strip().upper()


def _row_to_recipe(row, conn) -> Recipe:
    """Convert a database row into a Recipe, loading its ingredients and steps."""
    recipe = Recipe(
        id=row["id"],
        owner_id=row["owner_id"],
        title=row["title"],
        meal_type=row["meal_type"],
        cuisine_type=row["cuisine_type"],
        prep_time=row["prep_time"],
        difficulty=row["difficulty"],
        servings=row["servings"],
        chef=row["chef"],
        created_at=row["created_at"],
    )
    ing_rows = conn.execute(
        "SELECT name, quantity, unit FROM recipe_ingredients WHERE recipe_id = ? ORDER BY id",
        (recipe.id,),
    ).fetchall()
    recipe.ingredients = [
        Ingredient(name=r["name"], quantity=r["quantity"], unit=r["unit"])
        for r in ing_rows
    ]
    step_rows = conn.execute(
        "SELECT text FROM recipe_steps WHERE recipe_id = ? ORDER BY position",
        (recipe.id,),
    ).fetchall()
    recipe.instructions = [r["text"] for r in step_rows]
    return recipe


def list_recipes(owner_id: Optional[str] = None) -> list[Recipe]:
    """Return all recipes, newest first, optionally scoped to one owner."""
    owner = normalise_owner_id(owner_id)
    conn = get_connection()
    try:
        query = "SELECT * FROM recipes"
        params = []
        if owner:
            query += " WHERE owner_id = ?"
            params.append(owner)
        query += " ORDER BY created_at DESC, id"
        rows = conn.execute(query, params).fetchall()
        return [_row_to_recipe(r, conn) for r in rows]
    finally:
        conn.close()


def get(recipe_id: str) -> Optional[Recipe]:
    """Return a single recipe with its ingredients and steps, or None if not found."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM recipes WHERE id = ?", (str(recipe_id).strip().upper(),)
        ).fetchone()
        return _row_to_recipe(row, conn) if row else None
    finally:
        conn.close()


def count() -> int:
    """Return the total number of recipes."""
    conn = get_connection()
    try:
        return conn.execute("SELECT COUNT(*) FROM recipes").fetchone()[0]
    finally:
        conn.close()


def distinct_cuisines() -> list[str]:
    """Return distinct non-empty cuisine values currently in the catalogue."""
    conn = get_connection()
    try:
        rows = conn.execute(
            """SELECT DISTINCT cuisine_type FROM recipes
               WHERE cuisine_type IS NOT NULL AND TRIM(cuisine_type) != ''
               ORDER BY cuisine_type"""
        ).fetchall()
        return [r[0] for r in rows]
    finally:
        conn.close()


def add(recipe: Recipe) -> str:
    """Insert a new recipe with its ingredients and steps. Return the recipe ID.

    created_at defaults to the database's CURRENT_TIMESTAMP when not given.
    """
    recipe_id = str(recipe.id).strip().upper()
    conn = get_connection()
    try:
        conn.execute(
            """INSERT INTO recipes (id, owner_id, title, meal_type, cuisine_type,
               prep_time, difficulty, servings, chef, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, COALESCE(?, CURRENT_TIMESTAMP))""",
            (
                recipe_id, normalise_owner_id(recipe.owner_id) or None, recipe.title,
                recipe.meal_type, recipe.cuisine_type, recipe.prep_time,
                recipe.difficulty, recipe.servings, recipe.chef, recipe.created_at,
            ),
        )
        for ing in recipe.ingredients:
            conn.execute(
                "INSERT INTO recipe_ingredients (recipe_id, name, quantity, unit) VALUES (?, ?, ?, ?)",
                (recipe_id, ing.name, ing.quantity, ing.unit),
            )
        for position, step in enumerate(recipe.instructions):
            conn.execute(
                "INSERT INTO recipe_steps (recipe_id, position, text) VALUES (?, ?, ?)",
                (recipe_id, position, step),
            )
        conn.commit()
        return recipe_id
    finally:
        conn.close()


def delete(recipe_id: str) -> None:
    """Delete a recipe by ID. Ingredients and steps are cascade-deleted by the DB."""
    conn = get_connection()
    try:
        conn.execute("DELETE FROM recipes WHERE id = ?", (str(recipe_id).strip().upper(),))
        conn.commit()
    finally:
        conn.close()
