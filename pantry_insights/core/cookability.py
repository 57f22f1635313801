"""Cookability — which recipes can be made from what's in the inventory.

Two notions are exposed side by side:

- cookability_score (score_recipes): percentage of a recipe's ingredients for
  which at least one inventory row with the same normalised name exists.
  Existence only; quantities are ignored.  Used by the dashboards.
- can_cook (check_recipe / ready_to_cook): every ingredient has enough
  quantity on hand (sum of matching rows >= required quantity).  Units are
  not converted.
"""

import logging
from typing import Optional

from pantry_insights.core import recipes as recipes_core, inventory as inventory_core
from pantry_insights.core.pipeline import (
    build_name_index,
    normalize_name,
    round_half_up,
    safe_percentage,
    sort_rows,
    take,
    timestamp_key,
    to_number,
)
from pantry_insights.db.models import Recipe

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 90
DEFAULT_RECOMMENDATION_LIMIT = 6
DEFAULT_LATEST_LIMIT = 4


def _ingredient_lines(recipe: Recipe, index: dict) -> list[dict]:
    """Probe the inventory index once per ingredient and total the quantity on hand."""
    lines = []
    for ing in recipe.ingredients or []:
        matches = index.get(normalize_name(ing.name), [])
        required = to_number(ing.quantity)
        available = sum(to_number(item.quantity) for item in matches)
        lines.append({
            "name": ing.name,
            "unit": ing.unit,
            "in_inventory": bool(matches),
            "required_quantity": required,
            "available_quantity": round_half_up(available, 2),
            "has_enough": bool(matches) and available >= required,
        })
    return lines


def _score_row(recipe: Recipe, index: dict) -> dict:
    lines = _ingredient_lines(recipe, index)
    matched = [line["name"] for line in lines if line["in_inventory"]]
    missing = [line["name"] for line in lines if not line["in_inventory"]]
    total = len(lines)
    return {
        "recipe_id": recipe.id,
        "title": recipe.title,
        "chef": recipe.chef,
        "cuisine_type": recipe.cuisine_type,
        "created_at": recipe.created_at,
        "total_ingredients": total,
        "matched_count": len(matched),
        "missing_count": len(missing),
        "cookability_score": safe_percentage(len(matched), total),
        "matched_ingredients": matched,
        "missing_ingredients": missing,
        "has_enough_quantity": total > 0 and all(line["has_enough"] for line in lines),
    }


def score_recipes(recipes: list[Recipe], inventory: list) -> list[dict]:
    """Score every recipe against the inventory snapshot.

    Returns one row per recipe sorted by cookability_score desc, then newest
    first.  matched_ingredients and missing_ingredients together are exactly
    the recipe's ingredient names, in recipe order.
    """
    index = build_name_index(inventory, "ingredient_name")
    rows = [_score_row(recipe, index) for recipe in recipes]
    logger.debug(f"Scored {len(rows)} recipes against {len(index)} inventory names")
    return sort_rows(
        rows,
        (lambda r: r["cookability_score"], True),
        (lambda r: timestamp_key(r["created_at"]), True),
    )


def latest_recipes(scored: list[dict], limit: Optional[int] = DEFAULT_LATEST_LIMIT) -> list[dict]:
    """Re-sort scored rows newest first, ignoring the score."""
    return take(sort_rows(scored, (lambda r: timestamp_key(r["created_at"]), True)), limit)


def recommend(
    scored: list[dict],
    threshold: float = DEFAULT_THRESHOLD,
    limit: Optional[int] = DEFAULT_RECOMMENDATION_LIMIT,
) -> list[dict]:
    """Scored rows at or above the threshold, best first, trimmed to display fields."""
    picked = [row for row in scored if to_number(row["cookability_score"]) >= threshold]
    return [
        {
            "recipe_id": row["recipe_id"],
            "title": row["title"],
            "cuisine_type": row["cuisine_type"],
            "cookability_score": row["cookability_score"],
            "matched_count": row["matched_count"],
            "total_ingredients": row["total_ingredients"],
            "missing_ingredients": list(row["missing_ingredients"]),
        }
        for row in take(picked, limit)
    ]


def check_recipe(recipe: Recipe, inventory: list) -> dict:
    """Quantity-aware readiness check for one recipe.

    Each ingredient line carries required and available quantity and
    has_enough.  missing lists the lines without enough stock and the
    shortfall.  A recipe with no ingredients is never ready.
    """
    index = build_name_index(inventory, "ingredient_name")
    lines = _ingredient_lines(recipe, index)
    missing = [
        {
            "name": line["name"],
            "unit": line["unit"],
            "required_quantity": line["required_quantity"],
            "available_quantity": line["available_quantity"],
            "shortfall": round_half_up(
                max(line["required_quantity"] - line["available_quantity"], 0), 2
            ),
        }
        for line in lines
        if not line["has_enough"]
    ]
    return {
        "recipe_id": recipe.id,
        "title": recipe.title,
        "can_cook": bool(lines) and not missing,
        "ingredients": lines,
        "missing": missing,
    }


def ready_to_cook(recipes: list[Recipe], inventory: list, limit: Optional[int] = None) -> list[dict]:
    """Recipes with enough of every ingredient on hand, newest first."""
    checks = [check_recipe(recipe, inventory) for recipe in recipes]
    created = {recipe.id: recipe.created_at for recipe in recipes}
    ready = [check for check in checks if check["can_cook"]]
    ready = sort_rows(ready, (lambda c: timestamp_key(created.get(c["recipe_id"])), True))
    return take(ready, limit)


def recommend_from_inventory(
    owner_id: Optional[str] = None,
    inventory_owner_id: Optional[str] = None,
    min_score: Optional[float] = None,
    limit: Optional[int] = None,
) -> list[dict]:
    """Read fresh snapshots and return recommendations.

    owner_id scopes the recipes, inventory_owner_id scopes the inventory
    (falls back to owner_id).
    """
    recipes = recipes_core.list_recipes(owner_id)
    inventory = inventory_core.list_inventory(inventory_owner_id or owner_id)
    threshold = DEFAULT_THRESHOLD if min_score is None else min_score
    return recommend(score_recipes(recipes, inventory), threshold=threshold,
                     limit=DEFAULT_RECOMMENDATION_LIMIT if limit is None else limit)
