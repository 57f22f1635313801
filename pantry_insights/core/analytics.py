"""Popularity, cost and search reports over a recipe/inventory snapshot.

Every report is a pure function: recipes (and inventory where needed) in,
list of plain dicts out.  The dashboard assembler calls them independently,
so each can be tested in isolation.

Dirty data is grouped, not rejected: a missing cuisine is reported as
"Unspecified", a missing difficulty or chef as "Unknown".
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pantry_insights.core.pipeline import (
    average,
    build_name_index,
    group_by,
    label_or,
    month_label,
    normalize_name,
    parse_timestamp,
    rank_of,
    round_half_up,
    safe_percentage,
    sort_rows,
    take,
    timestamp_key,
    to_number,
)
from pantry_insights.db.models import Recipe

logger = logging.getLogger(__name__)

UNSPECIFIED = "Unspecified"
UNKNOWN = "Unknown"


def _cuisine(recipe: Recipe) -> str:
    return label_or(recipe.cuisine_type, UNSPECIFIED)


def _difficulty(recipe: Recipe) -> str:
    return label_or(recipe.difficulty, UNKNOWN)


def _ingredient_count(recipe: Recipe) -> int:
    return len(recipe.ingredients or [])


# ── Cuisine & difficulty ──────────────────────────────────────────────────────

def cuisine_performance(recipes: list[Recipe]) -> list[dict]:
    """Per cuisine: recipe count, average prep time and average servings.

    Sorted by count desc, ties alphabetically by cuisine.
    """
    rows = [
        {
            "cuisine_type": cuisine,
            "total_recipes": len(group),
            "avg_prep_time": round_half_up(average(r.prep_time for r in group)),
            "avg_servings": round_half_up(average(r.servings for r in group)),
        }
        for cuisine, group in group_by(recipes, _cuisine).items()
    ]
    return sort_rows(rows, (lambda r: r["total_recipes"], True), (lambda r: r["cuisine_type"], False))


def cuisine_popularity(recipes: list[Recipe]) -> list[dict]:
    """Per cuisine: count, average prep time, average ingredient count and newest recipe."""
    rows = []
    for cuisine, group in group_by(recipes, _cuisine).items():
        newest = max(group, key=lambda r: timestamp_key(r.created_at))
        rows.append({
            "cuisine_type": cuisine,
            "total_recipes": len(group),
            "avg_prep_time": round_half_up(average(r.prep_time for r in group)),
            "avg_ingredients": round_half_up(average(_ingredient_count(r) for r in group)),
            "top_recipe": newest.title or "N/A",
        })
    return sort_rows(rows, (lambda r: r["total_recipes"], True), (lambda r: r["cuisine_type"], False))


def difficulty_summary(recipes: list[Recipe]) -> list[dict]:
    """Recipe count per difficulty, in the fixed Easy, Medium, Hard order.

    Labels outside the fixed set come after Hard, larger groups first.
    """
    rows = [
        {"difficulty": difficulty, "total": len(group)}
        for difficulty, group in group_by(recipes, _difficulty).items()
    ]
    return sort_rows(rows, (lambda r: rank_of(r["difficulty"]), False), (lambda r: r["total"], True))


def top_recipes(recipes: list[Recipe], limit: Optional[int] = 6) -> list[dict]:
    """Biggest recipes: servings desc, then ingredient count desc."""
    ranked = sort_rows(
        recipes,
        (lambda r: to_number(r.servings), True),
        (_ingredient_count, True),
    )
    return [
        {
            "recipe_id": r.id,
            "title": r.title,
            "cuisine_type": r.cuisine_type,
            "difficulty": r.difficulty,
            "servings": to_number(r.servings),
            "ingredient_count": _ingredient_count(r),
            "chef": label_or(r.chef, UNKNOWN),
            "created_at": r.created_at,
        }
        for r in take(ranked, limit)
    ]


# ── Ingredients & cost ────────────────────────────────────────────────────────

def ingredient_usage(recipes: list[Recipe], inventory: list, limit: Optional[int] = 8) -> list[dict]:
    """Leaderboard of the most used ingredients across all recipes.

    Grouped by normalised name (the first spelling seen is displayed).  The
    inventory join adds the average observed cost and the number of matching
    inventory rows, both 0 when nothing matches.
    """
    lines = [
        (recipe, ing)
        for recipe in recipes
        for ing in recipe.ingredients or []
        if normalize_name(ing.name)
    ]
    inventory_index = build_name_index(inventory, "ingredient_name")

    rows = []
    for name, group in group_by(lines, lambda line: normalize_name(line[1].name)).items():
        titles = list(dict.fromkeys(recipe.title for recipe, _ in group))
        pricing = inventory_index.get(name, [])
        rows.append({
            "ingredient_name": group[0][1].name.strip(),
            "usage_count": len(group),
            "avg_quantity": round_half_up(average(ing.quantity for _, ing in group), 2),
            "units": sorted({ing.unit for _, ing in group if ing.unit}),
            "recipe_count": len(titles),
            "recipes": titles,
            "average_cost": round_half_up(average(item.cost for item in pricing), 2),
            "inventory_count": len(pricing),
        })
    rows = sort_rows(
        rows,
        (lambda r: r["usage_count"], True),
        (lambda r: normalize_name(r["ingredient_name"]), False),
    )
    return take(rows, limit)


def cost_reports(recipes: list[Recipe], inventory: list) -> list[dict]:
    """Estimated cost of every recipe from inventory prices.

    Each ingredient costs (average cost of matching inventory rows) x
    (required quantity); unmatched ingredients cost 0.  coverage is the
    percentage of ingredients that found a price.  Cheapest first.
    """
    inventory_index = build_name_index(inventory, "ingredient_name")
    rows = []
    for recipe in recipes:
        total = 0.0
        priced = 0
        ingredients = recipe.ingredients or []
        for ing in ingredients:
            pricing = inventory_index.get(normalize_name(ing.name), [])
            if not pricing:
                continue
            priced += 1
            total += to_number(ing.quantity) * average(item.cost for item in pricing)
        rows.append({
            "recipe_id": recipe.id,
            "title": recipe.title,
            "cuisine_type": recipe.cuisine_type,
            "difficulty": recipe.difficulty,
            "total_cost": round_half_up(total, 2),
            "coverage": safe_percentage(priced, len(ingredients)),
        })
    return sort_rows(rows, (lambda r: r["total_cost"], False), (lambda r: r["title"] or "", False))


# ── Chefs & seasons ───────────────────────────────────────────────────────────

def chef_insights(recipes: list[Recipe]) -> list[dict]:
    """Per-chef rollup built from (owner, difficulty) subtotals.

    First level: recipes and average prep time per owner per difficulty.
    Second level: per owner, total recipes, average of the first-level prep
    averages, sorted distinct cuisines and the difficulty breakdown in the
    fixed Easy, Medium, Hard order.  Busiest chefs first.
    """
    subtotals = []
    for (owner, difficulty), group in group_by(recipes, lambda r: (r.owner_id, _difficulty(r))).items():
        subtotals.append({
            "owner_id": owner,
            "chef": next((r.chef for r in group if label_or(r.chef, "")), None),
            "difficulty": difficulty,
            "recipes": len(group),
            "avg_prep": average(r.prep_time for r in group),
            "cuisines": {_cuisine(r) for r in group},
        })

    rows = []
    for owner, parts in group_by(subtotals, lambda s: s["owner_id"]).items():
        breakdown = sort_rows(
            ({"difficulty": p["difficulty"], "total": p["recipes"]} for p in parts),
            (lambda d: rank_of(d["difficulty"]), False),
        )
        rows.append({
            "owner_id": owner,
            "chef": next((p["chef"] for p in parts if p["chef"]), UNKNOWN),
            "total_recipes": sum(p["recipes"] for p in parts),
            "avg_prep_time": round_half_up(average(p["avg_prep"] for p in parts)),
            "cuisine_preferences": sorted(set().union(*(p["cuisines"] for p in parts))),
            "difficulty_breakdown": breakdown,
        })
    return sort_rows(rows, (lambda r: r["total_recipes"], True), (lambda r: r["chef"], False))


def seasonal_trends(recipes: list[Recipe]) -> list[dict]:
    """Recipes created per calendar month, oldest month first.

    Recipes without a readable created_at are left out.
    """
    dated = []
    for recipe in recipes:
        created = parse_timestamp(recipe.created_at)
        if created is None:
            logger.warning(f"Recipe {recipe.id} has no usable created_at; left out of seasonal trends")
            continue
        dated.append((created.year, created.month, recipe))

    rows = [
        {
            "year": year,
            "month": month,
            "label": month_label(year, month),
            "total_recipes": len(group),
            "cuisines": sorted({_cuisine(recipe) for _, _, recipe in group}),
        }
        for (year, month), group in group_by(dated, lambda d: (d[0], d[1])).items()
    ]
    return sort_rows(rows, (lambda r: (r["year"], r["month"]), False))


# ── Filtered search ───────────────────────────────────────────────────────────

@dataclass
class RecipeFilters:
    """Optional recipe search filters; blank/None filters impose no constraint."""

    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    meal_type: Optional[str] = None
    max_prep_minutes: Optional[float] = None
    search: Optional[str] = None
    chef: Optional[str] = None

    def applied(self) -> dict:
        """The filters as they were applied, with blanks for unused ones."""
        max_prep = to_number(self.max_prep_minutes)
        return {
            "cuisine": label_or(self.cuisine, ""),
            "difficulty": label_or(self.difficulty, ""),
            "meal_type": label_or(self.meal_type, ""),
            "max_prep": max_prep if max_prep > 0 else "",
            "search": label_or(self.search, ""),
            "chef": label_or(self.chef, ""),
        }

    def matches(self, recipe: Recipe) -> bool:
        applied = self.applied()
        if applied["cuisine"] and recipe.cuisine_type != applied["cuisine"]:
            return False
        if applied["difficulty"] and recipe.difficulty != applied["difficulty"]:
            return False
        if applied["meal_type"] and recipe.meal_type != applied["meal_type"]:
            return False
        if applied["max_prep"] != "" and (
            recipe.prep_time is None or to_number(recipe.prep_time) > applied["max_prep"]
        ):
            return False
        if applied["search"] and applied["search"].casefold() not in (recipe.title or "").casefold():
            return False
        if applied["chef"] and applied["chef"].casefold() not in (recipe.chef or "").casefold():
            return False
        return True


def filter_recipes(recipes: list[Recipe], filters: Optional[RecipeFilters] = None,
                   limit: Optional[int] = 20) -> list[dict]:
    """Recipes matching every given filter, newest first then by title."""
    filters = filters or RecipeFilters()
    matched = [recipe for recipe in recipes if filters.matches(recipe)]
    ranked = sort_rows(
        matched,
        (lambda r: timestamp_key(r.created_at), True),
        (lambda r: r.title or "", False),
    )
    return [
        {
            "recipe_id": r.id,
            "title": r.title,
            "cuisine_type": r.cuisine_type,
            "difficulty": r.difficulty,
            "prep_time": to_number(r.prep_time),
            "meal_type": r.meal_type,
            "servings": to_number(r.servings),
            "chef": label_or(r.chef, UNKNOWN),
            "created_at": r.created_at,
        }
        for r in take(ranked, limit)
    ]
