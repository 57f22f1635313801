"""Analytics router — recommendations, inventory advice and recipe readiness."""
from typing import Optional

from fastapi import APIRouter, HTTPException

from app.dependencies import parse_owner
from pantry_insights.config import load_analytics_config
from pantry_insights.core import recipes as recipes_core, inventory as inventory_core
from pantry_insights.core import advisor, cookability

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/recommendations")
def recommendations(
    owner: str = "",
    inventory_owner: str = "",
    min_score: Optional[float] = None,
    limit: Optional[int] = None,
):
    config = load_analytics_config()
    return cookability.recommend_from_inventory(
        owner_id=parse_owner(owner),
        inventory_owner_id=parse_owner(inventory_owner),
        min_score=config.recommendation_threshold if min_score is None else min_score,
        limit=config.recommendation_limit if limit is None else limit,
    )


@router.get("/optimisation")
def optimisation(
    owner: str = "",
    low_stock_threshold: Optional[float] = None,
    expiring_soon_days: Optional[float] = None,
):
    if (low_stock_threshold is not None and low_stock_threshold < 0) or (
        expiring_soon_days is not None and expiring_soon_days < 0
    ):
        raise HTTPException(status_code=400, detail="Thresholds cannot be negative")
    config = load_analytics_config()
    owner_id = parse_owner(owner)
    return advisor.optimisation_suggestions(
        inventory_core.list_inventory(owner_id),
        recipes_core.list_recipes(owner_id),
        low_stock_threshold=config.low_stock_threshold if low_stock_threshold is None else low_stock_threshold,
        expiring_soon_days=config.expiry_lookahead_days if expiring_soon_days is None else expiring_soon_days,
    )


@router.get("/recipes/{recipe_id}/check")
def check_recipe(recipe_id: str, inventory_owner: str = ""):
    recipe = recipes_core.get(recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    inventory = inventory_core.list_inventory(parse_owner(inventory_owner) or recipe.owner_id)
    return cookability.check_recipe(recipe, inventory)


@router.get("/ready")
def ready(owner: str = ""):
    owner_id = parse_owner(owner)
    return cookability.ready_to_cook(
        recipes_core.list_recipes(owner_id), inventory_core.list_inventory(owner_id)
    )
