from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from app.dependencies import parse_owner
from pantry_insights.core import recipes as recipes_core

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
def recipes_list(owner: str = ""):
    return [asdict(r) for r in recipes_core.list_recipes(parse_owner(owner))]


@router.get("/{recipe_id}")
def recipe_detail(recipe_id: str):
    recipe = recipes_core.get(recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return asdict(recipe)
