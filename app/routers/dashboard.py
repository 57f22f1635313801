"""Dashboard router — the combined analytics payload and its lighter variants."""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from app.dependencies import parse_owner
from pantry_insights.core import dashboard as dashboard_core
from pantry_insights.core.analytics import RecipeFilters

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
logger = logging.getLogger(__name__)


def dashboard_options(
    owner: str = "",
    inventory_owner: str = "",
    group_by: str = "",
    cuisine: str = "",
    difficulty: str = "",
    meal_type: str = "",
    max_prep: Optional[float] = None,
    search: str = "",
    chef: str = "",
    scope_recipe_usage: bool = False,
) -> dashboard_core.DashboardOptions:
    """Build DashboardOptions from query parameters (blank means 'not set')."""
    return dashboard_core.DashboardOptions(
        owner_id=parse_owner(owner),
        inventory_owner_id=parse_owner(inventory_owner),
        scope_recipe_usage=scope_recipe_usage,
        value_group_by=group_by.strip() or None,
        filters=RecipeFilters(
            cuisine=cuisine, difficulty=difficulty, meal_type=meal_type,
            max_prep_minutes=max_prep, search=search, chef=chef,
        ),
    )


async def render_dashboard(options: dashboard_core.DashboardOptions) -> dict:
    """Run the assembler, mapping its failures onto HTTP errors."""
    try:
        return await dashboard_core.build_dashboard(options)
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Dashboard took too long to build")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("")
async def dashboard(
    owner: str = "",
    inventory_owner: str = "",
    group_by: str = "",
    cuisine: str = "",
    difficulty: str = "",
    meal_type: str = "",
    max_prep: Optional[float] = None,
    search: str = "",
    chef: str = "",
    scope_recipe_usage: bool = False,
):
    options = dashboard_options(
        owner, inventory_owner, group_by, cuisine, difficulty, meal_type, max_prep, search, chef,
        scope_recipe_usage,
    )
    return await render_dashboard(options)


@router.get("/smart")
def smart_dashboard(owner: str = ""):
    return dashboard_core.smart_dashboard(parse_owner(owner))


@router.get("/stats")
def dashboard_stats(group_by: str = ""):
    try:
        return dashboard_core.headline_stats(group_by.strip() or None)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
