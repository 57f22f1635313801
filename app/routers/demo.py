"""Demo router — read-only dashboards backed by the demo DB.

Sets the db path override ContextVar so all core/ functions use demo.db.
The override is set before the assembler fans out, and worker threads
inherit it.
"""
import os
from pathlib import Path

from fastapi import APIRouter

from pantry_insights.db.database import override_db_path
from pantry_insights.core import dashboard as dashboard_core
from app.dependencies import parse_owner
from app.routers.dashboard import dashboard_options, render_dashboard

router = APIRouter(prefix="/demo", tags=["demo"])


def _demo_db_path() -> Path:
    return Path(os.environ.get("DEMO_DB_URL", "data/demo.db"))


@router.get("/dashboard")
async def demo_dashboard(
    owner: str = "",
    cuisine: str = "",
    difficulty: str = "",
    search: str = "",
    scope_recipe_usage: bool = False,
):
    options = dashboard_options(
        owner=owner, cuisine=cuisine, difficulty=difficulty, search=search,
        scope_recipe_usage=scope_recipe_usage,
    )
    with override_db_path(_demo_db_path()):
        return await render_dashboard(options)


@router.get("/smart")
def demo_smart(owner: str = ""):
    with override_db_path(_demo_db_path()):
        return dashboard_core.smart_dashboard(parse_owner(owner))
