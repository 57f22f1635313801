"""Dashboard assembly — run the independent reports concurrently and merge them.

build_dashboard() is the main entry point.  Each section branch reads its
own fresh snapshot from the store and computes one or more report sections.
Branches share no state, so they run side by side in worker threads
(asyncio.to_thread copies the context, so a demo DB override still applies).

Failure model: the first branch that raises fails the whole dashboard.  A
per-request deadline (dashboard_timeout_seconds) raises asyncio.TimeoutError.
In both cases the request stops waiting: the asyncio tasks still pending are
cancelled, but their worker threads can't be interrupted, so they run to
completion in the background and their results are discarded.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Callable, Optional

from pantry_insights.config import AnalyticsConfig, load_analytics_config
from pantry_insights.core import (
    recipes as recipes_core,
    inventory as inventory_core,
    users as users_core,
)
from pantry_insights.core import advisor, analytics, cookability
from pantry_insights.core.analytics import RecipeFilters

logger = logging.getLogger(__name__)


@dataclass
class DashboardOptions:
    """What one dashboard request should cover.

    owner_id scopes recipes (and inventory unless inventory_owner_id is
    given).  Expiry/low-stock recipe usage looks at every recipe unless
    scope_recipe_usage is set.  config=None loads thresholds from settings.
    """

    owner_id: Optional[str] = None
    inventory_owner_id: Optional[str] = None
    scope_recipe_usage: bool = False
    value_group_by: Optional[str] = None
    filters: RecipeFilters = field(default_factory=RecipeFilters)
    config: Optional[AnalyticsConfig] = None
    now: Optional[datetime] = None

    def inventory_owner(self) -> Optional[str]:
        return self.inventory_owner_id or self.owner_id

    def usage_owner(self) -> Optional[str]:
        return self.owner_id if self.scope_recipe_usage else None


def headline_stats(group_by: Optional[str] = None) -> dict:
    """Headline counts plus total inventory value (optionally broken down)."""
    value = inventory_core.inventory_value(group_by)
    stats = {
        "recipe_count": recipes_core.count(),
        "inventory_count": inventory_core.count(),
        "user_count": users_core.count_users(),
        "cuisine_count": len(recipes_core.distinct_cuisines()),
        "inventory_value": value["total_value"],
    }
    if group_by:
        stats["inventory_breakdown"] = value["breakdown"]
    return stats


# ── Section branches ──────────────────────────────────────────────────────────
# Each branch reads its own snapshot and returns {section_name: rows}.

def _stats_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    return {"stats": headline_stats(options.value_group_by)}


def _cookability_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    recipes = recipes_core.list_recipes(options.owner_id)
    inventory = inventory_core.list_inventory(options.inventory_owner())
    scored = cookability.score_recipes(recipes, inventory)
    return {
        "cookability": scored,
        "latest_recipes": cookability.latest_recipes(scored, config.latest_limit),
        "recommendations": cookability.recommend(
            scored, config.recommendation_threshold, config.recommendation_limit
        ),
    }


def _expiry_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    inventory = inventory_core.list_inventory(options.inventory_owner())
    recipes = recipes_core.list_recipes(options.usage_owner())
    return {
        "expiring_soon": advisor.expiring_soon(
            inventory, recipes, now=options.now,
            lookahead_days=config.expiry_lookahead_days, limit=config.expiring_limit,
        ),
    }


def _low_stock_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    inventory = inventory_core.list_inventory(options.inventory_owner())
    recipes = recipes_core.list_recipes(options.usage_owner())
    return {
        "low_stock": advisor.low_stock(
            inventory, recipes, threshold=config.low_stock_threshold, limit=config.low_stock_limit,
        ),
    }


def _performance_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    recipes = recipes_core.list_recipes(options.owner_id)
    return {
        "popularity": analytics.cuisine_popularity(recipes),
        "cuisine_performance": analytics.cuisine_performance(recipes),
        "difficulty_summary": analytics.difficulty_summary(recipes),
        "top_recipes": analytics.top_recipes(recipes, config.top_recipes_limit),
    }


def _ingredient_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    recipes = recipes_core.list_recipes(options.owner_id)
    inventory = inventory_core.list_inventory(options.inventory_owner())
    return {
        "ingredient_usage": analytics.ingredient_usage(recipes, inventory, config.ingredient_usage_limit),
    }


def _chef_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    return {"chef_insights": analytics.chef_insights(recipes_core.list_recipes(options.owner_id))}


def _seasonal_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    return {"seasonal_trends": analytics.seasonal_trends(recipes_core.list_recipes(options.owner_id))}


def _cost_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    recipes = recipes_core.list_recipes(options.owner_id)
    inventory = inventory_core.list_inventory(options.inventory_owner())
    return {"cost_reports": analytics.cost_reports(recipes, inventory)}


def _search_section(options: DashboardOptions, config: AnalyticsConfig) -> dict:
    recipes = recipes_core.list_recipes(options.owner_id)
    return {
        "filtered_recipes": analytics.filter_recipes(recipes, options.filters, config.search_page_size),
        "applied_filters": options.filters.applied(),
    }


SECTIONS: dict[str, Callable[[DashboardOptions, AnalyticsConfig], dict]] = {
    "stats": _stats_section,
    "cookability": _cookability_section,
    "expiry": _expiry_section,
    "low_stock": _low_stock_section,
    "performance": _performance_section,
    "ingredients": _ingredient_section,
    "chefs": _chef_section,
    "seasonal": _seasonal_section,
    "costs": _cost_section,
    "search": _search_section,
}


async def run_concurrently(branches: dict[str, Callable[[], dict]], timeout: Optional[float] = None) -> dict:
    """Run blocking branch callables in threads; return {name: result} in branch order.

    Raises the exception of a failed branch as soon as one fails, or
    asyncio.TimeoutError once timeout seconds pass.  Either way the pending
    tasks are cancelled and their threads are abandoned: they keep their
    executor slot until the blocking call returns, and the result is dropped.
    """
    tasks = {
        name: asyncio.create_task(asyncio.to_thread(fn), name=f"dashboard:{name}")
        for name, fn in branches.items()
    }
    try:
        done, pending = await asyncio.wait(
            tasks.values(), timeout=timeout, return_when=asyncio.FIRST_EXCEPTION
        )
    except asyncio.CancelledError:
        for task in tasks.values():
            task.cancel()
        raise

    for task in pending:
        task.cancel()

    failed = [
        (name, task) for name, task in tasks.items()
        if task in done and not task.cancelled() and task.exception() is not None
    ]
    if failed:
        name, task = failed[0]
        logger.error(f"Dashboard section {name!r} failed: {task.exception()!r}")
        raise task.exception()
    if pending:
        late = [name for name, task in tasks.items() if task in pending]
        logger.error(f"Dashboard timed out after {timeout}s waiting for: {', '.join(late)}")
        raise asyncio.TimeoutError(f"Dashboard sections timed out: {', '.join(late)}")
    return {name: task.result() for name, task in tasks.items()}


async def build_dashboard(options: Optional[DashboardOptions] = None, timeout: Optional[float] = None) -> dict:
    """Compute every dashboard section for one request and merge them into one payload."""
    options = options or DashboardOptions()
    config = options.config or await asyncio.to_thread(load_analytics_config)
    if timeout is None:
        timeout = config.dashboard_timeout_seconds

    started = time.perf_counter()
    branches = {name: partial(section, options, config) for name, section in SECTIONS.items()}
    results = await run_concurrently(branches, timeout=timeout if timeout > 0 else None)

    payload = {}
    for sections in results.values():
        payload.update(sections)
    payload["generated_at"] = datetime.now().isoformat(timespec="seconds")
    logger.info(
        f"Dashboard built in {time.perf_counter() - started:.3f}s "
        f"(owner={options.owner_id or '*'}, {len(payload['cookability'])} recipes scored)"
    )
    return payload


def smart_dashboard(owner_id: Optional[str] = None, config: Optional[AnalyticsConfig] = None) -> dict:
    """The lighter "what can I cook" view, computed sequentially from one snapshot."""
    config = config or load_analytics_config()
    recipes = recipes_core.list_recipes(owner_id)
    inventory = inventory_core.list_inventory(owner_id)
    all_recipes = recipes_core.list_recipes() if owner_id else recipes

    scored = cookability.score_recipes(recipes, inventory)
    return {
        "cookability": scored,
        "latest_recipes": cookability.latest_recipes(scored, config.latest_limit),
        "recommendations": cookability.recommend(
            scored, config.recommendation_threshold, config.recommendation_limit
        ),
        "expiring_soon": advisor.expiring_soon(
            inventory, all_recipes,
            lookahead_days=config.expiry_lookahead_days, limit=config.expiring_limit,
        ),
        "low_stock": advisor.low_stock(
            inventory, all_recipes, threshold=config.low_stock_threshold, limit=config.low_stock_limit,
        ),
        "popularity": analytics.cuisine_popularity(recipes),
    }


def inventory_based_suggestions(limit: Optional[int] = None) -> list[dict]:
    """Top recommendations across every recipe and the whole inventory."""
    recommendations = smart_dashboard()["recommendations"]
    if limit is None or limit <= 0:
        return recommendations
    return recommendations[:limit]
