"""Expiry and low-stock advice, aware of which recipes use each item.

Recipe usage is found through the name-keyed soft join: an inventory item is
"used" by every recipe listing an ingredient with the same normalised name.

The two reports treat usage differently on purpose:
- expiring_soon keeps items no recipe uses (expiry is urgent regardless);
- low_stock drops them (restocking something nobody cooks with isn't useful).
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from pantry_insights.core.pipeline import (
    build_usage_index,
    normalize_name,
    parse_timestamp,
    sort_rows,
    take,
    to_number,
    within_window,
)

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 7
DEFAULT_LOW_STOCK_THRESHOLD = 2
DEFAULT_LIMIT = 6

_SECONDS_PER_DAY = 24 * 60 * 60


def _days_until(expiration: datetime, now: datetime) -> int:
    days = math.ceil((expiration - now).total_seconds() / _SECONDS_PER_DAY)
    return max(days, 0)


def _recipes_using(item, usage_index: dict) -> list:
    return usage_index.get(normalize_name(item.ingredient_name), [])


def expiring_soon(
    inventory: list,
    recipes: list,
    now: Optional[datetime] = None,
    lookahead_days: float = DEFAULT_LOOKAHEAD_DAYS,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> list[dict]:
    """Items expiring within [now, now + lookahead_days], soonest first.

    Each row has days_until (ceiling of the day difference, never negative)
    plus recipe_titles/recipe_count of the recipes that use the ingredient.
    """
    now = now or datetime.now()
    horizon = now + timedelta(days=lookahead_days)
    usage_index = build_usage_index(recipes)

    rows = []
    for item in inventory:
        expiration = parse_timestamp(item.expiration_date)
        if expiration is None and item.expiration_date:
            logger.warning(f"Skipping inventory item {item.id}: bad expiration date {item.expiration_date!r}")
        if not within_window(expiration, now, horizon):
            continue
        using = _recipes_using(item, usage_index)
        rows.append({
            "inventory_id": item.id,
            "ingredient_name": item.ingredient_name,
            "quantity": item.quantity,
            "unit": item.unit,
            "expiration_date": item.expiration_date,
            "days_until": _days_until(expiration, now),
            "recipe_count": len(using),
            "recipe_titles": [recipe.title for recipe in using],
            "_expires": expiration,
        })

    rows = sort_rows(rows, (lambda r: r["_expires"], False))
    for row in rows:
        del row["_expires"]
    return take(rows, limit)


def low_stock(
    inventory: list,
    recipes: list,
    threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> list[dict]:
    """Items at or below threshold that at least one recipe uses.

    Sorted by usage_count desc, then quantity asc: the most-used, most
    depleted items come first.
    """
    usage_index = build_usage_index(recipes)
    rows = []
    for item in inventory:
        quantity = to_number(item.quantity)
        if quantity > threshold:
            continue
        using = _recipes_using(item, usage_index)
        if not using:
            continue
        rows.append({
            "inventory_id": item.id,
            "ingredient_name": item.ingredient_name,
            "quantity": quantity,
            "unit": item.unit,
            "usage_count": len(using),
            "recipe_titles": [recipe.title for recipe in using],
        })
    rows = sort_rows(
        rows,
        (lambda r: r["usage_count"], True),
        (lambda r: r["quantity"], False),
    )
    return take(rows, limit)


def unused_items(inventory: list, recipes: list) -> list[dict]:
    """Inventory items that no recipe references, sorted by name."""
    usage_index = build_usage_index(recipes)
    rows = [
        {
            "inventory_id": item.id,
            "ingredient_name": item.ingredient_name,
            "quantity": item.quantity,
            "unit": item.unit,
            "category": item.category,
        }
        for item in inventory
        if not _recipes_using(item, usage_index)
    ]
    return sort_rows(rows, (lambda r: normalize_name(r["ingredient_name"]), False))


def optimisation_suggestions(
    inventory: list,
    recipes: list,
    now: Optional[datetime] = None,
    low_stock_threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
    expiring_soon_days: float = DEFAULT_LOOKAHEAD_DAYS,
) -> dict:
    """Uncapped inventory advice: what expires, what to restock, what nobody uses."""
    return {
        "expiring_soon": expiring_soon(inventory, recipes, now=now,
                                       lookahead_days=expiring_soon_days, limit=None),
        "low_stock": low_stock(inventory, recipes, threshold=low_stock_threshold, limit=None),
        "unused": unused_items(inventory, recipes),
    }
