"""Pantry inventory access — read snapshots, inventory valuation, seeding helpers.

Inventory rows are linked to recipes only by ingredient name (see
core/pipeline.normalize_name); there is no foreign key between the two.
"""

from typing import Optional

from pantry_insights.db.database import get_connection
from pantry_insights.db.models import InventoryItem
from pantry_insights.core.recipes import normalise_owner_id
from pantry_insights.core.pipeline import to_number, round_half_up

VALUE_GROUPS = ("category", "location")


def list_inventory(owner_id: Optional[str] = None) -> list[InventoryItem]:
    """Return all inventory items, newest first, optionally scoped to one owner."""
    owner = normalise_owner_id(owner_id)
    conn = get_connection()
    try:
        query = "SELECT * FROM inventory"
        params = []
        if owner:
            query += " WHERE owner_id = ?"
            params.append(owner)
        query += " ORDER BY created_at DESC, id"
        rows = conn.execute(query, params).fetchall()
        return [InventoryItem(**dict(row)) for row in rows]
    finally:
        conn.close()


def get(item_id: str) -> Optional[InventoryItem]:
    """Return a single inventory item by ID, or None if not found."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM inventory WHERE id = ?", (str(item_id).strip().upper(),)
        ).fetchone()
        return InventoryItem(**dict(row)) if row else None
    finally:
        conn.close()


def count() -> int:
    """Return the total number of inventory items."""
    conn = get_connection()
    try:
        return conn.execute("SELECT COUNT(*) FROM inventory").fetchone()[0]
    finally:
        conn.close()


def inventory_value(group_by: Optional[str] = None) -> dict:
    """Return the monetary value of the inventory as sum(quantity * cost).

    Missing quantity or cost counts as 0.  With group_by ('category' or
    'location') the result also has a breakdown list of
    {group, total_value, item_count}, sorted by group name.
    """
    if group_by and group_by not in VALUE_GROUPS:
        raise ValueError(f"group_by must be one of {', '.join(VALUE_GROUPS)}")

    items = list_inventory()
    total = 0.0
    groups: dict[str, dict] = {}
    for item in items:
        line_value = to_number(item.quantity) * to_number(item.cost)
        total += line_value
        if group_by:
            label = getattr(item, group_by) or "Unspecified"
            entry = groups.setdefault(label, {"group": label, "total_value": 0.0, "item_count": 0})
            entry["total_value"] += line_value
            entry["item_count"] += 1

    result = {"total_value": round_half_up(total, 2)}
    if group_by:
        breakdown = sorted(groups.values(), key=lambda g: g["group"])
        for entry in breakdown:
            entry["total_value"] = round_half_up(entry["total_value"], 2)
        result["breakdown"] = breakdown
    return result


def add(item: InventoryItem) -> str:
    """Insert a new inventory item and return its ID."""
    item_id = str(item.id).strip().upper()
    conn = get_connection()
    try:
        conn.execute(
            """INSERT INTO inventory (id, owner_id, ingredient_name, quantity, unit,
               category, purchase_date, expiration_date, location, cost, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, COALESCE(?, CURRENT_TIMESTAMP))""",
            (
                item_id, normalise_owner_id(item.owner_id) or None, item.ingredient_name,
                item.quantity, item.unit, item.category, item.purchase_date,
                item.expiration_date, item.location, item.cost, item.created_at,
            ),
        )
        conn.commit()
        return item_id
    finally:
        conn.close()


def delete(item_id: str) -> None:
    """Delete an inventory item by ID."""
    conn = get_connection()
    try:
        conn.execute("DELETE FROM inventory WHERE id = ?", (str(item_id).strip().upper(),))
        conn.commit()
    finally:
        conn.close()
