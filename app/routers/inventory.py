from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from app.dependencies import parse_owner
from pantry_insights.core import inventory as inventory_core

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("")
def inventory_list(owner: str = "", location: str = "", category: str = ""):
    items = inventory_core.list_inventory(parse_owner(owner))
    if location:
        items = [i for i in items if i.location == location]
    if category:
        items = [i for i in items if i.category == category]
    return [asdict(i) for i in items]


@router.get("/{item_id}")
def inventory_detail(item_id: str):
    item = inventory_core.get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return asdict(item)
