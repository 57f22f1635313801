"""Dataclass models for all database entities.

Each class maps to a database table (Recipe also owns its ingredient and
instruction-step rows). Fields use Optional types for nullable columns.
These are plain data containers with no business logic.
"""

from dataclasses import dataclass, field
from typing import Optional

DIFFICULTIES = ("Easy", "Medium", "Hard")
MEAL_TYPES = ("Breakfast", "Lunch", "Dinner", "Snack")
CUISINE_TYPES = ("Italian", "Asian", "Mexican", "American", "French", "Indian", "Mediterranean", "Other")
LOCATIONS = ("Fridge", "Freezer", "Pantry", "Counter", "Cupboard")
INVENTORY_CATEGORIES = (
    "Vegetables", "Fruits", "Meat", "Dairy", "Grains",
    "Spices", "Beverages", "Frozen", "Canned", "Other",
)


@dataclass
class User:
    """An account that owns recipes and inventory. Role is 'chef' or 'admin'."""
    id: str
    display_name: str
    role: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class Ingredient:
    """A single ingredient line within a recipe (e.g. '60 g rolled oats')."""

    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None


@dataclass
class Recipe:
    """A recipe with metadata, ordered ingredients and ordered instruction steps.

    created_at is an ISO timestamp string. Numeric fields may be None on
    dirty historical rows; analytics treats them as 0.
    """

    id: str
    title: str
    owner_id: Optional[str] = None
    meal_type: Optional[str] = None
    cuisine_type: Optional[str] = None
    prep_time: Optional[float] = None  # minutes
    difficulty: Optional[str] = None  # Easy, Medium, Hard
    servings: Optional[float] = None
    chef: Optional[str] = None
    created_at: Optional[str] = None
    ingredients: list = field(default_factory=list)  # list[Ingredient]
    instructions: list = field(default_factory=list)  # list[str]


@dataclass
class InventoryItem:
    """A pantry inventory entry.

    Dates (purchase_date, expiration_date) are stored as ISO strings.
    cost is the price of one unit of quantity.
    """

    id: str
    ingredient_name: str
    owner_id: Optional[str] = None
    quantity: Optional[float] = 0.0
    unit: Optional[str] = None
    category: Optional[str] = None
    purchase_date: Optional[str] = None
    expiration_date: Optional[str] = None
    location: Optional[str] = None  # Fridge, Freezer, Pantry, Counter, Cupboard
    cost: Optional[float] = None
    created_at: Optional[str] = None
