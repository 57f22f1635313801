"""Seed the demo database with fake data if it's empty."""
import logging
from datetime import date, datetime, timedelta

from pantry_insights.core import recipes as recipes_core, inventory as inventory_core, users as users_core
from pantry_insights.db.models import User, Recipe, Ingredient, InventoryItem

logger = logging.getLogger(__name__)


DEMO_USERS = [
    User(id="U1", display_name="Alex Rivera", role="chef"),
    User(id="U2", display_name="Sam Chen", role="chef"),
    User(id="ADMIN", display_name="Demo Admin", role="admin"),
]

# (id, owner, title, meal_type, cuisine, prep, difficulty, servings, chef, days_ago, ingredients, steps)
_RECIPE_ROWS = [
    ("R1", "U1", "Protein Oats", "Breakfast", "American", 5, "Easy", 1, "Alex Rivera", 3,
     [("Rolled Oats", 60, "g"), ("Milk", 250, "ml"), ("Whey Protein", 30, "g")],
     ["Combine oats and milk.", "Stir in protein.", "Chill overnight."]),
    ("R2", "U1", "Spaghetti Bolognese", "Dinner", "Italian", 45, "Medium", 4, "Alex Rivera", 20,
     [("Spaghetti", 400, "g"), ("Ground Beef", 500, "g"), ("Canned Tomatoes", 2, "cans"),
      ("Onion", 1, "whole"), ("Garlic", 3, "cloves")],
     ["Brown the beef.", "Add tomatoes and simmer.", "Serve over pasta."]),
    ("R3", "U2", "Margherita Pizza", "Dinner", "Italian", 35, "Medium", 2, "Sam Chen", 48,
     [("Pizza Dough", 1, "ball"), ("Canned Tomatoes", 1, "cans"), ("Mozzarella", 200, "g"),
      ("Basil", 10, "leaves")],
     ["Stretch the dough.", "Top with sauce and cheese.", "Bake hot."]),
    ("R4", "U2", "Chicken Stir Fry", "Dinner", "Asian", 20, "Easy", 2, "Sam Chen", 75,
     [("Chicken Breast", 300, "g"), ("Broccoli", 200, "g"), ("Soy Sauce", 3, "tbsp"),
      ("Rice", 150, "g")],
     ["Slice chicken.", "Stir fry with vegetables.", "Add sauce and serve with rice."]),
    ("R5", "U1", "Beef Wellington", "Dinner", "French", 120, "Hard", 6, "Alex Rivera", 110,
     [("Beef Fillet", 1, "kg"), ("Puff Pastry", 1, "sheet"), ("Mushrooms", 250, "g"),
      ("Egg", 1, "whole")],
     ["Sear the beef.", "Wrap in duxelles and pastry.", "Bake and rest."]),
    ("R6", "U2", "Black Bean Tacos", "Lunch", "Mexican", 15, "Easy", 4, "Sam Chen", 140,
     [("Black Beans", 2, "cans"), ("Corn Tortillas", 8, "whole"), ("Salsa", 120, "ml"),
      ("Onion", 1, "whole")],
     ["Season the beans.", "Warm tortillas.", "Assemble."]),
    ("R7", "U1", "Greek Salad", "Lunch", None, 10, None, 2, None, 170,
     [("Cucumber", 1, "whole"), ("Tomatoes", 2, "whole"), ("Feta Cheese", 100, "g")],
     ["Chop vegetables.", "Toss with feta."]),
]

# (id, owner, name, quantity, unit, category, location, cost, expires_in_days)
_INVENTORY_ROWS = [
    ("I1", "U1", "Rolled Oats", 500, "g", "Grains", "Pantry", 0.01, 120),
    ("I2", "U1", "Milk", 2, "l", "Dairy", "Fridge", 1.2, 3),
    ("I3", "U1", "Spaghetti", 1000, "g", "Grains", "Pantry", 0.004, 300),
    ("I4", "U1", "Canned Tomatoes", 1, "cans", "Canned", "Pantry", 0.9, 400),
    ("I5", "U1", "onion", 1, "whole", "Vegetables", "Counter", 0.5, 10),
    ("I6", "U1", "Garlic", 6, "cloves", "Vegetables", "Counter", 0.1, 20),
    ("I7", "U2", "Chicken Breast", 600, "g", "Meat", "Fridge", 0.012, 2),
    ("I8", "U2", "Broccoli", 150, "g", "Vegetables", "Fridge", 0.006, 5),
    ("I9", "U2", "Soy Sauce", 20, "tbsp", "Other", "Cupboard", 0.05, 365),
    ("I10", "U2", "Rice", 2000, "g", "Grains", "Pantry", 0.003, 365),
    ("I11", "U2", "Mozzarella", 125, "g", "Dairy", "Fridge", 0.02, 6),
    ("I12", "U2", "Sparkling Water", 6, "bottles", "Beverages", "Pantry", 0.8, 200),
    ("I13", "U2", "Frozen Peas", 1, "bag", "Frozen", "Freezer", 2.5, 90),
]


def _recipes(now: datetime) -> list[Recipe]:
    return [
        Recipe(
            id=rid, owner_id=owner, title=title, meal_type=meal, cuisine_type=cuisine,
            prep_time=prep, difficulty=difficulty, servings=servings, chef=chef,
            created_at=(now - timedelta(days=days_ago)).isoformat(timespec="seconds"),
            ingredients=[Ingredient(name=n, quantity=q, unit=u) for n, q, u in ingredients],
            instructions=list(steps),
        )
        for rid, owner, title, meal, cuisine, prep, difficulty, servings, chef, days_ago, ingredients, steps
        in _RECIPE_ROWS
    ]


def _inventory(today: date) -> list[InventoryItem]:
    return [
        InventoryItem(
            id=iid, owner_id=owner, ingredient_name=name, quantity=quantity, unit=unit,
            category=category, location=location, cost=cost,
            purchase_date=str(today - timedelta(days=2)),
            expiration_date=str(today + timedelta(days=expires_in)),
        )
        for iid, owner, name, quantity, unit, category, location, cost, expires_in in _INVENTORY_ROWS
    ]


def seed_if_empty():
    if recipes_core.count() > 0:
        return  # Already seeded

    now = datetime.now().replace(microsecond=0)
    for user in DEMO_USERS:
        users_core.add(user)
    for recipe in _recipes(now):
        recipes_core.add(recipe)
    for item in _inventory(now.date()):
        inventory_core.add(item)
    logger.info(
        f"Seeded demo data: {len(DEMO_USERS)} users, {len(_RECIPE_ROWS)} recipes, "
        f"{len(_INVENTORY_ROWS)} inventory items"
    )
