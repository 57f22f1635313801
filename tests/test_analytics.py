from conftest import make_recipe, make_item
from pantry_insights.core import analytics
from pantry_insights.core.analytics import RecipeFilters


def _catalogue():
    return [
        make_recipe("R1", "Lasagne", ["Pasta", "Beef", "Tomato"], cuisine_type="Italian",
                    prep_time=60, servings=6, difficulty="Hard", owner_id="U1", chef="Alex",
                    meal_type="Dinner", created_at="2025-01-15T10:00:00"),
        make_recipe("R2", "Bruschetta", ["Bread", "Tomato"], cuisine_type="Italian",
                    prep_time=15, servings=4, difficulty="Easy", owner_id="U1", chef="Alex",
                    meal_type="Lunch", created_at="2025-02-01T10:00:00"),
        make_recipe("R3", "Ramen", ["Noodles", "Egg", "Broth", "Pork"], cuisine_type="Asian",
                    prep_time=40, servings=2, difficulty="Medium", owner_id="U2", chef="Sam",
                    meal_type="Dinner", created_at="2025-02-20T10:00:00"),
        make_recipe("R4", "Mystery Stew", ["Potato"], cuisine_type=None, prep_time=None,
                    servings=None, difficulty=None, owner_id="U2", chef=None,
                    created_at=None),
    ]


def test_cuisine_performance_two_italian_recipes():
    rows = analytics.cuisine_performance(_catalogue())
    italian = rows[0]
    assert italian["cuisine_type"] == "Italian"
    assert italian["total_recipes"] == 2
    assert italian["avg_prep_time"] == 38  # mean of 60 and 15, half rounds up
    assert italian["avg_servings"] == 5


def test_cuisine_performance_groups_missing_cuisine():
    rows = analytics.cuisine_performance(_catalogue())
    assert {r["cuisine_type"] for r in rows} == {"Italian", "Asian", "Unspecified"}
    unspecified = next(r for r in rows if r["cuisine_type"] == "Unspecified")
    assert unspecified["avg_prep_time"] == 0


def test_cuisine_popularity_names_newest_recipe():
    italian = analytics.cuisine_popularity(_catalogue())[0]
    assert italian["top_recipe"] == "Bruschetta"
    assert italian["avg_ingredients"] == 3  # (3 + 2) / 2 rounds up


def test_difficulty_summary_fixed_order():
    rows = analytics.difficulty_summary(_catalogue())
    assert [r["difficulty"] for r in rows] == ["Easy", "Medium", "Hard", "Unknown"]
    assert all(r["total"] == 1 for r in rows)


def test_top_recipes_by_servings_then_ingredients():
    rows = analytics.top_recipes(_catalogue(), limit=2)
    assert [r["recipe_id"] for r in rows] == ["R1", "R2"]
    assert rows[0]["ingredient_count"] == 3


def test_ingredient_usage_leaderboard():
    inventory = [make_item("I1", "tomato", 3, cost=0.5), make_item("I2", "Tomato", 1, cost=1.5)]
    rows = analytics.ingredient_usage(_catalogue(), inventory)
    tomato = rows[0]
    assert tomato["ingredient_name"] == "Tomato"
    assert tomato["usage_count"] == 2
    assert tomato["recipes"] == ["Lasagne", "Bruschetta"]
    assert tomato["average_cost"] == 1.0
    assert tomato["inventory_count"] == 2
    assert len(analytics.ingredient_usage(_catalogue(), inventory, limit=3)) == 3


def test_cost_report_unmatched_recipe_is_zero():
    inventory = [make_item("I1", "Pasta", 10, cost=0.25), make_item("I2", "Beef", 2, cost=4)]
    rows = analytics.cost_reports(_catalogue(), inventory)
    by_id = {r["recipe_id"]: r for r in rows}
    assert by_id["R3"]["total_cost"] == 0
    assert by_id["R3"]["coverage"] == 0
    # 1 x 0.25 + 1 x 4, two of three ingredients priced
    assert by_id["R1"]["total_cost"] == 4.25
    assert by_id["R1"]["coverage"] == 67
    assert rows[-1]["recipe_id"] == "R1"


def test_cost_report_recipe_without_ingredients():
    inventory = [make_item("I1", "Pasta", 10, cost=0.25)]
    [row] = analytics.cost_reports([make_recipe("R9", "Empty", [])], inventory)
    assert row["total_cost"] == 0
    assert row["coverage"] == 0


def test_chef_insights_rollup():
    rows = analytics.chef_insights(_catalogue())
    alex = next(r for r in rows if r["owner_id"] == "U1")
    assert alex["chef"] == "Alex"
    assert alex["total_recipes"] == 2
    assert alex["avg_prep_time"] == 38
    assert alex["cuisine_preferences"] == ["Italian"]
    assert [d["difficulty"] for d in alex["difficulty_breakdown"]] == ["Easy", "Hard"]

    sam = next(r for r in rows if r["owner_id"] == "U2")
    assert sam["cuisine_preferences"] == ["Asian", "Unspecified"]
    assert [d["difficulty"] for d in sam["difficulty_breakdown"]] == ["Medium", "Unknown"]


def test_seasonal_trends_skips_undated():
    rows = analytics.seasonal_trends(_catalogue())
    assert [(r["year"], r["month"]) for r in rows] == [(2025, 1), (2025, 2)]
    assert rows[1]["total_recipes"] == 2
    assert rows[1]["label"] == "February 2025"
    assert rows[1]["cuisines"] == ["Asian", "Italian"]


def test_filter_recipes_combines_filters():
    filters = RecipeFilters(cuisine="Italian", max_prep_minutes=30)
    rows = analytics.filter_recipes(_catalogue(), filters)
    assert [r["recipe_id"] for r in rows] == ["R2"]


def test_filter_recipes_search_and_chef_are_case_insensitive():
    assert [r["recipe_id"] for r in analytics.filter_recipes(_catalogue(), RecipeFilters(search="RAM"))] == ["R3"]
    assert [r["recipe_id"] for r in analytics.filter_recipes(_catalogue(), RecipeFilters(chef="alex"))] == ["R2", "R1"]


def test_filter_recipes_without_filters_returns_newest_first():
    rows = analytics.filter_recipes(_catalogue(), limit=2)
    assert [r["recipe_id"] for r in rows] == ["R3", "R2"]


def test_applied_filters_blank_when_unused():
    applied = RecipeFilters(difficulty="Easy").applied()
    assert applied == {
        "cuisine": "", "difficulty": "Easy", "meal_type": "",
        "max_prep": "", "search": "", "chef": "",
    }
