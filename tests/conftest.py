import os
import pytest

from pantry_insights.db.models import Recipe, Ingredient, InventoryItem


@pytest.fixture(scope="session", autouse=True)
def set_test_env(tmp_path_factory):
    db_file = tmp_path_factory.mktemp("data") / "test.db"
    demo_file = tmp_path_factory.mktemp("demo") / "demo.db"
    os.environ["DB_PATH"] = str(db_file)
    os.environ["APP_PASSWORD"] = "testpass"
    os.environ["SECRET_KEY"] = "test-secret-key-for-testing"
    os.environ["DEMO_DB_URL"] = str(demo_file)


@pytest.fixture(scope="session")
def client(set_test_env):
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


@pytest.fixture(scope="session")
def authed_client(client):
    client.post("/login", data={"password": "testpass"}, follow_redirects=False)
    return client


@pytest.fixture
def fresh_db(tmp_path, monkeypatch):
    """An empty, initialised database used for the duration of one test.

    Set through DB_PATH (not the ContextVar) so worker threads see it too.
    """
    from pantry_insights.db.database import init_db
    path = tmp_path / "fresh.db"
    monkeypatch.setenv("DB_PATH", str(path))
    init_db()
    return path


# ── In-memory builders ────────────────────────────────────────────────────────

def make_recipe(rid="R1", title="Recipe", ingredients=(), **kwargs) -> Recipe:
    """ingredients are names or (name, quantity, unit) tuples."""
    lines = []
    for ing in ingredients:
        if isinstance(ing, str):
            lines.append(Ingredient(name=ing, quantity=1, unit="unit"))
        else:
            lines.append(Ingredient(*ing))
    kwargs.setdefault("instructions", ["Cook it."])
    return Recipe(id=rid, title=title, ingredients=lines, **kwargs)


def make_item(iid="I1", name="Item", quantity=1, **kwargs) -> InventoryItem:
    return InventoryItem(id=iid, ingredient_name=name, quantity=quantity, **kwargs)


@pytest.fixture
def protein_oats():
    return make_recipe(
        "R1", "Protein Oats",
        [("Rolled Oats", 60, "g"), ("Milk", 250, "ml"), ("Whey Protein", 30, "g")],
        cuisine_type="American", difficulty="Easy", prep_time=5, servings=1,
        chef="Alex", owner_id="U1", created_at="2025-03-10T08:00:00",
    )


@pytest.fixture
def pantry():
    return [
        make_item("I1", "rolled oats", 500, unit="g", cost=0.01),
        make_item("I2", "Milk ", 2, unit="l", cost=1.2),
    ]
