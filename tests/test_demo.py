from fastapi.testclient import TestClient


def _fresh_client():
    from app.main import app
    return TestClient(app, raise_server_exceptions=True)


def test_demo_dashboard_accessible_without_auth():
    with _fresh_client() as c:
        resp = c.get("/demo/dashboard")
    assert resp.status_code == 200
    body = resp.json()
    assert body["stats"]["recipe_count"] == 7
    assert any(r["title"] == "Protein Oats" for r in body["cookability"])


def test_demo_dashboard_filters():
    with _fresh_client() as c:
        body = c.get("/demo/dashboard?cuisine=Italian").json()
    assert {r["title"] for r in body["filtered_recipes"]} == {"Spaghetti Bolognese", "Margherita Pizza"}
    italian = next(r for r in body["cuisine_performance"] if r["cuisine_type"] == "Italian")
    assert italian["total_recipes"] == 2
    assert italian["avg_prep_time"] == 40


def test_demo_smart_accessible_without_auth():
    with _fresh_client() as c:
        resp = c.get("/demo/smart?owner=U1")
    assert resp.status_code == 200
    oats = next(r for r in resp.json()["cookability"] if r["title"] == "Protein Oats")
    assert oats["missing_ingredients"] == ["Whey Protein"]
    assert oats["cookability_score"] == 67


def test_demo_low_stock_and_expiry():
    with _fresh_client() as c:
        body = c.get("/demo/smart").json()
    assert "Milk" in [r["ingredient_name"] for r in body["low_stock"]]
    assert all(r["days_until"] >= 0 for r in body["expiring_soon"])


def test_demo_does_not_affect_main_db(authed_client):
    with _fresh_client() as c:
        demo_count = c.get("/demo/dashboard").json()["stats"]["recipe_count"]
    main_titles = [r["title"] for r in authed_client.get("/recipes").json()]
    assert demo_count == 7
    assert "Protein Oats" not in main_titles


def test_demo_dashboard_scopes_recipe_usage():
    with _fresh_client() as c:
        body = c.get("/demo/dashboard?owner=U1&scope_recipe_usage=true").json()
    onion = next(r for r in body["low_stock"] if r["ingredient_name"] == "onion")
    assert onion["recipe_titles"] == ["Spaghetti Bolognese"]
    assert onion["usage_count"] == 1
