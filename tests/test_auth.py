def test_login_wrong_password_returns_401(client):
    resp = client.post("/login", data={"password": "wrong"})
    assert resp.status_code == 401
    assert "invalid" in resp.json()["detail"].lower()


def test_login_correct_password_sets_cookie(client):
    resp = client.post("/login", data={"password": "testpass"})
    assert resp.status_code == 200
    assert resp.json() == {"authenticated": True}
    assert "pi_session" in resp.cookies


def test_protected_route_rejects_unauthenticated():
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app, raise_server_exceptions=True, cookies={}) as fresh:
        fresh.cookies.clear()
        resp = fresh.get("/dashboard")
    assert resp.status_code == 401


def test_tampered_token_is_rejected():
    from app.dependencies import create_session_token, verify_session_token
    assert verify_session_token(create_session_token())
    assert not verify_session_token("not-a-signed-token")
    assert not verify_session_token(create_session_token() + "x")


def test_logout_clears_session():
    # Use an isolated client so logout doesn't pollute the session-scoped authed_client
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app, raise_server_exceptions=True) as c:
        c.post("/login", data={"password": "testpass"})
        resp = c.post("/logout")
    assert resp.status_code == 200
    set_cookie = resp.headers.get("set-cookie", "")
    assert "pi_session" in set_cookie
    assert "max-age=0" in set_cookie.lower()
