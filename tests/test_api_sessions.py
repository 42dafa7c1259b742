from api.dependencies.auth import SESSION_COOKIE


def _signup(client, email="ada@example.com", password="secret123", name="Ada"):
    return client.post("/sessions/signup", json={"name": name, "email": email, "password": password})


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["ready"] is True
    assert body["timestamp"]


def test_signup_sets_session(client):
    response = _signup(client, email="  Ada@Example.com ")

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["name"] == "Ada"
    assert body["redirect"] == "/app.html"
    assert SESSION_COOKIE in response.cookies

    session = client.get("/session")
    assert session.status_code == 200
    assert session.json()["user"] == body["user"]


def test_signup_validation_error(client):
    response = _signup(client, password="123")

    assert response.status_code == 400
    assert "at least 6 characters" in response.json()["error"]


def test_signup_duplicate_conflict(client):
    _signup(client)
    response = _signup(client, email="ADA@example.com")

    assert response.status_code == 409
    assert response.json()["error"] == "Email already registered. Please sign in."


def test_login_and_bearer_token(client):
    _signup(client)
    client.cookies.clear()

    response = client.post("/sessions/login", json={"email": "ada@example.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["token"]

    client.cookies.clear()
    session = client.get("/session", headers={"Authorization": f"Bearer {token}"})
    assert session.status_code == 200
    assert session.json()["user"]["email"] == "ada@example.com"


def test_login_wrong_password_and_unknown_email_look_the_same(client):
    _signup(client)
    client.cookies.clear()

    wrong = client.post("/sessions/login", json={"email": "ada@example.com", "password": "nope-nope"})
    unknown = client.post("/sessions/login", json={"email": "ghost@example.com", "password": "nope-nope"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid email or password."}


def test_logout_destroys_session(auth_client):
    token = auth_client.cookies.get(SESSION_COOKIE)

    response = auth_client.post("/sessions/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    # The old token is revoked server-side, not just dropped from the cookie jar
    assert auth_client.get("/session", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_protected_routes_require_authentication(client):
    for method, path in [
        ("get", "/session"),
        ("post", "/sessions/logout"),
        ("post", "/api/analyze"),
        ("post", "/api/export"),
        ("post", "/api/report"),
    ]:
        response = getattr(client, method)(path)
        assert response.status_code == 401, path
        assert response.json() == {"error": "Authentication required"}


def test_malformed_json_body_is_bad_request(client):
    response = client.post("/sessions/login", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400


def test_unknown_api_route_returns_json_404(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert "error" in response.json()


def test_unknown_page_redirects_to_error_page(client):
    response = client.get("/some/page", headers={"Accept": "text/html"}, follow_redirects=False)

    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith("/error.html?")
    assert "type=404" in location and "code=404" in location and "message=" in location
