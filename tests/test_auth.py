def test_register_returns_created_user(client, user):
    r = client.post("/api/register", json=user)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["data"]["username"] == "alice"
    assert isinstance(body["data"]["id"], int)
    assert "password" not in body["data"]


def test_register_duplicate_username(client, user):
    client.post("/api/register", json=user)
    r = client.post("/api/register", json={"username": "alice", "password": "another"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Registration failed"}


def test_register_malformed_payload(client):
    r = client.post("/api/register", json={"username": "alice"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_register_password_too_long_for_bcrypt(client):
    r = client.post("/api/register", json={"username": "alice", "password": "x" * 100})
    assert r.status_code == 400


def test_login_sets_session_cookie(client, user):
    client.post("/api/register", json=user)
    r = client.post("/api/login", json=user)
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Login successful"}
    cookie = r.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "Max-Age=86400" in cookie
    assert "samesite=lax" in cookie.lower()


def test_login_wrong_password(client, user):
    client.post("/api/register", json=user)
    r = client.post("/api/login", json={"username": "alice", "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid username or password"}
    assert "set-cookie" not in r.headers


def test_login_unknown_user(client):
    r = client.post("/api/login", json={"username": "ghost", "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid username or password"


def test_me_requires_cookie(client):
    r = client.get("/api/me")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Unauthorized"}


def test_me_rejects_invalid_token(client):
    client.cookies.set("token", "not-a-token")
    r = client.get("/api/me")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid token"}


def test_me_returns_claims(auth_client):
    r = auth_client.get("/api/me")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["username"] == "alice"
    assert isinstance(data["id"], int)


def test_me_follows_latest_login(client, user, other_user, register_and_login):
    register_and_login(client, user)
    register_and_login(client, other_user)
    assert client.get("/api/me").json()["data"]["username"] == "bob"


def test_logout_clears_cookie(auth_client):
    r = auth_client.post("/api/logout")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Logout successful"}
    assert "Max-Age=-1" in r.headers["set-cookie"]
    assert auth_client.get("/api/me").status_code == 401


def test_health_check(client):
    r = client.get("/health_check/")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
