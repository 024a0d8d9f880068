from trucktrack.config import settings


def test_register_login_and_me(client):
    register = client.post(
        "/api/v1/auth/register",
        json={
            "name": "Dan Driver",
            "email": " Dan@TruckTrack.test ",
            "phone": "+256700000002",
            "password": "pass-1234",
            "confirm_password": "pass-1234",
        },
    )
    assert register.status_code == 201
    profile = register.json()["user"]
    assert profile["email"] == "dan@trucktrack.test"
    assert profile["role"] == "driver"
    assert profile["status"] == "available"
    assert profile["performance_metrics"]["deliveries_completed"] == 0
    assert register.json()["token_type"] == "bearer"

    login = client.post(
        "/api/v1/auth/login", json={"email": "dan@trucktrack.test", "password": "pass-1234"}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]
    assert login.json()["expires_in"] == settings.jwt_expires_in_s

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == profile["id"]
    assert me.json()["last_active"] is not None


def test_register_rejects_duplicate_email_and_mismatched_passwords(client, driver):
    duplicate = client.post(
        "/api/v1/auth/register",
        json={"name": "Again", "email": "dan@trucktrack.test", "password": "pass-1234"},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Email already registered"

    mismatch = client.post(
        "/api/v1/auth/register",
        json={
            "name": "New",
            "email": "new@trucktrack.test",
            "password": "pass-1234",
            "confirm_password": "pass-9999",
        },
    )
    assert mismatch.status_code == 422


def test_login_rejects_wrong_password(client, driver):
    response = client.post(
        "/api/v1/auth/login", json={"email": "dan@trucktrack.test", "password": "nope-nope"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_is_rate_limited(client, monkeypatch):
    monkeypatch.setattr(settings, "login_rate_limit_requests", 2)
    payload = {"email": "ghost@trucktrack.test", "password": "whatever"}

    assert client.post("/api/v1/auth/login", json=payload).status_code == 401
    assert client.post("/api/v1/auth/login", json=payload).status_code == 401
    throttled = client.post("/api/v1/auth/login", json=payload)

    assert throttled.status_code == 429
    assert throttled.json()["detail"] == "Too many login attempts"
    assert int(throttled.headers["Retry-After"]) >= 1


def test_role_guards(client, driver, admin):
    assert client.get("/api/v1/drivers", headers=driver["headers"]).status_code == 403
    assert client.get("/api/v1/me/deliveries", headers=admin["headers"]).status_code == 403
    assert client.get("/api/v1/messages", headers=driver["headers"]).status_code == 200


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_admin_created_driver_claims_account_on_register(client, admin):
    created = client.post(
        "/api/v1/drivers",
        json={"name": "Cleo Driver", "email": "cleo@trucktrack.test"},
        headers=admin["headers"],
    )
    assert created.status_code == 201

    payload = {
        "name": "Cleo Driver",
        "email": "Cleo@TruckTrack.test",
        "phone": "+256700000009",
        "password": "pass-1234",
        "language": "sw",
    }
    register = client.post("/api/v1/auth/register", json=payload)
    assert register.status_code == 201
    profile = register.json()["user"]
    assert profile["id"] == created.json()["id"]
    assert profile["phone"] == "+256700000009"
    assert profile["language"] == "sw"

    login = client.post(
        "/api/v1/auth/login", json={"email": "cleo@trucktrack.test", "password": "pass-1234"}
    )
    assert login.status_code == 200

    again = client.post("/api/v1/auth/register", json=payload)
    assert again.status_code == 409
