import pytest

from trucktrack.auth.jwt import issue_access_token
from trucktrack.config import settings


def _register(client, *, name: str, email: str, role: str) -> dict:
    response = client.post(
        "/api/v1/auth/register",
        json={"name": name, "email": email, "password": "pass-1234", "role": role},
    )
    assert response.status_code == 201
    body = response.json()
    return {
        "id": body["user"]["id"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
    }


@pytest.fixture
def admin(client):
    return _register(client, name="Ada Admin", email="ada@trucktrack.test", role="admin")


@pytest.fixture
def driver(client):
    return _register(client, name="Dan Driver", email="dan@trucktrack.test", role="driver")


@pytest.fixture
def other_driver(client):
    return _register(client, name="Olu Driver", email="olu@trucktrack.test", role="driver")


@pytest.fixture
def auth_headers():
    def _headers(role: str, sub: str) -> dict[str, str]:
        token = issue_access_token(
            sub, role, secret=settings.jwt_secret, expires_in_s=settings.jwt_expires_in_s
        )
        return {"Authorization": f"Bearer {token}"}

    return {
        "admin": _headers("admin", "admin-1"),
        "driver": _headers("driver", "driver-1"),
    }
