"""
Name: API Test Fixtures

Responsibilities:
  - TestClient over the real FastAPI app (in-memory stores via APP_ENV=test)
  - Fast argon2 parameters through dependency_overrides
  - Helper to register a user and build the Authorization header
"""

import pytest
from fastapi.testclient import TestClient

from gardenspace.api.main import app
from gardenspace.container import get_auth_service


@pytest.fixture
def client(auth_service):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(email: str = "ana@example.com", password: str = "s3cret!", **extra):
        payload = {"email": email, "password": password, "fullName": "Ana", **extra}
        return client.post("/auth/register", json=payload)

    return _register


@pytest.fixture
def auth_headers(register):
    res = register()
    assert res.status_code == 201
    return {"Authorization": f"Bearer {res.json()['token']}"}
