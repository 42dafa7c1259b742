import os

# Must be set before any project module reads its configuration
os.environ["APP_ENV"] = "local"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CREDENTIAL_STORE", "memory")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from api.dependencies.auth import get_session_gate
from api.main import app
from services.credential_store import InMemoryCredentialStore
from services.session_service import InMemorySessionRegistry, SessionGate


@pytest.fixture
def gate():
    return SessionGate(InMemoryCredentialStore(), InMemorySessionRegistry(), secret_key="test-secret")


@pytest.fixture
def client(gate):
    app.dependency_overrides[get_session_gate] = lambda: gate
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    response = client.post(
        "/sessions/signup",
        json={"name": "Ada", "email": "ada@example.com", "password": "secret123"},
    )
    assert response.status_code == 200
    return client

