"""
Shared fixtures: an app on a fresh in-memory SQLite database per test,
with uploads written under the test's tmp_path.

Usage:
    pytest tests -v
"""
import pytest
from fastapi.testclient import TestClient

from crowdfund.core.config import Settings
from crowdfund.main import create_app

OWNER = {
    "firstName": "Asha",
    "lastName": "Rao",
    "email": "asha@fundraise.org",
    "password": "secret-pass",
}
OTHER = {
    "firstName": "Vikram",
    "lastName": "Sen",
    "email": "vikram@fundraise.org",
    "password": "other-pass",
}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-signing-secret",
        upload_dir=str(tmp_path / "uploads"),
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def make_client(app):
    """Factory for independent clients; each one keeps its own cookie jar."""
    clients = []

    def _make() -> TestClient:
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


def signup(c: TestClient, user: dict) -> dict:
    """Register and log in `user` on client `c`; returns the login response body."""
    resp = c.post("/api/register", json=user)
    assert resp.status_code == 201, resp.text
    resp = c.post("/api/login", json={"email": user["email"], "password": user["password"]})
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def owner_client(make_client):
    c = make_client()
    c.user = signup(c, OWNER)
    return c


@pytest.fixture
def other_client(make_client):
    c = make_client()
    c.user = signup(c, OTHER)
    return c


@pytest.fixture
def create_event(owner_client):
    """Create an event as the owner and return its JSON."""

    def _create(c: TestClient = None, **overrides) -> dict:
        form = {
            "title": "Clean water for Sundarpur",
            "description": "Install two borewells in the village.",
            "amountToRaise": "1000",
            "tags": '["water", "village"]',
        }
        form.update({key: str(value) for key, value in overrides.items()})
        resp = (c or owner_client).post("/api/events", data=form)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
