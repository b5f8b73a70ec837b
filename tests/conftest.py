"""Shared fixtures: a fresh SQLite database per test and an HTTP client."""

import pytest
from fastapi.testclient import TestClient

from task_tracker_api.app.core import db
from task_tracker_api.app.core.config import settings
from task_tracker_api.app.main import create_app


@pytest.fixture
def database(tmp_path, monkeypatch) -> str:
    """Point the application at an empty database file with the schema applied."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    db.init_db()
    return settings.database_url


@pytest.fixture
def client(database) -> TestClient:
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def user(client: TestClient) -> dict:
    response = client.post("/users", json={"name": "Ana", "email": "ana@x.com"})
    assert response.status_code == 201
    return response.json()
