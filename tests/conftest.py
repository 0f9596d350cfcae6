import pytest
from fastapi.testclient import TestClient

from library_catalog_api.app.core.config import settings
from library_catalog_api.app.core.db import init_db
from library_catalog_api.app.main import create_app


@pytest.fixture
def database(tmp_path, monkeypatch):
    # Each test gets its own SQLite file with the schema applied.
    db_file = str(tmp_path / "catalog.db")
    monkeypatch.setattr(settings, "database_url", db_file)
    init_db()
    return db_file


@pytest.fixture
def app(database):
    return create_app()


@pytest.fixture
def client(app):
    # Entering the context runs startup/shutdown hooks and keeps a single
    # event loop for HTTP requests and WebSocket sessions alike.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def gql(client):
    """POST a GraphQL operation and return the decoded JSON response."""

    def run(query, variables=None, token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = client.post("/", json={"query": query, "variables": variables or {}}, headers=headers)
        assert response.status_code == 200
        return response.json()

    return run
