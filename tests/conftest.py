# tests/conftest.py

"""
Shared fixtures: every test gets a fresh application wired to its own
in-memory SQLite database.
"""
import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from catalog_service.db import Database
from catalog_service.main import create_app
from catalog_service.products import get_repository
from catalog_service.repository import ProductRepository

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("catalog_service").setLevel(logging.WARNING)


def make_database() -> Database:
    # StaticPool keeps the single in-memory connection alive across sessions
    return Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def database():
    db = make_database()
    yield db
    db.close()


@pytest.fixture
def app(database):
    app = create_app(database)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """
    TestClient running the app lifespan, so the database is opened and the
    tables are created before the first request.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(client, database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mock_repository(app):
    """Replaces the repository with a mock, to observe or fake persistence calls."""
    repository = MagicMock(spec=ProductRepository)
    app.dependency_overrides[get_repository] = lambda: repository
    return repository


@pytest.fixture
def create_product(client):
    def _create(title="Phone", description="A phone", price=999.99):
        response = client.post(
            "/api/products",
            json={"title": title, "description": description, "price": price},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
