"""
Shared fixtures: an in-memory SQLite database wired into the app.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app import models  # noqa: F401

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Test client using the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def alice(client):
    """A registered user with a default household."""
    response = client.post("/api/users", json={"email": "alice@tripmail.com", "name": "Alice"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def bob(client):
    """A second registered user with a default household."""
    response = client.post("/api/users", json={"email": "bob@tripmail.com", "name": "Bob"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def trip(client, alice):
    """A trip created by Alice; her household participates with weight 1."""
    response = client.post(
        "/api/trips",
        json={"name": "Lake Weekend", "currency": "eur", "user_id": alice["user_id"]}
    )
    assert response.status_code == 201
    return response.json()
