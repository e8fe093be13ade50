"""
Shared test fixtures: SQLite test database, test client, sample records.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set DATABASE_URL before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from backend.database import Base, get_db
from backend.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def customer(client):
    """A stored customer, as returned by the API."""
    response = client.post("/api/customers/", json={
        "name": "Ayşe Yılmaz",
        "phone": "0532 000 00 00",
        "address": "Atatürk Cad. No:1, İzmir",
    })
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def stone_type(client):
    response = client.post("/api/catalog/stone-types/", json={"name": "Mermer"})
    assert response.status_code == 200
    return response.json()
