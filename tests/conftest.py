import os

# must be set before todoapp.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./todo_test.db")

import uuid

import pytest
from fastapi.testclient import TestClient

from todoapp.database import SessionLocal, Base, engine, init_db
from todoapp.main import app
from todoapp.models.user import User


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Insert a user row directly and return its id (for service-level tests)."""

    def _make(email=None):
        user = User(email=email or f"user_{uuid.uuid4().hex[:8]}@example.com", password="x")
        db.add(user)
        db.commit()
        return user.id

    return _make


@pytest.fixture
def signup(client):
    """Register and log in through the API; returns (user_id, auth headers).

    The session cookie set by /auth/login is dropped so each request only
    authenticates with the headers it is given.
    """

    def _signup(password="Pass123!"):
        email = f"user_{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/auth/register", json={"email": email, "password": password})
        assert r.status_code == 201
        user_id = r.json()["id"]
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200
        client.cookies.clear()
        return user_id, {"Authorization": f"Bearer {r.json()['token']}"}

    return _signup
