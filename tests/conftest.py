import os

import pytest
from fastapi.testclient import TestClient

# Set testing environment before the app reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"
os.environ["TOKEN_COUNTER_BACKEND"] = "database"

from clinic_queue.main import app
from clinic_queue.core.database import Base, SessionLocal, engine, init_db
from clinic_queue.core.security import create_access_token


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_headers(user_id: str = "U1", role: str = "patient") -> dict:
    token = create_access_token({"sub": user_id, "role": role, "email": f"{user_id.lower()}@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def patient_headers():
    return make_headers("U1", "patient")


@pytest.fixture
def doctor_headers():
    return make_headers("D1", "doctor")


@pytest.fixture
def admin_headers():
    return make_headers("A1", "admin")


@pytest.fixture
def auth_headers():
    return make_headers
