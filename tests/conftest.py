import os

os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from planner.database import get_db
from planner.database.base_class import Base
from planner.main import app
from planner.model import Habit, HabitCompletion, Task, User  # noqa: F401
from planner.router.dependencies import get_today

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

PASSWORD = "Secreto123"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def set_today():
    """Pin the request's calendar day: ``set_today(date(2024, 1, 3))``."""
    def _set(day: date):
        app.dependency_overrides[get_today] = lambda: day
    return _set


def register(client, email="ana@example.com", first_name="Ana", last_name="Lopez", timezone=None):
    body = {"first_name": first_name, "last_name": last_name, "email": email, "password": PASSWORD}
    if timezone:
        body["timezone"] = timezone
    res = client.post("/api/auth/register", json=body)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def auth_headers(client):
    data = register(client)
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def other_headers(client):
    data = register(client, email="luis@example.com", first_name="Luis")
    return {"Authorization": f"Bearer {data['token']}"}
