"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_liferpg.db")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from liferpg.db.base import Base, get_db
from liferpg.main import app
from liferpg.services.users import create_user

SQLITE_URL = "sqlite:///./test_liferpg.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def user(db):
    """A fresh player per test, so no two tests share XP, coins or streaks."""
    return create_user(db, name="Test Player", timezone="UTC", seed_actions=False)


@pytest.fixture()
def headers(user):
    return {"X-User-Id": str(user.id)}
