"""
Pytest configuration and fixtures

Tests run against a throwaway SQLite file; the schema is rebuilt for every
test so nothing leaks between them.
"""
import os
import sys
import tempfile
import uuid
from pathlib import Path

import pytest

# Add the parent directory to the path so we can import config, models, services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="fixit_test_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'fixit_test.db'}"
os.environ["SUPABASE_JWT_SECRET"] = "test-secret"
os.environ["APP_ENV"] = "development"

TEST_JWT_SECRET = "test-secret"


@pytest.fixture
def db():
    import models  # noqa: F401
    from database import Base, SessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def make_user(db):
    """Insert a user with the given counters and return its id."""
    from models.user import User
    from services.progression import calculate_level

    def _make(total_xp: int = 0, current_streak: int = 0, longest_streak: int = 0) -> str:
        uid = str(uuid.uuid4())
        db.add(User(
            id=uid,
            total_xp=total_xp,
            current_level=calculate_level(total_xp),
            current_streak=current_streak,
            longest_streak=longest_streak,
        ))
        db.commit()
        return uid

    return _make


@pytest.fixture
def make_lever(db):
    from services.lever_service import LeverService

    def _make(uid: str, text: str = "Write for 2 hours", xp_value: int = 50, order: int = 0):
        lever = LeverService.create_levers(db, uid, [{"lever_text": text, "xp_value": xp_value, "order": order}])[0]
        db.commit()
        return lever

    return _make


def make_token(sub: str, secret: str = TEST_JWT_SECRET, audience: str = "authenticated") -> str:
    from jose import jwt

    return jwt.encode({"sub": sub, "aud": audience, "role": "authenticated"}, secret, algorithm="HS256")


@pytest.fixture
def app(db):
    from database import get_db
    from main import app as fastapi_app

    def _get_db():
        yield db

    fastapi_app.dependency_overrides[get_db] = _get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def api_client(app, user_id):
    """Client already authenticated as `user_id`."""
    from fastapi.testclient import TestClient
    from auth import get_current_user

    app.dependency_overrides[get_current_user] = lambda: user_id
    with TestClient(app) as client:
        yield client


@pytest.fixture
def anon_client(app):
    """Client going through real token verification."""
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client
