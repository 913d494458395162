"""Root conftest: shared fixtures for all server tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Ensure server/ is on sys.path
_server_dir = str(Path(__file__).resolve().parent)
if _server_dir not in sys.path:
    sys.path.insert(0, _server_dir)

# Fixed signing key and throwaway DB so importing config never touches .env or disk
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, make_engine
import models  # noqa: F401  (register all models with Base)

# In-memory SQLite for tests; StaticPool ensures all connections share the same DB
TEST_ENGINE = make_engine("sqlite:///:memory:", poolclass=StaticPool)
TestSession = sessionmaker(bind=TEST_ENGINE, autoflush=False, expire_on_commit=False)


@pytest.fixture(autouse=True)
def _setup_db():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield
    Base.metadata.drop_all(bind=TEST_ENGINE)


@pytest.fixture
def db():
    """Yield a test database session."""
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


def _make_user(db, name, email, password):
    import bcrypt
    from models.user import User

    user = User(
        name=name,
        email=email,
        password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return _make_user(db, "Test User", "testuser@example.com", "testpass")


@pytest.fixture
def other_user(db):
    return _make_user(db, "Other User", "other@example.com", "otherpass")


@pytest.fixture
def token(user):
    from services.security import create_access_token

    return create_access_token(user.id)


@pytest.fixture
def other_token(other_user):
    from services.security import create_access_token

    return create_access_token(other_user.id)


@pytest.fixture
def project(db, user):
    from models.project import Project

    p = Project(
        user_id=user.id,
        name="Support Bot",
        description="Answers support questions",
        model="openai/gpt-3.5-turbo",
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def prompt(db, project):
    from models.project import Prompt

    pr = Prompt(
        project_id=project.id,
        name="Persona",
        content="You are a helpful support agent.",
        type="system",
    )
    db.add(pr)
    db.commit()
    db.refresh(pr)
    return pr
