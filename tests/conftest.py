"""
Pytest fixtures for testing
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.api.deps import get_today
from app.application.categories import EnsurePresetCategoriesUseCase
from app.auth import hash_password
from app.config import Settings
from app.infrastructure.db.session import Base
from app.infrastructure.db.models import User
from app.main import create_app

TODAY = date(2026, 3, 10)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared by every connection (StaticPool)"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def presets(db_session):
    EnsurePresetCategoriesUseCase(db_session).execute()


def _make_user(db: Session, email: str, is_premium: bool = False) -> User:
    user = User(email=email, password_hash=hash_password("password123"), is_premium=is_premium)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def user(db_session) -> User:
    return _make_user(db_session, "alice@mail.com")


@pytest.fixture
def other_user(db_session) -> User:
    return _make_user(db_session, "bob@mail.com")


@pytest.fixture
def premium_user(db_session) -> User:
    return _make_user(db_session, "carol@mail.com", is_premium=True)


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        FREE_TIER_LIMIT=5,
        _env_file=None,
    )


@pytest.fixture
def client(db_engine, settings):
    """Test client for an app wired to the in-memory engine, clock fixed at TODAY"""
    app = create_app(settings=settings, engine=db_engine)
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_client(client):
    """Client with a registered, logged-in user"""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "dave@mail.com", "password": "password123"},
    )
    assert response.status_code == 201
    return client
