# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-note-stash")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from note_stash.api.v1.dependencies import get_rate_limiter_dep
from note_stash.core.security import hash_password
from note_stash.db.session import Base
from note_stash.db.session import get_db as app_get_session
from note_stash.db.time import utcnow
from note_stash.main import app as fastapi_app
from note_stash.models import Note, User
from note_stash.services.rate_limit import RateLimiter
from note_stash.services.tokens import TokenService, get_token_service

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "password@123"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def rate_limiter() -> RateLimiter:
    """Return a fresh limiter so tests never share request counts."""
    return RateLimiter(60, 60.0, max_keys=1_000)


@pytest.fixture(autouse=True)
def override_rate_limiter(app: FastAPI, rate_limiter: RateLimiter) -> Iterator[None]:
    app.dependency_overrides[get_rate_limiter_dep] = lambda: rate_limiter
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_rate_limiter_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def token_service() -> TokenService:
    return get_token_service()


def _create_user(db_session: Session, username: str, email: str) -> User:
    user = User(username=username, email=email, password=hash_password(TEST_PASSWORD))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return _create_user(db_session, "test_user", "test_user@example.com")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return _create_user(db_session, "other_user", "other_user@example.com")


@pytest.fixture()
def auth_token(test_user: User, token_service: TokenService) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = token_service.issue_access(test_user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User, token_service: TokenService) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = token_service.issue_access(other_user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_note(db_session: Session) -> Callable[..., Note]:
    """Return a factory persisting notes directly, bypassing request validation."""

    def _make_note(
        owner: User,
        *,
        title: str = "Test note",
        content: str = "Test note content",
        created_at: datetime | None = None,
        expires_at: datetime | None = None,
    ) -> Note:
        created = created_at or utcnow()
        note = Note(
            title=title,
            content=content,
            username=owner.username,
            created_at=created,
            updated_at=created,
            expires_at=expires_at,
        )
        db_session.add(note)
        db_session.commit()
        db_session.refresh(note)
        return note

    return _make_note


@pytest.fixture()
def mixed_notes(test_user: User, make_note: Callable[..., Note]) -> list[Note]:
    """Create five active and five expired notes, interleaved by creation time.

    Returns the active notes in creation order.
    """
    now = utcnow()
    active: list[Note] = []
    for i in range(10):
        created_at = now - timedelta(hours=10 - i)
        if i % 2 == 0:
            active.append(
                make_note(
                    test_user,
                    title=f"active {i}",
                    created_at=created_at,
                    expires_at=None if i % 4 == 0 else now + timedelta(days=1),
                )
            )
        else:
            make_note(
                test_user,
                title=f"expired {i}",
                created_at=created_at,
                expires_at=now - timedelta(seconds=1),
            )
    return active
