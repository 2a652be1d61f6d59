# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPER_ADMIN_EMAIL", "root@example.com")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from brainscript.core.settings import settings  # noqa: E402
from brainscript.db.session import Base  # noqa: E402
from brainscript.db.session import get_db as app_get_session  # noqa: E402
from brainscript.db.time import utcnow  # noqa: E402
from brainscript.main import app as fastapi_app  # noqa: E402
from brainscript.models import Post, User  # noqa: E402
from brainscript.models.user import ROLE_ADMIN, ROLE_USER  # noqa: E402

TEST_DB_URL = "sqlite://"

_SLUG_COUNTER = count(1)


@pytest.fixture(scope="session")
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
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


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
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_token(email: str, *, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Sign a bearer token the way the identity provider does."""
    payload = {
        "sub": email,
        settings.jwt_email_claim: email,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def bearer(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {make_token(user.email)}"}


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting users with unique emails."""
    counter = count(1)

    def _make_user(name: str | None = None, role: str = ROLE_USER, email: str | None = None, **fields) -> User:
        index = next(counter)
        user = User(
            email=email or f"user{index}@example.com",
            name=name or f"User {index}",
            role=role,
            **fields,
        )
        db_session.add(user)
        db_session.flush()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Factory persisting published posts; keyword arguments override columns."""

    def _make_post(author: User, title: str | None = None, **fields) -> Post:
        index = next(_SLUG_COUNTER)
        values = {
            "title": title or f"Post {index}",
            "slug": f"post-{index}",
            "content": "<p>Body</p>",
            "published": True,
            "created_at": utcnow(),
        }
        values.update(fields)
        post = Post(author_id=author.id, **values)
        db_session.add(post)
        db_session.flush()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second user."""
    return make_user("Other User")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    """Create and return an administrator."""
    return make_user("Admin", role=ROLE_ADMIN)


@pytest.fixture()
def super_admin(make_user: Callable[..., User]) -> User:
    """Create the configured super admin account (already promoted)."""
    return make_user("Root", role=ROLE_ADMIN, email=settings.super_admin_email)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the administrator."""
    return bearer(admin_user)


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a published post written by ``test_user``."""
    return make_post(test_user, title="Test Post")


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a helper building authorization headers for any user."""
    return bearer


@pytest.fixture()
def token_factory() -> Callable[..., str]:
    """Return the bearer token signer."""
    return make_token
