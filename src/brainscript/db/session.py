"""Engine, session factory and declarative base for the BrainScript database."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from brainscript.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for every BrainScript table."""


def engine_options(url: str) -> dict[str, Any]:
    """Return ``create_engine`` keyword arguments suited to ``url``."""
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.sql_debug}
    if url.startswith("sqlite"):
        # Requests hop between the threadpool and the event loop thread.
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(
    settings.effective_database_url,
    **engine_options(settings.effective_database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create every table registered by ``brainscript.models``."""
    import brainscript.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop every table registered by ``brainscript.models``."""
    import brainscript.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
