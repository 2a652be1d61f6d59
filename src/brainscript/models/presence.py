"""Models for ephemeral "reading now" markers."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from brainscript.db.session import Base
from brainscript.db.time import utcnow


class Presence(Base):
    """Last time an identity was observed reading a post.

    Exactly one of ``user_id`` and ``session_key`` is set. ``session_key`` is
    a weak identity supplied by the client (or the shared anonymous bucket);
    it never grants ownership of anything. Rows are refreshed, never deleted:
    stale rows are simply filtered out by age.
    """

    __tablename__ = "presence"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_presence_post_user"),
        UniqueConstraint("post_id", "session_key", name="uq_presence_post_session"),
        Index("ix_presence_post_updated", "post_id", "updated_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=True,
    )
    session_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
