"""SQLAlchemy models for posts and their denormalized engagement counters."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from brainscript.db.session import Base
from brainscript.db.time import utcnow


class Post(Base):
    """Article authored by a user.

    ``likes``, ``comments_count`` and ``saves_count`` mirror the number of
    corresponding rows and are adjusted in the same transaction that creates
    or removes those rows.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_post_views_non_negative"),
        CheckConstraint("likes >= 0", name="ck_post_likes_non_negative"),
        CheckConstraint("comments_count >= 0", name="ck_post_comments_non_negative"),
        CheckConstraint("saves_count >= 0", name="ck_post_saves_non_negative"),
        Index("ix_post_author_id", "author_id"),
        Index("ix_post_category", "category"),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # Sanitized HTML produced by the editor; treated as opaque text here.
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # "article", "leetcode", "tutorial"; free text beyond that.
    post_type: Mapped[str | None] = mapped_column(String(32), nullable=True)

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    saves_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_read_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=utcnow,
    )
