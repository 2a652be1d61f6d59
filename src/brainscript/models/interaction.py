"""Models capturing per-user toggles on posts (likes and bookmarks)."""

from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from brainscript.db.session import Base


class PostLike(Base):
    """Per-user like on a post."""

    __tablename__ = "post_like"
    __table_args__ = (Index("ix_post_like_post_id", "post_id"),)

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate likes from the same user.


class PostSave(Base):
    """Per-user bookmark on a post. Has no side effects beyond the counter."""

    __tablename__ = "post_save"
    __table_args__ = (Index("ix_post_save_user_id", "user_id"),)

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
