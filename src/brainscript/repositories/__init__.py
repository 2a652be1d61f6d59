"""Repository helpers wrapping SQLAlchemy sessions."""

from .content_store import ContentStore

__all__ = ["ContentStore"]
