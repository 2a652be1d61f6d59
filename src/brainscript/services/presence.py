"""Presence tracking for the "reading now" indicator.

A reader's client sends a heartbeat every few seconds while the tab is
visible. Each heartbeat bumps one row per (post, identity); readers count as
active while their row is younger than ``PRESENCE_ACTIVE_SECONDS``. Rows are
never removed, only filtered out by age.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from brainscript.core.settings import settings
from brainscript.db.time import utcnow
from brainscript.models import Presence, User
from brainscript.repositories.content_store import ContentStore

logger = logging.getLogger(__name__)

ANONYMOUS_READER_NAME = "Anonymous Reader"
MAX_SESSION_KEY_LENGTH = 128


@dataclass
class ActiveReader:
    """Display entry for one reader currently on a post."""

    key: str
    name: str
    image: str | None
    user_id: int | None
    last_seen: datetime


def resolve_session_key(user: User | None, session_key: str | None) -> str | None:
    """Return the weak identity to record for an unauthenticated reader.

    Authenticated readers are tracked by user id, so no key is returned.
    Anonymous readers without a client-generated key share one bucket.
    """
    if user is not None:
        return None
    key = (session_key or "").strip()
    if not key:
        return settings.presence_anonymous_bucket
    return key[:MAX_SESSION_KEY_LENGTH]


class PresenceTracker:
    """Records heartbeats and answers "who is reading this post" queries."""

    def __init__(
        self,
        store: ContentStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.clock = clock

    @property
    def active_window(self) -> timedelta:
        """Age after which a presence row no longer counts as active."""
        return timedelta(seconds=settings.presence_active_seconds)

    def heartbeat(
        self,
        post_id: int,
        user: User | None = None,
        session_key: str | None = None,
    ) -> Presence:
        """Mark the caller as reading ``post_id`` right now.

        Raises:
            NotFoundError: If the post does not exist.
        """
        self.store.require_post(post_id)
        key = resolve_session_key(user, session_key)
        row = self.store.upsert_presence(
            post_id,
            user_id=user.id if user is not None else None,
            session_key=key,
            timestamp=self.clock(),
        )
        logger.debug(
            "Heartbeat on post %s from %s",
            post_id,
            f"user {user.id}" if user is not None else f"session {key}",
        )
        return row

    def get_active_readers(self, post_id: int) -> list[ActiveReader]:
        """Return readers seen within the active window, newest first.

        The post's author is never listed. Returns an empty list for unknown
        posts.
        """
        post = self.store.get_post(post_id)
        if post is None:
            return []

        since = self.clock() - self.active_window
        rows = self.store.find_presence(post_id, since, limit=settings.presence_reader_cap)

        readers: list[ActiveReader] = []
        for row in rows:
            if row.user_id is not None and row.user_id == post.author_id:
                continue
            if row.user_id is None:
                readers.append(
                    ActiveReader(
                        key=f"presence-{row.id}",
                        name=ANONYMOUS_READER_NAME,
                        image=None,
                        user_id=None,
                        last_seen=row.updated_at,
                    )
                )
                continue

            user = self.store.get_user(row.user_id)
            if user is None:
                continue
            readers.append(
                ActiveReader(
                    key=f"user-{user.id}",
                    name=user.name or "Anonymous",
                    image=user.image,
                    user_id=user.id,
                    last_seen=row.updated_at,
                )
            )
        return readers

    def get_viewer_count(self, post_id: int) -> int:
        """Return how many readers are currently active on ``post_id``.

        Counts the same identities ``get_active_readers`` lists, without the
        reader cap: the author is left out and unknown posts have none.
        """
        post = self.store.get_post(post_id)
        if post is None:
            return 0

        since = self.clock() - self.active_window
        return sum(
            1
            for row in self.store.find_presence(post_id, since)
            if row.user_id is None or row.user_id != post.author_id
        )
