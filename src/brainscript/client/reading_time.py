"""Focused reading time tracking for an open post.

The accumulator only counts time while the post is visible. Time is folded
into ``accumulated_ms`` whenever the reader hides the page, and flushed to the
API on hide, on unmount and periodically through ``ReadTimeFlusher``. A flush
that fails keeps the pending time for the next attempt.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

import httpx

from brainscript.core.settings import settings

logger = logging.getLogger(__name__)

# Sends ``duration_ms`` of reading for ``post_id``; raises on failure.
ReadTimeSender = Callable[[int, int], Awaitable[None]]


class HttpReadTimeSender:
    """Posts read-time durations to ``/api/v1/posts/{post_id}/read-time``."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.token = token
        self.timeout_seconds = timeout_seconds or settings.read_time_http_timeout_seconds
        self._client = client
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=httpx.Timeout(self.timeout_seconds),
                )
        return self._client

    async def __call__(self, post_id: int, duration_ms: int) -> None:
        client = await self._ensure_client()
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        response = await client.post(
            f"/api/v1/posts/{post_id}/read-time",
            json={"duration_ms": duration_ms},
            headers=headers,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class ReadTimeAccumulator:
    """Tracks how long a post has been visible and reports it in chunks.

    ``clock`` returns seconds (``time.monotonic`` by default) and is
    injectable for tests.
    """

    def __init__(
        self,
        post_id: int,
        sender: ReadTimeSender,
        clock: Callable[[], float] = time.monotonic,
        min_flush_ms: int | None = None,
    ) -> None:
        self.post_id = post_id
        self.sender = sender
        self.clock = clock
        self.min_flush_ms = (
            settings.read_time_min_flush_ms if min_flush_ms is None else min_flush_ms
        )
        self.session_start: float | None = None
        self.accumulated_ms = 0
        self.is_visible = False

    def _elapsed_ms(self) -> int:
        if self.session_start is None:
            return 0
        return int((self.clock() - self.session_start) * 1000)

    def _fold(self) -> None:
        """Move the open session into ``accumulated_ms``."""
        self.accumulated_ms += self._elapsed_ms()
        self.session_start = self.clock() if self.is_visible else None

    @property
    def pending_ms(self) -> int:
        """Reading time not yet reported, including the open session."""
        return self.accumulated_ms + self._elapsed_ms()

    def mount(self) -> None:
        """Start timing when the post is opened."""
        self.is_visible = True
        self.session_start = self.clock()

    def visible(self) -> None:
        """Restart timing when the reader comes back to the page."""
        self.is_visible = True
        if self.session_start is None:
            self.session_start = self.clock()

    async def hidden(self) -> bool:
        """Stop timing when the page is hidden, then try to report."""
        self.is_visible = False
        self._fold()
        return await self.flush()

    async def unmount(self) -> bool:
        """Stop timing for good and make a final best-effort report."""
        self.is_visible = False
        self._fold()
        return await self.flush()

    async def flush(self) -> bool:
        """Report pending time if it exceeds ``min_flush_ms``.

        Returns True when a report was delivered. The reported amount leaves
        ``accumulated_ms`` before the request starts, so an overlapping flush
        only sends time folded in after it. A failed send puts it back.
        """
        if self.pending_ms <= self.min_flush_ms:
            return False

        self._fold()
        duration = self.accumulated_ms
        self.accumulated_ms = 0
        try:
            await self.sender(self.post_id, duration)
        except (httpx.HTTPError, OSError) as exc:
            self.accumulated_ms += duration
            logger.warning("Failed to track read time for post %s: %s", self.post_id, exc)
            return False

        logger.debug("Reported %d ms of reading on post %s", duration, self.post_id)
        return True


class ReadTimeFlusher:
    """Flushes an accumulator on a fixed interval so a crash loses little time."""

    def __init__(
        self,
        accumulator: ReadTimeAccumulator,
        interval_seconds: float | None = None,
    ) -> None:
        self.accumulator = accumulator
        self.interval_seconds = (
            settings.read_time_flush_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        """Return True while the periodic task is alive."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the periodic flush loop."""
        if not self.running:
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the loop; the caller decides whether to flush once more."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        interval = max(0.01, float(self.interval_seconds))

        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except asyncio.TimeoutError:
                await self.accumulator.flush()
