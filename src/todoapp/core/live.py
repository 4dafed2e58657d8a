# src/todoapp/core/live.py

"""
Live sequences: async iterators that emit the current query result on
subscription and re-emit the full result every time the underlying table
changes.

The store owns an InvalidationTracker. Every committed mutation calls
tracker.invalidate(table); each LiveQuery observing that table is woken up
and re-runs its fetch in a worker thread.

Invalidations are coalesced: if several writes land between two emissions the
subscriber sees one emission carrying the latest state. Emissions therefore
never go back in time.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Observer = Callable[[], None]


class InvalidationTracker:
    """Thread-safe registry of table observers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observers: dict[str, list[Observer]] = {}

    def add_observer(self, table: str, observer: Observer) -> None:
        with self._lock:
            self._observers.setdefault(table, []).append(observer)

    def remove_observer(self, table: str, observer: Observer) -> None:
        with self._lock:
            observers = self._observers.get(table)
            if not observers:
                return
            with contextlib.suppress(ValueError):
                observers.remove(observer)
            if not observers:
                del self._observers[table]

    def observer_count(self, table: str) -> int:
        with self._lock:
            return len(self._observers.get(table, ()))

    def invalidate(self, table: str) -> None:
        with self._lock:
            observers = list(self._observers.get(table, ()))
        for observer in observers:
            # The write is already committed; one broken observer must not hide it from the rest.
            try:
                observer()
            except Exception:
                logger.exception("Invalidation observer failed table=%s", table)


class LiveQuery(Generic[T]):
    """
    Subscribable query result.

    Usage:
        async with store.query_all() as live:
            async for rows in live:
                ...

    Iteration starts the subscription; aclose() (or leaving the async with
    block) cancels it. Errors raised by the fetch propagate out of __anext__.
    """

    def __init__(self, tracker: InvalidationTracker, table: str, fetch: Callable[[], T]) -> None:
        self._tracker = tracker
        self._table = table
        self._fetch = fetch

        self._loop: asyncio.AbstractEventLoop | None = None
        self._dirty = asyncio.Event()
        self._registered = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def map(self, fn: Callable[[T], R]) -> LiveQuery[R]:
        """Return a new (unsubscribed) live query that applies fn to every emission."""
        fetch = self._fetch
        return LiveQuery(self._tracker, self._table, lambda: fn(fetch()))

    async def first(self) -> T:
        """Current value, without keeping the subscription open."""
        try:
            return await self.__anext__()
        finally:
            await self.aclose()

    # ---- async iterator protocol ----

    def __aiter__(self) -> LiveQuery[T]:
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration

        if not self._registered:
            self._loop = asyncio.get_running_loop()
            # Register before the first fetch so no write between the two is missed.
            self._tracker.add_observer(self._table, self._on_invalidated)
            self._registered = True
            self._dirty.set()

        await self._dirty.wait()
        if self._closed:
            raise StopAsyncIteration
        self._dirty.clear()

        return await asyncio.to_thread(self._fetch)

    async def aclose(self) -> None:
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._registered:
            self._tracker.remove_observer(self._table, self._on_invalidated)
            # Wake a pending __anext__ so it can finish with StopAsyncIteration.
            self._on_invalidated()

    async def __aenter__(self) -> LiveQuery[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- internals ----

    def _on_invalidated(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        # The loop may close between the check and the call.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(self._dirty.set)
