# src/todoapp/core/state_flow.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")

Listener = Callable[[S], None]


class StateFlow(Generic[S]):
    """
    Holder of one immutable state snapshot.

    Controllers replace the snapshot through update(); the presentation layer
    only reads `value`, subscribes for changes, or awaits a condition.
    All calls are expected on the owning event loop thread.
    """

    def __init__(self, initial: S) -> None:
        self._value = initial
        self._listeners: list[Listener[S]] = []
        self._waiters: list[asyncio.Future[None]] = []

    @property
    def value(self) -> S:
        return self._value

    def update(self, fn: Callable[[S], S]) -> S:
        new_value = fn(self._value)
        if new_value == self._value:
            return self._value
        self._value = new_value

        for listener in list(self._listeners):
            try:
                listener(new_value)
            except Exception:
                logger.exception("State listener failed")

        waiters, self._waiters = self._waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_result(None)
        return new_value

    def subscribe(self, listener: Listener[S]) -> Callable[[], None]:
        """Register listener for future snapshots. Returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_until(self, predicate: Callable[[S], bool]) -> S:
        while not predicate(self._value):
            fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            self._waiters.append(fut)
            await fut
        return self._value
