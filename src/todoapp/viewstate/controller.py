# src/todoapp/viewstate/controller.py

"""
Lifecycle shared by the view-state controllers.

A controller is created by the presentation layer, started once (start()),
and destroyed with close(). Between the two it owns:
- one background subscription task (live query collection),
- any in-flight intent tasks (fire-and-forget mutations).

close() cancels all of them and waits until they are gone, so no live query
stays registered with the store after the controller is destroyed.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Coroutine
from typing import Any, Generic, TypeVar

from ..core.state_flow import StateFlow

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")


def describe_error(exc: BaseException) -> str:
    """User-visible message for a fault."""
    return str(exc) or type(exc).__name__


class ViewStateController(ABC, Generic[S]):
    def __init__(self, initial: S) -> None:
        self._state: StateFlow[S] = StateFlow(initial)
        self._subscription: asyncio.Task[None] | None = None
        self._intents: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def state(self) -> StateFlow[S]:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def start(self) -> None:
        """Begin observing the repository (idempotent)."""

    async def close(self) -> None:
        self._closed = True
        pending = [t for t in (self._subscription, *self._intents) if t is not None and not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._subscription = None
        self._intents.clear()

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ---- helpers for subclasses ----

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"{type(self).__name__} is closed")

    def _subscribe(self, coro: Coroutine[Any, Any, None], *, name: str) -> None:
        """Replace the current subscription task with a new one."""
        self._check_open()
        if self._subscription is not None and not self._subscription.done():
            self._subscription.cancel()
        self._subscription = asyncio.get_running_loop().create_task(coro, name=name)

    def _launch(self, coro: Coroutine[Any, Any, R], *, name: str) -> asyncio.Task[R]:
        """Run an intent in the background; the returned task is the completion signal."""
        if self._closed:
            coro.close()
            self._check_open()
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._intents.add(task)
        task.add_done_callback(self._intents.discard)
        return task
