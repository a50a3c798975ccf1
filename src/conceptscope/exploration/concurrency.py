"""Supersede and debounce primitives for overlapping async requests."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class RequestSlot:
    """
    Monotonic generation counter for one logical request slot.

    Each request takes a token from ``begin()``; a response is only committed
    while ``is_current(token)`` holds. Starting a newer request invalidates
    every older token.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        """Start a new request and return its token."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def discard(self, token: int) -> bool:
        """True (and logged) if the response for ``token`` must be dropped."""
        if self.is_current(token):
            return False
        logger.debug(
            f"Discarding stale {self.name} response "
            f"(generation {token}, current {self._generation})"
        )
        return True


class Debouncer:
    """Trailing-edge debounce: run only after ``delay`` seconds of quiet.

    Scheduling again cancels the pending call, including one whose coroutine
    has already started.
    """

    def __init__(self, delay: float, name: str = "debounce") -> None:
        self.delay = delay
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, factory: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        """Run ``factory()`` after the quiet period; must be called inside a loop."""
        self.cancel()
        self._task = asyncio.create_task(self._fire(factory), name=self.name)
        return self._task

    async def _fire(self, factory: Callable[[], Awaitable[Any]]) -> Any:
        await asyncio.sleep(self.delay)
        return await factory()

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None

    async def wait(self) -> Any:
        """Wait for the pending call, if any; None when it was cancelled."""
        task = self._task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            return None
