"""
Trailing-edge debounce for async actions.

Every ``trigger()`` restarts a timer; the action runs once, ``delay``
seconds after the last trigger of a burst. Used by the data manager to
coalesce bursts of file events into a single reload.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from design_system.core.config.constants import RELOAD_DEBOUNCE_SECONDS
from design_system.core.logging.logger import get_logger

logger = get_logger(__name__)


class Debouncer:
    """
    Resettable-timer debounce.

    Must be triggered from inside a running event loop.

    Usage:
        debouncer = Debouncer(manager.reload, delay=0.1, name="data-reload")
        debouncer.trigger()
        debouncer.trigger()   # restarts the timer, reload runs once
    """

    def __init__(
        self,
        action: Callable[[], Awaitable[Any]],
        delay: float = RELOAD_DEBOUNCE_SECONDS,
        name: str = "debounce",
    ):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._action = action
        self.delay = delay
        self.name = name
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self.fire_count = 0

    @property
    def pending(self) -> bool:
        """True while a timer is armed or a fired action is still running."""
        return self._handle is not None or bool(self._tasks)

    def trigger(self) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self.fire_count += 1
        task = asyncio.ensure_future(self._action())
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced action failed", debouncer=self.name, error=str(exc), exc_info=exc)

    def cancel(self) -> None:
        """Disarm the timer and cancel any action still running."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        for task in list(self._tasks):
            task.cancel()

    async def wait(self) -> None:
        """Block until no timer is armed and every fired action has finished."""
        while self.pending:
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            else:
                await asyncio.sleep(max(self.delay / 2, 0.005))
