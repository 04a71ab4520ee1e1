"""
Dataset Directory Watcher

Watches the dataset directory (recursively) with ``watchfiles`` and
reports create/modify/delete of data files (``.json``, ``.yaml``,
``.yml``). Dotfiles and anything under a dot-directory are ignored.

The watcher runs as a background asyncio task between ``start()`` and
``stop()``; it only reports events, reloading is the data manager's job.
"""

import asyncio
import contextlib
from collections.abc import Callable
from pathlib import Path

from watchfiles import Change, awatch

from design_system.core.config.constants import WATCHED_SUFFIXES, DataEvent
from design_system.core.logging.logger import get_logger

logger = get_logger(__name__)

CHANGE_EVENTS: dict[Change, DataEvent] = {
    Change.added: DataEvent.FILE_ADDED,
    Change.modified: DataEvent.FILE_CHANGED,
    Change.deleted: DataEvent.FILE_REMOVED,
}

# watchfiles' own grouping window; reload coalescing happens in the Debouncer
WATCH_STEP_MS = 50


def is_data_file(path: str | Path, root: str | Path | None = None) -> bool:
    """True for non-hidden files with a watched suffix."""
    path = Path(path)
    parts = path.relative_to(root).parts if root is not None and path.is_relative_to(root) else path.parts
    if any(part.startswith(".") for part in parts if part not in (".", "..")):
        return False
    return path.suffix.lower() in WATCHED_SUFFIXES


class DataFileWatcher:
    """
    Background watcher for one directory.

    Args:
        root: Directory to watch
        on_change: Called with (event, path) for every relevant change
        on_error: Called with the exception if the watch loop dies
        force_polling: Poll instead of using OS notifications
    """

    def __init__(
        self,
        root: str | Path,
        on_change: Callable[[DataEvent, Path], None],
        on_error: Callable[[Exception], None],
        force_polling: bool = False,
    ):
        self.root = Path(root).resolve()
        self._on_change = on_change
        self._on_error = on_error
        self.force_polling = force_polling
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _filter(self, change: Change, path: str) -> bool:
        return is_data_file(path, self.root)

    async def start(self) -> None:
        """Start the watch loop in the background as an asyncio task."""
        if self.running:
            logger.debug("File watcher already running", root=str(self.root))
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._watch(), name=f"watch:{self.root}")
        logger.info("File watcher started", root=str(self.root), force_polling=self.force_polling)

    async def stop(self) -> None:
        """Stop the watch loop and wait for the task to finish."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("File watcher stopped", root=str(self.root))

    async def _watch(self) -> None:
        try:
            async for changes in awatch(
                self.root,
                watch_filter=self._filter,
                stop_event=self._stop_event,
                force_polling=self.force_polling,
                debounce=WATCH_STEP_MS,
                step=WATCH_STEP_MS,
                recursive=True,
            ):
                for change, raw_path in sorted(changes, key=lambda c: c[1]):
                    event = CHANGE_EVENTS.get(change)
                    if event is None:
                        continue
                    logger.debug("Data file change", change_event=event.value, path=raw_path)
                    self._on_change(event, Path(raw_path))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error("File watcher failed", root=str(self.root), error=str(exc))
            self._on_error(exc)
