"""
Data Manager: Dataset Loading, Caching and Hot Reload

Loads the three dataset files (design tokens, components, guidelines),
validates them element by element, and publishes them together as one
immutable ``CachedDataset`` snapshot.

MECHANISM OF ACTION:
-------------------
1.  **Loading**:
    The three files are read concurrently (aiofiles) and parsed (orjson).
    Invalid elements are dropped and reported; the rest of the dataset is
    kept. A load succeeds when any collection is non-empty, or when all of
    them are if ``require_all_datasets`` is set.

2.  **Publishing**:
    A successful load replaces the snapshot with one assignment. Readers
    holding the previous snapshot keep a complete, consistent view. A failed
    load leaves the previous snapshot in place.

3.  **Single Flight**:
    At most one load runs at a time. A second ``load_data()`` while one is
    running returns immediately with "Data loading already in progress".

4.  **Hot Reload**:
    File events from the watcher are debounced (``RELOAD_DEBOUNCE_SECONDS``)
    into one reload, which emits ``dataUpdated`` or ``dataError``.

The cache TTL is advisory: ``is_cache_valid()`` reports it but nothing
evicts or reloads on expiry.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import orjson

from design_system.core.config.constants import (
    COMPONENTS_FILE,
    DESIGN_TOKENS_FILE,
    GUIDELINES_FILE,
    RELOAD_DEBOUNCE_SECONDS,
    DataEvent,
)
from design_system.core.exceptions import ConfigurationError
from design_system.core.logging.logger import get_logger
from design_system.core.observability.events import EventHub
from design_system.core.resilience.debounce import Debouncer
from design_system.data.file_watcher import DataFileWatcher
from design_system.data.models import Component, DatasetModel, DesignToken, Guideline, validate_collection

logger = get_logger(__name__)

LOAD_IN_PROGRESS = "Data loading already in progress"
LOAD_ABANDONED = "Data manager was destroyed during load"
NO_DATA_LOADED = "No data could be loaded"
NOT_ALL_DATA_LOADED = "Not all datasets could be loaded"


# ============================================================================
# Dataset descriptors
# ============================================================================


@dataclass(frozen=True)
class DatasetSpec:
    """How one dataset is named on disk and in messages."""

    key: str
    file_name: str
    model: type[DatasetModel]
    title: str  # "Design tokens"
    label: str  # "Token"


DATASETS: tuple[DatasetSpec, ...] = (
    DatasetSpec("tokens", DESIGN_TOKENS_FILE, DesignToken, "Design tokens", "Token"),
    DatasetSpec("components", COMPONENTS_FILE, Component, "Components", "Component"),
    DatasetSpec("guidelines", GUIDELINES_FILE, Guideline, "Guidelines", "Guideline"),
)


# ============================================================================
# Value objects
# ============================================================================


@dataclass(frozen=True)
class DataManagerConfig:
    """
    Data manager parameters. Durations are in seconds.

    Raises:
        ConfigurationError: If the cache timeout or debounce delay is invalid
    """

    data_path: Path
    enable_file_watching: bool = True
    cache_timeout: float = 300.0
    require_all_datasets: bool = False
    watch_force_polling: bool = False
    debounce_delay: float = RELOAD_DEBOUNCE_SECONDS

    def __post_init__(self):
        object.__setattr__(self, "data_path", Path(self.data_path))
        if self.cache_timeout <= 0:
            raise ConfigurationError("data.cache_timeout", f"must be positive, got {self.cache_timeout!r}")
        if self.debounce_delay < 0:
            raise ConfigurationError("data.debounce_delay", f"must be >= 0, got {self.debounce_delay!r}")


@dataclass(frozen=True)
class CachedDataset:
    """One complete, internally consistent snapshot of the three collections."""

    tokens: tuple[DesignToken, ...]
    components: tuple[Component, ...]
    guidelines: tuple[Guideline, ...]
    last_updated: datetime

    def counts(self) -> dict[str, int]:
        return {
            "tokens": len(self.tokens),
            "components": len(self.components),
            "guidelines": len(self.guidelines),
        }


@dataclass(frozen=True)
class LoadResult:
    success: bool
    data: CachedDataset | None = None
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "counts": self.data.counts() if self.data else None,
            "last_updated": self.data.last_updated.isoformat() if self.data else None,
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)


# ============================================================================
# Data Manager
# ============================================================================


class DataManager:
    """
    Sole owner of the cached dataset snapshot.

    Usage:
        manager = DataManager(DataManagerConfig(data_path=Path("./data")))
        result = await manager.initialize()
        snapshot = manager.get_cached_data()
        ...
        await manager.destroy()
    """

    def __init__(self, config: DataManagerConfig, clock: Callable[[], float] = time.time):
        self.config = config
        self._clock = clock
        self.events = EventHub("data_manager")

        self._cache: CachedDataset | None = None
        self._loaded_at: float | None = None
        self._loading = False
        self._load_count = 0
        self._last_errors: tuple[str, ...] = ()
        # Bumped by destroy(); a load started under an older generation never publishes
        self._generation = 0

        self._watcher: DataFileWatcher | None = None
        self._debouncer = Debouncer(self._reload, delay=config.debounce_delay, name="data-reload")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> LoadResult:
        """Load once; start watching only if that load succeeded and watching is enabled."""
        result = await self.load_data()

        if result.success and self.config.enable_file_watching:
            await self.start_watching()

        return result

    async def start_watching(self) -> None:
        if self._watcher is not None and self._watcher.running:
            return
        self._watcher = DataFileWatcher(
            self.config.data_path,
            on_change=self._handle_file_change,
            on_error=self._handle_watch_error,
            force_polling=self.config.watch_force_polling,
        )
        await self._watcher.start()

    async def stop_watching(self) -> None:
        self._debouncer.cancel()
        if self._watcher is not None:
            await self._watcher.stop()
            self._watcher = None

    @property
    def is_watching(self) -> bool:
        return self._watcher is not None and self._watcher.running

    async def destroy(self) -> None:
        """Stop the watcher, drop the snapshot and every listener."""
        self._generation += 1
        await self.stop_watching()
        self._cache = None
        self._loaded_at = None
        self.events.remove_all_listeners()
        logger.info("Data manager destroyed", data_path=str(self.config.data_path))

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._loading

    async def load_data(self) -> LoadResult:
        """
        Load, validate and publish all three datasets.

        Returns:
            LoadResult with the new snapshot on success. ``errors`` lists
            missing files, parse failures and dropped elements even when the
            load succeeded.
        """
        if self._loading:
            logger.warning(LOAD_IN_PROGRESS, data_path=str(self.config.data_path))
            return LoadResult(success=False, errors=(LOAD_IN_PROGRESS,))

        self._loading = True
        generation = self._generation
        start = time.perf_counter()
        try:
            loaded = await asyncio.gather(*(self._load_dataset(spec) for spec in DATASETS))

            if generation != self._generation:
                logger.warning(LOAD_ABANDONED, data_path=str(self.config.data_path))
                return LoadResult(success=False, errors=(LOAD_ABANDONED,))

            errors: list[str] = []
            collections: dict[str, list[DatasetModel]] = {}
            for spec, (items, dataset_errors) in zip(DATASETS, loaded):
                collections[spec.key] = items
                errors.extend(dataset_errors)

            if self.config.require_all_datasets:
                success = all(collections.values())
                failure_message = NOT_ALL_DATA_LOADED
            else:
                success = any(collections.values())
                failure_message = NO_DATA_LOADED

            if not success:
                errors.append(failure_message)
                self._last_errors = tuple(errors)
                logger.error("Data load failed", data_path=str(self.config.data_path), errors=errors)
                return LoadResult(success=False, errors=tuple(errors))

            now = self._clock()
            snapshot = CachedDataset(
                tokens=tuple(collections["tokens"]),
                components=tuple(collections["components"]),
                guidelines=tuple(collections["guidelines"]),
                last_updated=datetime.fromtimestamp(now, tz=timezone.utc),
            )
            # Single assignment: readers see either the old or the new snapshot
            self._cache = snapshot
            self._loaded_at = now
            self._load_count += 1
            self._last_errors = tuple(errors)

            logger.info(
                "Data loaded",
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                warnings=len(errors),
                **snapshot.counts(),
            )
            self.events.emit(DataEvent.DATA_LOADED, {"data": snapshot, "errors": list(errors)})
            return LoadResult(success=True, data=snapshot, errors=tuple(errors))
        finally:
            self._loading = False

    async def _load_dataset(self, spec: DatasetSpec) -> tuple[list[DatasetModel], list[str]]:
        path = self.config.data_path / spec.file_name

        if not await aiofiles.os.path.exists(path):
            return [], [f"{spec.title} file not found: {path}"]

        try:
            async with aiofiles.open(path, "rb") as fh:
                raw = await fh.read()
            payload = orjson.loads(raw)
        except (OSError, orjson.JSONDecodeError) as exc:
            return [], [f"Failed to load {spec.title.lower()}: {exc}"]

        if not isinstance(payload, list):
            payload = [payload]

        items, errors = validate_collection(payload, spec.model, spec.title, spec.label)
        if errors:
            logger.warning(
                "Dataset elements dropped",
                dataset=spec.key,
                valid=len(items),
                invalid_messages=len(errors),
            )
        return items, errors

    # ------------------------------------------------------------------
    # Cache access
    # ------------------------------------------------------------------

    def get_cached_data(self) -> CachedDataset | None:
        """Current snapshot, or None before the first successful load."""
        return self._cache

    def cache_age(self) -> float | None:
        if self._loaded_at is None:
            return None
        return self._clock() - self._loaded_at

    def is_cache_valid(self) -> bool:
        age = self.cache_age()
        return self._cache is not None and age is not None and age < self.config.cache_timeout

    def validate_cached_data(self) -> ValidationReport:
        """Re-validate every entity of the current snapshot."""
        snapshot = self._cache
        if snapshot is None:
            return ValidationReport(valid=False, errors=("No cached data available",))

        errors: list[str] = []
        for spec in DATASETS:
            raw = [item.model_dump(mode="json", by_alias=True) for item in getattr(snapshot, spec.key)]
            _, dataset_errors = validate_collection(raw, spec.model, spec.title, spec.label)
            errors.extend(dataset_errors)

        return ValidationReport(valid=not errors, errors=tuple(errors))

    def get_status(self) -> dict[str, Any]:
        snapshot = self._cache
        age = self.cache_age()
        return {
            "loaded": snapshot is not None,
            "loading": self._loading,
            "load_count": self._load_count,
            "data_path": str(self.config.data_path),
            "counts": snapshot.counts() if snapshot else None,
            "last_updated": snapshot.last_updated.isoformat() if snapshot else None,
            "cache_age_seconds": round(age, 3) if age is not None else None,
            "cache_timeout_seconds": self.config.cache_timeout,
            "cache_valid": self.is_cache_valid(),
            "watching": self.is_watching,
            "last_errors": list(self._last_errors),
        }

    # ------------------------------------------------------------------
    # Hot reload
    # ------------------------------------------------------------------

    def _handle_file_change(self, event: DataEvent, path: Path) -> None:
        self.events.emit(event, {"path": str(path)})
        self._debouncer.trigger()

    def _handle_watch_error(self, error: Exception) -> None:
        self.events.emit(DataEvent.WATCH_ERROR, {"error": error})

    async def _reload(self) -> None:
        try:
            result = await self.load_data()
        except Exception as exc:
            logger.exception("Reload failed unexpectedly")
            self.events.emit(DataEvent.DATA_ERROR, {"errors": [str(exc) or exc.__class__.__name__]})
            return

        if result.success:
            self.events.emit(DataEvent.DATA_UPDATED, {"data": result.data})
        elif self._loading:
            # A manual load is running; pick the change up once it finishes
            logger.debug("Reload deferred, load in progress")
            self._debouncer.trigger()
        else:
            self.events.emit(DataEvent.DATA_ERROR, {"errors": list(result.errors)})

    async def wait_for_reload(self) -> None:
        """Wait until any pending debounced reload has completed."""
        await self._debouncer.wait()
