"""
Circuit Breaker and Registry for the Query Facades.

This module implements an in-process circuit breaker that guards every call
a query facade makes against the data manager's cache, plus the registry
that hands out exactly one breaker per logical resource.

MECHANISM OF ACTION:
-------------------
1.  **Rolling Window**:
    Every accounted outcome (success or failure) is appended to a window of
    ``(timestamp, ok)`` pairs. Entries not newer than
    ``now - monitoring_period`` are pruned before the failure count is read.

2.  **State Transitions**:
    - **CLOSED**: All calls admitted.
      - Threshold Reached: failures in the window >= ``failure_threshold`` -> OPEN.

    - **OPEN**: Calls rejected with ``ServiceUnavailableError`` without running
      the operation.
      - Recovery: the first call at or after ``next_attempt_time`` moves the
        breaker to HALF_OPEN and is admitted.

    - **HALF_OPEN**: Up to ``half_open_max_calls`` calls admitted.
      - On Success: once ``half_open_max_calls`` successes accumulate -> CLOSED.
      - On Failure: straight back to OPEN with a fresh recovery deadline.

3.  **Timeouts**:
    Each call races the operation against ``request_timeout``. A call that
    loses the race fails with ``ServiceTimeoutError``; the operation keeps
    running and whatever it eventually produces is discarded.

Admission rejections increase ``total_requests`` only. They never enter the
window and never count toward the threshold. The breaker does not retry;
callers decide based on ``error.retryable``.
"""

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, TypeVar

from design_system.core.config.constants import BreakerEvent, CircuitState
from design_system.core.exceptions import (
    ConfigurationError,
    DesignSystemError,
    ServiceError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from design_system.core.logging.logger import get_logger
from design_system.core.observability.events import EventHub

logger = get_logger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


def _to_datetime(ts: float | None) -> datetime | None:
    return datetime.fromtimestamp(ts, tz=timezone.utc) if ts is not None else None


def _discard_late_result(task: asyncio.Future) -> None:
    # Retrieve the outcome so asyncio does not warn about an unobserved exception
    if not task.cancelled():
        task.exception()


# ============================================================================
# Configuration & Stats
# ============================================================================


@dataclass(frozen=True)
class CircuitBreakerConfig:
    """
    Parameters of one breaker. Durations are in seconds.

    Raises:
        ConfigurationError: If any threshold or duration is not positive
    """

    name: str
    failure_threshold: int = 5
    recovery_timeout: float = 30.0
    request_timeout: float = 5.0
    monitoring_period: float = 60.0
    half_open_max_calls: int = 3

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ConfigurationError("circuit_breaker.name", "must be a non-empty string")
        for field_name in ("failure_threshold", "half_open_max_calls"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(f"circuit_breaker.{field_name}", f"must be an integer >= 1, got {value!r}")
        for field_name in ("recovery_timeout", "request_timeout", "monitoring_period"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"circuit_breaker.{field_name}", f"must be a positive number, got {value!r}")


@dataclass(frozen=True)
class CircuitBreakerStats:
    """Point-in-time snapshot of a breaker's counters."""

    name: str
    state: CircuitState
    failure_count: int
    success_count: int
    half_open_calls: int
    window_size: int
    window_failures: int
    total_requests: int
    total_failures: int
    total_successes: int
    last_failure_time: datetime | None
    last_success_time: datetime | None
    next_attempt_time: datetime | None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        for key in ("last_failure_time", "last_success_time", "next_attempt_time"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


# ============================================================================
# Circuit Breaker
# ============================================================================


class CircuitBreaker:
    """
    Per-resource state machine guarding async operations.

    All mutation happens synchronously between awaits, so on a single event
    loop no transition is ever observed half-applied.

    Usage:
        breaker = CircuitBreaker(CircuitBreakerConfig(name="design-tokens"))
        tokens = await breaker.execute(load_tokens, operation_name="get_tokens")
    """

    def __init__(
        self,
        config: CircuitBreakerConfig,
        clock: Clock = time.time,
        events: EventHub | None = None,
    ):
        self.config = config
        self.name = config.name
        self._clock = clock
        self.events = events or EventHub(f"circuit_breaker:{config.name}")

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._half_open_calls = 0
        self._window: deque[tuple[float, bool]] = deque()
        self._last_failure_time: float | None = None
        self._last_success_time: float | None = None
        self._next_attempt_time: float | None = None

        self._total_requests = 0
        self._total_failures = 0
        self._total_successes = 0

        logger.info(
            "Circuit breaker initialized",
            circuit_breaker=self.name,
            failure_threshold=config.failure_threshold,
            recovery_timeout=config.recovery_timeout,
            request_timeout=config.request_timeout,
            monitoring_period=config.monitoring_period,
            half_open_max_calls=config.half_open_max_calls,
        )
        self.events.emit(BreakerEvent.INITIALIZED, {"name": self.name, "config": asdict(config)})

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def next_attempt_time(self) -> datetime | None:
        return _to_datetime(self._next_attempt_time)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str | None = None,
    ) -> T:
        """
        Run ``operation`` under the breaker's admission and timeout rules.

        Raises:
            ServiceUnavailableError: The call was rejected (OPEN, or HALF_OPEN at capacity)
            ServiceTimeoutError: The operation did not settle within ``request_timeout``
            ServiceError: The operation raised a non-application exception
            DesignSystemError: The operation's own application error, unchanged
        """
        op_name = operation_name or getattr(operation, "__name__", "operation")
        self._total_requests += 1

        if self._state is CircuitState.OPEN:
            now = self._clock()
            if self._next_attempt_time is None or now >= self._next_attempt_time:
                self._move_to_half_open()
            else:
                self._reject(
                    f"Circuit breaker is OPEN. Next attempt at {self.next_attempt_time.isoformat()}",
                    op_name,
                )

        if self._state is CircuitState.HALF_OPEN:
            if self._half_open_calls >= self.config.half_open_max_calls:
                self._reject("Circuit breaker is HALF_OPEN and at call limit", op_name)
            self._half_open_calls += 1

        start = time.perf_counter()
        try:
            result = await self._run_with_timeout(operation, op_name)
        except Exception as exc:
            error = self._on_failure(exc, time.perf_counter() - start, op_name)
            if error is exc:
                raise
            raise error from exc

        self._on_success(time.perf_counter() - start)
        return result

    async def _run_with_timeout(self, operation: Callable[[], Awaitable[T]], op_name: str) -> T:
        task = asyncio.ensure_future(operation())
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=self.config.request_timeout)
        except asyncio.TimeoutError:
            if task.done() and not task.cancelled():
                raise  # the operation raised TimeoutError itself
            task.add_done_callback(_discard_late_result)
            raise ServiceTimeoutError(
                op_name,
                self.config.request_timeout,
                context={"circuit_breaker": self.name},
            ) from None

    def _reject(self, reason: str, op_name: str) -> None:
        error = ServiceUnavailableError(
            self.name,
            reason,
            context={"circuit_breaker": self.name, "state": self._state.value, "operation": op_name},
        )
        logger.warning("Circuit breaker rejected call", circuit_breaker=self.name, state=self._state.value)
        self.events.emit(BreakerEvent.CALL_REJECTED, {"error": error, "stats": self.get_stats()})
        raise error

    # ------------------------------------------------------------------
    # Outcome accounting
    # ------------------------------------------------------------------

    def _record(self, now: float, ok: bool) -> None:
        self._window.append((now, ok))
        cutoff = now - self.config.monitoring_period
        while self._window and self._window[0][0] <= cutoff:
            self._window.popleft()

    def _window_failures(self) -> int:
        return sum(1 for _, ok in self._window if not ok)

    def _on_success(self, duration: float) -> None:
        now = self._clock()
        self._success_count += 1
        self._total_successes += 1
        self._last_success_time = now
        self._record(now, True)

        if self._state is CircuitState.HALF_OPEN and self._success_count >= self.config.half_open_max_calls:
            self._move_to_closed()

        self.events.emit(BreakerEvent.CALL_SUCCESS, {"duration": duration, "stats": self.get_stats()})

    def _on_failure(self, exc: Exception, duration: float, op_name: str) -> DesignSystemError:
        now = self._clock()
        self._failure_count += 1
        self._total_failures += 1
        self._last_failure_time = now
        self._record(now, False)

        if isinstance(exc, DesignSystemError):
            error = exc
        else:
            error = ServiceError(
                str(exc) or exc.__class__.__name__,
                cause=exc,
                context={
                    "circuit_breaker": self.name,
                    "operation": op_name,
                    "original_error": exc.__class__.__name__,
                },
            )

        if self._state is CircuitState.HALF_OPEN:
            self._move_to_open()
        elif self._state is CircuitState.CLOSED and self._window_failures() >= self.config.failure_threshold:
            self._move_to_open()

        logger.debug(
            "Circuit breaker recorded failure",
            circuit_breaker=self.name,
            error_code=error.code.value,
            window_failures=self._window_failures(),
        )
        self.events.emit(
            BreakerEvent.CALL_FAILURE, {"error": error, "duration": duration, "stats": self.get_stats()}
        )
        return error

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(self, to: CircuitState) -> None:
        previous = self._state
        self._state = to
        if previous is not to:
            self.events.emit(
                BreakerEvent.STATE_CHANGE,
                {"from": previous, "to": to, "stats": self.get_stats()},
            )

    def _move_to_closed(self) -> None:
        self._failure_count = 0
        self._success_count = 0
        self._half_open_calls = 0
        self._next_attempt_time = None
        self._transition(CircuitState.CLOSED)

    def _move_to_open(self) -> None:
        self._next_attempt_time = self._clock() + self.config.recovery_timeout
        self._half_open_calls = 0
        self._transition(CircuitState.OPEN)

    def _move_to_half_open(self) -> None:
        self._half_open_calls = 0
        self._success_count = 0
        self._failure_count = 0
        self._next_attempt_time = None
        self._transition(CircuitState.HALF_OPEN)

    def force_state(self, state: CircuitState) -> None:
        """Move to ``state`` as if the normal transition had fired (ops/test escape hatch)."""
        state = CircuitState(state)
        logger.warning("Circuit breaker state forced", circuit_breaker=self.name, state=state.value)
        if state is CircuitState.OPEN:
            self._move_to_open()
        elif state is CircuitState.HALF_OPEN:
            self._move_to_half_open()
        else:
            self._move_to_closed()

    def reset(self) -> None:
        """Return to CLOSED with every counter, total and the window zeroed."""
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._half_open_calls = 0
        self._window.clear()
        self._last_failure_time = None
        self._last_success_time = None
        self._next_attempt_time = None
        self._total_requests = 0
        self._total_failures = 0
        self._total_successes = 0
        logger.info("Circuit breaker reset", circuit_breaker=self.name)
        self.events.emit(BreakerEvent.RESET, {"stats": self.get_stats()})

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_stats(self) -> CircuitBreakerStats:
        return CircuitBreakerStats(
            name=self.name,
            state=self._state,
            failure_count=self._failure_count,
            success_count=self._success_count,
            half_open_calls=self._half_open_calls,
            window_size=len(self._window),
            window_failures=self._window_failures(),
            total_requests=self._total_requests,
            total_failures=self._total_failures,
            total_successes=self._total_successes,
            last_failure_time=_to_datetime(self._last_failure_time),
            last_success_time=_to_datetime(self._last_success_time),
            next_attempt_time=_to_datetime(self._next_attempt_time),
        )

    def __repr__(self) -> str:
        return f"CircuitBreaker(name='{self.name}', state={self._state.value})"


# ============================================================================
# Registry
# ============================================================================


class CircuitBreakerRegistry:
    """
    Named breaker registry: one breaker per logical resource.

    Constructed explicitly by the application container and passed to
    whatever builds the facades.
    """

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._breakers: dict[str, CircuitBreaker] = {}

    def get_or_create(self, config: CircuitBreakerConfig) -> CircuitBreaker:
        """Return the breaker named ``config.name``, creating and registering it if needed."""
        breaker = self._breakers.get(config.name)
        if breaker is not None:
            return breaker

        breaker = CircuitBreaker(config, clock=self._clock)
        breaker.events.on(BreakerEvent.STATE_CHANGE, self._log_state_change)
        self._breakers[config.name] = breaker
        return breaker

    def get(self, name: str) -> CircuitBreaker | None:
        return self._breakers.get(name)

    def names(self) -> list[str]:
        return list(self._breakers)

    def get_all_stats(self) -> dict[str, CircuitBreakerStats]:
        return {name: breaker.get_stats() for name, breaker in self._breakers.items()}

    def reset_all(self) -> None:
        for breaker in self._breakers.values():
            breaker.reset()
        logger.info("All circuit breakers reset", count=len(self._breakers))

    def __len__(self) -> int:
        return len(self._breakers)

    def __contains__(self, name: object) -> bool:
        return name in self._breakers

    @staticmethod
    def _log_state_change(payload: dict[str, Any]) -> None:
        stats: CircuitBreakerStats = payload["stats"]
        log = logger.warning if payload["to"] is CircuitState.OPEN else logger.info
        log(
            "Circuit breaker state changed",
            circuit_breaker=stats.name,
            from_state=payload["from"].value,
            to_state=payload["to"].value,
            total_failures=stats.total_failures,
            next_attempt_time=stats.next_attempt_time.isoformat() if stats.next_attempt_time else None,
        )
