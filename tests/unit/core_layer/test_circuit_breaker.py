"""
Unit Tests for CircuitBreaker and CircuitBreakerRegistry

Tests the state machine (CLOSED -> OPEN -> HALF_OPEN -> CLOSED), the rolling
failure window, admission control, timeouts, events and the registry.
A fake clock drives every time-dependent transition.
"""

import asyncio

import pytest

from design_system.core.config.constants import BreakerEvent, CircuitState
from design_system.core.exceptions import (
    ConfigurationError,
    InvalidDataError,
    ServiceError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from design_system.core.observability import EventHub
from design_system.core.resilience.circuit_breaker import CircuitBreaker, CircuitBreakerConfig


async def succeed():
    return "ok"


async def fail():
    raise RuntimeError("boom")


@pytest.fixture
def breaker(breaker_config, clock):
    return CircuitBreaker(breaker_config(), clock=clock)


async def trip(breaker: CircuitBreaker, times: int) -> None:
    for _ in range(times):
        with pytest.raises(ServiceError):
            await breaker.execute(fail)


@pytest.mark.unit
class TestClosedState:
    def test_initial_state(self, breaker):
        stats = breaker.get_stats()

        assert breaker.state is CircuitState.CLOSED
        assert stats.total_requests == 0
        assert stats.window_size == 0
        assert stats.next_attempt_time is None

    async def test_success_returns_result(self, breaker):
        assert await breaker.execute(succeed) == "ok"

        stats = breaker.get_stats()
        assert stats.total_requests == 1
        assert stats.total_successes == 1
        assert stats.last_success_time is not None

    async def test_unknown_failure_is_wrapped_as_service_error(self, breaker):
        with pytest.raises(ServiceError) as exc_info:
            await breaker.execute(fail, operation_name="tokens.get")

        error = exc_info.value
        assert error.message == "boom"
        assert isinstance(error.cause, RuntimeError)
        assert error.context["operation"] == "tokens.get"
        assert error.context["original_error"] == "RuntimeError"

    async def test_application_error_passes_through_unchanged(self, breaker):
        original = InvalidDataError("No design system data available")

        async def no_data():
            raise original

        with pytest.raises(InvalidDataError) as exc_info:
            await breaker.execute(no_data)
        assert exc_info.value is original
        assert breaker.get_stats().total_failures == 1

    async def test_stays_closed_below_threshold(self, breaker):
        await trip(breaker, 2)

        assert breaker.state is CircuitState.CLOSED
        assert breaker.get_stats().window_failures == 2

    async def test_opens_at_threshold(self, breaker, clock):
        await trip(breaker, 3)

        assert breaker.state is CircuitState.OPEN
        assert breaker.next_attempt_time.timestamp() == pytest.approx(clock.now + 30.0)

    async def test_failures_outside_window_are_forgotten(self, breaker, clock):
        await trip(breaker, 2)
        clock.advance(61)
        await trip(breaker, 2)

        assert breaker.state is CircuitState.CLOSED
        assert breaker.get_stats().window_failures == 2


@pytest.mark.unit
class TestOpenState:
    async def test_rejects_without_running_operation(self, breaker):
        await trip(breaker, 3)
        calls = []

        async def tracked():
            calls.append(1)
            return "ok"

        with pytest.raises(ServiceUnavailableError) as exc_info:
            await breaker.execute(tracked)

        assert calls == []
        assert "Circuit breaker is OPEN. Next attempt at" in exc_info.value.message
        assert exc_info.value.retryable is True

    async def test_rejections_count_as_requests_not_failures(self, breaker):
        await trip(breaker, 3)
        for _ in range(2):
            with pytest.raises(ServiceUnavailableError):
                await breaker.execute(succeed)

        stats = breaker.get_stats()
        assert stats.total_requests == 5
        assert stats.total_failures == 3

    async def test_moves_to_half_open_after_recovery_timeout(self, breaker, clock):
        await trip(breaker, 3)
        clock.advance(30)

        assert await breaker.execute(succeed) == "ok"
        assert breaker.state is CircuitState.HALF_OPEN
        assert breaker.next_attempt_time is None

    async def test_still_open_just_before_deadline(self, breaker, clock):
        await trip(breaker, 3)
        clock.advance(29.9)

        with pytest.raises(ServiceUnavailableError):
            await breaker.execute(succeed)
        assert breaker.state is CircuitState.OPEN


@pytest.mark.unit
class TestHalfOpenState:
    async def test_closes_after_enough_successes(self, breaker, clock):
        await trip(breaker, 3)
        clock.advance(30)

        await breaker.execute(succeed)
        assert breaker.state is CircuitState.HALF_OPEN
        await breaker.execute(succeed)

        stats = breaker.get_stats()
        assert breaker.state is CircuitState.CLOSED
        assert stats.failure_count == 0
        assert stats.success_count == 0
        assert stats.half_open_calls == 0

    async def test_failure_reopens(self, breaker, clock):
        await trip(breaker, 3)
        clock.advance(30)

        await trip(breaker, 1)

        assert breaker.state is CircuitState.OPEN
        assert breaker.next_attempt_time.timestamp() == pytest.approx(clock.now + 30.0)

    async def test_admission_limit(self, breaker, clock):
        await trip(breaker, 3)
        clock.advance(30)
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "ok"

        first = asyncio.create_task(breaker.execute(slow))
        second = asyncio.create_task(breaker.execute(slow))
        await asyncio.sleep(0)

        with pytest.raises(ServiceUnavailableError) as exc_info:
            await breaker.execute(succeed)
        assert "HALF_OPEN and at call limit" in exc_info.value.message

        release.set()
        assert await asyncio.gather(first, second) == ["ok", "ok"]
        assert breaker.state is CircuitState.CLOSED


@pytest.mark.unit
class TestTimeout:
    async def test_slow_operation_times_out(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(request_timeout=0.05), clock=clock)
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "late"

        with pytest.raises(ServiceTimeoutError) as exc_info:
            await breaker.execute(slow, operation_name="slow")

        assert exc_info.value.message == 'Operation "slow" timed out after 0.05s'
        assert breaker.get_stats().total_failures == 1

        release.set()
        await asyncio.sleep(0.01)

    async def test_timeouts_open_the_circuit(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(request_timeout=0.01, failure_threshold=2), clock=clock)

        async def hang():
            await asyncio.sleep(0.2)

        for _ in range(2):
            with pytest.raises(ServiceTimeoutError):
                await breaker.execute(hang)

        assert breaker.state is CircuitState.OPEN
        await asyncio.sleep(0.25)


@pytest.mark.unit
class TestEventsAndReset:
    async def test_state_change_events(self, breaker, clock):
        changes = []
        breaker.events.on(BreakerEvent.STATE_CHANGE, lambda p: changes.append((p["from"], p["to"])))

        await trip(breaker, 3)
        clock.advance(30)
        await breaker.execute(succeed)
        await breaker.execute(succeed)

        assert changes == [
            (CircuitState.CLOSED, CircuitState.OPEN),
            (CircuitState.OPEN, CircuitState.HALF_OPEN),
            (CircuitState.HALF_OPEN, CircuitState.CLOSED),
        ]

    async def test_call_events_carry_stats(self, breaker):
        successes, failures, rejections = [], [], []
        breaker.events.on(BreakerEvent.CALL_SUCCESS, successes.append)
        breaker.events.on(BreakerEvent.CALL_FAILURE, failures.append)
        breaker.events.on(BreakerEvent.CALL_REJECTED, rejections.append)

        await breaker.execute(succeed)
        await trip(breaker, 3)
        with pytest.raises(ServiceUnavailableError):
            await breaker.execute(succeed)

        assert len(successes) == 1
        assert successes[0]["stats"].total_successes == 1
        assert successes[0]["duration"] >= 0
        assert len(failures) == 3
        assert isinstance(failures[0]["error"], ServiceError)
        assert len(rejections) == 1
        assert isinstance(rejections[0]["error"], ServiceUnavailableError)

    def test_initialized_event(self, breaker_config, clock):
        hub = EventHub("test")
        seen = []
        hub.on(BreakerEvent.INITIALIZED, seen.append)

        CircuitBreaker(breaker_config("init"), clock=clock, events=hub)

        assert seen[0]["name"] == "init"
        assert seen[0]["config"]["failure_threshold"] == 3

    async def test_reset_zeroes_everything(self, breaker):
        resets = []
        breaker.events.on(BreakerEvent.RESET, resets.append)
        await trip(breaker, 3)

        breaker.reset()

        stats = breaker.get_stats()
        assert breaker.state is CircuitState.CLOSED
        assert stats.total_requests == 0
        assert stats.total_failures == 0
        assert stats.window_size == 0
        assert stats.last_failure_time is None
        assert len(resets) == 1
        assert await breaker.execute(succeed) == "ok"

    async def test_force_state(self, breaker, clock):
        breaker.force_state(CircuitState.OPEN)
        assert breaker.state is CircuitState.OPEN
        assert breaker.next_attempt_time is not None

        breaker.force_state("CLOSED")
        assert breaker.state is CircuitState.CLOSED

    async def test_stats_to_dict(self, breaker):
        await trip(breaker, 3)
        data = breaker.get_stats().to_dict()

        assert data["name"] == "test"
        assert data["state"] == "OPEN"
        assert isinstance(data["next_attempt_time"], str)
        assert isinstance(data["last_failure_time"], str)
        assert data["last_success_time"] is None


@pytest.mark.unit
class TestCircuitBreakerConfig:
    def test_defaults(self):
        config = CircuitBreakerConfig(name="x")

        assert config.failure_threshold == 5
        assert config.recovery_timeout == 30.0
        assert config.request_timeout == 5.0
        assert config.monitoring_period == 60.0
        assert config.half_open_max_calls == 3

    @pytest.mark.parametrize(
        "overrides",
        [
            {"failure_threshold": 0},
            {"half_open_max_calls": 0},
            {"recovery_timeout": 0},
            {"request_timeout": -1},
            {"monitoring_period": 0},
        ],
    )
    def test_rejects_non_positive_values(self, overrides):
        with pytest.raises(ConfigurationError):
            CircuitBreakerConfig(name="x", **overrides)

    def test_rejects_blank_name(self):
        with pytest.raises(ConfigurationError):
            CircuitBreakerConfig(name="  ")


@pytest.mark.unit
class TestCircuitBreakerRegistry:
    def test_get_or_create_returns_same_instance(self, registry, breaker_config):
        first = registry.get_or_create(breaker_config("design-tokens"))
        second = registry.get_or_create(breaker_config("design-tokens", failure_threshold=10))

        assert first is second
        assert first.config.failure_threshold == 3

    def test_lookup(self, registry, breaker_config):
        registry.get_or_create(breaker_config("components"))

        assert "components" in registry
        assert len(registry) == 1
        assert registry.names() == ["components"]
        assert registry.get("missing") is None

    async def test_reset_all_is_idempotent(self, registry, breaker_config):
        tokens = registry.get_or_create(breaker_config("design-tokens"))
        components = registry.get_or_create(breaker_config("components"))
        await trip(tokens, 3)
        await components.execute(succeed)

        registry.reset_all()
        first = {name: s.to_dict() for name, s in registry.get_all_stats().items()}
        registry.reset_all()
        second = {name: s.to_dict() for name, s in registry.get_all_stats().items()}

        assert first == second
        assert all(s["state"] == "CLOSED" and s["total_requests"] == 0 for s in first.values())

    def test_reset_all_on_empty_registry(self, registry):
        registry.reset_all()
        assert registry.get_all_stats() == {}
