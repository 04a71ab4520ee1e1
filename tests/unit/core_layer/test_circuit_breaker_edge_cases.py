"""
Edge Case Tests for CircuitBreaker

Covers boundaries the main suite does not: threshold of one, the exact
recovery deadline, operations that raise TimeoutError themselves, late
results after a timeout and misbehaving event listeners.
"""

import asyncio

import pytest

from design_system.core.config.constants import BreakerEvent, CircuitState
from design_system.core.exceptions import ServiceError, ServiceTimeoutError, ServiceUnavailableError
from design_system.core.resilience.circuit_breaker import CircuitBreaker


async def succeed():
    return "ok"


async def fail():
    raise RuntimeError("boom")


@pytest.mark.unit
class TestCircuitBreakerEdgeCases:
    async def test_threshold_of_one_opens_on_first_failure(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(failure_threshold=1), clock=clock)

        with pytest.raises(ServiceError):
            await breaker.execute(fail)

        assert breaker.state is CircuitState.OPEN

    async def test_probe_allowed_exactly_at_deadline(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(failure_threshold=1, recovery_timeout=10), clock=clock)
        with pytest.raises(ServiceError):
            await breaker.execute(fail)

        clock.advance(10)

        assert await breaker.execute(succeed) == "ok"
        assert breaker.state is CircuitState.HALF_OPEN

    async def test_half_open_limit_of_one_closes_on_first_success(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(failure_threshold=1, half_open_max_calls=1), clock=clock)
        with pytest.raises(ServiceError):
            await breaker.execute(fail)
        clock.advance(30)

        await breaker.execute(succeed)

        assert breaker.state is CircuitState.CLOSED

    async def test_rejected_half_open_calls_are_not_failures(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(failure_threshold=1, half_open_max_calls=1), clock=clock)
        with pytest.raises(ServiceError):
            await breaker.execute(fail)
        clock.advance(30)
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "ok"

        probe = asyncio.create_task(breaker.execute(slow))
        await asyncio.sleep(0)
        with pytest.raises(ServiceUnavailableError):
            await breaker.execute(succeed)

        assert breaker.get_stats().total_failures == 1
        release.set()
        await probe
        assert breaker.state is CircuitState.CLOSED

    async def test_operation_raising_timeout_itself_is_not_a_breaker_timeout(self, breaker):
        async def raises_timeout():
            raise asyncio.TimeoutError()

        with pytest.raises(ServiceError) as exc_info:
            await breaker.execute(raises_timeout)

        assert not isinstance(exc_info.value, ServiceTimeoutError)

    async def test_late_failure_after_timeout_is_discarded(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(request_timeout=0.01), clock=clock)

        async def slow_then_fail():
            await asyncio.sleep(0.05)
            raise RuntimeError("too late")

        with pytest.raises(ServiceTimeoutError):
            await breaker.execute(slow_then_fail)
        await asyncio.sleep(0.1)

        # The late outcome never reaches the breaker's accounting
        assert breaker.get_stats().total_failures == 1

    async def test_faulty_listener_does_not_break_execution(self, breaker):
        def explode(payload):
            raise RuntimeError("listener bug")

        breaker.events.on(BreakerEvent.CALL_SUCCESS, explode)

        assert await breaker.execute(succeed) == "ok"
        assert breaker.get_stats().total_successes == 1

    async def test_operation_name_defaults_to_function_name(self, breaker_config, clock):
        breaker = CircuitBreaker(breaker_config(request_timeout=0.01), clock=clock)

        async def lookup_token():
            await asyncio.sleep(0.05)

        with pytest.raises(ServiceTimeoutError) as exc_info:
            await breaker.execute(lookup_token)

        assert exc_info.value.operation == "lookup_token"
        await asyncio.sleep(0.06)

    async def test_reset_while_open_allows_calls_immediately(self, breaker, clock):
        breaker.force_state(CircuitState.OPEN)
        breaker.reset()

        assert await breaker.execute(succeed) == "ok"

    def test_repr(self, breaker):
        assert repr(breaker) == "CircuitBreaker(name='test', state=CLOSED)"


@pytest.fixture
def breaker(breaker_config, clock):
    return CircuitBreaker(breaker_config(), clock=clock)
