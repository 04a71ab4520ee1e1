"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from design_system.application.container import ServiceContainer  # noqa: E402
from design_system.application.services import (  # noqa: E402
    ComponentService,
    DesignTokenService,
    GuidelinesService,
)
from design_system.core.config.settings import Settings  # noqa: E402
from design_system.core.logging.logger import clear_request_id  # noqa: E402
from design_system.core.resilience.circuit_breaker import (  # noqa: E402
    CircuitBreakerConfig,
    CircuitBreakerRegistry,
)
from design_system.data.data_manager import DataManager, DataManagerConfig  # noqa: E402
from tests.test_fixtures.dataset_factory import DatasetFactory  # noqa: E402


# ============================================================================
# Pytest Configuration
# ============================================================================

# pytest-asyncio runs in auto mode (see pyproject.toml)


@pytest.fixture(autouse=True)
def reset_request_id():
    """Make sure no request ID leaks between tests."""
    clear_request_id()
    yield
    clear_request_id()


# ============================================================================
# Time
# ============================================================================


class FakeClock:
    """Manually advanced wall clock (seconds since the epoch)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def dataset_dir(tmp_path):
    """Directory holding the default three dataset files."""
    return DatasetFactory.write(tmp_path / "data")


@pytest.fixture
def data_manager_config(dataset_dir):
    return DataManagerConfig(data_path=dataset_dir, enable_file_watching=False, debounce_delay=0.01)


@pytest.fixture
async def data_manager(data_manager_config, clock):
    """Data manager with the default dataset loaded (no watcher)."""
    manager = DataManager(data_manager_config, clock=clock)
    result = await manager.initialize()
    assert result.success, result.errors
    yield manager
    await manager.destroy()


# ============================================================================
# Circuit Breaker Fixtures
# ============================================================================


@pytest.fixture
def registry(clock):
    return CircuitBreakerRegistry(clock=clock)


@pytest.fixture
def breaker_config():
    """Factory for breaker configs with small, test-friendly defaults."""

    def make(name: str = "test", **overrides) -> CircuitBreakerConfig:
        params = {
            "failure_threshold": 3,
            "recovery_timeout": 30.0,
            "request_timeout": 1.0,
            "monitoring_period": 60.0,
            "half_open_max_calls": 2,
        }
        params.update(overrides)
        return CircuitBreakerConfig(name=name, **params)

    return make


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def token_service(data_manager, registry, breaker_config):
    return DesignTokenService(data_manager, registry.get_or_create(breaker_config("design-tokens")))


@pytest.fixture
def component_service(data_manager, registry, breaker_config):
    return ComponentService(data_manager, registry.get_or_create(breaker_config("components")))


@pytest.fixture
def guidelines_service(data_manager, registry, breaker_config):
    return GuidelinesService(data_manager, registry.get_or_create(breaker_config("guidelines")))


@pytest.fixture
def test_settings(dataset_dir):
    """Settings pointing at the default dataset with file watching disabled."""
    return Settings(
        DATA_PATH=str(dataset_dir),
        ENABLE_FILE_WATCHING=False,
        ENVIRONMENT="test",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def container(test_settings, clock):
    """Fully assembled and initialized service container."""
    services = ServiceContainer.from_settings(test_settings, clock=clock)
    result = await services.initialize()
    assert result.success, result.errors
    yield services
    await services.shutdown()
