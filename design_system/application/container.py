"""
Service Container

Explicit assembly of the running service: one circuit breaker registry, one
data manager, the three query facades (each with its own breaker) and the
tool dispatcher. Settings are translated into plain config objects here so
the core never reads settings itself.

Author: System Architect
Date: 2025-12-09
"""

import time
from collections.abc import Callable
from pathlib import Path

from design_system.application.services.component_service import ComponentService
from design_system.application.services.design_token_service import DesignTokenService
from design_system.application.services.guidelines_service import GuidelinesService
from design_system.application.tools.dispatcher import ToolDispatcher
from design_system.core.config.settings import Settings, get_settings
from design_system.core.logging.logger import get_logger
from design_system.core.resilience.circuit_breaker import CircuitBreakerConfig, CircuitBreakerRegistry
from design_system.data.data_manager import DataManager, DataManagerConfig, LoadResult

logger = get_logger(__name__)

TOKENS_BREAKER = "design-tokens"
COMPONENTS_BREAKER = "components"
GUIDELINES_BREAKER = "guidelines"


def breaker_config(name: str, settings: Settings) -> CircuitBreakerConfig:
    cb = settings.circuit_breaker
    return CircuitBreakerConfig(
        name=name,
        failure_threshold=cb.CB_FAILURE_THRESHOLD,
        recovery_timeout=cb.CB_RECOVERY_TIMEOUT,
        request_timeout=cb.CB_REQUEST_TIMEOUT,
        monitoring_period=cb.CB_MONITORING_PERIOD,
        half_open_max_calls=cb.CB_HALF_OPEN_MAX_CALLS,
    )


def data_manager_config(settings: Settings) -> DataManagerConfig:
    data = settings.data
    return DataManagerConfig(
        data_path=Path(data.DATA_PATH),
        enable_file_watching=data.ENABLE_FILE_WATCHING,
        cache_timeout=data.CACHE_TIMEOUT,
        require_all_datasets=data.REQUIRE_ALL_DATASETS,
        watch_force_polling=data.WATCH_FORCE_POLLING,
    )


class ServiceContainer:
    """
    Owns every long-lived object of one service instance.

    Usage:
        container = ServiceContainer.from_settings(get_settings())
        result = await container.initialize()
        payload = await container.dispatcher.call_tool("get-design-token-categories", {})
        await container.shutdown()
    """

    def __init__(
        self,
        data_manager: DataManager,
        registry: CircuitBreakerRegistry,
        breaker_configs: dict[str, CircuitBreakerConfig],
        retry_attempts: int = 1,
    ):
        self.data_manager = data_manager
        self.registry = registry

        self.token_service = DesignTokenService(
            data_manager, registry.get_or_create(breaker_configs[TOKENS_BREAKER])
        )
        self.component_service = ComponentService(
            data_manager, registry.get_or_create(breaker_configs[COMPONENTS_BREAKER])
        )
        self.guidelines_service = GuidelinesService(
            data_manager, registry.get_or_create(breaker_configs[GUIDELINES_BREAKER])
        )
        self.dispatcher = ToolDispatcher(
            self.token_service,
            self.component_service,
            self.guidelines_service,
            retry_attempts=retry_attempts,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "ServiceContainer":
        settings = settings or get_settings()
        return cls(
            data_manager=DataManager(data_manager_config(settings), clock=clock),
            registry=CircuitBreakerRegistry(clock=clock),
            breaker_configs={
                name: breaker_config(name, settings)
                for name in (TOKENS_BREAKER, COMPONENTS_BREAKER, GUIDELINES_BREAKER)
            },
            retry_attempts=settings.tools.TOOL_RETRY_ATTEMPTS,
        )

    async def initialize(self) -> LoadResult:
        result = await self.data_manager.initialize()
        logger.info(
            "Service container initialized",
            success=result.success,
            breakers=self.registry.names(),
            watching=self.data_manager.is_watching,
        )
        return result

    async def shutdown(self) -> None:
        await self.data_manager.destroy()
        logger.info("Service container shut down")
