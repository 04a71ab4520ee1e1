"""
FastAPI Dependencies

Accessors for the singletons the lifespan stores on ``app.state``. Routes
declare them with the ``Annotated`` aliases below:

    @router.get("/tools")
    async def list_tools(dispatcher: DispatcherDep):
        ...
"""

from typing import Annotated

from fastapi import Depends, Request

from design_system.application.container import ServiceContainer
from design_system.application.tools.dispatcher import ToolDispatcher
from design_system.core.config.settings import Settings
from design_system.core.exceptions import ServiceUnavailableError
from design_system.core.resilience.circuit_breaker import CircuitBreakerRegistry
from design_system.data.data_manager import DataManager


def get_container(request: Request) -> ServiceContainer:
    """
    Retrieve the ServiceContainer created during startup.

    Raises:
        ServiceUnavailableError: If the lifespan has not run (or has shut down)
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise ServiceUnavailableError("design-system", "service container is not initialized")
    return container


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_dispatcher(container: Annotated[ServiceContainer, Depends(get_container)]) -> ToolDispatcher:
    return container.dispatcher


def get_registry(container: Annotated[ServiceContainer, Depends(get_container)]) -> CircuitBreakerRegistry:
    return container.registry


def get_data_manager(container: Annotated[ServiceContainer, Depends(get_container)]) -> DataManager:
    return container.data_manager


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DispatcherDep = Annotated[ToolDispatcher, Depends(get_dispatcher)]
RegistryDep = Annotated[CircuitBreakerRegistry, Depends(get_registry)]
DataManagerDep = Annotated[DataManager, Depends(get_data_manager)]
