"""
Admin Routes

Operator endpoints:
- POST /admin/circuit-breakers/reset: return every breaker to CLOSED
- POST /admin/data/reload: run a manual load (shares the in-flight guard
  with hot reload, so a concurrent call reports "Data loading already in
  progress" instead of loading twice)
"""

from fastapi import APIRouter

from design_system.application.api.dependencies import DataManagerDep, RegistryDep
from design_system.application.api.models import ReloadResponse, ResetResponse
from design_system.core.logging.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/circuit-breakers/reset", response_model=ResetResponse)
async def reset_circuit_breakers(registry: RegistryDep):
    registry.reset_all()
    names = registry.names()
    logger.info("Circuit breakers reset via admin API", breakers=names)
    return ResetResponse(reset=names, message=f"Reset {len(names)} circuit breaker(s)")


@router.post("/data/reload", response_model=ReloadResponse)
async def reload_data(data_manager: DataManagerDep):
    result = await data_manager.load_data()
    logger.info("Manual data reload", success=result.success, errors=len(result.errors))
    return ReloadResponse(**result.to_dict())
