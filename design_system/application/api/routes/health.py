"""
Health Check Routes

- GET /health: overall status derived from the data snapshot and breakers
- GET /health/circuit-breakers: per-breaker statistics

Status rules:
    unhealthy  no snapshot is loaded (503)
    degraded   a snapshot is loaded but a breaker is not CLOSED or the
               cache is past its advisory TTL
    healthy    otherwise
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Response, status

from design_system.application.api.dependencies import DataManagerDep, RegistryDep, SettingsDep
from design_system.application.api.models import CircuitBreakersResponse, HealthResponse
from design_system.core.config.constants import CircuitState

# ============================================================================
# ROUTER SETUP
# ============================================================================

router = APIRouter(prefix="/health", tags=["Health"])


# ============================================================================
# HEALTH CHECK ENDPOINTS
# ============================================================================


@router.get("", response_model=HealthResponse)
async def health_check(
    response: Response,
    settings: SettingsDep,
    data_manager: DataManagerDep,
    registry: RegistryDep,
):
    """
    Report service health.

    HTTP Status Codes:
        200: healthy or degraded
        503: unhealthy (no data loaded)
    """
    data_status = data_manager.get_status()
    open_circuits = [
        name for name, stats in registry.get_all_stats().items()
        if stats.state is not CircuitState.CLOSED
    ]

    if not data_status["loaded"]:
        health = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif open_circuits or not data_status["cache_valid"]:
        health = "degraded"
    else:
        health = "healthy"

    return HealthResponse(
        status=health,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app.APP_VERSION,
        data=data_status,
        open_circuits=open_circuits,
    )


@router.get("/circuit-breakers", response_model=CircuitBreakersResponse)
async def circuit_breaker_stats(registry: RegistryDep):
    """Statistics of every registered circuit breaker."""
    stats = {name: s.to_dict() for name, s in registry.get_all_stats().items()}
    return CircuitBreakersResponse(circuit_breakers=stats, total=len(stats))
