"""
API Response Models

Pydantic models describing the JSON bodies of the health, tool and admin
endpoints. They drive response validation and the OpenAPI docs.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class DataStatus(BaseModel):
    """Snapshot of the data manager (see DataManager.get_status)."""

    loaded: bool
    loading: bool
    load_count: int = Field(ge=0)
    data_path: str
    counts: dict[str, int] | None = None
    last_updated: str | None = None
    cache_age_seconds: float | None = None
    cache_timeout_seconds: float
    cache_valid: bool
    watching: bool
    last_errors: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    timestamp: str
    version: str
    data: DataStatus
    open_circuits: list[str] = Field(default_factory=list)


class CircuitBreakerStatsModel(BaseModel):
    name: str
    state: str
    failure_count: int
    success_count: int
    half_open_calls: int
    window_size: int
    window_failures: int
    total_requests: int
    total_failures: int
    total_successes: int
    last_failure_time: str | None = None
    last_success_time: str | None = None
    next_attempt_time: str | None = None


class CircuitBreakersResponse(BaseModel):
    circuit_breakers: dict[str, CircuitBreakerStatsModel]
    total: int


class ToolInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(serialization_alias="inputSchema")


class ToolListResponse(BaseModel):
    tools: list[ToolInfo]
    count: int


class ResetResponse(BaseModel):
    reset: list[str]
    message: str


class ReloadResponse(BaseModel):
    success: bool
    errors: list[str] = Field(default_factory=list)
    counts: dict[str, int] | None = None
    last_updated: str | None = None


__all__ = [
    "DataStatus",
    "HealthResponse",
    "CircuitBreakerStatsModel",
    "CircuitBreakersResponse",
    "ToolInfo",
    "ToolListResponse",
    "ResetResponse",
    "ReloadResponse",
]
