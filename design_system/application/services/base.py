"""
Query Facade Base

Shared plumbing for the three read-only facades (tokens, components,
guidelines):

- input checks that run *before* the circuit breaker, so bad arguments never
  count against breaker health
- ``_guarded()``, which reads the current snapshot inside ``breaker.execute``
- not-found errors built *after* the guarded call returns

Filtering over a snapshot is synchronous; the only suspension point is the
breaker's timeout race.
"""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from design_system.core.exceptions import InvalidDataError, ResourceNotFoundError, ValidationError
from design_system.core.logging.logger import get_logger
from design_system.core.resilience.circuit_breaker import CircuitBreaker
from design_system.data.data_manager import CachedDataset, DataManager

logger = get_logger(__name__)

T = TypeVar("T")


def contains(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test; ``needle`` must already be lowercase."""
    return haystack is not None and needle in haystack.lower()


def any_contains(values: Iterable[str] | None, needle: str) -> bool:
    return values is not None and any(needle in v.lower() for v in values)


def has_member(values: Iterable[str] | None, wanted: str) -> bool:
    """Case-insensitive membership test."""
    wanted = wanted.lower()
    return values is not None and any(v.lower() == wanted for v in values)


def sorted_unique(values: Iterable[str]) -> list[str]:
    return sorted(set(values))


class BaseService:
    """
    Facade over the data manager guarded by one circuit breaker.

    Subclasses set ``service_name`` (used in logs and error context).
    """

    service_name = "service"

    def __init__(self, data_manager: DataManager, breaker: CircuitBreaker):
        self.data_manager = data_manager
        self.breaker = breaker

    # ------------------------------------------------------------------
    # Input validation (never touches the breaker)
    # ------------------------------------------------------------------

    def _require_text(self, value: Any, parameter: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(
                f"{parameter} must be a non-empty string",
                suggestions=[f"Provide a non-empty {parameter}"],
                context={"service": self.service_name, "parameter": parameter},
            )
        return value.strip()

    # ------------------------------------------------------------------
    # Guarded access
    # ------------------------------------------------------------------

    async def _guarded(self, operation_name: str, query: Callable[[CachedDataset], T]) -> T:
        """Run ``query`` against the current snapshot through the breaker."""

        async def operation() -> T:
            snapshot = self.data_manager.get_cached_data()
            if snapshot is None:
                raise InvalidDataError(
                    "No design system data available",
                    suggestions=["Ensure data files are loaded", "Check data directory configuration"],
                    context={"service": self.service_name, "method": operation_name},
                )
            return query(snapshot)

        return await self.breaker.execute(operation, operation_name=f"{self.service_name}.{operation_name}")

    def _not_found(
        self,
        resource: str,
        identifier: str,
        suggestions: list[str],
        within: str | None = None,
    ) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            resource,
            identifier,
            within=within,
            suggestions=suggestions,
            context={"service": self.service_name},
        )
