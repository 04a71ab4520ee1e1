"""
Event Listener Registry

Named-event publish/subscribe used by the circuit breaker and the data
manager. Payloads are plain dicts; listeners are synchronous callables.

A listener that raises is logged and skipped so that one faulty
subscriber cannot break the component that emits the event.
"""

from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Any

from design_system.core.logging.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[[dict[str, Any]], None]


def _key(event: str | Enum) -> str:
    return event.value if isinstance(event, Enum) else event


class EventHub:
    """Listener registry keyed by event name."""

    def __init__(self, source: str):
        self.source = source
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str | Enum, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        self._listeners[_key(event)].append(listener)
        return lambda: self.off(event, listener)

    def off(self, event: str | Enum, listener: Listener) -> None:
        listeners = self._listeners.get(_key(event))
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str | Enum, payload: dict[str, Any] | None = None) -> int:
        """
        Call every listener of ``event`` in registration order.

        Returns:
            Number of listeners that were invoked
        """
        name = _key(event)
        listeners = list(self._listeners.get(name, ()))
        for listener in listeners:
            try:
                listener(payload or {})
            except Exception:
                logger.exception("Event listener failed", source=self.source, event_name=name)
        return len(listeners)

    def listener_count(self, event: str | Enum) -> int:
        return len(self._listeners.get(_key(event), ()))

    def remove_all_listeners(self, event: str | Enum | None = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(_key(event), None)
