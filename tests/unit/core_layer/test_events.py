"""
Unit Tests for EventHub

Tests registration, ordering, unsubscription and listener isolation.
"""

import pytest

from design_system.core.config.constants import BreakerEvent, DataEvent
from design_system.core.observability import EventHub


@pytest.fixture
def hub():
    return EventHub("tests")


@pytest.mark.unit
class TestEventHub:
    def test_emit_calls_listeners_in_order(self, hub):
        calls = []
        hub.on("tick", lambda p: calls.append(("a", p["n"])))
        hub.on("tick", lambda p: calls.append(("b", p["n"])))

        count = hub.emit("tick", {"n": 1})

        assert count == 2
        assert calls == [("a", 1), ("b", 1)]

    def test_enum_and_string_names_are_equivalent(self, hub):
        calls = []
        hub.on(BreakerEvent.STATE_CHANGE, calls.append)

        hub.emit("stateChange", {"to": "OPEN"})

        assert calls == [{"to": "OPEN"}]
        assert hub.listener_count("stateChange") == 1

    def test_unsubscribe_callable(self, hub):
        calls = []
        unsubscribe = hub.on(DataEvent.DATA_LOADED, calls.append)

        unsubscribe()
        hub.emit(DataEvent.DATA_LOADED, {})

        assert calls == []

    def test_off_unknown_listener_is_noop(self, hub):
        hub.off("never-registered", print)
        assert hub.listener_count("never-registered") == 0

    def test_emit_without_listeners(self, hub):
        assert hub.emit("nobody-listens") == 0

    def test_missing_payload_becomes_empty_dict(self, hub):
        calls = []
        hub.on("tick", calls.append)
        hub.emit("tick")
        assert calls == [{}]

    def test_failing_listener_is_isolated(self, hub):
        calls = []

        def explode(payload):
            raise RuntimeError("listener bug")

        hub.on("tick", explode)
        hub.on("tick", calls.append)

        assert hub.emit("tick", {"n": 1}) == 2
        assert calls == [{"n": 1}]

    def test_remove_all_listeners(self, hub):
        hub.on("a", print)
        hub.on("b", print)

        hub.remove_all_listeners("a")
        assert hub.listener_count("a") == 0
        assert hub.listener_count("b") == 1

        hub.remove_all_listeners()
        assert hub.listener_count("b") == 0
