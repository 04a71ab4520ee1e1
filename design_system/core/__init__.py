"""
Core Module

Foundational components: configuration, exceptions, logging, events and
the resilience primitives (circuit breaker, debounce, retry).
"""
