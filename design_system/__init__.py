"""
Design System MCP Service

Serves a file-backed design-system dataset (tokens, components, guidelines)
through circuit-breaker guarded query facades and a small tool protocol.
"""

__version__ = "1.0.0"
