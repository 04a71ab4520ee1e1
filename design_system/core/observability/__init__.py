from .events import EventHub, Listener

__all__ = ["EventHub", "Listener"]
