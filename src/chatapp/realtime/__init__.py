"""Real-time delivery of chat events over WebSockets."""

from chatapp.realtime.events import ChatEventEnum
from chatapp.realtime.manager import ConnectionManager, manager

__all__ = [
    "ChatEventEnum",
    "ConnectionManager",
    "manager",
]
