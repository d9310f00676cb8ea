"""Interfaces module - Abstract base classes and dataclasses."""

from yapnet_client.interfaces.chat_transport import ChatTransport
from yapnet_client.interfaces.session_listener import ChatEntry, SessionListener

__all__ = [
    "ChatEntry",
    "ChatTransport",
    "SessionListener",
]
