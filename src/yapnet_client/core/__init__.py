"""Core module - Session state, message routing, and connection management."""

from yapnet_client.core.connection_manager import ConnectionManager
from yapnet_client.core.message_router import MessageRouter
from yapnet_client.core.sequence import SequenceProvider
from yapnet_client.core.session import Session, SessionState

__all__ = [
    "ConnectionManager",
    "MessageRouter",
    "SequenceProvider",
    "Session",
    "SessionState",
]
