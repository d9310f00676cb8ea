"""yapnet-client - Session layer for the yapnet real-time chat service."""

from yapnet_client.client import ChatClient
from yapnet_client.config import Config
from yapnet_client.core.session import SessionState
from yapnet_client.errors import (
    ClientClosedError,
    ConfigError,
    ParseError,
    ProtocolError,
    ServerError,
    SessionStateError,
    TransportError,
    YapnetClientError,
)
from yapnet_client.interfaces.session_listener import ChatEntry, SessionListener

__version__ = "0.1.0"

__all__ = [
    "ChatClient",
    "ChatEntry",
    "ClientClosedError",
    "Config",
    "ConfigError",
    "ParseError",
    "ProtocolError",
    "ServerError",
    "SessionListener",
    "SessionState",
    "SessionStateError",
    "TransportError",
    "YapnetClientError",
]
