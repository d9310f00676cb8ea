"""Transport module - Chat transport implementations."""

from yapnet_client.interfaces.chat_transport import ChatTransport
from yapnet_client.transport.websocket_transport import WebSocketTransport

__all__ = [
    "ChatTransport",
    "WebSocketTransport",
]
