"""WebSocket transport built on the websockets library."""

import logging
from collections.abc import AsyncIterator

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedError,
    InvalidHandshake,
    InvalidURI,
)
from websockets.protocol import State

from yapnet_client.errors import TransportError
from yapnet_client.interfaces.chat_transport import ChatTransport

logger = logging.getLogger(__name__)


class WebSocketTransport(ChatTransport):
    """One WebSocket connection to the chat server."""

    def __init__(self, open_timeout: float | None = 10.0) -> None:
        """Initialize the transport.

        Args:
            open_timeout: Timeout in seconds for the opening handshake
        """
        self._open_timeout = open_timeout
        self._ws: ClientConnection | None = None

    async def connect(self, url: str) -> None:
        """Open the WebSocket connection."""
        if self._ws is not None:
            raise TransportError("Transport already used; create a new one per connection")
        try:
            self._ws = await connect(url, open_timeout=self._open_timeout)
        except InvalidURI as e:
            raise TransportError(f"Invalid URL: {e}") from e
        except InvalidHandshake as e:
            raise TransportError(f"Handshake failed: {e}") from e
        except (OSError, TimeoutError) as e:
            raise TransportError(f"Cannot connect to {url}: {e}") from e
        logger.debug(f"WebSocket open to {url}")

    async def close(self) -> None:
        """Close the WebSocket if it is open."""
        if self._ws is not None:
            await self._ws.close()

    async def send(self, text: str) -> None:
        """Send one text frame."""
        if self._ws is None:
            raise TransportError("Not connected")
        try:
            await self._ws.send(text)
        except ConnectionClosed as e:
            raise TransportError(f"Connection closed: {e}") from e

    async def listen(self) -> AsyncIterator[str | bytes]:
        """Yield frames until the connection closes."""
        if self._ws is None:
            raise TransportError("Not connected")
        try:
            async for message in self._ws:
                yield message
        except ConnectionClosedError as e:
            logger.info(f"WebSocket closed abnormally: {e}")

    @property
    def is_connected(self) -> bool:
        """Check if the WebSocket is open."""
        return self._ws is not None and self._ws.state is State.OPEN
