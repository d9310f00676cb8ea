"""Chat transport interface - Abstract base class for transport implementations."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class ChatTransport(ABC):
    """Abstract base class for chat transport implementations.

    A transport carries text frames to and from the chat server. One
    transport instance represents one connection; the connection manager
    creates a fresh instance for every (re)connect.
    """

    @abstractmethod
    async def connect(self, url: str) -> None:
        """Open the connection to the chat server.

        Args:
            url: Endpoint to connect to

        Raises:
            TransportError: If the connection cannot be established
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""

    @abstractmethod
    async def send(self, text: str) -> None:
        """Send one text frame.

        Args:
            text: The encoded message

        Raises:
            TransportError: If the connection is not open or the send fails
        """

    @abstractmethod
    def listen(self) -> AsyncIterator[str | bytes]:
        """Listen for incoming frames.

        Yields:
            Each received frame, in delivery order. Iteration ends when the
            connection closes.
        """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the transport is currently connected."""
