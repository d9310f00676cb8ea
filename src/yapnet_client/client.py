"""Chat client - Wires session, router and connection together."""

import logging
from typing import Any

from yapnet_client.config import Config
from yapnet_client.core.connection_manager import ConnectionManager, TransportFactory
from yapnet_client.core.message_router import MessageRouter
from yapnet_client.core.sequence import SequenceProvider
from yapnet_client.core.session import Session
from yapnet_client.errors import ClientClosedError, SessionStateError
from yapnet_client.interfaces.session_listener import SessionListener
from yapnet_client.transport.websocket_transport import WebSocketTransport

logger = logging.getLogger(__name__)


class ChatClient:
    """Client-side session layer for the chat service.

    Owns one Session, MessageRouter and ConnectionManager. User actions build
    envelopes through the router and hand them to the connection manager,
    which sends them right away or queues them until the connection opens.

    Example:
        client = ChatClient(Config.default(), listener)
        client.start()
        await client.submit_registration("alice")
        await client.submit_chat("hello")
        ...
        await client.stop()
    """

    def __init__(
        self,
        config: Config,
        listener: SessionListener,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration
            listener: Application callbacks
            transport_factory: Creates a transport per connection attempt
                (default: WebSocketTransport)
        """
        self._config = config
        self._session = Session()
        self._sequence = SequenceProvider(monotonic=self._config.protocol.monotonic_sequence)
        self._router = MessageRouter(
            self._session, listener, sequence=self._sequence, protocol=self._config.protocol
        )

        if transport_factory is None:
            open_timeout = self._config.connection.open_timeout_seconds

            def transport_factory() -> WebSocketTransport:
                return WebSocketTransport(open_timeout=open_timeout)

        self._connection = ConnectionManager(
            self._config.connection, self._session, self._router, transport_factory
        )

    def start(self) -> None:
        """Start connecting. Must be called from a running event loop."""
        self._connection.connect()

    async def stop(self) -> None:
        """Shut down the connection; no reconnect and no further sends."""
        await self._connection.shutdown()

    async def submit_registration(self, username: str) -> bool:
        """Register a new identity with the server.

        Args:
            username: Requested display name

        Returns:
            False if the session is already authenticated, True otherwise

        Raises:
            ClientClosedError: If the client has been stopped
        """
        self._require_open_client()
        try:
            self._session.begin_registration(username)
        except SessionStateError as e:
            self._router.report(str(e), logging.WARNING)
            return False
        logger.info(f"Registering as {username}")
        await self._connection.send(self._router.build_register(username))
        return True

    async def submit_resume(self, token: str) -> bool:
        """Resume an existing identity using its token.

        Args:
            token: Token from an earlier welcome

        Returns:
            False if the session is already authenticated, True otherwise

        Raises:
            ClientClosedError: If the client has been stopped
        """
        self._require_open_client()
        try:
            self._session.begin_resume()
        except SessionStateError as e:
            self._router.report(str(e), logging.WARNING)
            return False
        logger.info("Resuming session by token")
        await self._connection.send(self._router.build_resume(token))
        return True

    async def submit_chat(self, content: str) -> bool:
        """Send a chat message to the default channel.

        The message is echoed to the listener immediately.

        Args:
            content: Message text

        Returns:
            True if transmitted now, False if queued until the connection opens

        Raises:
            ClientClosedError: If the client has been stopped
        """
        self._require_open_client()
        return await self._connection.send(self._router.prepare_chat(content))

    async def send_echo(self, data: dict[str, Any]) -> bool:
        """Ask the server to echo data back.

        Returns:
            True if transmitted now, False if queued
        """
        self._require_open_client()
        return await self._connection.send(self._router.build_echo(data))

    def _require_open_client(self) -> None:
        if self._connection.is_closed:
            raise ClientClosedError("Client is stopped")

    @property
    def config(self) -> Config:
        """Get the client configuration."""
        return self._config

    @property
    def session(self) -> Session:
        """Get the session."""
        return self._session

    @property
    def connection(self) -> ConnectionManager:
        """Get the connection manager."""
        return self._connection
