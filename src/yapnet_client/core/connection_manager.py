"""Connection manager - Owns the transport and keeps it alive."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable

from yapnet_client.config import ConnectionConfig
from yapnet_client.core.message_router import MessageRouter
from yapnet_client.core.session import Session
from yapnet_client.errors import ClientClosedError, ParseError, TransportError
from yapnet_client.interfaces.chat_transport import ChatTransport
from yapnet_client.protocol.codec import decode, encode
from yapnet_client.protocol.envelope import Envelope

logger = logging.getLogger(__name__)

TransportFactory = Callable[[], ChatTransport]


class ConnectionManager:
    """Maintains one logical connection to the chat server.

    Lifecycle of a connection attempt:
    1. connect() creates a fresh transport and runs it in a background task
    2. handle_open() re-authenticates an authenticated session with a resume
       envelope, then flushes the pending queue in FIFO order
    3. handle_message() decodes each frame and hands it to the router
    4. handle_close() schedules the next attempt after a fixed delay

    Envelopes sent while the connection is not open are queued and go out on
    the next successful open, ahead of anything sent after it. The session is
    never reset by transport events.

    All methods must be called from the event loop thread.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        session: Session,
        router: MessageRouter,
        transport_factory: TransportFactory,
    ) -> None:
        """Initialize the connection manager.

        Args:
            config: Endpoint and reconnect settings
            session: Session used to re-authenticate after reconnect
            router: Router that receives decoded inbound envelopes
            transport_factory: Creates a new, unconnected transport per attempt
        """
        self._config = config
        self._session = session
        self._router = router
        self._transport_factory = transport_factory
        self._transport: ChatTransport | None = None
        self._run_task: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._pending: deque[Envelope] = deque()
        self._open = False
        self._closed = False
        self._connect_attempts = 0

    def connect(self) -> None:
        """Start a connection attempt and return without waiting for it.

        Readiness is signalled through handle_open, not the return value.

        Raises:
            ClientClosedError: If shutdown() has been called
        """
        if self._closed:
            raise ClientClosedError("Connection manager is shut down")

        self._cancel_reconnect()
        if self._run_task is not None and not self._run_task.done():
            logger.debug("Connection attempt already in progress")
            return

        self._connect_attempts += 1
        transport = self._transport_factory()
        self._transport = transport
        logger.info(f"Connecting to {self._config.url} (attempt {self._connect_attempts})")
        self._run_task = asyncio.get_running_loop().create_task(self._run(transport))

    async def send(self, envelope: Envelope) -> bool:
        """Send an envelope now, or queue it until the connection opens.

        Args:
            envelope: The envelope to send

        Returns:
            True if the envelope was transmitted, False if it was queued

        Raises:
            ClientClosedError: If shutdown() has been called
        """
        if self._closed:
            raise ClientClosedError("Cannot send: connection manager is shut down")

        if not self._open:
            self._pending.append(envelope)
            logger.debug(f"Queued {envelope.kind} envelope ({len(self._pending)} pending)")
            return False

        try:
            await self._transmit(envelope)
        except TransportError as e:
            logger.warning(f"Send failed, queueing for reconnect: {e}")
            self._pending.append(envelope)
            return False
        return True

    async def handle_open(self) -> None:
        """Handle a newly opened connection.

        Raises:
            TransportError: If a send fails; unsent envelopes stay queued
        """
        logger.info(f"Connected to {self._config.url}")
        if self._session.is_authenticated and self._session.token is not None:
            logger.info("Resuming session after reconnect")
            await self._transmit(self._router.build_resume(self._session.token))

        flushed = 0
        while self._pending:
            await self._transmit(self._pending[0])
            self._pending.popleft()
            flushed += 1
        if flushed:
            logger.info(f"Flushed {flushed} queued envelopes")

        self._open = True

    def handle_message(self, raw: str | bytes) -> None:
        """Decode one inbound frame and dispatch it.

        Never raises: malformed frames and handler failures are reported and
        the frame is dropped.

        Args:
            raw: The frame as received from the transport
        """
        try:
            envelope = decode(raw)
        except ParseError as e:
            self._router.report(f"Discarded malformed message: {e}", logging.WARNING)
            return

        try:
            self._router.dispatch(envelope)
        except Exception as e:
            logger.exception(f"Error handling {envelope.kind} message")
            self._router.report(f"Error handling {envelope.kind} message: {e}")

    def handle_close(self) -> None:
        """Handle loss of the connection by scheduling a reconnect.

        At most one reconnect is pending at any time; a close while one is
        already scheduled is ignored.
        """
        self._open = False
        if self._closed:
            return
        if self._reconnect_handle is not None:
            logger.debug("Reconnect already scheduled")
            return

        delay = self._config.reconnect_delay_seconds
        logger.info(f"Disconnected, reconnecting in {delay}s")
        self._reconnect_handle = asyncio.get_running_loop().call_later(delay, self._reconnect)

    def handle_error(self, error: BaseException) -> None:
        """Report a transport error. Reconnecting is left to handle_close."""
        self._router.report(f"Transport error: {error}", logging.WARNING)

    async def shutdown(self) -> None:
        """Stop reconnecting, close the transport and refuse further sends."""
        if self._closed:
            return
        self._closed = True
        self._open = False
        self._cancel_reconnect()

        if self._transport is not None:
            await self._transport.close()

        if self._run_task is not None and not self._run_task.done():
            self._run_task.cancel()
            try:
                await self._run_task
            except asyncio.CancelledError:
                pass

        if self._pending:
            logger.warning(f"Shut down with {len(self._pending)} unsent envelopes")
        logger.info("Connection manager shut down")

    async def _run(self, transport: ChatTransport) -> None:
        try:
            await transport.connect(self._config.url)
        except Exception as e:
            self.handle_error(e)
            self.handle_close()
            return

        try:
            await self.handle_open()
            async for raw in transport.listen():
                self.handle_message(raw)
        except Exception as e:
            self.handle_error(e)
        finally:
            self._open = False
            await transport.close()

        self.handle_close()

    async def _transmit(self, envelope: Envelope) -> None:
        if self._transport is None:
            raise TransportError("No transport")
        await self._transport.send(encode(envelope))

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        if not self._closed:
            self.connect()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    @property
    def is_open(self) -> bool:
        """Check if the connection is open and the queue has been flushed."""
        return self._open

    @property
    def is_closed(self) -> bool:
        """Check if shutdown() has been called."""
        return self._closed

    @property
    def reconnect_pending(self) -> bool:
        """Check if a reconnect timer is scheduled."""
        return self._reconnect_handle is not None

    @property
    def pending_count(self) -> int:
        """Get the number of queued envelopes."""
        return len(self._pending)

    @property
    def connect_attempts(self) -> int:
        """Get the number of connection attempts started so far."""
        return self._connect_attempts
