"""Message router - Dispatches inbound envelopes and builds outbound ones."""

import logging
from collections.abc import Callable
from typing import Any

from yapnet_client.config import ProtocolConfig
from yapnet_client.core.sequence import SequenceProvider
from yapnet_client.core.session import Session
from yapnet_client.errors import ProtocolError, ServerError
from yapnet_client.interfaces.session_listener import ChatEntry, SessionListener
from yapnet_client.protocol.envelope import (
    ChatPayload,
    ChatSendPayload,
    EchoPayload,
    Envelope,
    ErrorPayload,
    HelloPayload,
    MessageKind,
    ResumePayload,
    WelcomePayload,
)

logger = logging.getLogger(__name__)


class MessageRouter:
    """Routes envelopes between the connection and the application.

    Inbound:
        err     -> operator log, no state change
        chat    -> ChatEntry to the listener
        welcome -> session becomes authenticated
        echo    -> debug log
        other   -> operator log warning, dropped

    Outbound envelopes are built with build_register, build_resume,
    prepare_chat and build_echo.
    """

    def __init__(
        self,
        session: Session,
        listener: SessionListener,
        sequence: SequenceProvider | None = None,
        protocol: ProtocolConfig | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            session: Session to update on welcome
            listener: Application callbacks
            sequence: Source of outbound seq values (default: always 0)
            protocol: Protocol settings (default: ProtocolConfig())
        """
        self._session = session
        self._listener = listener
        self._sequence = sequence or SequenceProvider()
        self._protocol = protocol or ProtocolConfig()
        self._handlers: dict[MessageKind, Callable[[Envelope], None]] = {
            MessageKind.ERROR: self._handle_error,
            MessageKind.CHAT: self._handle_chat,
            MessageKind.WELCOME: self._handle_welcome,
            MessageKind.ECHO: self._handle_echo,
        }

    def dispatch(self, envelope: Envelope) -> None:
        """Handle one decoded inbound envelope.

        Never raises for unknown kinds; they are reported and dropped.

        Args:
            envelope: The envelope to handle
        """
        if not envelope.is_recognized:
            self.report(f"Dropped message: {ProtocolError(envelope.kind)}", logging.WARNING)
            return
        handler = self._handlers.get(envelope.kind)
        if handler is None:
            self.report(f"Dropped unexpected {envelope.kind} message from server", logging.WARNING)
            return
        handler(envelope)

    def report(self, message: str, level: int = logging.ERROR) -> None:
        """Send a diagnostic line to the log and the operator channel.

        Args:
            message: Text of the diagnostic
            level: Logging level for the module logger
        """
        logger.log(level, message)
        self._listener.on_operator_log(message)

    def build_register(self, username: str) -> Envelope:
        """Build a hello envelope registering a new identity."""
        return self._envelope(
            MessageKind.HELLO,
            HelloPayload(username=username, versions=list(self._protocol.versions)),
        )

    def build_resume(self, token: str) -> Envelope:
        """Build a resume envelope re-authenticating with a token."""
        return self._envelope(
            MessageKind.RESUME,
            ResumePayload(token=token, versions=list(self._protocol.versions)),
        )

    def prepare_chat(self, content: str) -> Envelope:
        """Build a chat-send envelope and echo the message locally.

        The local ChatEntry is emitted immediately, without waiting for the
        server to relay the message.

        Args:
            content: Message text

        Returns:
            The chat-send envelope to transmit
        """
        sender = self._session.display_name or self._protocol.local_sender_placeholder
        self._listener.on_chat_entry(ChatEntry(sender=sender, content=content))
        return self._envelope(
            MessageKind.CHAT_SEND,
            ChatSendPayload(target=self._protocol.default_target, content=content),
        )

    def build_echo(self, data: dict[str, Any]) -> Envelope:
        """Build an echo envelope; the server sends it straight back."""
        return self._envelope(MessageKind.ECHO, EchoPayload(data=dict(data)))

    def _envelope(self, kind: MessageKind, payload: Any) -> Envelope:
        return Envelope(kind=kind, payload=payload, seq=self._sequence.take())

    def _handle_error(self, envelope: Envelope) -> None:
        payload: ErrorPayload = envelope.payload
        error = ServerError(payload.info, kind=payload.kind, details=payload.details)
        self.report(str(error))

    def _handle_chat(self, envelope: Envelope) -> None:
        payload: ChatPayload = envelope.payload
        self._listener.on_chat_entry(ChatEntry(sender=payload.sender, content=payload.content))

    def _handle_welcome(self, envelope: Envelope) -> None:
        payload: WelcomePayload = envelope.payload
        if self._session.authenticate(payload.token, payload.name, payload.version):
            logger.info(f"Authenticated as {payload.name}")
            self._listener.on_session_authenticated(payload.name, payload.token)
        else:
            logger.debug(f"Welcome re-confirmed session for {payload.name}")

    def _handle_echo(self, envelope: Envelope) -> None:
        payload: EchoPayload = envelope.payload
        logger.debug(f"Echo received: {payload.data}")
