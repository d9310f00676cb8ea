"""Envelope and payload types for the chat wire protocol.

Every message on the wire is an envelope ``{"msg_type", "seq", "data"}``. The
``msg_type`` tag selects the payload dataclass held in ``Envelope.payload``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageKind(str, Enum):
    """Recognized ``msg_type`` values."""

    # Client -> server
    HELLO = "hello"
    RESUME = "resume"
    CHAT_SEND = "chat-send"
    # Server -> client
    ERROR = "err"
    CHAT = "chat"
    WELCOME = "welcome"
    # Both directions
    ECHO = "echo"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HelloPayload:
    """Registration request for a new identity."""

    username: str
    versions: list[str] = field(default_factory=lambda: ["1"])


@dataclass(frozen=True)
class ResumePayload:
    """Re-authentication with a previously issued token."""

    token: str
    versions: list[str] = field(default_factory=lambda: ["1"])


@dataclass(frozen=True)
class ChatSendPayload:
    """Outbound chat message."""

    target: str
    content: str


@dataclass(frozen=True)
class ErrorPayload:
    """Error reported by the server.

    Attributes:
        info: Human-readable description
        kind: Machine-readable error kind, e.g. "InvalidToken"
        details: Extra structured data
    """

    info: str
    kind: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChatPayload:
    """Chat message relayed by the server."""

    sender: str
    content: str
    target: str | None = None


@dataclass(frozen=True)
class WelcomePayload:
    """Handshake answer carrying the session identity."""

    token: str
    name: str
    version: str | None = None


@dataclass(frozen=True)
class EchoPayload:
    """Arbitrary data bounced back by the server."""

    data: dict[str, Any] = field(default_factory=dict)


Payload = (
    HelloPayload
    | ResumePayload
    | ChatSendPayload
    | ErrorPayload
    | ChatPayload
    | WelcomePayload
    | EchoPayload
    | dict[str, Any]
)


@dataclass(frozen=True)
class Envelope:
    """A single protocol message.

    Attributes:
        kind: The msg_type tag; a MessageKind for recognized kinds, the raw
            string otherwise
        payload: Kind-specific payload; a plain dict for unrecognized kinds
        seq: Sequence number
    """

    kind: MessageKind | str
    payload: Payload
    seq: int = 0

    @property
    def is_recognized(self) -> bool:
        """Check if the kind is part of the protocol."""
        return isinstance(self.kind, MessageKind)
