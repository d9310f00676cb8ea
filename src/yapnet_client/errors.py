"""Exception hierarchy for the chat client."""

from typing import Any


class YapnetClientError(Exception):
    """Base class for all client errors."""


class TransportError(YapnetClientError):
    """The connection could not be opened or was lost.

    Recovered automatically by reconnecting; never fatal.
    """


class ParseError(YapnetClientError):
    """Inbound data is not a well-formed envelope."""


class ProtocolError(YapnetClientError):
    """An envelope carried a msg_type this client does not understand."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unrecognized message type: {kind!r}")
        self.kind = kind


class ServerError(YapnetClientError):
    """The server answered with an ``err`` envelope.

    Attributes:
        info: Human-readable description from the server
        kind: Machine-readable error kind (e.g. "InvalidToken"), if given
        details: Extra structured data attached by the server
    """

    def __init__(
        self, info: str, kind: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        label = f"{kind}: {info}" if kind else info
        super().__init__(f"Server error: {label}")
        self.info = info
        self.kind = kind
        self.details = details or {}


class SessionStateError(YapnetClientError):
    """A user action is not valid in the current session state."""


class ClientClosedError(YapnetClientError):
    """An action was attempted after the client was shut down."""


class ConfigError(YapnetClientError):
    """The configuration file or mapping is invalid."""
