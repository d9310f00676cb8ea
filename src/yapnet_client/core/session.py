"""Session state - identity of the local user on the chat server."""

import logging
from enum import Enum

from yapnet_client.errors import SessionStateError

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Handshake progress of a session."""

    ANONYMOUS = "anonymous"
    PENDING_REGISTRATION = "pending_registration"
    PENDING_RESUME = "pending_resume"
    AUTHENTICATED = "authenticated"


class Session:
    """Identity of the local user.

    A session starts ANONYMOUS. Submitting a registration or resume moves it to
    the matching pending state, and a welcome from the server moves it to
    AUTHENTICATED. There is no way back out of AUTHENTICATED; transport
    disconnects leave the session untouched so it can be resumed.

    token and display_name are only ever set while AUTHENTICATED.
    """

    def __init__(self) -> None:
        """Initialize an anonymous session."""
        self._state = SessionState.ANONYMOUS
        self._token: str | None = None
        self._display_name: str | None = None
        self._server_version: str | None = None
        self._requested_username: str | None = None

    def begin_registration(self, username: str) -> None:
        """Record that the user asked to register a new identity.

        Args:
            username: Requested display name

        Raises:
            SessionStateError: If the session is already authenticated
        """
        self._require_unauthenticated("register")
        self._requested_username = username
        self._transition(SessionState.PENDING_REGISTRATION)

    def begin_resume(self) -> None:
        """Record that the user asked to resume an identity by token.

        Raises:
            SessionStateError: If the session is already authenticated
        """
        self._require_unauthenticated("resume")
        self._transition(SessionState.PENDING_RESUME)

    def authenticate(self, token: str, name: str, server_version: str | None = None) -> bool:
        """Apply a welcome from the server.

        A welcome while already authenticated is treated as a re-confirmation
        and overwrites the stored values.

        Args:
            token: Resume token issued by the server
            name: Display name assigned by the server
            server_version: Protocol version the server answered with

        Returns:
            True if this call moved the session into AUTHENTICATED
        """
        if self._state is SessionState.ANONYMOUS:
            logger.warning(f"Unsolicited welcome for {name!r} accepted")
        elif self._state is SessionState.AUTHENTICATED and (
            token != self._token or name != self._display_name
        ):
            logger.warning(f"Welcome replaced identity {self._display_name!r} with {name!r}")

        newly_authenticated = self._state is not SessionState.AUTHENTICATED
        self._token = token
        self._display_name = name
        self._server_version = server_version
        self._transition(SessionState.AUTHENTICATED)
        return newly_authenticated

    def _require_unauthenticated(self, action: str) -> None:
        if self._state is SessionState.AUTHENTICATED:
            raise SessionStateError(
                f"Cannot {action}: already authenticated as {self._display_name!r}"
            )

    def _transition(self, new_state: SessionState) -> None:
        if new_state is not self._state:
            logger.debug(f"Session {self._state.value} -> {new_state.value}")
        self._state = new_state

    @property
    def state(self) -> SessionState:
        """Get the current session state."""
        return self._state

    @property
    def is_authenticated(self) -> bool:
        """Check if the handshake has completed."""
        return self._state is SessionState.AUTHENTICATED

    @property
    def token(self) -> str | None:
        """Get the resume token (None until authenticated)."""
        return self._token

    @property
    def display_name(self) -> str | None:
        """Get the server-assigned display name (None until authenticated)."""
        return self._display_name

    @property
    def server_version(self) -> str | None:
        """Get the protocol version reported in the last welcome."""
        return self._server_version

    @property
    def requested_username(self) -> str | None:
        """Get the username from the last registration request."""
        return self._requested_username
