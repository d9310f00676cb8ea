"""Application-side callbacks for chat and session events."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChatEntry:
    """One line of the chat log.

    Attributes:
        sender: Who wrote the message
        content: The message text
    """

    sender: str
    content: str


class SessionListener(ABC):
    """Receives events from the chat client.

    Implemented by the application (UI, chat log). All callbacks run on the
    event loop and should return quickly.
    """

    @abstractmethod
    def on_chat_entry(self, entry: ChatEntry) -> None:
        """Called for every new chat entry, local or remote."""

    @abstractmethod
    def on_session_authenticated(self, name: str, token: str) -> None:
        """Called once when the session becomes authenticated."""

    @abstractmethod
    def on_operator_log(self, message: str) -> None:
        """Called with diagnostic and error text meant for the operator."""
