"""Protocol module - Wire envelope types and codec."""

from yapnet_client.protocol.codec import decode, encode
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

__all__ = [
    "ChatPayload",
    "ChatSendPayload",
    "EchoPayload",
    "Envelope",
    "ErrorPayload",
    "HelloPayload",
    "MessageKind",
    "ResumePayload",
    "WelcomePayload",
    "decode",
    "encode",
]
