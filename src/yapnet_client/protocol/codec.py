"""Conversion between wire JSON and Envelope objects."""

import json
from dataclasses import asdict
from typing import Any

from yapnet_client.errors import ParseError
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


ENC = "utf-8"


def encode(envelope: Envelope) -> str:
    """Serialize an envelope to its JSON wire form.

    Args:
        envelope: The envelope to serialize

    Returns:
        JSON text of the form {"msg_type": ..., "seq": ..., "data": {...}}
    """
    kind = envelope.kind.value if isinstance(envelope.kind, MessageKind) else envelope.kind
    return json.dumps(
        {"msg_type": kind, "seq": envelope.seq, "data": _payload_to_dict(envelope.payload)},
        ensure_ascii=False,
    )


def decode(raw: str | bytes) -> Envelope:
    """Parse and validate an envelope received from the wire.

    Unrecognized msg_type values are not an error here; they decode to an
    Envelope with the raw kind string and a plain dict payload.

    Args:
        raw: JSON text (or UTF-8 bytes) of one message

    Returns:
        The decoded Envelope

    Raises:
        ParseError: If the data is not a well-formed envelope
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode(ENC)
        except UnicodeDecodeError as e:
            raise ParseError(f"Message is not valid {ENC}: {e}") from e

    try:
        obj = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals, and nesting too deep to parse
        raise ParseError(f"Malformed JSON: {e}") from e

    if not isinstance(obj, dict):
        raise ParseError("Envelope must be a JSON object")

    kind = obj.get("msg_type")
    if not isinstance(kind, str):
        raise ParseError("Missing or non-string 'msg_type' field")

    data = obj.get("data")
    if not isinstance(data, dict):
        raise ParseError(f"Missing or non-object 'data' field in {kind!r} message")

    seq = obj.get("seq", 0)
    if not isinstance(seq, int) or isinstance(seq, bool) or seq < 0:
        raise ParseError(f"'seq' must be a non-negative integer, got {seq!r}")

    try:
        message_kind = MessageKind(kind)
    except ValueError:
        return Envelope(kind=kind, payload=data, seq=seq)

    return Envelope(kind=message_kind, payload=_parse_payload(message_kind, data), seq=seq)


def _payload_to_dict(payload: Any) -> dict[str, Any]:
    if isinstance(payload, dict):
        return dict(payload)
    if isinstance(payload, EchoPayload):
        return dict(payload.data)
    return {k: v for k, v in asdict(payload).items() if v is not None}


def _parse_payload(kind: MessageKind, data: dict[str, Any]) -> Any:
    if kind is MessageKind.ECHO:
        return EchoPayload(data=data)
    if kind is MessageKind.ERROR:
        details = data.get("details") or {}
        if not isinstance(details, dict):
            raise ParseError("'details' of err message must be an object")
        return ErrorPayload(
            info=_require_str(kind, data, "info"),
            kind=_optional_str(kind, data, "kind"),
            details=details,
        )
    if kind is MessageKind.CHAT:
        return ChatPayload(
            sender=_require_str(kind, data, "sender"),
            content=_require_str(kind, data, "content"),
            target=_optional_str(kind, data, "target"),
        )
    if kind is MessageKind.WELCOME:
        return WelcomePayload(
            token=_require_str(kind, data, "token"),
            name=_require_str(kind, data, "name"),
            version=_optional_str(kind, data, "version"),
        )
    if kind is MessageKind.HELLO:
        return HelloPayload(
            username=_require_str(kind, data, "username"),
            versions=_require_versions(kind, data),
        )
    if kind is MessageKind.RESUME:
        return ResumePayload(
            token=_require_str(kind, data, "token"),
            versions=_require_versions(kind, data),
        )
    # CHAT_SEND
    return ChatSendPayload(
        target=_require_str(kind, data, "target"),
        content=_require_str(kind, data, "content"),
    )


def _require_str(kind: MessageKind, data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ParseError(f"{kind.value!r} message requires string field {key!r}")
    return value


def _optional_str(kind: MessageKind, data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(f"Field {key!r} of {kind.value!r} message must be a string")
    return value


def _require_versions(kind: MessageKind, data: dict[str, Any]) -> list[str]:
    versions = data.get("versions")
    if not isinstance(versions, list) or not all(isinstance(v, str) for v in versions):
        raise ParseError(f"{kind.value!r} message requires a list of version strings")
    return versions
