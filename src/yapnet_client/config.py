"""Configuration for the chat client.

Configuration is grouped into sections (connection, protocol, logging) and can
be built from defaults, a mapping, or a YAML file:

    config = Config.default()
    config = Config.load("yapnet.yaml")
    config.connection.reconnect_delay_seconds = 0.5
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from yapnet_client.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:8080/ws"
URL_ENV_VAR = "YAPNET_URL"


@dataclass
class ConnectionConfig:
    """Transport endpoint and reconnect behaviour.

    Attributes:
        url: WebSocket endpoint of the chat server
        reconnect_delay_seconds: Fixed delay before each reconnect attempt
        open_timeout_seconds: Timeout for the opening handshake
    """

    url: str = DEFAULT_URL
    reconnect_delay_seconds: float = 1.0
    open_timeout_seconds: float = 10.0


@dataclass
class ProtocolConfig:
    """Wire protocol settings.

    Attributes:
        versions: Protocol versions announced in hello/resume
        default_target: Channel that outbound chat is addressed to
        monotonic_sequence: Number outbound envelopes 0, 1, 2... instead of always 0
        local_sender_placeholder: Sender shown for local chat before authentication
    """

    versions: list[str] = field(default_factory=lambda: ["1"])
    default_target: str = "general"
    monotonic_sequence: bool = False
    local_sender_placeholder: str = "You"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"


@dataclass
class Config:
    """Top-level client configuration."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> "Config":
        """Create a configuration with default values and environment overrides."""
        config = cls()
        config._apply_env()
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Build a configuration from a nested mapping.

        Missing sections and keys keep their defaults.

        Args:
            data: Mapping with optional "connection", "protocol" and "logging" sections

        Returns:
            The resulting Config

        Raises:
            ConfigError: If a section or key is unknown or has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        config = cls()
        sections = {f.name: getattr(config, f.name) for f in fields(cls)}
        for section_name, values in data.items():
            if section_name not in sections:
                raise ConfigError(f"Unknown configuration section: {section_name}")
            if values is None:
                continue
            if not isinstance(values, dict):
                raise ConfigError(f"Section {section_name} must be a mapping")
            _update_section(section_name, sections[section_name], values)

        config._apply_env()
        config.validate()
        return config

    @classmethod
    def load(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            The loaded Config

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

        logger.info(f"Loaded configuration from {path}")
        return cls.from_dict(data or {})

    def validate(self) -> None:
        """Check value ranges that the type checks cannot express.

        Raises:
            ConfigError: If a value is out of range
        """
        if not self.connection.url.startswith(("ws://", "wss://")):
            raise ConfigError(f"connection.url must be a ws:// or wss:// URL: {self.connection.url}")
        if self.connection.reconnect_delay_seconds < 0:
            raise ConfigError("connection.reconnect_delay_seconds must not be negative")
        if not self.protocol.versions:
            raise ConfigError("protocol.versions must not be empty")
        if logging.getLevelName(self.logging.level.upper()) == f"Level {self.logging.level.upper()}":
            raise ConfigError(f"Unknown log level: {self.logging.level}")

    def _apply_env(self) -> None:
        url = os.environ.get(URL_ENV_VAR)
        if url:
            self.connection.url = url


def _update_section(section_name: str, section: Any, values: dict[str, Any]) -> None:
    known = {f.name: f for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"Unknown key {section_name}.{key}")
        current = getattr(section, key)
        if isinstance(current, bool):
            ok = isinstance(value, bool)
        elif isinstance(current, float):
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
            value = float(value) if ok else value
        elif isinstance(current, list):
            ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
        else:
            ok = isinstance(value, type(current))
        if not ok:
            raise ConfigError(
                f"{section_name}.{key} must be {type(current).__name__}, got {type(value).__name__}"
            )
        setattr(section, key, value)
