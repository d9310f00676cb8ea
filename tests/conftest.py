"""Shared test fixtures for pytest."""

import pytest

from tests.mocks import MockTransportFactory, RecordingListener
from yapnet_client.client import ChatClient
from yapnet_client.config import Config
from yapnet_client.core.connection_manager import ConnectionManager
from yapnet_client.core.message_router import MessageRouter
from yapnet_client.core.session import Session


@pytest.fixture(autouse=True)
def _no_url_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's YAPNET_URL from leaking into tests."""
    monkeypatch.delenv("YAPNET_URL", raising=False)


@pytest.fixture
def config() -> Config:
    """Create a configuration with a short reconnect delay."""
    config = Config.default()
    config.connection.reconnect_delay_seconds = 0.01
    return config


@pytest.fixture
def session() -> Session:
    """Create an anonymous Session."""
    return Session()


@pytest.fixture
def listener() -> RecordingListener:
    """Create a RecordingListener."""
    return RecordingListener()


@pytest.fixture
def router(session: Session, listener: RecordingListener, config: Config) -> MessageRouter:
    """Create a MessageRouter bound to the session and listener."""
    return MessageRouter(session, listener, protocol=config.protocol)


@pytest.fixture
def transport_factory() -> MockTransportFactory:
    """Create a MockTransportFactory."""
    return MockTransportFactory()


@pytest.fixture
def manager(
    config: Config,
    session: Session,
    router: MessageRouter,
    transport_factory: MockTransportFactory,
) -> ConnectionManager:
    """Create a ConnectionManager over mock transports."""
    return ConnectionManager(config.connection, session, router, transport_factory)


@pytest.fixture
def client(
    config: Config, listener: RecordingListener, transport_factory: MockTransportFactory
) -> ChatClient:
    """Create a ChatClient over mock transports."""
    return ChatClient(config, listener, transport_factory=transport_factory)
