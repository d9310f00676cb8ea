"""Tests for WebSocketTransport against a local websockets server."""

import json

import pytest
from websockets.asyncio.server import ServerConnection, serve

from tests.mocks import RecordingListener, wait_for
from yapnet_client.client import ChatClient
from yapnet_client.config import Config
from yapnet_client.errors import TransportError
from yapnet_client.transport.websocket_transport import WebSocketTransport


async def echo_handler(ws: ServerConnection) -> None:
    """Send every frame straight back."""
    async for message in ws:
        await ws.send(message)


async def chat_server_handler(ws: ServerConnection) -> None:
    """Minimal chat server: welcomes hello/resume and relays chat."""
    async for raw in ws:
        message = json.loads(raw)
        data = message["data"]
        if message["msg_type"] == "hello":
            reply = {"msg_type": "welcome", "seq": 0,
                     "data": {"token": "T1", "name": data["username"], "version": "1"}}
        elif message["msg_type"] == "resume":
            reply = {"msg_type": "welcome", "seq": 0,
                     "data": {"token": data["token"], "name": "alice", "version": "1"}}
        elif message["msg_type"] == "chat-send":
            reply = {"msg_type": "chat", "seq": 0,
                     "data": {"sender": "server", "content": data["content"].upper()}}
        else:
            reply = {"msg_type": "err", "seq": 0,
                     "data": {"kind": "InvalidMSGType", "info": message["msg_type"]}}
        await ws.send(json.dumps(reply))


class TestWebSocketTransport:
    """Tests for the transport on its own."""

    @pytest.mark.asyncio
    async def test_send_and_listen(self) -> None:
        """Test frames round-trip through a real WebSocket."""
        async with serve(echo_handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            transport = WebSocketTransport()

            await transport.connect(f"ws://127.0.0.1:{port}")
            assert transport.is_connected

            await transport.send("hello")
            frames = transport.listen()
            assert await anext(frames) == "hello"

            await transport.close()
            assert not transport.is_connected

    @pytest.mark.asyncio
    async def test_connect_refused(self) -> None:
        """Test an unreachable endpoint raises TransportError."""
        async with serve(echo_handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
        transport = WebSocketTransport(open_timeout=1.0)

        with pytest.raises(TransportError):
            await transport.connect(f"ws://127.0.0.1:{port}")

    @pytest.mark.asyncio
    async def test_send_before_connect(self) -> None:
        """Test sending on an unopened transport raises TransportError."""
        with pytest.raises(TransportError):
            await WebSocketTransport().send("x")


class TestChatClientOverWebSocket:
    """End-to-end tests with ChatClient and a local server."""

    @pytest.mark.asyncio
    async def test_register_and_chat(self, listener: RecordingListener) -> None:
        """Test the full handshake and a chat round trip."""
        async with serve(chat_server_handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            config = Config.default()
            config.connection.url = f"ws://127.0.0.1:{port}"
            client = ChatClient(config, listener)

            client.start()
            await wait_for(lambda: client.connection.is_open)
            await client.submit_registration("alice")
            await wait_for(lambda: client.session.is_authenticated)
            await client.submit_chat("hi")
            await wait_for(lambda: len(listener.chat_entries) == 2)

            assert listener.authenticated == [("alice", "T1")]
            assert [(e.sender, e.content) for e in listener.chat_entries] == [
                ("alice", "hi"),
                ("server", "HI"),
            ]

            await client.stop()
