"""Command-line chat client.

Reads lines from stdin:
    /register NAME   register a new identity
    /resume TOKEN    resume an identity by token
    /echo TEXT       ask the server to echo TEXT back
    /quit            exit
    anything else    send as chat
"""

import argparse
import asyncio
import logging
import sys
import threading
from collections.abc import AsyncIterator
from typing import TextIO

from yapnet_client.client import ChatClient
from yapnet_client.config import Config
from yapnet_client.errors import ConfigError
from yapnet_client.interfaces.session_listener import ChatEntry, SessionListener

logger = logging.getLogger(__name__)


class ConsoleListener(SessionListener):
    """Prints chat to stdout and operator messages to stderr."""

    def on_chat_entry(self, entry: ChatEntry) -> None:
        print(f"{entry.sender}: {entry.content}", flush=True)

    def on_session_authenticated(self, name: str, token: str) -> None:
        print(f"* Logged in as {name} (token {token})", flush=True)

    def on_operator_log(self, message: str) -> None:
        print(f"! {message}", file=sys.stderr, flush=True)


async def handle_line(client: ChatClient, line: str) -> bool:
    """Apply one line of user input.

    Args:
        client: The chat client
        line: Input line without the trailing newline

    Returns:
        False when the user asked to quit
    """
    line = line.strip()
    if not line:
        return True

    command, _, argument = line.partition(" ")
    argument = argument.strip()
    if command == "/quit":
        return False
    if command == "/register" and argument:
        await client.submit_registration(argument)
    elif command == "/resume" and argument:
        await client.submit_resume(argument)
    elif command == "/echo":
        await client.send_echo({"text": argument})
    elif command in ("/register", "/resume"):
        print(f"Usage: {command} <value>", file=sys.stderr)
    else:
        await client.submit_chat(line)
    return True


async def read_lines(stream: TextIO | None = None) -> AsyncIterator[str]:
    """Yield lines from a blocking text stream until EOF.

    The stream is read on a daemon thread so a pending read never keeps the
    process alive after the event loop stops (e.g. on Ctrl-C).

    Args:
        stream: Text stream to read (default: stdin)
    """
    stream = stream or sys.stdin
    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[str | None] = asyncio.Queue()

    def _read_loop() -> None:
        try:
            for line in iter(stream.readline, ""):
                loop.call_soon_threadsafe(lines.put_nowait, line)
            loop.call_soon_threadsafe(lines.put_nowait, None)
        except RuntimeError:
            # Event loop closed while a read was pending
            logger.debug("Stdin reader stopped after event loop closed")

    threading.Thread(target=_read_loop, name="stdin-reader", daemon=True).start()
    while (line := await lines.get()) is not None:
        yield line


async def run(config: Config) -> None:
    """Run the interactive client until EOF or /quit."""
    client = ChatClient(config, ConsoleListener())
    client.start()
    try:
        async for line in read_lines():
            if not await handle_line(client, line):
                break
    finally:
        await client.stop()



def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog="yapnet-client", description="Terminal chat client")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--url", help="Server WebSocket URL")
    parser.add_argument(
        "--reconnect-delay", type=float, help="Seconds to wait before reconnecting"
    )
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Build the configuration from a file and command-line overrides.

    Raises:
        ConfigError: If the file or an override is invalid
    """
    config = Config.load(args.config) if args.config else Config.default()
    if args.url:
        config.connection.url = args.url
    if args.reconnect_delay is not None:
        config.connection.reconnect_delay_seconds = args.reconnect_delay
    if args.log_level:
        config.logging.level = args.log_level.upper()
    config.validate()
    return config


def main(argv: list[str] | None = None) -> int:
    """Entry point for the yapnet-client command."""
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.logging.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
