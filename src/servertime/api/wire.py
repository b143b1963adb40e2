"""Line-oriented chat connection to a server.

Each line is UTF-8 text terminated by "\n". Inbound lines are handed to a
ChatDispatcher; lines it decides to echo go to the local output.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Callable, Optional, TextIO

import structlog

from ..chat.dispatcher import ChatDispatcher

logger = structlog.get_logger(__name__)


class LocalOutput:
    """Writes single lines to the local display (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def __call__(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text + "\n")
        stream.flush()


class ChatConnection:
    def __init__(
        self,
        host: str,
        port: int,
        dispatcher: ChatDispatcher,
        output: Optional[Callable[[str], None]] = None,
    ):
        self.host = host
        self.port = port
        self.dispatcher = dispatcher
        self.output = output or LocalOutput()
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    def current_endpoint_id(self) -> Optional[str]:
        """"host:port" of the connected server, None when disconnected."""
        if not self.connected:
            return None
        return f"{self.host}:{self.port}"

    async def connect(self) -> None:
        self._reader, self._writer = await asyncio.open_connection(self.host, self.port)
        logger.info("connected", endpoint=self.current_endpoint_id())

    def send_line(self, text: str) -> None:
        """Queue one line for the server. Dropped (and logged) when disconnected."""
        if not self.connected:
            logger.warning("send_while_disconnected", line=text)
            return
        self._writer.write(text.encode("utf-8") + b"\n")

    # The probe is an ordinary chat line.
    send_probe = send_line

    async def drain(self) -> None:
        if self.connected:
            await self._writer.drain()

    async def handle_line(self, raw: bytes) -> None:
        line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        if not line:
            return
        if self.dispatcher.dispatch(line):
            self.output(line)
        await self.drain()

    async def run(self) -> None:
        """Read inbound lines until the server closes the connection."""
        if self._reader is None:
            raise RuntimeError("not connected")
        try:
            while not self._reader.at_eof():
                raw = await self._reader.readline()
                if not raw:
                    break
                await self.handle_line(raw)
        finally:
            await self.close()

    async def close(self) -> None:
        writer, self._writer = self._writer, None
        self._reader = None
        if writer is None:
            return
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, ConnectionError):
            pass
        logger.info("disconnected", endpoint=f"{self.host}:{self.port}")
