"""Asyncio stream transport speaking the IRC wire protocol."""

from __future__ import annotations

import asyncio
import codecs
import logging

from ..constants import (
    IRC_CONNECT_TIMEOUT,
    IRC_POLL_DRAIN_TIMEOUT,
    IRC_POLL_MAX_BYTES,
    IRC_READ_CHUNK_SIZE,
)
from ..errors.handling import describe_transport_error, log_error
from ..errors.internal import NetworkError, ParsingError
from ..logs.logger import logger
from .models import IRCEvent
from .parser import message_to_events, parse_irc_message


class IRCTransport:
    """One TCP connection to an IRC server.

    The transport performs registration, answers server PINGs and turns
    incoming lines into events. It never raises on I/O failure: the
    connection is closed, the reason is kept for ``last_error()`` and
    ``is_connected()`` turns False.
    """

    def __init__(self) -> None:
        self.server: str | None = None
        self.port: int | None = None
        self.nick: str | None = None
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.message_buffer = ""
        # Keeps a multi-byte character split across reads until it is complete
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._last_error = ""

    async def connect(self, server: str, port: int, nick: str) -> bool:
        if self.writer is not None:
            await self.disconnect()
        self.server = server
        self.port = port
        self.nick = nick
        self._last_error = ""
        logger.log_event(
            "irc", "open_connection", level=logging.DEBUG, server=server, port=port
        )
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(server, port),
                timeout=IRC_CONNECT_TIMEOUT,
            )
        except (TimeoutError, OSError) as e:
            self._last_error = describe_transport_error(e)
            log_error(
                "IRC connection failed",
                NetworkError(self._last_error),
                context={"server": server, "port": port},
            )
            self.reader = None
            self.writer = None
            return False

        logger.log_event(
            "irc", "connection_established", level=logging.DEBUG, server=server
        )
        await self._send_line(f"NICK {nick}")
        await self._send_line(f"USER {nick} 0 * :{nick}")
        return self.is_connected()

    def is_connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    def last_error(self) -> str:
        return self._last_error

    async def poll(self, timeout: float) -> list[IRCEvent]:
        """Read whatever arrived within ``timeout`` seconds and decode it.

        Once the first chunk is in, the reader is drained with short reads
        (up to ``IRC_POLL_MAX_BYTES``) so a burst is handled in one tick.
        """
        if self.reader is None or not self.is_connected():
            return []
        chunks: list[bytes] = []
        received = 0
        closed_reason: str | None = None
        wait = timeout
        while received < IRC_POLL_MAX_BYTES:
            try:
                data = await asyncio.wait_for(
                    self.reader.read(IRC_READ_CHUNK_SIZE), timeout=wait
                )
            except TimeoutError:
                break
            except OSError as e:
                closed_reason = describe_transport_error(e)
                break
            if not data:
                closed_reason = "Connection closed by server"
                break
            chunks.append(data)
            received += len(data)
            wait = IRC_POLL_DRAIN_TIMEOUT

        events: list[IRCEvent] = []
        if chunks:
            events = await self.process_incoming_data(
                self._decoder.decode(b"".join(chunks))
            )
        if closed_reason is not None and self.writer is not None:
            await self._close(closed_reason)
        return events

    async def process_incoming_data(self, new_data: str) -> list[IRCEvent]:
        self.message_buffer += new_data
        events: list[IRCEvent] = []
        while "\n" in self.message_buffer:
            line, self.message_buffer = self.message_buffer.split("\n", 1)
            line = line.rstrip("\r")
            if line.strip():
                events.extend(await self._handle_line(line))
        return events

    async def _handle_line(self, raw_message: str) -> list[IRCEvent]:
        parsed = parse_irc_message(raw_message)
        if parsed.command is None:
            log_error(
                "Unparsable IRC line",
                ParsingError("no command", data={"server": self.server, "line": raw_message}),
            )
            return []
        if parsed.command != "PING":
            logger.log_event(
                "irc", "raw", level=logging.DEBUG, nick=self.nick, raw=raw_message
            )
        if parsed.command == "PING":
            token = parsed.params[-1] if parsed.params else self.server or ""
            await self._send_line(f"PONG :{token}")
            return []
        if parsed.command == "ERROR":
            reason = parsed.params[-1] if parsed.params else "Closing link"
            await self._close(reason)
            return []
        return message_to_events(parsed)

    async def send_join(self, channel: str, password: str | None = None) -> bool:
        if password:
            return await self._send_line(f"JOIN {channel} {password}")
        return await self._send_line(f"JOIN {channel}")

    async def send_part(self, channel: str) -> bool:
        return await self._send_line(f"PART {channel}")

    async def send_msg(self, target: str, text: str) -> bool:
        return await self._send_line(f"PRIVMSG {target} :{text}")

    async def send_topic(self, channel: str, topic: str) -> bool:
        return await self._send_line(f"TOPIC {channel} :{topic}")

    async def send_nick(self, nick: str) -> bool:
        return await self._send_line(f"NICK {nick}")

    async def send_quit(self, message: str | None = None) -> bool:
        return await self._send_line(f"QUIT :{message}" if message else "QUIT")

    async def _send_line(self, message: str) -> bool:
        if not self.is_connected():
            logger.log_event(
                "irc", "send_skipped", level=logging.DEBUG, nick=self.nick, line=message
            )
            return False
        # A line break inside user text would start a new protocol command
        line = message.replace("\r", " ").replace("\n", " ")
        try:
            self.writer.write(f"{line}\r\n".encode())  # type: ignore[union-attr]
            await self.writer.drain()  # type: ignore[union-attr]
        except OSError as e:
            await self._close(describe_transport_error(e))
            return False
        return True

    async def _close(self, reason: str) -> None:
        self._last_error = reason
        logger.log_event(
            "irc", "connection_lost", level=logging.WARNING, server=self.server, error=reason
        )
        await self.disconnect()

    async def disconnect(self) -> None:
        writer = self.writer
        self.writer = None
        self.reader = None
        self.message_buffer = ""
        self._decoder.reset()
        if writer is None:
            return
        try:
            writer.close()
            await writer.wait_closed()
        except OSError as e:
            logger.log_event(
                "irc",
                "close_error",
                level=logging.DEBUG,
                server=self.server,
                error=str(e),
            )
