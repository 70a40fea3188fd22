"""IRC session: connection lifecycle, polling and outbound actions."""

from __future__ import annotations

import asyncio
import logging

from ..config.model import SessionConfig
from ..constants import (
    APP_BANNER,
    IRC_POLL_INTERVAL,
    IRC_POLL_IO_TIMEOUT,
    STATUS_TARGET,
)
from ..logs.logger import logger
from ..ui.sink import PresentationSink
from .channels import ChannelRegistry
from .decoder import EventDecoder
from .models import ConnectionState
from .transport import IRCTransport


class IRCSession:  # pylint: disable=too-many-instance-attributes
    """State of one client connection.

    Owns the channel registry, the transport and the poll task. The config
    object is shared with the rest of the application; the session updates
    ``nick`` on collisions and ``/nick``.
    """

    def __init__(
        self,
        config: SessionConfig,
        sink: PresentationSink,
        transport: IRCTransport | None = None,
    ) -> None:
        self.config = config
        self.sink = sink
        self.transport = transport or IRCTransport()
        self.registry = ChannelRegistry(sink)
        self.decoder = EventDecoder(self)
        self.state = ConnectionState.DISCONNECTED
        self.active_target = STATUS_TARGET
        self.closed = asyncio.Event()
        self._poll_task: asyncio.Task[None] | None = None

    def _status(self, text: str) -> None:
        self.sink.append_line(STATUS_TARGET, text)

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                nick=self.config.nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def mark_connected(self) -> None:
        self._set_state(ConnectionState.CONNECTED)
        logger.log_event(
            "irc", "connect_success", nick=self.config.nick, server=self.config.server
        )

    async def connect(self) -> bool:
        server = self.config.server
        port = self.config.port
        if not server:
            self._status("No server configured, use /connect server[:port]")
            return False
        if self.state != ConnectionState.DISCONNECTED or self.transport.is_connected():
            await self._teardown()

        self._status(f"Connecting to {server} port {port}")
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event(
            "irc", "connect_start", nick=self.config.nick, server=server, port=port
        )
        if not await self.transport.connect(server, port, self.config.nick):
            error = self.transport.last_error()
            self._status(f"Connection to {server}:{port} failed: {error}")
            self._set_state(ConnectionState.DISCONNECTED)
            return False
        self._poll_task = asyncio.create_task(self._poll_loop(), name="irc-poll")
        return True

    async def _poll_loop(self) -> None:
        while await self.poll():
            await asyncio.sleep(IRC_POLL_INTERVAL)

    async def poll(self) -> bool:
        """Run one poll tick; returns False once the connection is gone."""
        if not self.transport.is_connected():
            self._connection_lost()
            return False
        events = await self.transport.poll(IRC_POLL_IO_TIMEOUT)
        for event in events:
            await self.decoder.dispatch(event)
        if not self.transport.is_connected():
            self._connection_lost()
            return False
        return True

    def _connection_lost(self) -> None:
        if self.state == ConnectionState.DISCONNECTED:
            return
        error = self.transport.last_error() or "not connected"
        self._set_state(ConnectionState.DISCONNECTED)
        self._status(f"Connection to {self.config.server} lost: {error}")
        logger.log_event(
            "irc",
            "disconnected",
            level=logging.WARNING,
            nick=self.config.nick,
            server=self.config.server,
            error=error,
        )

    async def _stop_polling(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        await asyncio.wait([task])

    async def _teardown(self) -> None:
        self._set_state(ConnectionState.DISCONNECTED)
        await self._stop_polling()
        if self.transport.is_connected():
            await self.transport.send_quit()
        await self.transport.disconnect()

    async def quit(self) -> None:
        await self._teardown()
        logger.log_event("irc", "quit", nick=self.config.nick)
        self.closed.set()

    async def retry_with_new_nick(self) -> None:
        self.config.nick = f"{self.config.nick}_"
        logger.log_event("irc", "nick_retry", nick=self.config.nick)
        await self.transport.send_nick(self.config.nick)

    async def join(self, channel: str, password: str | None = None) -> bool:
        self._status(f"Joining channel '{channel}'")
        existing = self.registry.get(channel)
        if existing is not None:
            # Names replies for the new join rebuild the list
            self.registry.clear_nicks(channel)
            if password:
                existing.password = password
        elif self.registry.add(channel, password) is None:
            return False
        await self.transport.send_join(channel, password)
        return True

    async def part(self, channel: str) -> None:
        await self.transport.send_part(channel)
        self.sink.close_target(channel)
        self.registry.remove(channel)
        logger.log_event("irc", "part", nick=self.config.nick, channel=channel)

    async def send_message(self, channel: str, text: str) -> None:
        if self.registry.lookup(channel) is None:
            return
        if not await self.transport.send_msg(channel, text):
            self.sink.append_line(channel, "Not connected, message not sent")
            return
        self.sink.append_line(channel, f"<{self.config.nick}> {text}")

    async def set_topic(self, channel: str, topic: str) -> None:
        await self.transport.send_topic(channel, topic)

    async def change_nick(self, nick: str) -> None:
        """Set the nick and announce it when connected.

        Raises:
            ValueError: The nick is rejected by ``SessionConfig.validate_nick``;
                pydantic runs it on assignment (``validate_assignment``) and
                its ValidationError is a ValueError. Nothing is sent then.
        """
        self.config.nick = nick
        if self.transport.is_connected():
            await self.transport.send_nick(self.config.nick)

    def on_target_switched(self, target: str) -> None:
        self.active_target = target
        if target == STATUS_TARGET:
            self.sink.set_topic_display(APP_BANNER)
            return
        channel = self.registry.get(target)
        self.sink.set_topic_display(channel.topic if channel else None)

    def refresh_topic_display(self, channel: str) -> None:
        if channel != self.active_target:
            return
        entry = self.registry.get(channel)
        if entry is not None:
            self.sink.set_topic_display(entry.topic)
