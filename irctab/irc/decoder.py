"""Event decoding: protocol events to registry updates and window lines."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from ..constants import STATUS_TARGET
from ..logs.logger import logger
from .models import (
    ChannelMessageEvent,
    ConnectEvent,
    IRCEvent,
    JoinEvent,
    NickEvent,
    NumericEvent,
    PartEvent,
    TopicEvent,
)
from .numerics import (
    ERR_CHANOPRIVSNEEDED,
    ERR_NICKNAMEINUSE,
    PARAM_LIST_REPLIES,
    RPL_ENDOFNAMES,
    RPL_NAMREPLY,
    RPL_NOTOPIC,
    RPL_TOPIC,
    RPL_TOPICWHOTIME,
    SERVER_INFO_REPLIES,
)
from .parser import nick_from_origin

if TYPE_CHECKING:  # pragma: no cover
    from .session import IRCSession

TOPIC_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"


class EventDecoder:
    """Applies decoded protocol events to the session.

    Each event kind has one handler. A failing handler is logged and the
    next event is processed normally.
    """

    def __init__(self, session: IRCSession) -> None:
        self.session = session
        self._handlers: dict[type, Callable[[Any], Awaitable[None]]] = {
            ConnectEvent: self._on_connect,
            JoinEvent: self._on_join,
            PartEvent: self._on_part,
            NickEvent: self._on_nick,
            ChannelMessageEvent: self._on_channel_message,
            TopicEvent: self._on_topic,
            NumericEvent: self._on_numeric,
        }
        self._numeric_handlers: dict[int, Callable[[NumericEvent], Awaitable[None]]] = {
            RPL_ENDOFNAMES: self._on_end_of_names,
            RPL_NAMREPLY: self._on_names_reply,
            RPL_NOTOPIC: self._on_no_topic,
            RPL_TOPIC: self._on_topic_reply,
            RPL_TOPICWHOTIME: self._on_topic_who_time,
            ERR_CHANOPRIVSNEEDED: self._on_chanop_needed,
            ERR_NICKNAMEINUSE: self._on_nick_in_use,
        }

    @property
    def registry(self):
        return self.session.registry

    def _status(self, text: str) -> None:
        self.session.sink.append_line(STATUS_TARGET, text)

    async def dispatch(self, event: IRCEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.log_event(
                "irc",
                "unknown_event",
                level=logging.WARNING,
                event_type=type(event).__name__,
            )
            return
        try:
            await handler(event)
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "event_handler_error",
                level=logging.ERROR,
                nick=self.session.config.nick,
                event_type=type(event).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )

    async def _on_connect(self, _event: ConnectEvent) -> None:
        self.session.mark_connected()
        joins = [(e.channel, e.password) for e in self.session.config.autojoin]
        autojoin_names = {name for name, _ in joins}
        # Channels still open from an earlier connection are joined again
        joins.extend(
            (channel.name, channel.password)
            for channel in self.registry
            if channel.name not in autojoin_names
        )
        for name, password in joins:
            await self.session.join(name, password)

    async def _on_join(self, event: JoinEvent) -> None:
        self.registry.append(
            event.channel,
            f"{event.nick} [{event.origin}] has joined {event.channel}",
        )
        if event.nick != self.session.config.nick:
            self.registry.add_nick(event.channel, event.nick)

    async def _on_part(self, event: PartEvent) -> None:
        self.registry.append(
            event.channel,
            f"{event.nick} [{event.origin}] has quit [Connection closed]",
        )
        self.registry.remove_nick(event.channel, event.nick)

    async def _on_nick(self, event: NickEvent) -> None:
        logger.log_event(
            "irc",
            "nick_change",
            old_nick=event.old_nick,
            new_nick=event.new_nick,
        )

    async def _on_channel_message(self, event: ChannelMessageEvent) -> None:
        self.registry.append(event.channel, f"<{event.nick}> {event.text}")

    async def _on_topic(self, event: TopicEvent) -> None:
        self.registry.set_topic(event.channel, event.topic)
        self.session.refresh_topic_display(event.channel)
        self.registry.append(
            event.channel, f"{event.nick} changed topic to '{event.topic}'"
        )

    async def _on_numeric(self, event: NumericEvent) -> None:
        handler = self._numeric_handlers.get(event.code)
        if handler is not None:
            await handler(event)
        elif event.code in SERVER_INFO_REPLIES:
            self._server_info(event.params)
        elif event.code in PARAM_LIST_REPLIES:
            self._status(" ".join(event.params[1:]))
        else:
            self._status(f"Unhandled event {event.code}")
            logger.log_event(
                "irc",
                "unhandled_numeric",
                level=logging.DEBUG,
                code=event.code,
                params=" ".join(event.params),
            )

    def _server_info(self, params: tuple[str, ...]) -> None:
        if len(params) == 2:
            self._status(params[1])
        elif len(params) >= 3:
            self._status(f"{params[1]} {params[2]}")

    def _too_short(self, event: NumericEvent, needed: int) -> bool:
        if len(event.params) >= needed:
            return False
        logger.log_event(
            "irc",
            "numeric_short",
            level=logging.DEBUG,
            code=event.code,
            count=len(event.params),
            needed=needed,
        )
        return True

    async def _on_end_of_names(self, event: NumericEvent) -> None:
        if self._too_short(event, 2):
            return
        name = event.params[1]
        line = self.registry.format_nicks(name)
        if line is None:
            return
        self.session.sink.append_line(name, f"[Users {name}]")
        self.session.sink.append_line(name, line)

    async def _on_names_reply(self, event: NumericEvent) -> None:
        if self._too_short(event, 4):
            return
        self.registry.add_nicks(event.params[2], event.params[3])

    async def _on_no_topic(self, event: NumericEvent) -> None:
        logger.log_event(
            "irc",
            "no_topic",
            level=logging.DEBUG,
            channel=event.params[1] if len(event.params) > 1 else None,
        )

    async def _on_topic_reply(self, event: NumericEvent) -> None:
        if self._too_short(event, 3):
            return
        name, topic = event.params[1], event.params[2]
        self.registry.set_topic(name, topic)
        self.session.refresh_topic_display(name)
        self.registry.append(name, f"Topic for {name}: {topic}")

    async def _on_topic_who_time(self, event: NumericEvent) -> None:
        if self._too_short(event, 4):
            return
        name, origin = event.params[1], event.params[2]
        date = format_topic_time(event.params[3])
        self.registry.append(
            name, f"Topic set by {nick_from_origin(origin)} [{origin}] [{date}]"
        )

    async def _on_chanop_needed(self, event: NumericEvent) -> None:
        if self._too_short(event, 3):
            return
        self.registry.append(event.params[1], f"{event.params[1]} {event.params[2]}")

    async def _on_nick_in_use(self, event: NumericEvent) -> None:
        if len(event.params) >= 2:
            self._status(f"Your nick {event.params[1]} is already in use")
        await self.session.retry_with_new_nick()


def format_topic_time(raw: str) -> str:
    """Format a Unix timestamp string; unparsable input gives an empty string."""
    try:
        return time.strftime(TOPIC_DATE_FORMAT, time.localtime(int(raw)))
    except (ValueError, OverflowError, OSError):
        return ""
