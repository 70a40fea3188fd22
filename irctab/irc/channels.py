"""Registry of the channels the client has joined."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..constants import STATUS_TARGET
from ..logs.logger import logger
from ..ui.sink import PresentationSink
from .models import Channel

OPERATOR_PREFIX = "@"


class ChannelRegistry:
    """Channels keyed by name, each with its topic and nick list.

    Lookups that a caller depends on go through ``lookup``, which reports
    unknown names to the status window. ``get`` is the silent variant.
    """

    def __init__(self, sink: PresentationSink) -> None:
        self.sink = sink
        self._channels: dict[str, Channel] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._channels

    def __len__(self) -> int:
        return len(self._channels)

    def __iter__(self) -> Iterator[Channel]:
        return iter(list(self._channels.values()))

    def names(self) -> list[str]:
        return list(self._channels)

    def add(self, name: str, password: str | None = None) -> Channel | None:
        existing = self._channels.get(name)
        if existing is not None:
            logger.log_event(
                "channel", "already_open", level=logging.DEBUG, channel=name
            )
            return existing
        channel = Channel(name=name, password=password)
        try:
            self.sink.open_target(name)
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "channel",
                "open_failed",
                level=logging.ERROR,
                channel=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            self.sink.append_line(STATUS_TARGET, "Allocation failure")
            return None
        self._channels[name] = channel
        logger.log_event("channel", "added", level=logging.DEBUG, channel=name)
        return channel

    def remove(self, name: str) -> None:
        if self._channels.pop(name, None) is not None:
            logger.log_event("channel", "removed", level=logging.DEBUG, channel=name)

    def get(self, name: str) -> Channel | None:
        return self._channels.get(name)

    def lookup(self, name: str) -> Channel | None:
        channel = self._channels.get(name)
        if channel is None:
            self.sink.append_line(STATUS_TARGET, f"Channel '{name}' does not exist!")
        return channel

    def append(self, name: str, text: str) -> bool:
        """Append ``text`` to the window of channel ``name`` if it exists."""
        if self.lookup(name) is None:
            return False
        self.sink.append_line(name, text)
        return True

    def set_topic(self, name: str, topic: str | None) -> Channel | None:
        channel = self._channels.get(name)
        if channel is not None:
            channel.topic = topic
        return channel

    def add_nick(self, name: str, nick: str) -> None:
        channel = self.lookup(name)
        if channel is None:
            return
        channel.nicks.append(nick)

    def add_nicks(self, name: str, nicks: str) -> None:
        channel = self.lookup(name)
        if channel is None:
            return
        channel.nicks.extend(n for n in nicks.split(" ") if n)

    def remove_nick(self, name: str, nick: str) -> None:
        """Departures are not pruned from the nick list.

        The membership list only grows between names replies; it is rebuilt
        when the channel is rejoined.
        """
        if self.lookup(name) is None:
            return
        logger.log_event(
            "channel", "nick_left", level=logging.DEBUG, channel=name, who=nick
        )

    def clear_nicks(self, name: str) -> None:
        channel = self._channels.get(name)
        if channel is not None:
            channel.nicks.clear()

    def format_nicks(self, name: str) -> str | None:
        channel = self.lookup(name)
        if channel is None:
            return None
        return " ".join(_format_nick(nick) for nick in channel.nicks)


def _format_nick(nick: str) -> str:
    if nick.startswith(OPERATOR_PREFIX):
        return f"[{nick[len(OPERATOR_PREFIX):]}]"
    return f"[ {nick}]"
