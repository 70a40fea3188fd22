"""IRC message parsing utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

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
from .numerics import RPL_WELCOME

CHANNEL_PREFIXES = "#&+!"


@dataclass
class IRCMessage:
    raw: str
    prefix: str | None
    command: str | None
    params: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)


def parse_irc_message(raw_line: str) -> IRCMessage:
    tags: dict[str, str] = {}
    prefix: str | None = None
    command: str | None = None
    params: list[str] = []
    trailing: str | None = None

    original = raw_line

    if raw_line.startswith("@"):
        if " " in raw_line:
            tags_part, raw_line = raw_line.split(" ", 1)
        else:
            tags_part, raw_line = raw_line, ""
        tags = _parse_tags(tags_part[1:])

    if raw_line.startswith(":"):
        # Malformed lines may omit the space after the prefix
        remainder = raw_line[1:]
        if " " in remainder:
            prefix, raw_line = remainder.split(" ", 1)
        else:
            prefix = remainder
            raw_line = ""

    if " :" in raw_line:
        raw_line, trailing = raw_line.split(" :", 1)

    parts = raw_line.split()
    if parts:
        command = parts[0].upper()
        params = parts[1:]
    if trailing is not None and command is not None:
        params.append(trailing)

    return IRCMessage(
        raw=original, prefix=prefix, command=command, params=params, tags=tags
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags


def nick_from_origin(origin: str | None) -> str:
    """Return the nick part of a ``nick!user@host`` origin."""
    if not origin:
        return ""
    return origin.split("!", 1)[0]


def is_channel(name: str) -> bool:
    return bool(name) and name[0] in CHANNEL_PREFIXES


def message_to_events(message: IRCMessage) -> list[IRCEvent]:
    """Translate a parsed line into the events the session understands.

    Lines missing the parameters an event needs are dropped, as are
    commands the client does not track (MODE, QUIT, NOTICE, CTCP, ...).
    """
    command = message.command
    if not command:
        return []
    origin = message.prefix or ""
    nick = nick_from_origin(origin)
    params = message.params

    if len(command) == 3 and command.isdigit():
        code = int(command)
        numeric = NumericEvent(code=code, params=tuple(params), origin=origin)
        if code == RPL_WELCOME:
            return [ConnectEvent(), numeric]
        return [numeric]

    if command == "JOIN" and params:
        return [JoinEvent(nick=nick, origin=origin, channel=params[0])]
    if command == "PART" and params:
        reason = params[1] if len(params) > 1 else None
        return [PartEvent(nick=nick, origin=origin, channel=params[0], reason=reason)]
    if command == "NICK" and params:
        return [NickEvent(old_nick=nick, new_nick=params[0], origin=origin)]
    if command == "TOPIC" and len(params) == 2:
        return [TopicEvent(channel=params[0], topic=params[1], nick=nick, origin=origin)]
    if (
        command == "PRIVMSG"
        and len(params) == 2
        and is_channel(params[0])
        and not params[1].startswith("\x01")
    ):
        return [
            ChannelMessageEvent(
                channel=params[0], nick=nick, text=params[1], origin=origin
            )
        ]

    logger.log_event(
        "irc",
        "ignored_command",
        level=logging.DEBUG,
        command=command,
        raw=message.raw,
    )
    return []
