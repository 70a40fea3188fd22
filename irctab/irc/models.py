"""Shared IRC data models: connection state and the decoded event union."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()


@dataclass(frozen=True, slots=True)
class ConnectEvent:
    """The server accepted the registration (RPL_WELCOME)."""


@dataclass(frozen=True, slots=True)
class JoinEvent:
    nick: str
    origin: str
    channel: str


@dataclass(frozen=True, slots=True)
class PartEvent:
    nick: str
    origin: str
    channel: str
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class NickEvent:
    old_nick: str
    new_nick: str
    origin: str


@dataclass(frozen=True, slots=True)
class ChannelMessageEvent:
    channel: str
    nick: str
    text: str
    origin: str = ""


@dataclass(frozen=True, slots=True)
class TopicEvent:
    channel: str
    topic: str
    nick: str
    origin: str = ""


@dataclass(frozen=True, slots=True)
class NumericEvent:
    code: int
    params: tuple[str, ...] = field(default_factory=tuple)
    origin: str = ""


IRCEvent = (
    ConnectEvent
    | JoinEvent
    | PartEvent
    | NickEvent
    | ChannelMessageEvent
    | TopicEvent
    | NumericEvent
)


@dataclass(slots=True)
class Channel:
    """A joined channel as the client sees it.

    Attributes:
        name: Channel name, the registry key; never changes.
        topic: Current topic, ``None`` when no topic is known.
        nicks: Membership in the order the server reported it.
        password: Key the channel was joined with, reused on rejoin.
    """

    name: str
    topic: str | None = None
    nicks: list[str] = field(default_factory=list)
    password: str | None = None
