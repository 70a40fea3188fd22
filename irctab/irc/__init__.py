"""IRC subsystem package.

Contains the transport, line parser, event decoder, channel registry and the
session that ties them together.
"""

from .channels import ChannelRegistry  # noqa: F401
from .decoder import EventDecoder  # noqa: F401
from .models import (  # noqa: F401
    Channel,
    ChannelMessageEvent,
    ConnectEvent,
    ConnectionState,
    IRCEvent,
    JoinEvent,
    NickEvent,
    NumericEvent,
    PartEvent,
    TopicEvent,
)
from .parser import IRCMessage, message_to_events, parse_irc_message  # noqa: F401
from .session import IRCSession  # noqa: F401
from .transport import IRCTransport  # noqa: F401

__all__ = [
    "Channel",
    "ChannelMessageEvent",
    "ChannelRegistry",
    "ConnectEvent",
    "ConnectionState",
    "EventDecoder",
    "IRCEvent",
    "IRCMessage",
    "IRCSession",
    "IRCTransport",
    "JoinEvent",
    "NickEvent",
    "NumericEvent",
    "PartEvent",
    "TopicEvent",
    "message_to_events",
    "parse_irc_message",
]
