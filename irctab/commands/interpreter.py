"""User input: slash commands and plain channel messages."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..constants import STATUS_TARGET
from ..logs.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.session import IRCSession

HELP_TEXT = (
    " /help                 - Prints this help",
    " /join #chan [key]     - Joins channel #chan",
    " /quit                 - Quits",
    " /topic text           - Sets channel topic",
    " /wc                   - Closes this window",
    " /nick name            - Changes your nick",
    " /connect host[:port]  - Connects to a server",
)


class CommandInterpreter:
    """Routes one line of user input typed in a window.

    A line starting with ``/`` is a command: the name runs up to the first
    space and must match the table exactly, the rest is handed to the command
    as is. Other lines typed in a channel window are sent to that channel;
    in the status window they are ignored.
    """

    def __init__(self, session: IRCSession) -> None:
        self.session = session
        self._commands: dict[str, Callable[[str, str], Awaitable[None]]] = {
            "help": self._cmd_help,
            "join": self._cmd_join,
            "quit": self._cmd_quit,
            "topic": self._cmd_topic,
            "wc": self._cmd_wc,
            "nick": self._cmd_nick,
            "connect": self._cmd_connect,
        }

    @property
    def command_names(self) -> list[str]:
        return list(self._commands)

    def _reply(self, target: str, text: str) -> None:
        self.session.sink.append_line(target, text)

    async def execute(self, target: str, line: str) -> None:
        if line.startswith("/"):
            await self.run_command(target, line[1:])
            return
        if target == STATUS_TARGET:
            logger.log_event("input", "status_text_ignored", level=logging.DEBUG)
            return
        if not line:
            return
        await self.session.send_message(target, line)

    async def run_command(self, target: str, text: str) -> None:
        name, _, args = text.partition(" ")
        handler = self._commands.get(name)
        if handler is None:
            self._reply(target, "Invalid command")
            return
        logger.log_event(
            "input", "command", level=logging.DEBUG, command=name, channel=target
        )
        await handler(target, args)

    async def _cmd_help(self, target: str, _args: str) -> None:
        for line in HELP_TEXT:
            self._reply(target, line)

    async def _cmd_join(self, target: str, args: str) -> None:
        tokens = args.split()
        if not tokens:
            self._reply(target, "/join requires parameter")
            return
        if len(tokens) > 2:
            self._reply(target, "/join takes a channel and an optional password")
            return
        password = tokens[1] if len(tokens) == 2 else None
        await self.session.join(tokens[0], password)

    async def _cmd_quit(self, target: str, args: str) -> None:
        if args:
            self._reply(target, "/quit command invalid parameters")
            return
        await self.session.quit()

    async def _cmd_topic(self, target: str, args: str) -> None:
        if not args:
            self._reply(target, "/topic requires parameter")
            return
        if target == STATUS_TARGET:
            self._reply(target, "/topic must be used in a channel window")
            return
        if self.session.registry.lookup(target) is None:
            return
        await self.session.set_topic(target, args)

    async def _cmd_wc(self, target: str, args: str) -> None:
        if args:
            self._reply(target, "/wc command invalid parameters")
            return
        if target == STATUS_TARGET:
            self._reply(target, "/wc cannot close the status window")
            return
        await self.session.part(target)

    async def _cmd_nick(self, target: str, args: str) -> None:
        nick = args.strip()
        if not nick:
            self._reply(target, "/nick requires a parameter")
            return
        try:
            await self.session.change_nick(nick)
        except ValueError:
            self._reply(target, f"/nick invalid nick '{nick}'")

    async def _cmd_connect(self, target: str, args: str) -> None:
        address = args.strip()
        if not address:
            self._reply(target, "/connect requires parameter(s)")
            return
        server, port = address, None
        if ":" in address:
            server, _, port_text = address.rpartition(":")
            if not port_text.isdigit() or not 0 < int(port_text) < 65536:
                self._reply(target, f"/connect invalid port '{port_text}'")
                return
            port = int(port_text)
        if not server:
            self._reply(target, "/connect requires parameter(s)")
            return
        try:
            self.session.config.set_connection(server, port)
        except ValueError:
            self._reply(target, f"/connect invalid server '{server}'")
            return
        await self.session.connect()
