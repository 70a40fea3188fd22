"""Line oriented terminal front end.

Every window (the status window and one per channel) shares the terminal;
lines are prefixed with the window name. ``/window`` switches the window that
typed text goes to, the rest of the input is handed to the interpreter.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, TextIO

from ..constants import STATUS_TARGET
from ..logs.logger import logger

if TYPE_CHECKING:  # pragma: no cover
    from ..commands.interpreter import CommandInterpreter
    from ..irc.session import IRCSession

WINDOW_COMMAND = "/window"


class ConsoleFrontend:
    def __init__(self, output: TextIO | None = None) -> None:
        self.output = output or sys.stdout
        self.windows: list[str] = [STATUS_TARGET]
        self.active = STATUS_TARGET
        self._switch_listener: Callable[[str], None] | None = None

    def set_switch_listener(self, listener: Callable[[str], None]) -> None:
        self._switch_listener = listener

    def _write(self, text: str) -> None:
        print(text, file=self.output, flush=True)

    def append_line(self, target: str, text: str) -> None:
        self._write(f"[{target}] {text}")

    def set_topic_display(self, text: str | None) -> None:
        self._write(f"-- topic: {text if text is not None else '(none)'}")

    def open_target(self, name: str) -> None:
        if name not in self.windows:
            self.windows.append(name)
        self.switch_to(name)

    def close_target(self, name: str) -> None:
        if name not in self.windows:
            return
        self.windows.remove(name)
        if self.active == name:
            self.switch_to(STATUS_TARGET)

    def switch_to(self, target: str) -> bool:
        if target not in self.windows:
            return False
        self.active = target
        if self._switch_listener is not None:
            self._switch_listener(target)
        return True

    def _window_command(self, args: str) -> None:
        choice = args.strip()
        if not choice:
            listing = " ".join(
                f"*{w}" if w == self.active else w for w in self.windows
            )
            self.append_line(self.active, f"Windows: {listing}")
            return
        if choice.isdigit() and 0 <= int(choice) < len(self.windows):
            choice = self.windows[int(choice)]
        if not self.switch_to(choice):
            self.append_line(self.active, f"No window named '{choice}'")

    async def handle_line(self, line: str, interpreter: CommandInterpreter) -> None:
        if line == WINDOW_COMMAND or line.startswith(WINDOW_COMMAND + " "):
            self._window_command(line[len(WINDOW_COMMAND):])
            return
        await interpreter.execute(self.active, line)

    async def run(
        self,
        session: IRCSession,
        interpreter: CommandInterpreter,
        reader: asyncio.StreamReader | None = None,
    ) -> None:
        """Feed input lines to the interpreter until the session is closed."""
        if reader is None:
            reader = await _stdin_reader()
        while not session.closed.is_set():
            data = await reader.readline()
            if not data:
                logger.log_event("input", "eof")
                await session.quit()
                break
            line = data.decode("utf-8", errors="replace").rstrip("\r\n")
            await self.handle_line(line, interpreter)


async def _stdin_reader() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader
