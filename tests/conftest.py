import os

import pytest
import pytest_asyncio

# Keep test runs fast: no real socket waits in the poll loop
os.environ.setdefault("IRC_POLL_INTERVAL", "0")
os.environ.setdefault("IRC_CONNECT_TIMEOUT", "1")

from irctab.config.model import AutojoinChannel, SessionConfig  # noqa: E402
from irctab.irc.models import ConnectionState, IRCEvent  # noqa: E402
from irctab.irc.session import IRCSession  # noqa: E402
from irctab.irc.transport import IRCTransport  # noqa: E402


class RecordingSink:
    """Presentation sink that remembers everything it was asked to show."""

    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []
        self.topics: list[str | None] = []
        self.opened: list[str] = []
        self.closed: list[str] = []
        self.fail_open = False

    def append_line(self, target: str, text: str) -> None:
        self.lines.append((target, text))

    def set_topic_display(self, text: str | None) -> None:
        self.topics.append(text)

    def open_target(self, name: str) -> None:
        if self.fail_open:
            raise MemoryError("no room for another window")
        self.opened.append(name)

    def close_target(self, name: str) -> None:
        self.closed.append(name)

    def lines_for(self, target: str) -> list[str]:
        return [text for t, text in self.lines if t == target]


class FakeTransport(IRCTransport):
    """Transport double: records outbound lines, replays queued events."""

    def __init__(self, connect_ok: bool = True, error: str = "Connection refused") -> None:
        super().__init__()
        self.sent: list[str] = []
        self.connected = False
        self.connect_ok = connect_ok
        self.connect_error = error
        self.connect_calls: list[tuple[str, int, str]] = []
        self.pending: list[IRCEvent] = []
        self.poll_timeouts: list[float] = []

    async def connect(self, server: str, port: int, nick: str) -> bool:  # type: ignore[override]
        self.connect_calls.append((server, port, nick))
        if not self.connect_ok:
            self._last_error = self.connect_error
            return False
        self._last_error = ""
        self.nick = nick
        self.connected = True
        return True

    def is_connected(self) -> bool:  # type: ignore[override]
        return self.connected

    async def poll(self, timeout: float):  # type: ignore[override]
        self.poll_timeouts.append(timeout)
        events, self.pending = self.pending, []
        return events

    async def _send_line(self, message: str) -> bool:  # capture instead of network
        if not self.connected:
            return False
        self.sent.append(message)
        return True

    async def disconnect(self) -> None:  # type: ignore[override]
        self.connected = False

    def drop(self, reason: str) -> None:
        self.connected = False
        self._last_error = reason


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def config() -> SessionConfig:
    return SessionConfig(server="irc.example.org", port=6667, nick="me")


@pytest_asyncio.fixture
async def session(config, sink, transport):
    sess = IRCSession(config, sink, transport)
    yield sess
    await sess._stop_polling()  # noqa: SLF001


@pytest.fixture
def online_session(session, transport):
    """Session that is registered with the server, without a poll task."""
    transport.connected = True
    session.state = ConnectionState.CONNECTED
    return session


@pytest.fixture
def make_config():
    def _make(**kwargs) -> SessionConfig:
        base = {"server": "irc.example.org", "nick": "me"}
        base.update(kwargs)
        base["autojoin"] = [AutojoinChannel(**a) for a in base.get("autojoin", [])]
        return SessionConfig(**base)

    return _make
