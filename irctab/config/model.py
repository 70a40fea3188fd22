from __future__ import annotations

import getpass
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import IRC_DEFAULT_PORT


def default_nick() -> str:
    """Return the OS user name, used when no nick is configured."""
    try:
        name = getpass.getuser()
    except (KeyError, OSError):
        return "unknown"
    return name or "unknown"


class AutojoinChannel(BaseModel):
    """A channel joined automatically once the server accepts the connection.

    Attributes:
        channel: Channel name including its prefix, e.g. ``#python``.
        password: Optional channel key sent along with the JOIN.
    """

    channel: str = Field(min_length=1)
    password: str | None = None

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped or " " in stripped:
            raise ValueError("channel name must be a single non-empty token")
        return stripped


class SessionConfig(BaseModel):
    """Connection settings shared by the session and the command interpreter.

    The session mutates ``nick`` on collisions and ``/nick``, and
    ``server``/``port`` on ``/connect``; assignments are validated.

    Attributes:
        server: IRC server host name, ``None`` until one is configured.
        port: TCP port of the server.
        nick: Nickname used for registration.
        autojoin: Channels joined when the connection is established.
    """

    model_config = ConfigDict(validate_assignment=True)

    server: str | None = None
    port: int = Field(default=IRC_DEFAULT_PORT, ge=1, le=65535)
    nick: str = Field(default_factory=default_nick, min_length=1)
    autojoin: list[AutojoinChannel] = Field(default_factory=list)

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str | None) -> str | None:
        if v is None:
            return None
        stripped = v.strip()
        if " " in stripped:
            raise ValueError("server must not contain spaces")
        return stripped or None

    @field_validator("nick")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped or " " in stripped:
            raise ValueError("nick must be a single non-empty token")
        return stripped

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionConfig:
        """Create a SessionConfig from the on-disk representation.

        The file lists autojoin channels under ``channels`` as
        ``{"name": ..., "password": ...}`` objects; ``autojoin`` with
        ``channel`` keys is accepted as well.

        Args:
            data: Dictionary loaded from the configuration file.

        Returns:
            SessionConfig instance.
        """
        norm_data = {k: v for k, v in data.items() if k in ("server", "port", "nick")}
        if norm_data.get("nick") is None:
            norm_data.pop("nick", None)
        entries = data.get("autojoin")
        if entries is None:
            entries = [
                {"channel": c.get("name"), "password": c.get("password")}
                if isinstance(c, Mapping)
                else c
                for c in data.get("channels", [])
            ]
        norm_data["autojoin"] = entries
        return cls.model_validate(norm_data)

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the on-disk representation."""
        data: dict[str, Any] = {"port": self.port, "nick": self.nick}
        if self.server:
            data["server"] = self.server
        data["channels"] = [
            {"name": e.channel, **({"password": e.password} if e.password else {})}
            for e in self.autojoin
        ]
        return data

    def set_connection(self, server: str, port: int | None = None) -> None:
        """Point the config at another server; ``port`` keeps its value if None."""
        self.server = server
        if port:
            self.port = port
