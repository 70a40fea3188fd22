"""Exception types raised inside irctab.

Socket errors, timeouts and pydantic validation errors are wrapped into these
at the transport and configuration boundaries; ``data`` carries the context
(server, path, offending line) for the structured error log.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class of all irctab errors.

    Args:
        message: Human readable description, also the ``str()`` of the error.
        data: Optional context; copied so later changes by the caller do not
            leak into the error.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Connecting to, reading from or writing to the server failed.

    The message is the transport error text shown in the status window.
    """


class ParsingError(InternalError):
    """A line from the server could not be parsed."""


class ConfigError(InternalError):
    """The configuration file cannot be read or is not valid JSON."""


__all__ = [
    "InternalError",
    "NetworkError",
    "ParsingError",
    "ConfigError",
]
