from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    ConfigError,
    InternalError,
    NetworkError,
    ParsingError,
)

# First match wins; order from most to least specific
_CATEGORIES: tuple[tuple[type[BaseException] | tuple[type[BaseException], ...], str], ...] = (
    ((NetworkError, OSError, TimeoutError), "network"),
    (ParsingError, "parsing"),
    (ConfigError, "config"),
    (InternalError, "internal"),
)


def error_category(error: BaseException) -> str:
    for types, name in _CATEGORIES:
        if isinstance(error, types):
            return name
    return "unknown"


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Log ``error`` under its category and count it in the error aggregator.

    Args:
        message: What was being attempted, e.g. "IRC connection failed".
        error: The exception that was caught.
        context: Extra key/value pairs; ``error.data`` is used when omitted.
    """
    if context is None and isinstance(error, InternalError):
        context = error.data
    log_structured_error(
        error_type=error_category(error),
        message=f"{message}: {error}",
        exception=error,
        context=context,
    )


def describe_transport_error(error: BaseException) -> str:
    """Return the text shown to the user for a transport failure.

    ``OSError`` carries ``strerror``; a timeout's ``str()`` is empty.
    """
    if isinstance(error, TimeoutError):
        return "Connection timed out"
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error) or type(error).__name__
