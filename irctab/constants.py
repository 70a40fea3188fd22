"""
Tunables for the irctab IRC client

Numeric constants can be overridden by setting an environment variable with
the same name; an unparsable value falls back to the default with a warning.
"""

import os
import sys


def _env_warning(name: str, value: str, kind: str, default: object) -> None:
    # Printed, not logged: constants load before logging is configured
    print(f"Warning: Invalid {kind} value for {name}='{value}', using default {default}", file=sys.stderr)


def _get_env_int(name: str, default: int) -> int:
    """Return ``int(os.environ[name])``, or ``default`` if unset or invalid."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        _env_warning(name, value, "integer", default)
        return default


def _get_env_float(name: str, default: float) -> float:
    """Return ``float(os.environ[name])``, or ``default`` if unset or invalid."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        _env_warning(name, value, "float", default)
        return default


APP_NAME = "irctab"
APP_VERSION = "1.0.0"
APP_BANNER = f"{APP_NAME} {APP_VERSION}"

# Output target for session-level lines (not a valid IRC channel name)
STATUS_TARGET = "status"

# Poll loop: seconds between ticks and the longest a tick may wait on the socket
IRC_POLL_INTERVAL = _get_env_float("IRC_POLL_INTERVAL", 0.1)
IRC_POLL_IO_TIMEOUT = _get_env_float("IRC_POLL_IO_TIMEOUT", 0.01)
# Follow-up reads inside one tick, and the most one tick reads before yielding
IRC_POLL_DRAIN_TIMEOUT = _get_env_float("IRC_POLL_DRAIN_TIMEOUT", 0.001)
IRC_POLL_MAX_BYTES = _get_env_int("IRC_POLL_MAX_BYTES", 1024 * 1024)

IRC_CONNECT_TIMEOUT = _get_env_float("IRC_CONNECT_TIMEOUT", 10.0)
IRC_READ_CHUNK_SIZE = _get_env_int("IRC_READ_CHUNK_SIZE", 4096)
IRC_DEFAULT_PORT = _get_env_int("IRC_DEFAULT_PORT", 6667)

# Error aggregation: alert after THRESHOLD errors of one kind within WINDOW seconds
ERROR_ALERT_THRESHOLD = _get_env_int("ERROR_ALERT_THRESHOLD", 10)
ERROR_ALERT_WINDOW = _get_env_float("ERROR_ALERT_WINDOW", 300.0)
ERROR_HISTORY_LIMIT = _get_env_int("ERROR_HISTORY_LIMIT", 200)

CONFIG_FILE_ENV = "IRCTAB_CONF_FILE"
CONFIG_FILE_NAME = "config.json"
LOG_FILE_ENV = "IRCTAB_LOG_FILE"
