r"""
Logging configuration module for irctab.

Sets up colorlog output on stderr, or a plain log file, and keeps an error
aggregator so a flapping connection shows up as one alert plus an exit
summary instead of a wall of identical errors. stdout is left to the console
front end.
"""

import atexit
import logging
import os
import sys
import time
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any

import colorlog

from .constants import (
    ERROR_ALERT_THRESHOLD,
    ERROR_ALERT_WINDOW,
    ERROR_HISTORY_LIMIT,
    LOG_FILE_ENV,
)


@dataclass(slots=True)
class ErrorRecord:
    timestamp: float
    message: str
    context: dict[str, Any] = field(default_factory=dict)


class ErrorAggregator:
    """Counts errors per category.

    An alert is due when ``threshold`` errors of one category fall inside the
    last ``window`` seconds; it fires once per burst.
    """

    def __init__(
        self,
        window: float = ERROR_ALERT_WINDOW,
        threshold: int = ERROR_ALERT_THRESHOLD,
    ) -> None:
        self.window = window
        self.threshold = threshold
        self.errors: dict[str, deque[ErrorRecord]] = defaultdict(
            lambda: deque(maxlen=ERROR_HISTORY_LIMIT)
        )
        self.totals: dict[str, int] = defaultdict(int)

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        self.errors[error_type].append(ErrorRecord(time.time(), message, dict(context or {})))
        self.totals[error_type] += 1

    def recent_count(self, error_type: str, now: float | None = None) -> int:
        now = time.time() if now is None else now
        return sum(1 for e in self.errors.get(error_type, ()) if now - e.timestamp < self.window)

    def should_alert(self, error_type: str) -> bool:
        return self.recent_count(error_type) == self.threshold

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        summary: dict[str, dict[str, Any]] = {}
        for error_type, records in self.errors.items():
            if not records:
                continue
            servers = {str(r.context["server"]) for r in records if r.context.get("server")}
            summary[error_type] = {
                "total_count": self.totals[error_type],
                "recent_count": self.recent_count(error_type),
                "servers": sorted(servers),
                "last_message": records[-1].message,
            }
        return summary

    def clear(self) -> None:
        self.errors.clear()
        self.totals.clear()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.debug("No errors recorded in this session")
            return

        logging.warning("Error summary for this session:")
        for error_type, stats in summary.items():
            where = f" ({', '.join(stats['servers'])})" if stats["servers"] else ""
            logging.warning(
                f"  {error_type}: {stats['total_count']} total, "
                f"{stats['recent_count']} in the last {self.window:.0f}s{where}"
            )
            logging.warning(f"    last: {stats['last_message']}")


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with its category and context, and count it.

    Args:
        error_type: Category of the error (network, parsing, config, ...).
        message: Descriptive error message.
        exception: The exception that occurred, if any.
        context: Extra key/value pairs appended to the record.
        level: Logging level (default: ERROR).
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))

    error_aggregator.record_error(error_type, message, context)
    if error_aggregator.should_alert(error_type):
        logging.critical(
            f"Repeated {error_type} errors: {error_aggregator.threshold} "
            f"in the last {error_aggregator.window:.0f}s"
        )


class LoggerConfigurator:
    """Installs the root logging handler.

    Uses environment variables:
    - DEBUG: 'true', '1' or 'yes' selects DEBUG level, otherwise INFO
    - IRCTAB_LOG_FILE: write records to that file instead of stderr

    ``config["log_file"]`` takes precedence over the environment.
    """

    def __init__(self, config=None):
        self.config = config or {}

    def _build_handler(self) -> logging.Handler:
        log_file = self.config.get("log_file") or os.environ.get(LOG_FILE_ENV)
        if log_file:
            handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s %(levelname)-8s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
                )
            )
            return handler
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
                datefmt="%H:%M:%S",
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                },
                secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
                reset=True,
            )
        )
        return handler

    def configure(self) -> logging.Handler:
        debug_env = os.environ.get("DEBUG", "").lower()
        log_level = logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

        handler = self._build_handler()
        root_logger = logging.getLogger()
        for h in list(root_logger.handlers):
            root_logger.removeHandler(h)
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

        atexit.register(error_aggregator.log_summary_report)
        return handler
