"""Event logger used by every irctab module."""

from __future__ import annotations

import logging
import os

EVENT_NAME_WIDTH = 32
PREFIX_WIDTH = 24


def _debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


class ClientLogger:
    """Structured event logger.

    Events are addressed by ``(domain, action)``; the text comes from the
    template catalog. ``nick`` and ``channel`` are lifted out of the context
    into a fixed width ``[nick channel]`` column. With ``DEBUG`` set the
    event name and the remaining context are appended as well.

    Records go through the ``irctab`` logger and propagate to the root
    logger, so the handlers installed by ``LoggerConfigurator`` apply.
    """

    def __init__(self, name: str = "irctab", log_file: str | None = None) -> None:
        self.logger = logging.getLogger(name)
        self.log_file = log_file
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG if _debug_enabled() else logging.INFO)
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            self.logger.addHandler(file_handler)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        nick = kwargs.pop("nick", None)
        channel = kwargs.pop("channel", None)
        if human is None:
            # Local import: the catalog must not load while this module initialises
            from .event_catalog import render_event

            human, derived = render_event(
                domain, action, {"nick": nick, "channel": channel, **kwargs}
            )
            if derived:
                kwargs["derived"] = True

        prefix = self._build_prefix(
            nick if isinstance(nick, str) else None,
            channel if isinstance(channel, str) else None,
        )
        if _debug_enabled():
            msg = self._build_debug_message(f"{domain}_{action}".lower(), prefix, human, kwargs)
        else:
            msg = f"{prefix} {human}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _build_prefix(nick: str | None, channel: str | None) -> str:
        core = f"{nick or 'session'} {channel}" if channel else (nick or "session")
        return f"[{core.ljust(PREFIX_WIDTH)[:PREFIX_WIDTH]}]"

    @staticmethod
    def _build_debug_message(
        event_name: str, prefix: str, human_text: str, context: dict[str, object]
    ) -> str:
        if len(event_name) <= EVENT_NAME_WIDTH:
            ev = event_name.ljust(EVENT_NAME_WIDTH)
        else:
            ev = event_name[: EVENT_NAME_WIDTH - 1] + "…"
        msg = f"{ev} {prefix} {human_text}"
        if context:
            msg += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"
        return msg


logger = ClientLogger()
