"""Configuration loading utilities."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from ..constants import APP_NAME, CONFIG_FILE_ENV, CONFIG_FILE_NAME
from ..errors.handling import log_error
from ..errors.internal import ConfigError
from ..logs.logger import logger
from .model import SessionConfig
from .repository import ConfigRepository


def default_config_path() -> Path:
    """Return ``$XDG_CONFIG_HOME/irctab/config.json`` (``~/.config`` fallback)."""
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    return Path(base) / APP_NAME / CONFIG_FILE_NAME


class ConfigLoader:
    """Loads the session configuration and reports progress as status lines."""

    def __init__(self, report: Callable[[str], None] | None = None) -> None:
        """Initialize ConfigLoader.

        Args:
            report: Callback receiving user-visible status lines.
        """
        self.report = report or (lambda _line: None)

    def resolve_path(self) -> Path:
        env_path = os.environ.get(CONFIG_FILE_ENV)
        return Path(env_path) if env_path else default_config_path()

    def get_configuration(self, config_file: str | os.PathLike[str] | None = None) -> SessionConfig:
        """Load and validate the configuration file.

        A missing file is not an error: the defaults (OS user name as nick,
        no server, no autojoin) are returned. An unreadable or invalid file
        is reported and the defaults are returned as well.

        Returns:
            The loaded SessionConfig.
        """
        path = Path(config_file) if config_file else self.resolve_path()
        repo = ConfigRepository(path)
        if not repo.exists():
            self.report("Config file not present")
            logger.log_event("config", "missing", path=str(path))
            return SessionConfig()

        self.report("Loading config file")
        try:
            raw = repo.load_raw()
            config = SessionConfig.from_dict(raw)
        except ValidationError as e:
            return self._fallback(ConfigError(_summarize(e), data={"path": str(path)}))
        except ConfigError as e:
            return self._fallback(e)

        logger.log_event(
            "config",
            "loaded",
            path=str(path),
            server=config.server,
            autojoin=len(config.autojoin),
        )
        return config

    def _fallback(self, error: ConfigError) -> SessionConfig:
        self.report(f"Failed to load config file: {error}")
        log_error("Configuration load error", error, context=error.data)
        return SessionConfig()


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc}: {item.get('msg')}" if loc else str(item.get("msg")))
    return "; ".join(parts)
