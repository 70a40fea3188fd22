"""Configuration package exports."""

from .config_loader import ConfigLoader, default_config_path
from .model import AutojoinChannel, SessionConfig, default_nick
from .repository import ConfigRepository

__all__ = [
    "AutojoinChannel",
    "ConfigLoader",
    "ConfigRepository",
    "SessionConfig",
    "default_config_path",
    "default_nick",
]
