"""Event logging for irctab: the template catalog and ``ClientLogger``."""

from .event_catalog import EVENT_TEMPLATES, reload_event_templates, render_event  # noqa: F401
from .logger import ClientLogger, logger  # noqa: F401

__all__ = [
    "ClientLogger",
    "EVENT_TEMPLATES",
    "logger",
    "reload_event_templates",
    "render_event",
]
