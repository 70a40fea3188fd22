"""irctab - a small tabbed IRC client session."""

from .constants import APP_VERSION

__version__ = APP_VERSION
