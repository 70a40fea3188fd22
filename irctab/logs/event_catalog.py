"""Human readable texts for logged events.

``event_templates.json`` next to this module maps ``domain -> action ->
template``; templates are ``str.format`` strings filled from the event
context.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}
_JSON_FILENAME = "event_templates.json"


def _load_event_templates() -> dict[tuple[str, str], str]:
    path = Path(__file__).with_name(_JSON_FILENAME)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}
    if not isinstance(raw, Mapping):
        return {("app", "load_error"): "Event templates file is not an object"}
    return {
        (domain, action): template
        for domain, actions in raw.items()
        if isinstance(actions, Mapping)
        for action, template in actions.items()
        if isinstance(template, str)
    }


def reload_event_templates() -> None:
    global EVENT_TEMPLATES  # noqa: PLW0603
    EVENT_TEMPLATES = _load_event_templates()


def render_event(domain: str, action: str, context: Mapping[str, object]) -> tuple[str, bool]:
    """Return ``(text, derived)`` for an event.

    ``derived`` is True when no template exists and the text was built from
    the domain and action names. A template referring to a field missing
    from ``context`` is returned unformatted.
    """
    template = EVENT_TEMPLATES.get((domain, action))
    if not template:
        return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}", True
    try:
        return template.format(**context), False
    except (KeyError, IndexError, ValueError):
        return template, False


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates", "render_event"]
