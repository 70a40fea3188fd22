"""Protocol definition for the presentation layer.

The session only talks to the screen through this interface, so the console
front end, a GUI or a test double can be plugged in.
"""

from __future__ import annotations

from typing import Protocol


class PresentationSink(Protocol):
    """Output side of the user interface.

    Targets are either ``STATUS_TARGET`` or a channel name.
    """

    def append_line(self, target: str, text: str) -> None:
        """Append a line to the log of ``target``."""
        ...

    def set_topic_display(self, text: str | None) -> None:
        """Show ``text`` as the topic of the active target; None means no topic."""
        ...

    def open_target(self, name: str) -> None:
        """Create the window for a newly joined channel."""
        ...

    def close_target(self, name: str) -> None:
        """Remove the window of a parted channel."""
        ...
