"""Presentation layer: the sink protocol and the console front end."""

from .sink import PresentationSink

__all__ = ["PresentationSink"]
