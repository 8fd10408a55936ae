"""Exceptions raised by the font detection pipeline."""

from __future__ import annotations

from typing import Optional


class FontGrabberError(Exception):
    """Base class for font detection failures."""


class MissingURLError(FontGrabberError):
    def __init__(self) -> None:
        super().__init__("URL is required")


class PageFetchError(FontGrabberError):
    """The target page itself could not be acquired."""

    def __init__(self, url: str, summary: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(summary)
        self.url = url
        self.summary = summary
        self.cause = cause
