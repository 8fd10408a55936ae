"""Detect the fonts a web page declares, loads, or renders."""

from font_grabber.catalog import FontCatalog, detect_fonts
from font_grabber.errors import FontGrabberError, MissingURLError, PageFetchError

__all__ = ["FontCatalog", "FontGrabberError", "MissingURLError", "PageFetchError", "detect_fonts"]
