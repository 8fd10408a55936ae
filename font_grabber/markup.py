"""Index of the font-relevant parts of an HTML document."""

from __future__ import annotations

from dataclasses import dataclass
from html.parser import HTMLParser
from typing import List, Optional, Tuple


@dataclass
class PreloadLink:
    href: str
    type: str = ""


class MarkupIndex(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.style_blocks: List[str] = []
        self.stylesheets: List[str] = []
        self.preloads: List[PreloadLink] = []
        self.style_attributes: List[str] = []

        self._in_style = False
        self._style_buf: List[str] = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        attr_map = {k.lower(): (v or "") for k, v in attrs}

        style_attr = attr_map.get("style", "").strip()
        if style_attr:
            self.style_attributes.append(style_attr)

        if tag == "link":
            rel = set(attr_map.get("rel", "").lower().split())
            href = attr_map.get("href", "").strip()
            if not href:
                return
            if "stylesheet" in rel:
                self.stylesheets.append(href)
            if "preload" in rel and attr_map.get("as", "").strip().lower() == "font":
                self.preloads.append(PreloadLink(href=href, type=attr_map.get("type", "").strip()))
        elif tag == "style":
            self._in_style = True
            self._style_buf = []

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag == "style":
            return
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        if tag == "style" and self._in_style:
            self._in_style = False
            css = "".join(self._style_buf)
            if css.strip():
                self.style_blocks.append(css)

    def handle_data(self, data: str) -> None:
        if self._in_style:
            self._style_buf.append(data)


def index_markup(html_text: str) -> MarkupIndex:
    parser = MarkupIndex()
    parser.feed(html_text or "")
    parser.close()
    return parser
