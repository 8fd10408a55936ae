"""Collect inline and linked stylesheet text for a page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from font_grabber.css import FamilyUsage, extract_font_families
from font_grabber.fetch import STYLESHEET_TIMEOUT, Fetcher, fetch_each, fetch_text
from font_grabber.markup import MarkupIndex
from font_grabber.urls import is_font_service_url, resolve_url

logger = logging.getLogger(__name__)

INLINE = "inline"
EXTERNAL = "external"


@dataclass(frozen=True)
class StylesheetSource:
    kind: str
    url: Optional[str]
    content: str
    font_families: List[FamilyUsage] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "source": "inline <style> tag" if self.kind == INLINE else "external CSS file",
            "kind": self.kind,
            "url": self.url,
            "content": self.content,
            "fontFamilies": [usage.to_dict() for usage in self.font_families],
        }


def stylesheet_urls(page_url: str, index: MarkupIndex) -> List[str]:
    """Absolute URLs of every linked stylesheet, in document order."""
    urls: List[str] = []
    for href in index.stylesheets:
        url = resolve_url(href, page_url)
        if not url:
            logger.debug("Skipping unresolvable stylesheet href %r", href)
            continue
        if url not in urls:
            urls.append(url)
    return urls


def collect_sources(
    page_url: str,
    index: MarkupIndex,
    fetch: Fetcher = fetch_text,
    timeout: float = STYLESHEET_TIMEOUT,
) -> List[StylesheetSource]:
    sources: List[StylesheetSource] = []
    for block in index.style_blocks:
        sources.append(StylesheetSource(INLINE, None, block, extract_font_families(block)))

    external = [url for url in stylesheet_urls(page_url, index) if not is_font_service_url(url)]
    for outcome in fetch_each(external, timeout, fetch):
        if not outcome.ok:
            continue
        text = outcome.text or ""
        sources.append(StylesheetSource(EXTERNAL, outcome.url, text, extract_font_families(text)))

    logger.debug(
        "Collected %d stylesheet sources for %s (%d external requested)", len(sources), page_url, len(external)
    )
    return sources
