"""Assemble every font signal for a page into one catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional, TypeVar

from font_grabber.acquisition import Acquirer, Acquisition, StaticAcquirer
from font_grabber.css import (
    FontFaceDeclaration,
    FontFileReference,
    ImportReference,
    extract_font_faces,
    extract_font_files,
    extract_font_stacks,
    extract_imports,
)
from font_grabber.errors import MissingURLError
from font_grabber.fetch import Fetcher, fetch_text
from font_grabber.markup import MarkupIndex, index_markup
from font_grabber.observer import FontVariable, LoadedFont, observe
from font_grabber.services import KitProject, ServiceFamily, classify_service_links
from font_grabber.sources import StylesheetSource, collect_sources, stylesheet_urls
from font_grabber.urls import font_format, resolve_url

logger = logging.getLogger(__name__)

GENERIC_FAMILIES = {"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui", "-apple-system"}
SYSTEM_FONT_TOKENS = (
    "system-ui",
    "-apple-system",
    "BlinkMacSystemFont",
    "Segoe UI",
    "Roboto",
    "Helvetica Neue",
    "Arial",
)

T = TypeVar("T")


@dataclass(frozen=True)
class PreloadedFont:
    url: str
    format: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "type": "preloaded-font", "format": self.format}


@dataclass
class FontCatalog:
    acquisition: str = "static"
    google_fonts: List[ServiceFamily] = field(default_factory=list)
    adobe_fonts: List[KitProject] = field(default_factory=list)
    font_files: List[FontFileReference] = field(default_factory=list)
    font_face_declarations: List[FontFaceDeclaration] = field(default_factory=list)
    preloaded_fonts: List[PreloadedFont] = field(default_factory=list)
    css_import_fonts: List[ImportReference] = field(default_factory=list)
    font_variables: List[FontVariable] = field(default_factory=list)
    loaded_fonts: List[LoadedFont] = field(default_factory=list)
    system_font_stacks: List[str] = field(default_factory=list)
    computed_fonts: List[str] = field(default_factory=list)
    css_source_files: List[StylesheetSource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "acquisition": self.acquisition,
            "googleFonts": [f.to_dict() for f in self.google_fonts],
            "adobeFonts": [p.to_dict() for p in self.adobe_fonts],
            "fontFiles": [f.to_dict() for f in self.font_files],
            "fontFaceDeclarations": [d.to_dict() for d in self.font_face_declarations],
            "preloadedFonts": [p.to_dict() for p in self.preloaded_fonts],
            "cssImportFonts": [i.to_dict() for i in self.css_import_fonts],
            "fontVariables": [v.to_dict() for v in self.font_variables],
            "loadedFonts": [f.to_dict() for f in self.loaded_fonts],
            "systemFontStacks": [{"stack": s, "type": "system-font-stack"} for s in self.system_font_stacks],
            "computedFonts": [{"name": n, "type": "computed-font"} for n in self.computed_fonts],
            "cssSourceFiles": [s.to_dict() for s in self.css_source_files],
        }


def unique(items: Iterable[T], key=None) -> List[T]:
    seen = set()
    out: List[T] = []
    for item in items:
        marker: Hashable = key(item) if key else item
        if marker in seen:
            continue
        seen.add(marker)
        out.append(item)
    return out


def clean_font_stack(stack: str) -> str:
    families = []
    for token in stack.split(","):
        name = token.strip().replace('"', "").replace("'", "").strip()
        if name and name not in GENERIC_FAMILIES:
            families.append(name)
    return ", ".join(families)


def is_system_stack(stack: str) -> bool:
    return any(token in stack for token in SYSTEM_FONT_TOKENS)


def preloaded_fonts(page_url: str, index: MarkupIndex) -> List[PreloadedFont]:
    fonts: List[PreloadedFont] = []
    for link in index.preloads:
        url = resolve_url(link.href, page_url)
        if not url:
            logger.debug("Skipping unresolvable preload href %r", link.href)
            continue
        fmt = link.type.lower().replace("font/", "") if link.type else font_format(url)
        fonts.append(PreloadedFont(url, fmt or "unknown"))
    return fonts


def build_catalog(
    page_url: str,
    index: MarkupIndex,
    sources: List[StylesheetSource],
    google_fonts: List[ServiceFamily],
    adobe_fonts: List[KitProject],
    computed_stacks: List[str],
    font_variables: Optional[List[FontVariable]] = None,
    loaded_fonts: Optional[List[LoadedFont]] = None,
    include_sources: bool = True,
    acquisition: str = "static",
) -> FontCatalog:
    faces: List[FontFaceDeclaration] = []
    files: List[FontFileReference] = []
    imports: List[ImportReference] = []
    for source in sources:
        base = source.url or page_url
        faces.extend(extract_font_faces(source.content))
        files.extend(extract_font_files(source.content, base))
        imports.extend(extract_imports(source.content, base))

    stacks = unique(computed_stacks)
    cleaned = unique(name for name in (clean_font_stack(s) for s in stacks) if name)

    return FontCatalog(
        acquisition=acquisition,
        google_fonts=google_fonts,
        adobe_fonts=unique(adobe_fonts, key=lambda p: p.url),
        font_files=unique(files),
        font_face_declarations=faces,
        preloaded_fonts=unique(preloaded_fonts(page_url, index), key=lambda p: p.url),
        css_import_fonts=unique(imports, key=lambda i: i.url),
        font_variables=unique(font_variables or [], key=lambda v: v.name),
        loaded_fonts=unique(loaded_fonts or [], key=lambda f: f.url),
        system_font_stacks=[s for s in stacks if is_system_stack(s)],
        computed_fonts=cleaned,
        css_source_files=list(sources) if include_sources else [],
    )


def authored_font_stacks(index: MarkupIndex, sources: List[StylesheetSource]) -> List[str]:
    """Declared ``font-family`` values, standing in for computed stacks without a browser."""
    stacks: List[str] = []
    for source in sources:
        stacks.extend(extract_font_stacks(source.content))
    for style in index.style_attributes:
        stacks.extend(extract_font_stacks(style))
    return stacks


def catalog_from_acquisition(acquired: Acquisition, fetch: Fetcher = fetch_text, acquisition: str = "static") -> FontCatalog:
    index = index_markup(acquired.html)
    sources = collect_sources(acquired.url, index, fetch)
    google_fonts, adobe_fonts = classify_service_links(stylesheet_urls(acquired.url, index), fetch)

    if acquired.page is not None:
        observation = observe(acquired.page)
        return build_catalog(
            acquired.url,
            index,
            sources,
            google_fonts,
            adobe_fonts,
            observation.computed_stacks,
            font_variables=observation.font_variables,
            loaded_fonts=observation.loaded_fonts,
            include_sources=False,
            acquisition=acquisition,
        )

    return build_catalog(
        acquired.url,
        index,
        sources,
        google_fonts,
        adobe_fonts,
        authored_font_stacks(index, sources),
        acquisition=acquisition,
    )


def detect_fonts(url: Optional[str], acquirer: Optional[Acquirer] = None, fetch: Fetcher = fetch_text) -> FontCatalog:
    """Build the font catalog for ``url``.

    Raises ``MissingURLError`` before any network use when ``url`` is blank,
    and ``PageFetchError`` when the page itself cannot be acquired. Failures
    on secondary stylesheet fetches only drop the affected source.
    """
    if not url or not url.strip():
        raise MissingURLError()
    acquirer = acquirer or StaticAcquirer(fetch=fetch)
    with acquirer.acquire(url.strip()) as acquired:
        catalog = catalog_from_acquisition(acquired, fetch, acquisition=acquirer.name or "static")
    logger.info(
        "Detected %d face declarations, %d service families, %d computed fonts on %s",
        len(catalog.font_face_declarations),
        len(catalog.google_fonts) + len(catalog.adobe_fonts),
        len(catalog.computed_fonts),
        url,
    )
    return catalog
