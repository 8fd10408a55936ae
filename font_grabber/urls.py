"""Resource URL resolution and font URL predicates."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

FAMILY_LIST_HOSTS = {"fonts.googleapis.com"}
KIT_HOSTS = {"use.typekit.net", "use.edgefonts.net"}
KNOWN_FONT_HOSTS = FAMILY_LIST_HOSTS | KIT_HOSTS | {"fonts.gstatic.com", "p.typekit.net", "fonts.bunny.net"}

FONT_EXTENSIONS = ("woff2", "woff", "ttf", "otf", "eot")
FONT_EXTENSION_RE = re.compile(r"\.(woff2?|ttf|otf|eot)(?:$|[?#])", re.I)
FONT_PATH_RE = re.compile(r"/fonts?/", re.I)


def resolve_url(reference: Optional[str], base_url: str) -> Optional[str]:
    """Resolve ``reference`` against ``base_url``.

    Returns ``None`` when the reference is empty, inline (``data:`` or a
    fragment) or does not form a usable http(s) URL after joining.
    """
    raw = (reference or "").strip().strip("\"'").strip()
    if not raw or raw.startswith(("data:", "#", "javascript:", "about:")):
        return None
    try:
        resolved = urljoin(base_url, raw)
        parsed = urlparse(resolved)
        # Accessing .port validates the netloc (bad IPv6 brackets, ports).
        _ = parsed.port
    except ValueError:
        return None
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        return None
    return resolved


def hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_family_list_url(url: str) -> bool:
    return hostname(url) in FAMILY_LIST_HOSTS


def is_kit_url(url: str) -> bool:
    return hostname(url) in KIT_HOSTS


def is_font_service_url(url: str) -> bool:
    return is_family_list_url(url) or is_kit_url(url)


def font_format(url: str) -> str:
    m = FONT_EXTENSION_RE.search(url)
    if m:
        return m.group(1).lower()
    try:
        path = urlparse(url).path
    except ValueError:
        return "unknown"
    m = re.search(r"\.([A-Za-z0-9]+)$", path)
    return m.group(1).lower() if m else "unknown"


def is_font_related_url(url: str) -> bool:
    host = hostname(url)
    if host in KNOWN_FONT_HOSTS:
        return True
    try:
        path = urlparse(url).path
    except ValueError:
        path = ""
    if "fonts" in host or "fonts" in path.lower():
        return True
    return bool(FONT_EXTENSION_RE.search(url))


def looks_like_font_resource(url: str) -> bool:
    return bool(FONT_EXTENSION_RE.search(url) or FONT_PATH_RE.search(url))
