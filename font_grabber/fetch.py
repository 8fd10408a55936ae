"""Plain HTTP text fetching with per-URL outcomes."""

from __future__ import annotations

import logging
import socket
import ssl
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)

PAGE_TIMEOUT = 15.0
STYLESHEET_TIMEOUT = 5.0
SERVICE_TIMEOUT = 5.0
UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/121.0.0.0 Safari/537.36"
)

Fetcher = Callable[[str, float], str]


@dataclass(frozen=True)
class FetchOutcome:
    url: str
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


def _read(req: Request, timeout: float, context: Optional[ssl.SSLContext] = None) -> str:
    with urlopen(req, timeout=timeout, context=context) as res:
        charset = res.headers.get_content_charset() or "utf-8"
        body = res.read()
    return body.decode(charset, errors="replace")


def fetch_text(url: str, timeout: float = PAGE_TIMEOUT) -> str:
    req = Request(
        url,
        headers={
            "User-Agent": UA,
            "Accept": "text/html,text/css,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        },
    )
    try:
        return _read(req, timeout)
    except (ssl.SSLCertVerificationError, URLError) as exc:
        should_retry = isinstance(exc, ssl.SSLCertVerificationError)
        if isinstance(exc, URLError) and isinstance(exc.reason, ssl.SSLCertVerificationError):
            should_retry = True
        if not should_retry:
            raise
        return _read(req, timeout, context=ssl._create_unverified_context())


def fetch_each(urls: Iterable[str], timeout: float, fetch: Fetcher = fetch_text) -> List[FetchOutcome]:
    """Fetch ``urls`` one after another; a failure only affects its own URL."""
    outcomes: List[FetchOutcome] = []
    for url in urls:
        try:
            outcomes.append(FetchOutcome(url, text=fetch(url, timeout)))
        except Exception as exc:
            reason = describe_fetch_error(exc)
            logger.warning("Failed to fetch %s: %s", url, reason)
            outcomes.append(FetchOutcome(url, error=reason))
    return outcomes


def describe_fetch_error(exc: BaseException) -> str:
    if isinstance(exc, HTTPError):
        if exc.code == 403:
            headers = exc.headers or {}
            if headers.get("cf-mitigated"):
                return "Blocked by a bot challenge (HTTP 403)"
            return "Access denied (HTTP 403)"
        if exc.code == 404:
            return "Not found (HTTP 404)"
        if exc.code == 429:
            return "Too many requests (HTTP 429)"
        if exc.code >= 500:
            return f"Server error (HTTP {exc.code})"
        return f"Request failed (HTTP {exc.code})"
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return "Timed out"
    if isinstance(exc, URLError):
        reason = exc.reason
        if isinstance(reason, (socket.timeout, TimeoutError)):
            return "Timed out"
        if isinstance(reason, socket.gaierror):
            return "Host could not be resolved"
        if isinstance(reason, ConnectionRefusedError):
            return "Connection refused"
        return f"Network error: {reason}"
    return str(exc) or exc.__class__.__name__
