"""Page acquisition strategies: plain fetch or headless browser."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ContextManager, Iterator, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from font_grabber.errors import PageFetchError
from font_grabber.fetch import PAGE_TIMEOUT, UA, Fetcher, describe_fetch_error, fetch_text

logger = logging.getLogger(__name__)

BROWSER_TIMEOUT = 30.0
STATIC = "static"
BROWSER = "browser"


@dataclass
class Acquisition:
    """Markup for ``url`` and, when scripts ran, the live page it came from."""

    url: str
    html: str
    page: Optional[Any] = None


class Acquirer:
    name = ""

    def acquire(self, url: str) -> ContextManager[Acquisition]:
        raise NotImplementedError


class StaticAcquirer(Acquirer):
    name = STATIC

    def __init__(self, fetch: Fetcher = fetch_text, timeout: float = PAGE_TIMEOUT) -> None:
        self.fetch = fetch
        self.timeout = timeout

    @contextmanager
    def acquire(self, url: str) -> Iterator[Acquisition]:
        try:
            html_text = self.fetch(url, self.timeout)
        except Exception as exc:
            raise PageFetchError(url, describe_fetch_error(exc), exc) from exc
        yield Acquisition(url, html_text)


class BrowserAcquirer(Acquirer):
    name = BROWSER

    def __init__(self, timeout: float = BROWSER_TIMEOUT, wait_until: str = "networkidle") -> None:
        self.timeout = timeout
        self.wait_until = wait_until

    @contextmanager
    def acquire(self, url: str) -> Iterator[Acquisition]:
        with sync_playwright() as p:
            try:
                browser = p.chromium.launch(headless=True)
            except PlaywrightError as exc:
                raise PageFetchError(url, f"Browser could not start: {exc.message}", exc) from exc
            try:
                context = browser.new_context(user_agent=UA)
                page = context.new_page()
                try:
                    response = page.goto(url, wait_until=self.wait_until, timeout=self.timeout * 1000)
                    html_text = page.content()
                except PlaywrightError as exc:
                    raise PageFetchError(url, f"Browser could not load page: {exc.message}", exc) from exc
                if response is not None and response.status >= 400:
                    raise PageFetchError(url, f"Request failed (HTTP {response.status})")
                logger.debug("Rendered %s in headless browser", url)
                yield Acquisition(url, html_text, page)
            finally:
                browser.close()


def make_acquirer(name: str, timeout: Optional[float] = None) -> Acquirer:
    if name == BROWSER:
        return BrowserAcquirer(timeout=timeout or BROWSER_TIMEOUT)
    if name == STATIC:
        return StaticAcquirer(timeout=timeout or PAGE_TIMEOUT)
    raise ValueError(f"Unknown acquisition strategy: {name!r}")
