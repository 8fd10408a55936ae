from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace
from typing import Optional

import pytest
from playwright.sync_api import Error as PlaywrightError

from font_grabber import acquisition
from font_grabber.acquisition import BrowserAcquirer, StaticAcquirer
from font_grabber.errors import PageFetchError

URL = "https://example.com/"


class FakeBrowserPage:
    def __init__(self, status: int = 200, goto_error: Optional[Exception] = None) -> None:
        self.status = status
        self.goto_error = goto_error
        self.goto_calls = []

    def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if self.goto_error:
            raise self.goto_error
        return SimpleNamespace(status=self.status)

    def content(self) -> str:
        return "<html><body>rendered</body></html>"


class FakeBrowser:
    def __init__(self, page: FakeBrowserPage) -> None:
        self.page = page
        self.closed = False

    def new_context(self, user_agent=None):
        return SimpleNamespace(new_page=lambda: self.page)

    def close(self) -> None:
        self.closed = True


def install_browser(monkeypatch, browser: Optional[FakeBrowser] = None, launch_error: Optional[Exception] = None):
    def launch(headless=True):
        if launch_error:
            raise launch_error
        return browser

    @contextmanager
    def fake_sync_playwright():
        yield SimpleNamespace(chromium=SimpleNamespace(launch=launch))

    monkeypatch.setattr(acquisition, "sync_playwright", fake_sync_playwright)


def test_browser_yields_rendered_page_and_closes(monkeypatch) -> None:
    page = FakeBrowserPage()
    browser = FakeBrowser(page)
    install_browser(monkeypatch, browser)

    with BrowserAcquirer(timeout=12).acquire(URL) as acquired:
        assert acquired.page is page
        assert "rendered" in acquired.html
        assert not browser.closed

    assert browser.closed
    assert page.goto_calls == [(URL, "networkidle", 12000)]


def test_navigation_timeout_is_page_fetch_error(monkeypatch) -> None:
    browser = FakeBrowser(FakeBrowserPage(goto_error=PlaywrightError("Timeout 30000ms exceeded")))
    install_browser(monkeypatch, browser)

    with pytest.raises(PageFetchError) as info:
        with BrowserAcquirer().acquire(URL):
            pass

    assert "Timeout" in info.value.summary
    assert browser.closed


def test_launch_failure_is_page_fetch_error(monkeypatch) -> None:
    install_browser(monkeypatch, launch_error=PlaywrightError("Executable doesn't exist"))

    with pytest.raises(PageFetchError) as info:
        with BrowserAcquirer().acquire(URL):
            pass

    assert "Executable doesn't exist" in info.value.summary


def test_http_error_status_is_page_fetch_error(monkeypatch) -> None:
    browser = FakeBrowser(FakeBrowserPage(status=404))
    install_browser(monkeypatch, browser)

    with pytest.raises(PageFetchError) as info:
        with BrowserAcquirer().acquire(URL):
            pass

    assert "404" in info.value.summary
    assert browser.closed


def test_error_inside_body_still_closes_browser(monkeypatch) -> None:
    browser = FakeBrowser(FakeBrowserPage())
    install_browser(monkeypatch, browser)

    with pytest.raises(RuntimeError):
        with BrowserAcquirer().acquire(URL):
            raise RuntimeError("extraction failed")

    assert browser.closed


def test_static_acquirer_wraps_fetch_failures(fake_fetcher) -> None:
    with pytest.raises(PageFetchError) as info:
        with StaticAcquirer(fetch=fake_fetcher({})).acquire(URL):
            pass
    assert info.value.url == URL
