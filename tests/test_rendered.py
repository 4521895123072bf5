from __future__ import annotations

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from preview_api.services import rendered
from preview_api.services.rendered import BrowserSession, RenderedFetcher
from tests.fakes import FakeBrowserSession, FakeChromium, FakePage, FakePlaywright

RENDERED = """
<html><head>
  <title>Rendered title</title>
  <meta name="description" content="Added by script">
</head><body><img src="/hero.jpg"></body></html>
"""


def test_fetch_reads_live_dom(settings) -> None:
    page = FakePage(html=RENDERED, url="https://app.ex.com/home")
    session = FakeBrowserSession(page)

    extraction = asyncio.run(RenderedFetcher(settings, session).fetch("https://app.ex.com"))

    assert page.visited == ["https://app.ex.com"]
    assert extraction.meta == {"title": "Rendered title", "description": "Added by script"}
    assert extraction.images[0].src == "https://app.ex.com/hero.jpg"
    assert session.closed == 1


def test_network_idle_timeout_keeps_loaded_content(settings) -> None:
    page = FakePage(html=RENDERED, idle_error=PlaywrightTimeoutError("still busy"))
    session = FakeBrowserSession(page)

    extraction = asyncio.run(RenderedFetcher(settings, session).fetch("http://example.com"))

    assert extraction.meta["title"] == "Rendered title"
    assert session.closed == 1


def test_navigation_error_degrades_to_empty(settings) -> None:
    page = FakePage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
    session = FakeBrowserSession(page)

    extraction = asyncio.run(RenderedFetcher(settings, session).fetch("http://nope.invalid"))

    assert extraction.is_empty
    assert session.closed == 1


def test_overall_timeout_degrades_to_empty_and_releases_browser(settings) -> None:
    settings.render_timeout_seconds = 0.05
    page = FakePage(hang=True)
    session = FakeBrowserSession(page)

    extraction = asyncio.run(RenderedFetcher(settings, session).fetch("http://slow.example.com"))

    assert extraction.is_empty
    assert session.opened == 1
    assert session.closed == 1


def test_browser_launch_failure_degrades_to_empty(settings) -> None:
    session = FakeBrowserSession(launch_error=RuntimeError("browser crashed"))

    extraction = asyncio.run(RenderedFetcher(settings, session).fetch("http://example.com"))

    assert extraction.is_empty


def test_browser_session_closes_browser_and_driver(monkeypatch) -> None:
    driver = FakePlaywright(FakeChromium())
    monkeypatch.setattr(rendered, "async_playwright", driver)

    async def scenario():
        async with BrowserSession() as browser:
            assert browser is driver.chromium

    asyncio.run(scenario())
    assert driver.chromium.browser_closed == 1
    assert driver.stopped == 1


def test_browser_session_stops_driver_when_launch_fails(monkeypatch) -> None:
    driver = FakePlaywright(FakeChromium(launch_error=PlaywrightError("no chromium")))
    monkeypatch.setattr(rendered, "async_playwright", driver)

    async def scenario():
        async with BrowserSession():
            pass

    with pytest.raises(PlaywrightError):
        asyncio.run(scenario())
    assert driver.stopped == 1


def test_browser_session_stops_driver_when_close_fails(monkeypatch) -> None:
    driver = FakePlaywright(FakeChromium(close_error=PlaywrightError("target closed")))
    monkeypatch.setattr(rendered, "async_playwright", driver)

    async def scenario():
        async with BrowserSession():
            pass

    with pytest.raises(PlaywrightError):
        asyncio.run(scenario())
    assert driver.chromium.browser_closed == 1
    assert driver.stopped == 1


def test_browser_session_releases_on_error_in_block(monkeypatch) -> None:
    driver = FakePlaywright(FakeChromium())
    monkeypatch.setattr(rendered, "async_playwright", driver)

    async def scenario():
        async with BrowserSession():
            raise RuntimeError("page crashed")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())
    assert driver.chromium.browser_closed == 1
    assert driver.stopped == 1
