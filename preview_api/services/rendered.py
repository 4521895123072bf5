"""Headless browser fetch for pages that only expose metadata after scripts run."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncContextManager, Callable, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from preview_api.config import Settings
from preview_api.schemas import RawExtraction
from preview_api.services.parser import parse_document

if TYPE_CHECKING:
    from playwright.async_api import Browser, Playwright

logger = logging.getLogger(__name__)


class BrowserSession:
    """Headless Chromium owned by a single ``async with`` block.

    The browser and the Playwright driver are shut down when the block exits,
    whether it finishes, raises or is cancelled.
    """

    def __init__(self, headless: bool = True) -> None:
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> Browser:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless
            )
        except BaseException:
            await self._playwright.stop()
            raise
        return self._browser

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._browser = None
            self._playwright = None


class RenderedFetcher:
    """Last-resort fetch: load the page in a browser and read the live DOM.

    Never raises. Navigation errors, crashes and timeouts all produce an empty
    :class:`RawExtraction`.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: Callable[[], AsyncContextManager[Browser]] = BrowserSession,
    ) -> None:
        self.session_factory = session_factory
        self.user_agent = settings.user_agent
        self.render_timeout = settings.render_timeout_seconds
        self.navigation_timeout_ms = settings.navigation_timeout_seconds * 1000

    async def fetch(self, url: str) -> RawExtraction:
        try:
            html, final_url = await asyncio.wait_for(
                self._render(url), timeout=self.render_timeout
            )
            return parse_document(html, final_url)
        except asyncio.TimeoutError:
            logger.warning("Rendering %s exceeded %.1fs", url, self.render_timeout)
        except Exception:  # noqa: BLE001
            logger.warning("Rendering %s failed", url, exc_info=True)
        return RawExtraction()

    async def _render(self, url: str) -> tuple[str, str]:
        async with self.session_factory() as browser:
            page = await browser.new_page(user_agent=self.user_agent)
            logger.info("Rendering %s", url)
            await page.goto(url, wait_until="load", timeout=self.navigation_timeout_ms)
            try:
                await page.wait_for_load_state(
                    "networkidle", timeout=self.navigation_timeout_ms
                )
            except PlaywrightTimeoutError:
                # Pages with long-lived connections never go idle; use what loaded.
                logger.debug("Network never went idle for %s", url)
            return await page.content(), page.url
