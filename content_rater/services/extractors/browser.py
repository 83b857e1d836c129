"""Playwright browser session that hands out rendering contexts.

Usage:
    async with BrowserSession(config) as session:
        page = await session.new_page()
        article = await ArticleContentFetcher().fetch(url, page)  # closes page

Note: Playwright browsers must be installed separately:
    playwright install chromium
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from content_rater.services.extractors.exceptions import FetchFailedError

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page, Playwright

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrowserConfig:
    """Page setup applied to every page the session creates."""

    headless: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    viewport_width: int = 1280
    viewport_height: int = 800
    navigation_timeout_ms: int = 30000


class BrowserSession:
    """Lazily launched Chromium browser producing configured pages.

    The browser is only started on the first ``new_page()`` call. Pages are
    owned by the caller; ArticleContentFetcher closes the page it is given.

    Attributes:
        config: Page setup (headless mode, user agent, viewport, timeout)
    """

    def __init__(self, config: BrowserConfig | None = None) -> None:
        self.config = config or BrowserConfig()
        self._browser: Browser | None = None
        self._playwright: Playwright | None = None
        self._launch_lock = asyncio.Lock()

    async def _ensure_browser(self) -> Browser:
        """Launch the browser on first use.

        Concurrent first callers share a single launch.

        Raises:
            FetchFailedError: If the browser fails to launch.
        """
        if self._browser is not None:
            return self._browser

        async with self._launch_lock:
            if self._browser is None:
                await self._launch()
        return self._browser

    async def _launch(self) -> None:
        try:
            # Import here to avoid loading Playwright until needed
            from playwright.async_api import async_playwright

            if self._playwright is None:
                self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
            )
            logger.debug(
                "Playwright browser launched (headless=%s)", self.config.headless
            )
        except Exception as e:
            logger.error("Failed to launch Playwright browser: %s", e)
            raise FetchFailedError(f"Failed to launch browser: {e}") from e

    async def new_page(self) -> Page:
        """Create a page with user agent, viewport and timeout applied."""
        browser = await self._ensure_browser()
        page = await browser.new_page()
        try:
            page.set_default_timeout(self.config.navigation_timeout_ms)
            await page.set_extra_http_headers({"User-Agent": self.config.user_agent})
            await page.set_viewport_size(
                {
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                }
            )
        except Exception as e:
            await page.close()
            raise FetchFailedError(f"Failed to configure page: {e}") from e
        return page

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def close(self) -> None:
        """Close browser and cleanup resources. Safe to call multiple times."""
        if self._browser:
            try:
                await self._browser.close()
                logger.debug("Playwright browser closed")
            except Exception as e:
                logger.warning("Error closing browser: %s", e)
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
                logger.debug("Playwright stopped")
            except Exception as e:
                logger.warning("Error stopping Playwright: %s", e)
            self._playwright = None

    async def __aenter__(self) -> BrowserSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
