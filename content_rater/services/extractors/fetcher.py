"""Public entry point for article content extraction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from content_rater.services.extractors.base import ArticleContent, ExtractionConfig
from content_rater.services.extractors.exceptions import (
    AllExtractionStrategiesFailedError,
    ExtractionError,
    FetchFailedError,
    InvalidURLError,
)
from content_rater.services.extractors.fallback import FallbackFetcher
from content_rater.services.extractors.strategies import (
    UNIVERSAL_EXCLUDE_SELECTORS,
    build_strategy_chain,
    remove_elements,
)

if TYPE_CHECKING:
    from content_rater.services.extractors.base import Page

logger = logging.getLogger(__name__)


def validate_url(url: str) -> str:
    """Return ``url`` if it is an absolute HTTP(S) URL with a host.

    Raises:
        InvalidURLError: Otherwise
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(str(url))
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidURLError(url) from e
    if parsed.scheme.lower() not in ("http", "https") or not hostname:
        raise InvalidURLError(url)
    return url.strip()


class ArticleContentFetcher:
    """Extract an article from a URL.

    With a rendering context (a Playwright page), the page is navigated to
    the URL and four strategies are tried in order: structured-data,
    semantic-elements, site-specific, generic-selectors. The first one that
    yields non-empty content wins. Without a page, a plain HTTP fetch with
    regex parsing is used instead.

    The page is always closed before ``fetch`` returns or raises.

    Usage:
        fetcher = ArticleContentFetcher()
        article = await fetcher.fetch("https://example.com/post")

        page = await browser_session.new_page()
        article = await fetcher.fetch("https://example.com/post", page)
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        fallback: FallbackFetcher | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.fallback = fallback or FallbackFetcher(self.config)
        self.strategies = build_strategy_chain(self.config)

    async def fetch(self, url: str, page: Page | None = None) -> ArticleContent:
        """Extract article content from ``url``.

        Args:
            url: Absolute HTTP(S) URL of the article
            page: Optional rendering context; closed on every exit path

        Returns:
            ArticleContent from the first successful strategy

        Raises:
            InvalidURLError: If ``url`` is not an absolute HTTP(S) URL
            FetchFailedError: On network, HTTP or browser failures
            AllExtractionStrategiesFailedError: If no strategy found content
        """
        try:
            url = validate_url(url)
        except InvalidURLError:
            if page is not None:
                await self._close_page(page)
            raise

        if page is None:
            logger.info("No rendering context, using fallback fetch for %s", url)
            return await self.fallback.fetch(url)

        try:
            return await self._extract_from_page(url, page)
        except ExtractionError:
            raise
        except Exception as e:
            logger.warning("Rendered extraction failed for %s: %s", url, e)
            raise FetchFailedError(f"Failed to fetch article content: {e}") from e
        finally:
            await self._close_page(page)

    async def _extract_from_page(self, url: str, page: Page) -> ArticleContent:
        await page.goto(url, wait_until="domcontentloaded")

        removed = await remove_elements(page, UNIVERSAL_EXCLUDE_SELECTORS)
        logger.debug("Removed %s non-content elements from %s", removed, url)

        for strategy in self.strategies:
            result = await strategy.extract(page, url)
            if result is not None and result.content:
                logger.info(
                    "Extracted %s with %s (score=%.2f, %d chars)",
                    url,
                    result.extraction_method.value,
                    result.quality_score,
                    len(result.content),
                )
                return result

        raise AllExtractionStrategiesFailedError(url)

    async def _close_page(self, page: Page) -> None:
        try:
            await page.close()
        except Exception as e:
            logger.warning("Error closing page: %s", e)
