"""Browser-free extraction: plain HTTP GET plus regex parsing.

This path is deliberately crude. It never runs the quality scorer and always
reports a fixed score, so downstream consumers can tell it apart from a
rendered-page extraction.
"""

from __future__ import annotations

import logging
import re

import httpx

from content_rater.services.extractors.base import (
    EXTRACTION_FAILED_CONTENT,
    UNKNOWN_TITLE,
    ArticleContent,
    ArticleMetadata,
    ExtractionConfig,
    ExtractionMethod,
    count_words,
    estimate_reading_time,
)
from content_rater.services.extractors.exceptions import FetchFailedError
from content_rater.services.extractors.sanitizer import sanitize_html, truncate

logger = logging.getLogger(__name__)

FALLBACK_QUALITY_SCORE = 0.3

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_BODY_RE = re.compile(r"<body[^>]*>([\s\S]*?)</body>", re.IGNORECASE)


def _meta_patterns(attr: str, value: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    """Patterns for a meta tag's content with either attribute order."""
    key = rf'{attr}=["\']{re.escape(value)}["\']'
    content = r'content=["\']([^"\']+)["\']'
    return (
        re.compile(rf"<meta[^>]*{key}[^>]*{content}", re.IGNORECASE),
        re.compile(rf"<meta[^>]*{content}[^>]*{key}", re.IGNORECASE),
    )


_AUTHOR_PATTERNS = _meta_patterns("name", "author")
_PUBLISHED_PATTERNS = _meta_patterns("property", "article:published_time")


def _search_meta(html: str, patterns: tuple[re.Pattern[str], ...]) -> str | None:
    for pattern in patterns:
        match = pattern.search(html)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def parse_html(html: str, config: ExtractionConfig | None = None) -> ArticleContent:
    """Extract title, body text and basic metadata from raw HTML.

    Args:
        html: Raw HTML text (may be empty or malformed)
        config: Extraction configuration for the length cap

    Returns:
        ArticleContent with method ``fallback-html`` and score 0.3
    """
    config = config or ExtractionConfig()

    title_match = _TITLE_RE.search(html)
    title = title_match.group(1).strip() if title_match else ""
    title = re.sub(r"\s+", " ", title) or UNKNOWN_TITLE

    body_match = _BODY_RE.search(html)
    if body_match:
        text = sanitize_html(body_match.group(1))
        content = truncate(text, config.max_content_length)
        word_count: int | None = count_words(text)
    else:
        content = EXTRACTION_FAILED_CONTENT
        word_count = None

    return ArticleContent(
        title=title,
        content=content,
        metadata=ArticleMetadata(
            author=_search_meta(html, _AUTHOR_PATTERNS),
            published_date=_search_meta(html, _PUBLISHED_PATTERNS),
            reading_time=(
                estimate_reading_time(word_count, config.words_per_minute)
                if word_count is not None
                else None
            ),
            word_count=word_count,
        ),
        extraction_method=ExtractionMethod.FALLBACK_HTML,
        quality_score=FALLBACK_QUALITY_SCORE,
    )


class FallbackFetcher:
    """Fetch a page over HTTP and parse it without a browser.

    Usage:
        fetcher = FallbackFetcher()
        article = await fetcher.fetch("https://example.com/post")
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    async def fetch(self, url: str) -> ArticleContent:
        """Fetch ``url`` and extract its content.

        Raises:
            FetchFailedError: On non-2xx status or transport failure
        """
        html = await self._fetch_html(url)
        result = parse_html(html, self.config)
        logger.info(
            "Fallback extraction for %s: %d chars, title=%r",
            url,
            len(result.content),
            result.title,
        )
        return result

    async def _fetch_html(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
            ) as client:
                response = await client.get(
                    url,
                    headers={"User-Agent": self.config.user_agent},
                )
                response.raise_for_status()
                return response.text

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchFailedError(
                f"HTTP error! status: {status}", status_code=status
            ) from e
        except httpx.TimeoutException as e:
            raise FetchFailedError(f"Timeout fetching {url}: {e}") from e
        except httpx.RequestError as e:
            raise FetchFailedError(f"Network error fetching {url}: {e}") from e
