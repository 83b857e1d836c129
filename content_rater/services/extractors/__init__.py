"""Article content extraction engine.

Given an arbitrary URL, produce the page's title, body text and metadata,
tagged with the extraction method used and a deterministic quality score.

Two paths:
1. Rendered page (Playwright) - four strategies tried in order:
   structured-data, semantic-elements, site-specific, generic-selectors
2. Fallback - plain HTTP GET with regex parsing, fixed quality score

Usage:
    from content_rater.services.extractors import ArticleContentFetcher

    fetcher = ArticleContentFetcher()
    article = await fetcher.fetch("https://example.com/post")

    async with BrowserSession() as session:
        article = await fetcher.fetch(url, await session.new_page())
"""

from content_rater.services.extractors.base import (
    EXTRACTION_FAILED_CONTENT,
    UNKNOWN_TITLE,
    ArticleContent,
    ArticleMetadata,
    ExtractionConfig,
    ExtractionMethod,
)
from content_rater.services.extractors.browser import BrowserConfig, BrowserSession
from content_rater.services.extractors.exceptions import (
    AllExtractionStrategiesFailedError,
    ExtractionError,
    FetchFailedError,
    InvalidURLError,
    ParseFailure,
)
from content_rater.services.extractors.fallback import FallbackFetcher, parse_html
from content_rater.services.extractors.fetcher import ArticleContentFetcher, validate_url
from content_rater.services.extractors.quality import calculate_quality_score
from content_rater.services.extractors.site_strategies import (
    SITE_STRATEGIES,
    SiteMetadataSelectors,
    SiteStrategy,
    get_site_strategy,
)

__all__ = [
    # Types
    "ArticleContent",
    "ArticleMetadata",
    "ExtractionConfig",
    "ExtractionMethod",
    "UNKNOWN_TITLE",
    "EXTRACTION_FAILED_CONTENT",
    # Site configuration
    "SITE_STRATEGIES",
    "SiteMetadataSelectors",
    "SiteStrategy",
    "get_site_strategy",
    # Extraction
    "ArticleContentFetcher",
    "BrowserConfig",
    "BrowserSession",
    "FallbackFetcher",
    "calculate_quality_score",
    "parse_html",
    "validate_url",
    # Exceptions
    "ExtractionError",
    "InvalidURLError",
    "FetchFailedError",
    "AllExtractionStrategiesFailedError",
    "ParseFailure",
]
