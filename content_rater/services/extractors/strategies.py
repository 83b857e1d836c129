"""Extraction strategies run against a rendered page.

Four strategies are tried in a fixed order by ArticleContentFetcher:

1. structured-data   - JSON-LD article objects and Open Graph/Twitter meta tags
2. semantic-elements - ``<article>``/``<main>`` style containers
3. site-specific     - per-hostname selectors from SITE_STRATEGIES
4. generic-selectors - the default selectors, then the ``body`` fallback

Each strategy locates content, locates metadata and then decides whether it
accepts what it found. A strategy that does not accept returns ``None`` and
the next one is tried.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from content_rater.services.extractors.base import (
    ArticleContent,
    ArticleMetadata,
    ExtractionConfig,
    ExtractionMethod,
    count_words,
    estimate_reading_time,
)
from content_rater.services.extractors.exceptions import ParseFailure
from content_rater.services.extractors.metadata import MetadataExtractor, ResolvedMetadata
from content_rater.services.extractors.quality import calculate_quality_score
from content_rater.services.extractors.sanitizer import sanitize_text, truncate
from content_rater.services.extractors.site_strategies import (
    SiteMetadataSelectors,
    default_strategy,
    get_site_strategy,
)

if TYPE_CHECKING:
    from content_rater.services.extractors.base import ElementHandle, Page

logger = logging.getLogger(__name__)

# Removed from every rendered page before the first strategy runs.
# JSON-LD scripts are kept for the structured-data strategy.
UNIVERSAL_EXCLUDE_SELECTORS: tuple[str, ...] = (
    'script:not([type="application/ld+json"])',
    "style",
    "noscript",
    "nav",
    '[role="navigation"]',
    "body > header",
    "body > footer",
    "aside",
    ".ad",
    ".ads",
    ".advertisement",
    "[class*='advert']",
    "[id^='ad-']",
    "[class^='ad-']",
)

# Removes every element matching any selector; invalid selectors are skipped.
REMOVE_ELEMENTS_SCRIPT = """
(selectors) => {
    let removed = 0;
    for (const selector of selectors) {
        let elements = [];
        try {
            elements = Array.from(document.querySelectorAll(selector));
        } catch (e) {
            continue;
        }
        for (const element of elements) {
            element.remove();
            removed += 1;
        }
    }
    return removed;
}
"""

# Text of an element read from a detached clone. Script, style and template
# children are dropped (textContent would include them), as is anything
# matching the extra selectors, so the live document is never modified.
ELEMENT_TEXT_SCRIPT = """
(element, excluded) => {
    const clone = element.cloneNode(true);
    for (const selector of ["script", "style", "noscript", "template", ...excluded]) {
        try {
            clone.querySelectorAll(selector).forEach((node) => node.remove());
        } catch (e) {
            continue;
        }
    }
    return clone.textContent;
}
"""

JSON_LD_SELECTOR = 'script[type="application/ld+json"]'

# JSON-LD @type values treated as an article
ARTICLE_TYPES = frozenset(
    {"Article", "BlogPosting", "NewsArticle", "TechArticle", "Report", "ScholarlyArticle"}
)

MAIN_CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    "main",
    ".content",
    ".post",
    ".article",
    "#content",
    ".entry-content",
    "body",
)

SEMANTIC_SELECTORS: tuple[str, ...] = (
    "article",
    '[role="main"] article',
    "main article",
    "main",
    '[role="main"]',
    ".article",
    ".content",
)

META_TITLE_SELECTORS = ('meta[property="og:title"]', 'meta[name="twitter:title"]')
META_DESCRIPTION_SELECTORS = (
    'meta[property="og:description"]',
    'meta[name="description"]',
    'meta[name="twitter:description"]',
)
META_AUTHOR_SELECTORS = ('meta[name="author"]', 'meta[property="article:author"]')
META_PUBLISHED_SELECTORS = ('meta[property="article:published_time"]',)


async def remove_elements(page: Page, selectors: tuple[str, ...]) -> int:
    """Remove matching elements from the live document, returning the count."""
    if not selectors:
        return 0
    return await page.evaluate(REMOVE_ELEMENTS_SCRIPT, list(selectors))


async def element_text(element: ElementHandle, exclude: tuple[str, ...] = ()) -> str:
    """Sanitized visible text of ``element``, without script or excluded children."""
    return sanitize_text(await element.evaluate(ELEMENT_TEXT_SCRIPT, list(exclude)))


async def first_container_text(
    page: Page, selectors: tuple[str, ...], exclude: tuple[str, ...] = ()
) -> str | None:
    """Sanitized text of the first selector whose element has non-empty text."""
    for selector in selectors:
        try:
            element = await page.query_selector(selector)
            if element is None:
                continue
            text = await element_text(element, exclude)
        except Exception as e:
            logger.warning("Content selector %r failed: %s", selector, e)
            continue
        if text:
            logger.debug("Content container %r matched (%d chars)", selector, len(text))
            return text
    return None


class ExtractionStrategy:
    """Shared flow for all strategies.

    Subclasses set ``method`` and implement ``locate_content``; they may
    override ``locate_metadata`` and ``accepts``.
    """

    method: ExtractionMethod

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    async def locate_content(self, page: Page, url: str) -> str | None:
        raise NotImplementedError

    def metadata_selectors(self, url: str) -> SiteMetadataSelectors:
        return default_strategy().metadata

    async def locate_metadata(self, page: Page, url: str) -> ResolvedMetadata:
        return await MetadataExtractor(page).resolve(self.metadata_selectors(url))

    def accepts(self, text: str, metadata: ResolvedMetadata) -> bool:
        """Whether this strategy's findings are good enough to return."""
        return bool(text)

    def has_structured_data(self, metadata: ResolvedMetadata) -> bool:
        return False

    async def extract(self, page: Page, url: str) -> ArticleContent | None:
        """Run the strategy, returning ``None`` to cede to the next one."""
        text = await self.locate_content(page, url)
        if not text:
            logger.debug("%s: no content found for %s", self.method.value, url)
            return None

        metadata = await self.locate_metadata(page, url)
        if not self.accepts(text, metadata):
            logger.debug("%s: result rejected for %s", self.method.value, url)
            return None

        title = await MetadataExtractor(page).resolve_title(metadata.title)
        return self.build_result(text, title, metadata)

    def build_result(
        self, text: str, title: str, metadata: ResolvedMetadata
    ) -> ArticleContent:
        content = truncate(
            text, self.config.max_content_length, self.config.truncation_marker
        )
        word_count = count_words(text)

        return ArticleContent(
            title=title,
            content=content,
            metadata=ArticleMetadata(
                author=metadata.author,
                published_date=metadata.published_date,
                tags=metadata.tags,
                reading_time=estimate_reading_time(
                    word_count, self.config.words_per_minute
                ),
                word_count=word_count,
                description=metadata.description,
                language=metadata.language,
            ),
            extraction_method=self.method,
            quality_score=calculate_quality_score(
                has_structured_data=self.has_structured_data(metadata),
                content_length=len(content),
                has_metadata=bool(metadata.author or metadata.published_date),
                has_description=bool(metadata.description),
            ),
        )


class StructuredDataStrategy(ExtractionStrategy):
    """JSON-LD and meta-tag driven extraction."""

    method = ExtractionMethod.STRUCTURED_DATA

    async def locate_content(self, page: Page, url: str) -> str | None:
        return await first_container_text(page, MAIN_CONTENT_SELECTORS)

    async def locate_metadata(self, page: Page, url: str) -> ResolvedMetadata:
        article = find_article(await read_json_ld(page))
        extractor = MetadataExtractor(page)

        meta_title = await extractor.first_match(META_TITLE_SELECTORS)
        meta_description = await extractor.first_match(META_DESCRIPTION_SELECTORS)
        meta_author = await extractor.first_match(META_AUTHOR_SELECTORS)
        meta_published = await extractor.first_match(META_PUBLISHED_SELECTORS)
        language = await extractor.language()

        if article is not None:
            source = "json-ld"
        elif meta_title:
            source = "meta-tags"
        else:
            source = None
        article = article or {}

        return ResolvedMetadata(
            author=_author_name(article.get("author")) or meta_author,
            published_date=_clean(article.get("datePublished")) or meta_published,
            tags=_keywords(article.get("keywords")),
            title=_clean(article.get("headline")) or _clean(article.get("name")) or meta_title,
            description=_clean(article.get("description")) or meta_description,
            language=_clean(article.get("inLanguage")) or language,
            structured_source=source,
        )

    def accepts(self, text: str, metadata: ResolvedMetadata) -> bool:
        if metadata.structured_source is None:
            return False
        # A JSON-LD article vouches for the page; meta tags alone need real content
        if metadata.structured_source == "json-ld":
            return bool(text)
        return len(text) >= self.config.min_content_length

    def has_structured_data(self, metadata: ResolvedMetadata) -> bool:
        return metadata.structured_source is not None


class SemanticElementsStrategy(ExtractionStrategy):
    """Extraction from semantic containers such as ``<article>`` and ``<main>``."""

    method = ExtractionMethod.SEMANTIC_ELEMENTS

    async def locate_content(self, page: Page, url: str) -> str | None:
        return await first_container_text(page, SEMANTIC_SELECTORS)


class SiteSpecificStrategy(ExtractionStrategy):
    """Extraction with the SITE_STRATEGIES entry for the URL's hostname."""

    method = ExtractionMethod.SITE_SPECIFIC

    async def locate_content(self, page: Page, url: str) -> str | None:
        # Excludes apply to the container clone only; later strategies see the page unchanged
        strategy = get_site_strategy(_hostname(url))
        return await first_container_text(
            page, strategy.selectors, exclude=strategy.exclude_selectors
        )

    def metadata_selectors(self, url: str) -> SiteMetadataSelectors:
        return get_site_strategy(_hostname(url)).metadata


class GenericSelectorsStrategy(ExtractionStrategy):
    """Default selectors, then the default entry's fallback selectors."""

    method = ExtractionMethod.GENERIC_SELECTORS

    async def locate_content(self, page: Page, url: str) -> str | None:
        strategy = default_strategy()
        text = await first_container_text(page, strategy.selectors)
        if text:
            return text
        return await first_container_text(page, strategy.fallback_selectors)


def build_strategy_chain(
    config: ExtractionConfig | None = None,
) -> tuple[ExtractionStrategy, ...]:
    """Strategies in the order they are attempted."""
    return (
        StructuredDataStrategy(config),
        SemanticElementsStrategy(config),
        SiteSpecificStrategy(config),
        GenericSelectorsStrategy(config),
    )


# -----------------------------------------------------------------------------
# JSON-LD helpers
# -----------------------------------------------------------------------------


async def read_json_ld(page: Page) -> list[dict[str, Any]]:
    """Parse every JSON-LD block on the page, skipping blocks that fail."""
    try:
        handles = await page.query_selector_all(JSON_LD_SELECTOR)
    except Exception as e:
        logger.warning("Reading JSON-LD blocks failed: %s", e)
        return []

    objects: list[dict[str, Any]] = []
    for handle in handles:
        try:
            raw = await handle.text_content()
        except Exception as e:
            logger.warning("Skipping unreadable JSON-LD block: %s", e)
            continue
        try:
            objects.extend(parse_json_ld_block(raw or ""))
        except ParseFailure as e:
            logger.debug("Skipping JSON-LD block: %s", e)
    return objects


def parse_json_ld_block(raw: str) -> list[dict[str, Any]]:
    """Parse one JSON-LD block into a flat list of objects.

    Top-level arrays and ``@graph`` containers are flattened.

    Raises:
        ParseFailure: If the block is not valid JSON
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Invalid JSON-LD: {e}") from e

    items = data if isinstance(data, list) else [data]
    objects: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        objects.append(item)
        graph = item.get("@graph")
        if isinstance(graph, list):
            objects.extend(node for node in graph if isinstance(node, dict))
    return objects


def find_article(objects: list[dict[str, Any]]) -> dict[str, Any] | None:
    """First JSON-LD object whose ``@type`` is an article type."""
    for obj in objects:
        types = obj.get("@type")
        if isinstance(types, str):
            types = [types]
        if isinstance(types, list) and ARTICLE_TYPES.intersection(
            t for t in types if isinstance(t, str)
        ):
            return obj
    return None


def _author_name(author: Any) -> str | None:
    if isinstance(author, str):
        return _clean(author)
    if isinstance(author, dict):
        return _clean(author.get("name"))
    if isinstance(author, list):
        names = [name for name in (_author_name(a) for a in author) if name]
        return ", ".join(names) or None
    return None


def _keywords(keywords: Any) -> tuple[str, ...] | None:
    if isinstance(keywords, str):
        keywords = keywords.split(",")
    if not isinstance(keywords, list):
        return None
    tags = tuple(k.strip() for k in keywords if isinstance(k, str) and k.strip())
    return tags or None


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = sanitize_text(value)
    return value or None


def _hostname(url: str) -> str:
    return (urlparse(url).hostname or "").lower()
