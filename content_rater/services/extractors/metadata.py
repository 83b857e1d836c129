"""Selector-driven metadata lookup against a rendered page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from content_rater.services.extractors.base import UNKNOWN_TITLE
from content_rater.services.extractors.sanitizer import sanitize_text
from content_rater.services.extractors.site_strategies import SiteMetadataSelectors

if TYPE_CHECKING:
    from content_rater.services.extractors.base import ElementHandle, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedMetadata:
    """Metadata fields found through a strategy's selectors."""

    author: str | None = None
    published_date: str | None = None
    tags: tuple[str, ...] | None = None
    title: str | None = None
    description: str | None = None
    language: str | None = None
    structured_source: str | None = None  # "json-ld", "meta-tags" or None


class MetadataExtractor:
    """Resolve metadata fields by trying selector lists in order.

    Every field is resolved independently. A selector that raises (invalid
    syntax, detached element) is logged and the next selector is tried.

    Usage:
        extractor = MetadataExtractor(page)
        author = await extractor.first_match(strategy.metadata.author)
    """

    def __init__(self, page: Page) -> None:
        self.page = page

    async def first_match(self, selectors: tuple[str, ...]) -> str | None:
        """Return the first non-empty value matched by ``selectors``."""
        for selector in selectors:
            try:
                element = await self.page.query_selector(selector)
                if element is None:
                    continue
                value = await element_value(element)
            except Exception as e:
                logger.warning("Metadata selector %r failed: %s", selector, e)
                continue
            if value:
                return value
        return None

    async def all_matches(self, selectors: tuple[str, ...]) -> tuple[str, ...] | None:
        """Return every non-empty value of the first selector that matches."""
        for selector in selectors:
            try:
                elements = await self.page.query_selector_all(selector)
                values = [await element_value(element) for element in elements]
            except Exception as e:
                logger.warning("Metadata selector %r failed: %s", selector, e)
                continue
            found = tuple(dict.fromkeys(value for value in values if value))
            if found:
                return found
        return None

    async def language(self) -> str | None:
        """Page language from ``<html lang>`` or the content-language meta."""
        value = await self.first_attribute("html", "lang")
        if value:
            return value
        return await self.first_match(('meta[http-equiv="content-language"]',))

    async def first_attribute(self, selector: str, name: str) -> str | None:
        try:
            element = await self.page.query_selector(selector)
            if element is None:
                return None
            value = await element.get_attribute(name)
        except Exception as e:
            logger.warning("Attribute lookup %s[%s] failed: %s", selector, name, e)
            return None
        return value.strip() if value and value.strip() else None

    async def resolve(self, selectors: SiteMetadataSelectors) -> ResolvedMetadata:
        """Resolve every field of a strategy's metadata selectors."""
        return ResolvedMetadata(
            author=await self.first_match(selectors.author),
            published_date=await self.first_match(selectors.published_date),
            tags=await self.all_matches(selectors.tags),
            title=await self.first_match(selectors.title),
            description=await self.first_match(selectors.description),
            language=await self.language(),
        )

    async def resolve_title(self, preferred: str | None = None) -> str:
        """Resolve a title: preferred -> first h1 -> document title -> sentinel."""
        if preferred:
            return preferred

        heading = await self.first_match(("h1",))
        if heading:
            return heading

        try:
            document_title = sanitize_text(await self.page.title())
        except Exception as e:
            logger.warning("Reading document title failed: %s", e)
            document_title = ""
        return document_title or UNKNOWN_TITLE


async def element_value(element: ElementHandle) -> str:
    """``content`` attribute for meta-style elements, text otherwise."""
    content = await element.get_attribute("content")
    if content is not None:
        return content.strip()
    return sanitize_text(await element.text_content())
