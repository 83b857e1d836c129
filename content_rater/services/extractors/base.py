"""Base types for article content extraction."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Protocol

# Placeholder title when a page exposes none
UNKNOWN_TITLE = "Unknown article title"

# Content placeholder for the fallback path when <body> is missing
EXTRACTION_FAILED_CONTENT = "Failed to extract article content"


class ExtractionMethod(str, enum.Enum):
    """Which strategy produced an ArticleContent."""

    STRUCTURED_DATA = "structured-data"
    SEMANTIC_ELEMENTS = "semantic-elements"
    SITE_SPECIFIC = "site-specific"
    GENERIC_SELECTORS = "generic-selectors"
    FALLBACK_HTML = "fallback-html"


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for the extraction engine."""

    timeout_seconds: int = 30  # HTTP timeout on the fallback path
    max_content_length: int = 2000  # Hard cap on ArticleContent.content
    min_content_length: int = 100  # Minimum chars for meta-tag-only structured data
    truncation_marker: str = "..."
    words_per_minute: int = 200
    user_agent: str = "Mozilla/5.0 (compatible; content-rater/0.1; +article-extraction)"


@dataclass(frozen=True)
class ArticleMetadata:
    """Optional article metadata. ``None`` means unknown."""

    author: str | None = None
    published_date: str | None = None
    tags: tuple[str, ...] | None = None
    reading_time: int | None = None  # minutes
    word_count: int | None = None
    description: str | None = None
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire shape, omitting unknown fields."""
        fields = {
            "author": self.author,
            "publishedDate": self.published_date,
            "tags": list(self.tags) if self.tags is not None else None,
            "readingTime": self.reading_time,
            "wordCount": self.word_count,
            "description": self.description,
            "language": self.language,
        }
        return {key: value for key, value in fields.items() if value is not None}


@dataclass(frozen=True)
class ArticleContent:
    """Result of a single article extraction."""

    title: str
    content: str
    metadata: ArticleMetadata
    extraction_method: ExtractionMethod
    quality_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "metadata": self.metadata.to_dict(),
            "extractionMethod": self.extraction_method.value,
            "qualityScore": self.quality_score,
        }


def count_words(text: str) -> int:
    """Count whitespace-separated tokens."""
    return len(text.split())


def estimate_reading_time(word_count: int, words_per_minute: int = 200) -> int:
    """Estimate reading time in whole minutes, rounding up."""
    return math.ceil(word_count / words_per_minute)


class ElementHandle(Protocol):
    """Subset of Playwright's ElementHandle used by the engine."""

    async def text_content(self) -> str | None: ...

    async def get_attribute(self, name: str) -> str | None: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...


class Page(Protocol):
    """Subset of Playwright's async Page used by the engine.

    Any object with these coroutines can serve as a rendering context;
    ``playwright.async_api.Page`` satisfies it.
    """

    async def goto(self, url: str, **kwargs: Any) -> Any: ...

    async def title(self) -> str: ...

    async def query_selector(self, selector: str) -> ElementHandle | None: ...

    async def query_selector_all(self, selector: str) -> list[ElementHandle]: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...

    async def close(self) -> None: ...
