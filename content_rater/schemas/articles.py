"""Pydantic v2 schemas for article extraction and rating prompt endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from content_rater.services.extractors.base import ArticleContent

ExtractionMethodName = Literal[
    "structured-data",
    "semantic-elements",
    "site-specific",
    "generic-selectors",
    "fallback-html",
]


# -----------------------------------------------------------------------------
# Request Schemas
# -----------------------------------------------------------------------------


class FetchArticleRequest(BaseModel):
    """Request body for POST /api/v1/articles/content."""

    url: str = Field(..., max_length=2048, description="Absolute HTTP(S) article URL")
    render_js: bool = Field(
        default=True,
        description="Render the page in a headless browser when available",
    )


class RatingPromptRequest(BaseModel):
    """Request body for POST /api/v1/articles/rating-prompt."""

    article_id: int | None = Field(
        default=None, gt=0, description="Bookmark/article ID the rating belongs to"
    )
    url: str = Field(..., max_length=2048, description="Absolute HTTP(S) article URL")
    fetch_content: bool = Field(
        default=True, description="Fetch the article before building the prompt"
    )
    render_js: bool = Field(
        default=True,
        description="Render the page in a headless browser when available",
    )


# -----------------------------------------------------------------------------
# Response Schemas
# -----------------------------------------------------------------------------


class ArticleMetadataSchema(BaseModel):
    """Optional article metadata; unknown fields are null."""

    author: str | None = None
    published_date: str | None = None
    tags: list[str] | None = None
    reading_time: int | None = Field(default=None, ge=0, description="Minutes")
    word_count: int | None = Field(default=None, ge=0)
    description: str | None = None
    language: str | None = None


class ArticleContentResponse(BaseModel):
    """Extracted article content."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., max_length=2000)
    metadata: ArticleMetadataSchema
    extraction_method: ExtractionMethodName
    quality_score: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_article(cls, article: ArticleContent) -> ArticleContentResponse:
        metadata = article.metadata
        return cls(
            title=article.title,
            content=article.content,
            metadata=ArticleMetadataSchema(
                author=metadata.author,
                published_date=metadata.published_date,
                tags=list(metadata.tags) if metadata.tags is not None else None,
                reading_time=metadata.reading_time,
                word_count=metadata.word_count,
                description=metadata.description,
                language=metadata.language,
            ),
            extraction_method=article.extraction_method.value,
            quality_score=article.quality_score,
        )


class RatingPromptResponse(BaseModel):
    """Rating prompt plus the extraction it was built from."""

    article_id: int | None = None
    url: str
    prompt: str
    article: ArticleContentResponse | None = Field(
        default=None, description="Extraction result; null when not fetched or failed"
    )
    error: str | None = Field(
        default=None, description="Extraction error when the prompt fell back"
    )
