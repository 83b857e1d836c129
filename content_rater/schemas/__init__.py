"""Pydantic schemas package."""

from content_rater.schemas.articles import (  # noqa: F401
    ArticleContentResponse,
    ArticleMetadataSchema,
    FetchArticleRequest,
    RatingPromptRequest,
    RatingPromptResponse,
)
