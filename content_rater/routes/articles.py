"""Article extraction and rating prompt REST endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request

from content_rater.core.config import settings
from content_rater.schemas.articles import (
    ArticleContentResponse,
    FetchArticleRequest,
    RatingPromptRequest,
    RatingPromptResponse,
)
from content_rater.services.extractors import (
    AllExtractionStrategiesFailedError,
    ArticleContentFetcher,
    BrowserSession,
    ExtractionError,
    FetchFailedError,
    InvalidURLError,
    validate_url,
)
from content_rater.services.rating_prompt import generate_rating_prompt

if TYPE_CHECKING:
    from content_rater.services.extractors.base import ArticleContent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


def get_fetcher() -> ArticleContentFetcher:
    return ArticleContentFetcher(settings.extraction_config())


def get_browser_session(request: Request) -> BrowserSession | None:
    """Shared browser session, or None when rendering is disabled."""
    return getattr(request.app.state, "browser_session", None)


def _error_status(exc: ExtractionError) -> tuple[int, str]:
    match exc:
        case InvalidURLError():
            return 400, "INVALID_URL"
        case FetchFailedError():
            return 502, "FETCH_FAILED"
        case AllExtractionStrategiesFailedError():
            return 422, "EXTRACTION_FAILED"
        case _:
            return 500, "EXTRACTION_ERROR"


def _http_error(exc: ExtractionError) -> HTTPException:
    status_code, code = _error_status(exc)
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": str(exc),
            }
        },
    )


async def _extract(
    url: str,
    render_js: bool,
    fetcher: ArticleContentFetcher,
    browser_session: BrowserSession | None,
) -> ArticleContent:
    """Run the fetcher, with a fresh page when rendering is requested."""
    # Reject bad input before a page is opened
    url = validate_url(url)

    page = None
    if render_js and browser_session is not None:
        try:
            page = await browser_session.new_page()
        except FetchFailedError as e:
            logger.warning("Browser unavailable, using fallback fetch for %s: %s", url, e)

    return await fetcher.fetch(url, page)


@router.post("/content", response_model=ArticleContentResponse)
async def fetch_article_content(
    request: FetchArticleRequest,
    fetcher: ArticleContentFetcher = Depends(get_fetcher),
    browser_session: BrowserSession | None = Depends(get_browser_session),
) -> ArticleContentResponse:
    """Extract title, body text and metadata from an article URL.

    Raises:
        HTTPException: 400 for invalid URLs, 502 when the page cannot be
            fetched, 422 when no extraction strategy found content.
    """
    try:
        article = await _extract(
            request.url, request.render_js, fetcher, browser_session
        )
    except ExtractionError as e:
        logger.warning("Article extraction failed for %s: %s", request.url, e)
        raise _http_error(e)

    return ArticleContentResponse.from_article(article)


@router.post("/rating-prompt", response_model=RatingPromptResponse)
async def create_rating_prompt(
    request: RatingPromptRequest,
    fetcher: ArticleContentFetcher = Depends(get_fetcher),
    browser_session: BrowserSession | None = Depends(get_browser_session),
) -> RatingPromptResponse:
    """Build an evaluation prompt for an article.

    When extraction fails the prompt falls back to asking the model to read
    the page itself; the failure is reported in ``error``.

    Raises:
        HTTPException: 400 for invalid URLs.
    """
    try:
        url = validate_url(request.url)
    except InvalidURLError as e:
        raise _http_error(e)

    article: ArticleContent | None = None
    error: str | None = None

    if request.fetch_content:
        try:
            article = await _extract(url, request.render_js, fetcher, browser_session)
        except ExtractionError as e:
            logger.warning("Rating prompt falling back for %s: %s", url, e)
            error = str(e)

    return RatingPromptResponse(
        article_id=request.article_id,
        url=url,
        prompt=generate_rating_prompt(article, url),
        article=ArticleContentResponse.from_article(article) if article else None,
        error=error,
    )
