"""FastAPI application entry point for content-rater-service.

Configures middleware, exception handlers, lifecycle hooks, and routes.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from content_rater import __version__
from content_rater.core.config import settings
from content_rater.routes import health
from content_rater.routes.articles import router as articles_router
from content_rater.services.extractors import BrowserSession

# ---------------------------------------------------------------------------
# Logging Configuration
# ---------------------------------------------------------------------------

# Configure root logger with level from settings
logging.basicConfig(
    level=settings.get_log_level_int(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup / shutdown lifecycle."""
    # --- Startup ---
    logger.info(
        "Starting content-rater-service (env=%s, port=%d)",
        settings.service_env,
        settings.port,
    )

    # Browser launches lazily on the first rendered request
    if settings.browser_rendering_enabled:
        app.state.browser_session = BrowserSession(settings.browser_config())
        logger.info(
            "Browser rendering enabled (headless=%s)", settings.playwright_headless
        )
    else:
        app.state.browser_session = None
        logger.info("Browser rendering disabled, using fallback HTML fetch only")

    yield

    # --- Shutdown ---
    logger.info("Shutting down content-rater-service")
    if app.state.browser_session is not None:
        await app.state.browser_session.close()


# ---------------------------------------------------------------------------
# App instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title="content-rater API",
    version=__version__,
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log every request with method, path, status, and duration."""
    start = time.monotonic()
    response = await call_next(request)
    duration_ms = (time.monotonic() - start) * 1000
    logger.info(
        "%s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


# ---------------------------------------------------------------------------
# Global exception handler
# ---------------------------------------------------------------------------


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler that returns a structured JSON error."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            }
        },
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

# Health check at /health (no prefix)
app.include_router(health.router)

# Article extraction routes (prefixed with /api/v1/articles)
app.include_router(articles_router)


# Additional health endpoint under API prefix for consistency
@app.get("/api/v1/health", tags=["health"])
async def api_health_check():
    """Health check under the /api/v1 prefix."""
    return {
        "status": "ok",
        "name": "content-rater-service",
        "version": __version__,
        "environment": settings.service_env,
    }
