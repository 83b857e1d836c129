"""Liveness endpoint reporting build and browser state."""

from __future__ import annotations

import functools
import logging
import subprocess

from fastapi import APIRouter, Request

from content_rater import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@functools.lru_cache(maxsize=1)
def get_git_sha() -> str:
    """Short commit SHA of the deployed checkout, resolved once per process."""
    try:
        output = subprocess.check_output(
            ["git", "rev-parse", "--short=7", "HEAD"], stderr=subprocess.DEVNULL
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        logger.debug("Git SHA unavailable: %s", e)
        return "unknown"
    return output.decode().strip()[:7] or "unknown"


@router.get("/health")
async def health_check(request: Request) -> dict:
    session = getattr(request.app.state, "browser_session", None)
    return {
        "status": "ok",
        "name": "content-rater-service",
        "version": __version__,
        "git_sha": get_git_sha(),
        "browser_rendering": session is not None,
        "browser_running": bool(session and session.is_running),
    }
