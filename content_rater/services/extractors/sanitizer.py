"""Text cleanup shared by every extraction path."""

from __future__ import annotations

import re

_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_markup(html: str) -> str:
    """Drop script/style blocks, then every remaining tag."""
    html = _SCRIPT_RE.sub("", html)
    html = _STYLE_RE.sub("", html)
    return _TAG_RE.sub(" ", html)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate(text: str, max_length: int, marker: str = "") -> str:
    """Cut text so the result, marker included, fits in max_length."""
    if len(text) <= max_length:
        return text
    if not marker:
        return text[:max_length]
    return text[: max_length - len(marker)] + marker


def sanitize_text(text: str | None) -> str:
    """Normalize element text from a rendered page (no truncation).

    Script and style elements are removed from the live DOM before any
    strategy runs, so element text only needs whitespace cleanup. Literal
    angle brackets (code samples) are kept.
    """
    if not text:
        return ""
    return collapse_whitespace(text)


def sanitize_html(html: str) -> str:
    """Turn a raw HTML fragment into collapsed plain text (no truncation)."""
    return collapse_whitespace(strip_markup(html))
