"""Shared pytest fixtures for unit and API tests.

``FakePage`` stands in for a Playwright page. It is backed by BeautifulSoup,
so strategies run real CSS selectors against real HTML without a browser.

Usage in new test files:
    async def test_something(make_page):
        page = make_page("<html><body><article>Text</article></body></html>")
        article = await ArticleContentFetcher().fetch(url, page)
"""

from __future__ import annotations

import copy
from typing import Any, Callable

import pytest
from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    NavigableString,
    RubyParenthesisString,
    RubyTextString,
    Script,
    Stylesheet,
    TemplateString,
)
from fastapi.testclient import TestClient

from content_rater.core.config import settings
from content_rater.main import app
from content_rater.services.extractors.strategies import (
    ELEMENT_TEXT_SCRIPT,
    REMOVE_ELEMENTS_SCRIPT,
)


# Every text node a DOM textContent includes; bs4 skips script/style by default
TEXT_NODE_TYPES = (
    NavigableString,
    CData,
    Script,
    Stylesheet,
    TemplateString,
    RubyTextString,
    RubyParenthesisString,
)


class FakeElement:
    """Element handle exposing the Playwright calls the engine uses."""

    def __init__(self, tag: Any) -> None:
        self.tag = tag

    async def text_content(self) -> str | None:
        return self.tag.get_text(types=TEXT_NODE_TYPES)

    async def get_attribute(self, name: str) -> str | None:
        value = self.tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if expression == ELEMENT_TEXT_SCRIPT:
            clone = copy.copy(self.tag)
            for selector in ["script", "style", "noscript", "template", *(arg or [])]:
                for node in clone.select(selector):
                    node.extract()
            return clone.get_text(types=TEXT_NODE_TYPES)
        raise NotImplementedError(f"Unsupported expression: {expression[:40]}")


class FakePage:
    """Minimal async Playwright page over a parsed HTML document."""

    def __init__(
        self,
        html: str,
        *,
        goto_error: Exception | None = None,
        failing_selectors: set[str] | None = None,
    ) -> None:
        self.soup = BeautifulSoup(html, "lxml")
        self.goto_error = goto_error
        self.failing_selectors = failing_selectors or set()
        self.goto_calls: list[str] = []
        self.closed = False

    def _check(self, selector: str) -> None:
        if selector in self.failing_selectors:
            raise RuntimeError(f"Selector evaluation failed: {selector}")

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.goto_calls.append(url)
        if self.goto_error is not None:
            raise self.goto_error

    async def title(self) -> str:
        tag = self.soup.title
        return tag.get_text() if tag else ""

    async def query_selector(self, selector: str) -> FakeElement | None:
        self._check(selector)
        tag = self.soup.select_one(selector)
        return FakeElement(tag) if tag is not None else None

    async def query_selector_all(self, selector: str) -> list[FakeElement]:
        self._check(selector)
        return [FakeElement(tag) for tag in self.soup.select(selector)]

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if expression == REMOVE_ELEMENTS_SCRIPT:
            removed = 0
            for selector in arg:
                for tag in self.soup.select(selector):
                    tag.extract()
                    removed += 1
            return removed
        raise NotImplementedError(f"Unsupported expression: {expression[:40]}")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def make_page() -> Callable[..., FakePage]:
    """Return a factory for FakePage instances."""

    def _make(html: str, **kwargs: Any) -> FakePage:
        return FakePage(html, **kwargs)

    return _make


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """TestClient with browser rendering disabled."""
    monkeypatch.setattr(settings, "browser_rendering_enabled", False)
    with TestClient(app) as tc:
        yield tc
    app.dependency_overrides.clear()
