"""Tests for the individual extraction strategies."""

from __future__ import annotations

import pytest

from content_rater.services.extractors.base import (
    UNKNOWN_TITLE,
    ExtractionConfig,
    ExtractionMethod,
)
from content_rater.services.extractors.exceptions import ParseFailure
from content_rater.services.extractors.strategies import (
    JSON_LD_SELECTOR,
    GenericSelectorsStrategy,
    SemanticElementsStrategy,
    SiteSpecificStrategy,
    StructuredDataStrategy,
    build_strategy_chain,
    find_article,
    parse_json_ld_block,
    read_json_ld,
    remove_elements,
)


LONG_PARAGRAPH = (
    "Structured extraction keeps the article body intact while dropping the "
    "surrounding chrome of the page. "
) * 6

JSON_LD_HTML = f"""
<!DOCTYPE html>
<html lang="en">
<head>
<title>Document Title | Blog</title>
<script type="application/ld+json">{{ not valid json</script>
<script type="application/ld+json">
{{
  "@context": "https://schema.org",
  "@type": "BlogPosting",
  "headline": "JSON-LD Headline",
  "author": {{"@type": "Person", "name": "Jane Writer"}},
  "datePublished": "2024-03-01",
  "description": "Structured description",
  "keywords": "python, scraping"
}}
</script>
</head>
<body>
<article><h1>Visible Heading</h1><p>{LONG_PARAGRAPH}</p></article>
</body>
</html>
"""

GRAPH_HTML = """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@graph": [
  {"@type": "WebSite", "name": "Site"},
  {"@type": ["NewsArticle"], "headline": "Graph Headline",
   "author": [{"name": "A. One"}, {"name": "B. Two"}]}
]}
</script>
</head><body><article>Short body.</article></body></html>
"""

OG_ONLY_SHORT_HTML = """
<html><head>
<meta property="og:title" content="OG Title">
</head><body><article>Too short to trust.</article></body></html>
"""

OG_ONLY_LONG_HTML = f"""
<html><head>
<meta property="og:title" content="OG Title">
<meta property="og:description" content="OG description">
</head><body><main><p>{LONG_PARAGRAPH}</p></main></body></html>
"""

PLAIN_ARTICLE_HTML = """
<html><head><title>Plain Page</title></head>
<body><div id="wrap"><article><p>Only a little text.</p></article></div></body></html>
"""

NO_CONTAINER_HTML = """
<html><head><title>Bare Page</title></head>
<body><div class="wrapper"><p>Text directly in a div.</p></div></body></html>
"""

QIITA_HTML = """
<html><head><title>Qiita Page</title></head>
<body>
<h1 class="p-items_title">Qiita Article Title</h1>
<span class="p-items_authorName">qiita_user</span>
<time class="p-items_createdAt">2024-02-02</time>
<a class="p-items_tag">Python</a><a class="p-items_tag">FastAPI</a>
<div class="it-MdContent"><p>Qiita body text.</p></div>
</body></html>
"""

ZENN_HTML = """
<html><head><title>Zenn Page</title></head>
<body>
<div class="znc">Zenn body text.<div class="znc_sidebar">Sidebar noise</div></div>
</body></html>
"""

BODY_JSON_LD_HTML = """
<html><head><title>Inline Data</title></head>
<body>
<script type="application/ld+json">{"@type": "Article", "headline": "Inline Headline"}</script>
<div><p>Paragraph outside any semantic container.</p></div>
<style>.x { color: red; }</style>
</body></html>
"""

ZENN_NO_CONTENT_HTML = """
<html><head><title>Zenn Page</title></head>
<body>
<div class="znc_ad">Sponsored block</div>
<p>Loose paragraph.</p>
</body></html>
"""


class DetachedElement:
    """Handle whose element was removed from the DOM."""

    async def text_content(self) -> str | None:
        raise RuntimeError("Element is not attached to the DOM")


def _with_detached_json_ld(page):
    """Prepend an unreadable handle to the page's JSON-LD lookups."""
    original = page.query_selector_all

    async def query_selector_all(selector: str):
        handles = await original(selector)
        if selector == JSON_LD_SELECTOR:
            return [DetachedElement(), *handles]
        return handles

    page.query_selector_all = query_selector_all
    return page


class TestJsonLdParsing:
    """Test suite for JSON-LD helpers."""

    def test_parse_single_object(self) -> None:
        """Test a single object block parses to one item."""
        objects = parse_json_ld_block('{"@type": "Article", "headline": "X"}')
        assert objects == [{"@type": "Article", "headline": "X"}]

    def test_parse_flattens_graph_and_lists(self) -> None:
        """Test @graph nodes and top-level arrays are flattened."""
        objects = parse_json_ld_block(
            '[{"@graph": [{"@type": "Article"}]}, {"@type": "Person"}, 3]'
        )
        types = [obj.get("@type") for obj in objects]
        assert types == [None, "Article", "Person"]

    def test_invalid_block_raises_parse_failure(self) -> None:
        """Test a broken block raises ParseFailure."""
        with pytest.raises(ParseFailure):
            parse_json_ld_block("{ nope")

    def test_find_article_handles_type_lists(self) -> None:
        """Test @type given as a list is recognised."""
        article = find_article([{"@type": "WebPage"}, {"@type": ["TechArticle"]}])
        assert article == {"@type": ["TechArticle"]}

    def test_find_article_none(self) -> None:
        """Test non-article objects are ignored."""
        assert find_article([{"@type": "Organization"}]) is None

    @pytest.mark.asyncio
    async def test_unreadable_block_is_skipped(self, make_page) -> None:
        """Test a block that cannot be read does not hide the others."""
        page = _with_detached_json_ld(make_page(GRAPH_HTML))

        objects = await read_json_ld(page)

        assert find_article(objects)["headline"] == "Graph Headline"

    @pytest.mark.asyncio
    async def test_lookup_failure_yields_nothing(self, make_page) -> None:
        """Test a failing block lookup is treated as no structured data."""
        page = make_page(GRAPH_HTML, failing_selectors={JSON_LD_SELECTOR})
        assert await read_json_ld(page) == []


class TestStructuredDataStrategy:
    """Test suite for StructuredDataStrategy."""

    @pytest.mark.asyncio
    async def test_json_ld_article(self, make_page) -> None:
        """Test JSON-LD data populates title and metadata."""
        result = await StructuredDataStrategy().extract(
            make_page(JSON_LD_HTML), "https://blog.example.com/post"
        )

        assert result is not None
        assert result.extraction_method is ExtractionMethod.STRUCTURED_DATA
        assert result.title == "JSON-LD Headline"
        assert result.metadata.author == "Jane Writer"
        assert result.metadata.published_date == "2024-03-01"
        assert result.metadata.description == "Structured description"
        assert result.metadata.tags == ("python", "scraping")
        assert result.metadata.language == "en"
        assert result.quality_score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_graph_article_with_short_content(self, make_page) -> None:
        """Test a JSON-LD article relaxes the content length requirement."""
        result = await StructuredDataStrategy().extract(
            make_page(GRAPH_HTML), "https://news.example.com/a"
        )

        assert result is not None
        assert result.title == "Graph Headline"
        assert result.metadata.author == "A. One, B. Two"
        assert result.content == "Short body."

    @pytest.mark.asyncio
    async def test_meta_tags_only_requires_min_length(self, make_page) -> None:
        """Test meta-tag-only pages with thin content are rejected."""
        result = await StructuredDataStrategy().extract(
            make_page(OG_ONLY_SHORT_HTML), "https://example.com/a"
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_meta_tags_with_enough_content(self, make_page) -> None:
        """Test meta tags plus real content are accepted."""
        result = await StructuredDataStrategy().extract(
            make_page(OG_ONLY_LONG_HTML), "https://example.com/a"
        )

        assert result is not None
        assert result.title == "OG Title"
        assert result.metadata.description == "OG description"
        # structured 0.3 + length 0.3 + description 0.2
        assert result.quality_score == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_document_title_alone_is_not_structured_data(self, make_page) -> None:
        """Test a plain <title> does not count as structured data."""
        result = await StructuredDataStrategy().extract(
            make_page(PLAIN_ARTICLE_HTML), "https://example.com/a"
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_json_ld_text_not_in_content(self, make_page) -> None:
        """Test JSON-LD and style text inside the container stay out of content."""
        result = await StructuredDataStrategy().extract(
            make_page(BODY_JSON_LD_HTML), "https://example.com/a"
        )

        assert result is not None
        assert result.title == "Inline Headline"
        assert result.content == "Paragraph outside any semantic container."
        assert "@type" not in result.content
        assert "color" not in result.content

    @pytest.mark.asyncio
    async def test_detached_json_ld_block(self, make_page) -> None:
        """Test an unreadable block still lets the readable one be used."""
        page = _with_detached_json_ld(make_page(GRAPH_HTML))
        result = await StructuredDataStrategy().extract(page, "https://news.example.com/a")

        assert result is not None
        assert result.title == "Graph Headline"

    @pytest.mark.asyncio
    async def test_min_length_is_configurable(self, make_page) -> None:
        """Test min_content_length comes from config."""
        strategy = StructuredDataStrategy(ExtractionConfig(min_content_length=5))
        result = await strategy.extract(
            make_page(OG_ONLY_SHORT_HTML), "https://example.com/a"
        )
        assert result is not None
        assert result.content == "Too short to trust."


class TestSemanticElementsStrategy:
    """Test suite for SemanticElementsStrategy."""

    @pytest.mark.asyncio
    async def test_article_container(self, make_page) -> None:
        """Test an <article> with any text is accepted."""
        result = await SemanticElementsStrategy().extract(
            make_page(PLAIN_ARTICLE_HTML), "https://example.com/a"
        )

        assert result is not None
        assert result.extraction_method is ExtractionMethod.SEMANTIC_ELEMENTS
        assert result.content == "Only a little text."
        assert result.title == "Plain Page"
        assert result.metadata.author is None
        assert result.metadata.word_count == 4
        assert result.metadata.reading_time == 1

    @pytest.mark.asyncio
    async def test_no_semantic_container(self, make_page) -> None:
        """Test pages without semantic containers are ceded."""
        result = await SemanticElementsStrategy().extract(
            make_page(NO_CONTAINER_HTML), "https://example.com/a"
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_empty_article_falls_through_to_main(self, make_page) -> None:
        """Test an empty <article> does not stop the search."""
        html = "<html><body><article> </article><main>Main text</main></body></html>"
        result = await SemanticElementsStrategy().extract(
            make_page(html), "https://example.com/a"
        )
        assert result is not None
        assert result.content == "Main text"
        assert result.title == UNKNOWN_TITLE

    @pytest.mark.asyncio
    async def test_long_content_truncated_with_marker(self, make_page) -> None:
        """Test content is capped at 2000 characters including the marker."""
        html = f"<html><body><article>{'word ' * 1000}</article></body></html>"
        result = await SemanticElementsStrategy().extract(
            make_page(html), "https://example.com/a"
        )

        assert result is not None
        assert len(result.content) == 2000
        assert result.content.endswith("...")
        assert result.metadata.word_count == 1000


class TestSiteSpecificStrategy:
    """Test suite for SiteSpecificStrategy."""

    @pytest.mark.asyncio
    async def test_qiita_selectors(self, make_page) -> None:
        """Test the qiita.com entry drives content and metadata."""
        result = await SiteSpecificStrategy().extract(
            make_page(QIITA_HTML), "https://qiita.com/user/items/abc"
        )

        assert result is not None
        assert result.extraction_method is ExtractionMethod.SITE_SPECIFIC
        assert result.content == "Qiita body text."
        assert result.title == "Qiita Article Title"
        assert result.metadata.author == "qiita_user"
        assert result.metadata.published_date == "2024-02-02"
        assert result.metadata.tags == ("Python", "FastAPI")

    @pytest.mark.asyncio
    async def test_exclude_selectors_removed(self, make_page) -> None:
        """Test zenn.dev exclude selectors are stripped before extraction."""
        page = make_page(ZENN_HTML)
        result = await SiteSpecificStrategy().extract(page, "https://zenn.dev/u/articles/x")

        assert result is not None
        assert result.content == "Zenn body text."
        assert "Sidebar" not in result.content
        assert page.soup.select_one(".znc_sidebar") is not None

    @pytest.mark.asyncio
    async def test_failed_site_strategy_leaves_page_unchanged(self, make_page) -> None:
        """Test exclude selectors do not leak into later strategies."""
        page = make_page(ZENN_NO_CONTENT_HTML)
        url = "https://zenn.dev/u/articles/x"

        assert await SiteSpecificStrategy().extract(page, url) is None
        result = await GenericSelectorsStrategy().extract(page, url)

        assert result is not None
        assert result.content == "Sponsored block Loose paragraph."

    @pytest.mark.asyncio
    async def test_no_selector_match_fails(self, make_page) -> None:
        """Test the strategy does not use the body fallback."""
        result = await SiteSpecificStrategy().extract(
            make_page(NO_CONTAINER_HTML), "https://example.com/a"
        )
        assert result is None


class TestGenericSelectorsStrategy:
    """Test suite for GenericSelectorsStrategy."""

    @pytest.mark.asyncio
    async def test_body_fallback(self, make_page) -> None:
        """Test the body fallback selector is used last."""
        result = await GenericSelectorsStrategy().extract(
            make_page(NO_CONTAINER_HTML), "https://example.com/a"
        )

        assert result is not None
        assert result.extraction_method is ExtractionMethod.GENERIC_SELECTORS
        assert result.content == "Text directly in a div."
        assert result.title == "Bare Page"

    @pytest.mark.asyncio
    async def test_empty_body(self, make_page) -> None:
        """Test an empty document yields nothing."""
        result = await GenericSelectorsStrategy().extract(
            make_page("<html><body></body></html>"), "https://example.com/a"
        )
        assert result is None


class TestStrategyChain:
    """Test suite for chain construction and helpers."""

    def test_chain_order(self) -> None:
        """Test the fixed strategy order."""
        methods = [strategy.method for strategy in build_strategy_chain()]
        assert methods == [
            ExtractionMethod.STRUCTURED_DATA,
            ExtractionMethod.SEMANTIC_ELEMENTS,
            ExtractionMethod.SITE_SPECIFIC,
            ExtractionMethod.GENERIC_SELECTORS,
        ]

    def test_chain_shares_config(self) -> None:
        """Test every strategy receives the same config."""
        config = ExtractionConfig(max_content_length=500)
        assert all(s.config is config for s in build_strategy_chain(config))

    @pytest.mark.asyncio
    async def test_remove_elements(self, make_page) -> None:
        """Test remove_elements reports how many elements it removed."""
        page = make_page("<html><body><nav>a</nav><nav>b</nav><p>c</p></body></html>")
        assert await remove_elements(page, ("nav",)) == 2
        assert await remove_elements(page, ()) == 0
