"""Per-site selector configuration.

``SITE_STRATEGIES`` maps a hostname to the selectors that locate article
content and metadata on that site. Lookups that miss fall back to the
``default`` entry. The table is read-only and shared by every request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

DEFAULT_STRATEGY_KEY = "default"


@dataclass(frozen=True)
class SiteMetadataSelectors:
    """Ordered selector lists per metadata field (first non-empty match wins)."""

    author: tuple[str, ...] = ()
    published_date: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    title: tuple[str, ...] = ()
    description: tuple[str, ...] = ()


@dataclass(frozen=True)
class SiteStrategy:
    """Selectors guiding content and metadata location for one site."""

    selectors: tuple[str, ...]
    metadata: SiteMetadataSelectors = field(default_factory=SiteMetadataSelectors)
    exclude_selectors: tuple[str, ...] = ()
    fallback_selectors: tuple[str, ...] = ()  # default entry only


SITE_STRATEGIES: Mapping[str, SiteStrategy] = MappingProxyType(
    {
        "zenn.dev": SiteStrategy(
            selectors=(".znc", ".zenn-content"),
            metadata=SiteMetadataSelectors(
                author=(".ArticleHeader_author a", ".znc_author a"),
                published_date=("[datetime]", "time[datetime]"),
                tags=(".ArticleHeader_tag", ".znc_tag"),
                title=("h1.ArticleHeader_title", "h1"),
                description=('meta[name="description"]',),
            ),
            exclude_selectors=(".znc_sidebar", ".znc_ad"),
        ),
        "qiita.com": SiteStrategy(
            selectors=(".it-MdContent", ".p-items_article"),
            metadata=SiteMetadataSelectors(
                author=(".p-items_authorName", ".UserInfo_name"),
                published_date=(".p-items_createdAt", "time"),
                tags=(".p-items_tag", ".TagList_tag"),
                title=("h1.p-items_title", "h1"),
            ),
        ),
        "note.com": SiteStrategy(
            selectors=(".note-common-styles__textnote-body", ".o-noteContentBody"),
            metadata=SiteMetadataSelectors(
                author=(".o-noteContentHeader__authorName", ".p-userInfo__name"),
                published_date=(".o-noteContentHeader__date", "time"),
                title=("h1.o-noteContentHeader__title", "h1"),
            ),
        ),
        "medium.com": SiteStrategy(
            selectors=("article section", ".postArticle-content"),
            metadata=SiteMetadataSelectors(
                author=('[data-testid="authorName"]', ".ds-link--styleSubtle"),
                published_date=("time", '[data-testid="storyPublishDate"]'),
                tags=("[data-testid='storyTags'] a", ".tag"),
            ),
        ),
        "dev.to": SiteStrategy(
            selectors=("#article-body", ".crayons-article__body"),
            metadata=SiteMetadataSelectors(
                author=(".crayons-article__subheader a", 'meta[name="author"]'),
                published_date=("time[datetime]",),
                tags=(".crayons-tag",),
                title=("h1",),
                description=('meta[name="description"]',),
            ),
        ),
        DEFAULT_STRATEGY_KEY: SiteStrategy(
            selectors=(
                "article",
                '[role="main"] article',
                "main article",
                ".article-content",
                ".post-content",
                ".entry-content",
                ".content",
                "main",
            ),
            metadata=SiteMetadataSelectors(
                author=('meta[name="author"]', ".author", ".byline"),
                published_date=(
                    'meta[property="article:published_time"]',
                    "time[datetime]",
                    ".date",
                ),
                tags=('meta[property="article:tag"]', ".tags a", ".tag"),
                title=("h1", "title"),
                description=(
                    'meta[name="description"]',
                    'meta[property="og:description"]',
                ),
            ),
            fallback_selectors=("body",),
        ),
    }
)


def get_site_strategy(hostname: str) -> SiteStrategy:
    """Return the strategy for an exact hostname, else the default entry."""
    return SITE_STRATEGIES.get(hostname, SITE_STRATEGIES[DEFAULT_STRATEGY_KEY])


def default_strategy() -> SiteStrategy:
    return SITE_STRATEGIES[DEFAULT_STRATEGY_KEY]
