"""Navigable views over the content store: permalinks, listing, feed."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ConfigDict

from quire.config import SiteConfig
from quire.content.frontmatter import slugify
from quire.content.models import Post
from quire.render.markdown import excerpt
from quire.render.renderer import LayoutRegistry

INDEX_PATH = "index.html"
FEED_PATH = "feed.xml"


class IndexEntry(BaseModel):
    """One row of the listing."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    permalink: str
    date: date
    slug: str


def permalink_for(post: Post) -> str:
    """Stable site path for a post, derived from its date and slug only."""
    return post.permalink


def tag_path(tag: str) -> str:
    return f"tags/{slugify(tag)}.html"


def build_index(posts: Iterable[Post]) -> tuple[IndexEntry, ...]:
    """Listing entries, newest first, ties broken by slug."""
    ordered = sorted(posts, key=lambda p: p.sort_key)
    return tuple(
        IndexEntry(
            title=post.title,
            description=post.description or excerpt(post.body),
            permalink=permalink_for(post),
            date=post.publication_date,
            slug=post.slug,
        )
        for post in ordered
    )


def _site_prefixed(entries: tuple[IndexEntry, ...], site: SiteConfig) -> list[IndexEntry]:
    base = site.base_path.rstrip("/")
    if not base:
        return list(entries)
    return [e.model_copy(update={"permalink": base + e.permalink}) for e in entries]


def render_index_page(
    entries: tuple[IndexEntry, ...],
    site: SiteConfig,
    registry: LayoutRegistry,
    heading: str | None = None,
) -> str:
    """HTML listing page; used for the front page and each tag page."""
    template = registry.get_template("listing.html")
    return template.render(site=site, entries=_site_prefixed(entries, site), heading=heading)


def render_feed(
    entries: tuple[IndexEntry, ...],
    site: SiteConfig,
    registry: LayoutRegistry,
    limit: int = 20,
) -> str:
    """Atom feed of the newest ``limit`` entries.

    ``updated`` is the newest post date so the feed is stable across
    rebuilds of unchanged content.

    Raises ValueError if ``site.url`` is unset; Atom ids must be absolute.
    """
    if not site.url:
        raise ValueError("an Atom feed needs an absolute site url")
    latest = entries[:limit]
    updated = latest[0].date if latest else date(1970, 1, 1)
    template = registry.get_template("feed.xml")
    return template.render(
        site=site,
        site_url=site.url,
        entries=latest,
        updated=f"{updated.isoformat()}T00:00:00Z",
    )
