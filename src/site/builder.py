"""Site build orchestration.

A build is all-or-nothing: every page is rendered in memory first, then
written to a temporary sibling directory that replaces the output
directory only once everything succeeded.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

from quire.config import QuireConfig
from quire.content.store import ContentStore
from quire.errors import OutputDirectoryError
from quire.render.renderer import LayoutRegistry, Renderer
from quire.site.index import (
    FEED_PATH,
    INDEX_PATH,
    build_index,
    render_feed,
    render_index_page,
    tag_path,
)

logger = logging.getLogger(__name__)


class BuildResult(BaseModel):
    """Summary of a completed build."""

    output_dir: Path
    post_count: int = 0
    pages: list[str] = Field(default_factory=list)


class SiteBuilder:
    """Loads, renders, and writes a whole site."""

    def __init__(self, config: QuireConfig) -> None:
        self.config = config
        self.registry = LayoutRegistry()
        self.renderer = Renderer(config.site, self.registry)

    def load(self) -> ContentStore:
        return ContentStore.load(
            self.config.source_path,
            workers=self.config.build.workers,
            include_drafts=self.config.build.include_drafts,
        )

    def render_site(self, store: ContentStore) -> dict[str, str]:
        """Render every output document, keyed by site-relative path."""
        site = self.config.site
        pages: dict[str, str] = {}

        for post in store:
            doc = self.renderer.render(post)
            pages[doc.path] = doc.content

        entries = build_index(store)
        pages[INDEX_PATH] = render_index_page(entries, site, self.registry)
        if site.url:
            pages[FEED_PATH] = render_feed(entries, site, self.registry, limit=self.config.build.feed_limit)
        else:
            logger.warning("No site url configured, skipping %s", FEED_PATH)

        for tag, posts in store.tags().items():
            pages[tag_path(tag)] = render_index_page(
                build_index(posts), site, self.registry, heading=f"Posts tagged “{tag}”"
            )
        return pages

    def check(self) -> BuildResult:
        """Run the full pipeline without writing anything."""
        self.check_output_dir()
        store = self.load()
        pages = self.render_site(store)
        return BuildResult(
            output_dir=self.config.output_path,
            post_count=len(store),
            pages=sorted(pages),
        )

    def check_output_dir(self) -> None:
        """Raise OutputDirectoryError if writing the output would replace the sources.

        The whole output directory is swapped out on every build, so it
        must not be the source directory or contain it.
        """
        output_dir = self.config.output_path.resolve()
        source_dir = self.config.source_path.resolve()
        if output_dir == source_dir or output_dir in source_dir.parents:
            raise OutputDirectoryError(
                f"output directory contains the source directory {source_dir}",
                path=self.config.output_path,
            )

    def build(self) -> BuildResult:
        self.check_output_dir()
        store = self.load()
        pages = self.render_site(store)
        output_dir = self.config.output_path
        write_atomically(output_dir, pages)
        logger.info("Wrote %d page(s) for %d post(s) to %s", len(pages), len(store), output_dir)
        return BuildResult(output_dir=output_dir, post_count=len(store), pages=sorted(pages))


def write_atomically(output_dir: Path, pages: dict[str, str]) -> None:
    """Write ``pages`` to a fresh directory, then swap it into place.

    On failure the previous contents of ``output_dir`` are untouched.
    """
    output_dir = output_dir.resolve()
    output_dir.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-", dir=output_dir.parent))
    try:
        for rel_path in sorted(pages):
            target = staging / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(pages[rel_path], encoding="utf-8")
            logger.debug("Wrote %s", rel_path)
        staging.chmod(0o755)

        backup = None
        if output_dir.exists():
            backup = output_dir.with_name(f".{output_dir.name}-previous")
            if backup.exists():
                shutil.rmtree(backup)
            output_dir.rename(backup)
        try:
            staging.rename(output_dir)
        except OSError:
            if backup is not None:
                backup.rename(output_dir)
            raise
        if backup is not None:
            shutil.rmtree(backup)
    except BaseException:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)
        raise
