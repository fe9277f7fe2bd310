"""In-memory content store for one build.

Loads every source document in a directory once, validates slugs, and
exposes the posts newest first. A store is never mutated after load;
each build creates a fresh one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from quire.content.frontmatter import post_from_document, slugify
from quire.content.models import Post
from quire.errors import DuplicateSlugError, DuplicateTagError, FilesystemReadError

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".md", ".markdown")


def discover_documents(source_dir: Path) -> list[Path]:
    """Return source documents in ``source_dir`` sorted by file name.

    Raises FilesystemReadError if the directory cannot be listed.
    """
    if not source_dir.is_dir():
        raise FilesystemReadError("source directory does not exist", path=source_dir)
    try:
        entries = list(source_dir.iterdir())
    except OSError as exc:
        raise FilesystemReadError(f"cannot list directory: {exc}", path=source_dir) from exc
    return sorted(
        (
            p
            for p in entries
            if p.is_file() and p.suffix.lower() in SOURCE_SUFFIXES and not p.name.startswith(".")
        ),
        key=lambda p: p.name,
    )


def load_document(path: Path) -> Post:
    """Read and parse one source document."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FilesystemReadError(f"not valid UTF-8: {exc.reason}", path=path) from exc
    except OSError as exc:
        raise FilesystemReadError(f"cannot read file: {exc.strerror or exc}", path=path) from exc
    post = post_from_document(path, text)
    logger.debug("Loaded %s as '%s'", path.name, post.slug)
    return post


class ContentStore:
    """Ordered, read-only collection of posts.

    Iteration yields posts by publication date descending, ties broken
    by slug ascending.
    """

    def __init__(self, posts: list[Post] | tuple[Post, ...] = ()) -> None:
        self._by_slug: dict[str, Post] = {}
        for post in posts:
            existing = self._by_slug.get(post.slug)
            if existing is not None:
                raise DuplicateSlugError(post.slug, [existing.source_path, post.source_path])
            self._by_slug[post.slug] = post
        self._posts = tuple(sorted(self._by_slug.values(), key=lambda p: p.sort_key))

    # ── Loading ──────────────────────────────────────────────────

    @classmethod
    def load(
        cls,
        source_dir: Path,
        *,
        workers: int = 1,
        include_drafts: bool = False,
    ) -> ContentStore:
        """Load every document under ``source_dir``.

        One failing document aborts the whole load. With ``workers > 1``
        documents are parsed in a thread pool; the result is identical
        to a sequential load and the first failure in file name order
        is the one raised.
        """
        paths = discover_documents(source_dir)
        logger.info("Loading %d document(s) from %s", len(paths), source_dir)

        if workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(load_document, p) for p in paths]
                # Collect in submission order so errors surface deterministically.
                posts = [f.result() for f in futures]
        else:
            posts = [load_document(p) for p in paths]

        # Drafts still claim their slug.
        store = cls(posts)
        if include_drafts:
            return store
        kept: list[Post] = []
        for post in posts:
            if not post.published:
                logger.info("Skipping draft %s", post.source_path.name)
                continue
            kept.append(post)
        return cls(kept)

    # ── Read operations ──────────────────────────────────────────

    @property
    def posts(self) -> tuple[Post, ...]:
        return self._posts

    def get(self, slug: str) -> Post | None:
        """Return a post by slug, or None if not found."""
        return self._by_slug.get(slug)

    def tags(self) -> dict[str, tuple[Post, ...]]:
        """Posts grouped by tag, tags sorted, posts in store order.

        Raises DuplicateTagError if two different tags share a slug and
        would be written to the same tag page.
        """
        grouped: dict[str, list[Post]] = {}
        by_slug: dict[str, str] = {}
        for post in self._posts:
            for tag in post.tags:
                other = by_slug.setdefault(slugify(tag), tag)
                if other != tag:
                    raise DuplicateTagError(tag, other, path=post.source_path, slug=post.slug)
                grouped.setdefault(tag, []).append(post)
        return {tag: tuple(grouped[tag]) for tag in sorted(grouped)}

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug
