"""Content domain: posts, front-matter parsing, and the per-build store."""

from quire.content.frontmatter import parse_frontmatter, post_from_document, slugify
from quire.content.models import Post
from quire.content.store import ContentStore

__all__ = [
    "ContentStore",
    "Post",
    "parse_frontmatter",
    "post_from_document",
    "slugify",
]
