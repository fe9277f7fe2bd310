"""Markdown to HTML conversion for untrusted post bodies.

Python-Markdown with fenced code blocks. Raw HTML in the source is
escaped rather than passed through, and script-capable link schemes are
neutralised. Fenced code content is escaped by the fenced_code extension
and never interpreted as markup.
"""

from __future__ import annotations

import html
import re

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

EXTENSIONS = ("fenced_code", "tables")
EXCERPT_LENGTH = 200

_UNSAFE_SCHEME = re.compile(r"^(javascript|vbscript|data):", re.IGNORECASE)
_IGNORED_IN_URL = re.compile(r"[\s\x00-\x1f\x7f]")
_FIRST_PARAGRAPH = re.compile(r"<p>(.*?)</p>", re.DOTALL)
_TAG = re.compile(r"<[^>]+>")


def is_unsafe_url(value: str) -> bool:
    """True if ``value`` would run script once a browser decodes it."""
    # Browsers decode entities and drop whitespace and control characters
    # before reading the scheme.
    decoded = _IGNORED_IN_URL.sub("", html.unescape(value))
    return bool(_UNSAFE_SCHEME.match(decoded))


class _SafeLinks(Treeprocessor):
    """Replace href/src values that could execute script."""

    def run(self, root):
        for element in root.iter():
            for attr in ("href", "src"):
                value = element.get(attr)
                if value is not None and is_unsafe_url(value):
                    element.set(attr, "#")


class EscapeHtmlExtension(Extension):
    """Escape raw HTML blocks and inline tags instead of emitting them."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(_SafeLinks(md), "safe_links", 0)


def _converter() -> markdown.Markdown:
    # Markdown instances keep per-document state; one per call keeps
    # threaded loads independent.
    return markdown.Markdown(
        extensions=[*EXTENSIONS, EscapeHtmlExtension()],
        output_format="html",
    )


def render_markdown(text: str) -> str:
    """Convert a Markdown body to an HTML fragment."""
    return _converter().convert(text)


def excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    """Plain-text first paragraph of a Markdown body, truncated to ``limit``."""
    match = _FIRST_PARAGRAPH.search(render_markdown(text))
    if match is None:
        return ""
    plain = " ".join(html.unescape(_TAG.sub("", match.group(1))).split())
    if len(plain) > limit:
        plain = plain[:limit].rstrip() + "..."
    return plain
