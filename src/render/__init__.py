"""Rendering: Markdown conversion and layout templates."""

from quire.render.layouts import Layout
from quire.render.markdown import excerpt, render_markdown
from quire.render.renderer import LayoutRegistry, RenderedDocument, Renderer

__all__ = [
    "Layout",
    "LayoutRegistry",
    "RenderedDocument",
    "Renderer",
    "excerpt",
    "render_markdown",
]
