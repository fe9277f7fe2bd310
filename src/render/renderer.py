"""Post renderer: body markup to a complete HTML document."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jinja2 import Template
from markupsafe import Markup

from quire.config import SiteConfig
from quire.content.frontmatter import slugify
from quire.content.models import Post
from quire.errors import UnknownLayoutError
from quire.render.layouts import LAYOUT_TEMPLATES, Layout, create_environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedDocument:
    """A rendered post and the site-relative path it is written to."""

    path: str
    content: str


class LayoutRegistry:
    """Maps layout names to compiled templates."""

    def __init__(self) -> None:
        self._env = create_environment()
        self._templates: dict[str, Template] = {
            layout.value: self._env.get_template(name) for layout, name in LAYOUT_TEMPLATES.items()
        }

    def __contains__(self, layout: object) -> bool:
        return layout in self._templates

    def names(self) -> list[str]:
        return sorted(self._templates)

    def template_for(self, post: Post) -> Template:
        """Return the template for ``post.layout``.

        Raises UnknownLayoutError if the layout is not registered.
        """
        template = self._templates.get(post.layout)
        if template is None:
            raise UnknownLayoutError(post.layout, path=post.source_path, slug=post.slug)
        return template

    def get_template(self, name: str) -> Template:
        """Non-layout templates (listing, feed)."""
        return self._env.get_template(name)


class Renderer:
    """Renders posts through their layout.

    Output depends only on the post and site settings, never on the
    time of the build.
    """

    def __init__(self, site: SiteConfig, registry: LayoutRegistry | None = None) -> None:
        self.site = site
        self.registry = registry or LayoutRegistry()

    def render(self, post: Post) -> RenderedDocument:
        template = self.registry.template_for(post)
        html = template.render(
            site=self.site,
            post=post,
            content=Markup(post.rendered_body),
            tag_slugs={tag: slugify(tag) for tag in post.tags},
        )
        logger.debug("Rendered '%s' with layout %s", post.slug, post.layout)
        return RenderedDocument(path=post.permalink.lstrip("/"), content=html)


__all__ = ["Layout", "LayoutRegistry", "RenderedDocument", "Renderer"]
