"""Tests for layout rendering."""

from datetime import date
from pathlib import Path

import pytest

from quire.config import SiteConfig
from quire.content.frontmatter import post_from_document
from quire.content.models import Post
from quire.errors import MalformedFrontMatterError, UnknownLayoutError
from quire.render import Layout, LayoutRegistry, Renderer


def _make_post(**kwargs) -> Post:
    defaults = {
        "slug": "hello",
        "title": "T",
        "publication_date": date(2018, 5, 23),
        "layout": "post",
        "body": "Hello",
        "source_path": Path("_posts/2018-05-23-hello.md"),
    }
    defaults.update(kwargs)
    return Post(**defaults)


@pytest.fixture
def renderer() -> Renderer:
    return Renderer(SiteConfig(title="Ruby Notes", author="Sam"))


class TestLayoutRegistry:
    def test_registers_every_layout(self):
        registry = LayoutRegistry()
        assert registry.names() == sorted(layout.value for layout in Layout)
        assert "post" in registry
        assert "gallery" not in registry

    def test_unknown_layout(self):
        with pytest.raises(UnknownLayoutError) as exc_info:
            LayoutRegistry().template_for(_make_post(layout="gallery"))
        assert exc_info.value.layout == "gallery"
        assert exc_info.value.path == Path("_posts/2018-05-23-hello.md")


class TestRender:
    def test_parsed_document_round_trip(self, renderer: Renderer):
        text = "---\nlayout: post\ntitle: T\n---\nHello\n"
        post = post_from_document(Path("2018-05-23-hello.md"), text)
        doc = renderer.render(post)

        assert doc.path == "2018/05/23/hello.html"
        assert "Hello" in doc.content
        assert "---" not in doc.content

    def test_deterministic(self, renderer: Renderer):
        post = _make_post(body="# Heading\n\n```\n<x>\n```\n", tags=("ruby",))
        assert renderer.render(post).content == renderer.render(post).content
        assert renderer.render(post).content == Renderer(renderer.site).render(post).content

    def test_post_layout_metadata(self, renderer: Renderer):
        post = _make_post(
            description="About routing",
            canonical_url="https://dev.example.com/routing",
            tags=("ruby",),
        )
        html = renderer.render(post).content

        assert "<title>T | Ruby Notes</title>" in html
        assert '<meta name="description" content="About routing">' in html
        assert '<link rel="canonical" href="https://dev.example.com/routing">' in html
        assert '<time datetime="2018-05-23">May 23, 2018</time>' in html
        assert "by Sam" in html
        assert 'href="/tags/ruby.html"' in html

    def test_script_canonical_url_never_rendered(self, renderer: Renderer):
        text = '---\nlayout: post\ntitle: T\noriginally_published_at: "javascript:alert(1)"\n---\nHi\n'
        with pytest.raises(MalformedFrontMatterError):
            renderer.render(post_from_document(Path("2018-05-23-hello.md"), text))

    def test_path_follows_permalink(self, renderer: Renderer):
        doc = renderer.render(_make_post(slug="routing", publication_date=date(2019, 1, 2)))
        assert doc.path == "2019/01/02/routing.html"

    def test_page_layout(self, renderer: Renderer):
        html = renderer.render(_make_post(layout="page")).content
        assert '<article class="page">' in html
        assert "<time" not in html

    def test_body_html_embedded_unescaped(self, renderer: Renderer):
        html = renderer.render(_make_post(body="Some *emphasis*")).content
        assert "<p>Some <em>emphasis</em></p>" in html

    def test_title_is_escaped(self, renderer: Renderer):
        html = renderer.render(_make_post(title="<script>x</script>")).content
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_template_syntax_in_body_is_data(self, renderer: Renderer):
        html = renderer.render(_make_post(body="Total: {{ 7 * 7 }} {% if true %}x{% endif %}")).content
        assert "{{ 7 * 7 }}" in html
        assert "49" not in html

    def test_unknown_layout(self, renderer: Renderer):
        with pytest.raises(UnknownLayoutError):
            renderer.render(_make_post(layout="gallery"))
