"""Tests for content domain models."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from quire.content.models import Post, is_web_url


def _make_post(**kwargs) -> Post:
    defaults = {
        "slug": "hello-world",
        "title": "Hello World",
        "publication_date": date(2018, 5, 23),
        "layout": "post",
        "body": "Hello",
    }
    defaults.update(kwargs)
    return Post(**defaults)


class TestPost:
    def test_defaults(self):
        post = _make_post()
        assert post.description is None
        assert post.canonical_url is None
        assert post.tags == ()
        assert post.published is True
        assert post.source_path == Path(".")

    def test_is_immutable(self):
        post = _make_post()
        with pytest.raises(ValidationError):
            post.slug = "changed"  # type: ignore[misc]

    def test_blank_body_rejected(self):
        with pytest.raises(ValidationError):
            _make_post(body="  \n ")

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            _make_post(title=" ")

    def test_script_canonical_url_rejected(self):
        with pytest.raises(ValidationError):
            _make_post(canonical_url="javascript:alert(1)")

    def test_permalink(self):
        assert _make_post().permalink == "/2018/05/23/hello-world.html"

    def test_rendered_body_is_html(self):
        post = _make_post(body="Some *emphasis* here.")
        assert post.rendered_body == "<p>Some <em>emphasis</em> here.</p>"

    def test_rendered_body_is_cached(self):
        post = _make_post()
        assert post.rendered_body is post.rendered_body


class TestSortKey:
    def test_newer_sorts_first(self):
        newer = _make_post(slug="b", publication_date=date(2018, 5, 23))
        older = _make_post(slug="a", publication_date=date(2018, 4, 30))
        assert sorted([older, newer], key=lambda p: p.sort_key) == [newer, older]

    def test_same_date_sorts_by_slug(self):
        b = _make_post(slug="b")
        a = _make_post(slug="a")
        assert [p.slug for p in sorted([b, a], key=lambda p: p.sort_key)] == ["a", "b"]


class TestIsWebUrl:
    @pytest.mark.parametrize("url", ["https://a.example/p", "HTTP://a.example"])
    def test_accepts_absolute_http(self, url: str):
        assert is_web_url(url)

    @pytest.mark.parametrize(
        "url", ["javascript:alert(1)", "data:text/html,x", "/local/path", "https://[::1"]
    )
    def test_rejects_everything_else(self, url: str):
        assert not is_web_url(url)
