"""Content domain models: pure Pydantic v2 data types.

A Post is created once when its source document is loaded and never
changes for the rest of the build.
"""

from __future__ import annotations

from datetime import date
from functools import cached_property
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEB_SCHEMES = ("http", "https")


def is_web_url(url: str) -> bool:
    """True for an absolute http or https URL."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() in WEB_SCHEMES and bool(parts.netloc)


class Post(BaseModel):
    """One article loaded from a source document."""

    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    publication_date: date
    layout: str
    body: str
    description: str | None = None
    canonical_url: str | None = None
    tags: tuple[str, ...] = Field(default_factory=tuple)
    published: bool = True
    source_path: Path = Path(".")

    @field_validator("slug", "title", "layout")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("body")
    @classmethod
    def _body_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("body must not be empty")
        return value

    @field_validator("canonical_url")
    @classmethod
    def _canonical_is_web_url(cls, value: str | None) -> str | None:
        if value is not None and not is_web_url(value):
            raise ValueError("canonical_url must be an absolute http(s) URL")
        return value

    @cached_property
    def rendered_body(self) -> str:
        """Body converted to HTML, computed on first access."""
        from quire.render.markdown import render_markdown

        return render_markdown(self.body)

    @property
    def sort_key(self) -> tuple[int, str]:
        """Newest first, then slug ascending."""
        return (-self.publication_date.toordinal(), self.slug)

    @property
    def permalink(self) -> str:
        """Site path ``/YYYY/MM/DD/slug.html``, from the date and slug only."""
        d = self.publication_date
        return f"/{d.year:04d}/{d.month:02d}/{d.day:02d}/{self.slug}.html"
