"""Front-matter parsing and Post construction.

A source document looks like::

    ---
    layout: post
    title: Rails vs Hanami routing
    originally_published_at: https://example.com/original
    ---
    Body markdown...

The filename may carry the publication date as a ``YYYY-MM-DD-`` prefix.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from quire.content.models import Post, is_web_url
from quire.errors import MalformedFrontMatterError, MissingRequiredFieldError

DELIMITER = "---"
REQUIRED_FIELDS = ("layout", "title")

_FILENAME_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase and collapse anything non-alphanumeric to single hyphens."""
    return _NON_SLUG.sub("-", text.lower()).strip("-")


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its metadata mapping and body text.

    Raises:
        MalformedFrontMatterError: No opening delimiter, no closing
            delimiter, invalid YAML, or a block that is not a mapping.
        MissingRequiredFieldError: ``layout`` or ``title`` absent or blank.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)

    if not lines or lines[0].strip() != DELIMITER:
        raise MalformedFrontMatterError("document does not start with a '---' metadata block")

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        raise MalformedFrontMatterError("metadata block is not terminated by '---'")

    raw = "".join(lines[1:end])
    body = "".join(lines[end + 1 :])

    try:
        metadata = yaml.safe_load(raw) if raw.strip() else {}
    except (yaml.YAMLError, ValueError) as exc:
        raise MalformedFrontMatterError(f"invalid YAML in metadata block: {exc}") from exc

    if not isinstance(metadata, dict):
        raise MalformedFrontMatterError("metadata block must be a key/value mapping")

    metadata = {str(k): v for k, v in metadata.items()}
    for field in REQUIRED_FIELDS:
        value = metadata.get(field)
        if value is None or not str(value).strip():
            raise MissingRequiredFieldError(field)

    return metadata, body


def is_published(metadata: dict[str, Any]) -> bool:
    """Documents with ``published: false`` are drafts."""
    return metadata.get("published", True) is not False


def post_from_document(path: Path, text: str) -> Post:
    """Parse a document and build its Post.

    Errors raised here carry ``path``.
    """
    try:
        metadata, body = parse_frontmatter(text)
        return _build_post(path, metadata, body)
    except (MalformedFrontMatterError, MissingRequiredFieldError) as exc:
        exc.with_path(path)
        raise


def _build_post(path: Path, metadata: dict[str, Any], body: str) -> Post:
    match = _FILENAME_DATE.match(path.stem)
    stem = match.group(4) if match else path.stem

    slug = slugify(str(metadata.get("slug") or stem))
    if not slug:
        raise MalformedFrontMatterError(f"cannot derive a slug from '{path.name}'")

    if not body.strip():
        raise MissingRequiredFieldError("body", slug=slug)

    canonical = _canonical_url(metadata.get("originally_published_at") or metadata.get("canonical_url"))
    description = metadata.get("description")

    try:
        return Post(
            slug=slug,
            title=str(metadata["title"]).strip(),
            publication_date=_publication_date(metadata, match),
            layout=str(metadata["layout"]).strip(),
            body=body,
            description=str(description).strip() if description else None,
            canonical_url=canonical,
            tags=_parse_tags(metadata.get("tags")),
            published=is_published(metadata),
            source_path=path,
        )
    except ValidationError as exc:
        raise MalformedFrontMatterError(f"invalid metadata: {exc}", slug=slug) from exc


def _canonical_url(value: Any) -> str | None:
    if not value:
        return None
    url = str(value).strip()
    # Ends up in href attributes.
    if not is_web_url(url):
        raise MalformedFrontMatterError(f"canonical URL must be an absolute http(s) URL, got '{url}'")
    return url


def _publication_date(metadata: dict[str, Any], match: re.Match[str] | None) -> date:
    value = metadata.get("date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is not None:
        # Quoted dates stay strings after YAML loading.
        raw = str(value).strip()
        try:
            return date.fromisoformat(raw[:10])
        except ValueError as exc:
            raise MalformedFrontMatterError(f"invalid date '{raw}'") from exc
    if match is not None:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError as exc:
            raise MalformedFrontMatterError(f"invalid date in filename: {exc}") from exc
    raise MissingRequiredFieldError("date")


def _parse_tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    elif isinstance(value, list):
        items = [str(part).strip() for part in value]
    else:
        raise MalformedFrontMatterError(f"tags must be a list or string, got {type(value).__name__}")
    seen: dict[str, None] = {}
    for item in items:
        if not item:
            continue
        if not slugify(item):
            raise MalformedFrontMatterError(f"tag '{item}' has no letters or digits")
        seen.setdefault(item, None)
    return tuple(seen)
