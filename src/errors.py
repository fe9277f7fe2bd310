"""Build errors.

Every error aborts the current build. Each carries the offending
document's path (and slug where known) so the CLI can report it.
"""

from __future__ import annotations

from pathlib import Path


class QuireError(Exception):
    """Base class for all build failures."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        slug: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None
        self.slug = slug

    @property
    def document(self) -> str:
        """Best identifier for the failing document."""
        if self.path is not None:
            return str(self.path)
        return self.slug or "<unknown>"

    def with_path(self, path: Path | str) -> QuireError:
        """Attach a document path if none was recorded yet."""
        if self.path is None:
            self.path = Path(path)
        return self

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        if self.slug:
            return f"{self.slug}: {self.message}"
        return self.message


class MalformedFrontMatterError(QuireError):
    """Metadata block is absent, unterminated, or not a YAML mapping."""


class MissingRequiredFieldError(QuireError):
    """A required metadata field is missing or blank."""

    def __init__(self, field: str, **kwargs: object) -> None:
        super().__init__(f"missing required field '{field}'", **kwargs)  # type: ignore[arg-type]
        self.field = field


class DuplicateSlugError(QuireError):
    """Two documents resolved to the same slug."""

    def __init__(self, slug: str, paths: list[Path]) -> None:
        joined = ", ".join(str(p) for p in paths)
        super().__init__(f"duplicate slug '{slug}' ({joined})", path=paths[-1], slug=slug)
        self.paths = paths


class UnknownLayoutError(QuireError):
    """A post names a layout with no registered template."""

    def __init__(self, layout: str, **kwargs: object) -> None:
        super().__init__(f"unknown layout '{layout}'", **kwargs)  # type: ignore[arg-type]
        self.layout = layout


class FilesystemReadError(QuireError):
    """A source directory or document could not be read."""


class DuplicateTagError(QuireError):
    """Two different tags would be written to the same tag page."""

    def __init__(self, tag: str, other: str, **kwargs: object) -> None:
        super().__init__(f"tag '{tag}' collides with tag '{other}'", **kwargs)  # type: ignore[arg-type]
        self.tags = (other, tag)


class OutputDirectoryError(QuireError):
    """The output directory would replace the source directory."""


class ConfigurationError(QuireError):
    """Settings from a config file, the environment, or flags are invalid."""
