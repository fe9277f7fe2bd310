"""Unified configuration loaded from .quire.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".quire.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "quire" / "config.toml"


class SiteConfig(BaseModel):
    """[site] section."""

    title: str = "Blog"
    url: str = ""
    author: str = ""
    description: str = ""

    @field_validator("url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if value and not value.endswith("/"):
            value += "/"
        return value

    @property
    def base_path(self) -> str:
        """URL path prefix for site-relative links ("/" when no url is set)."""
        if not self.url:
            return "/"
        return urlsplit(self.url).path or "/"


class BuildConfig(BaseModel):
    """[build] section."""

    source_dir: str = "_posts"
    output_dir: str = "_site"
    workers: int = Field(default=1, ge=1)
    feed_limit: int = Field(default=20, ge=1)
    include_drafts: bool = False


class QuireConfig(BaseModel):
    """Top-level configuration model for a site build."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    @property
    def source_path(self) -> Path:
        return Path(self.build.source_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.build.output_dir)


def load_config(path: str | Path | None = None) -> QuireConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .quire.toml in CWD
    3. ~/.config/quire/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged QuireConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    config = QuireConfig.model_validate(data) if data else QuireConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: QuireConfig, **cli_kwargs: object) -> QuireConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "source_dir": ("build", "source_dir"),
        "output_dir": ("build", "output_dir"),
        "workers": ("build", "workers"),
        "include_drafts": ("build", "include_drafts"),
        "site_url": ("site", "url"),
        "site_title": ("site", "title"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value

    return QuireConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: QuireConfig) -> QuireConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "QUIRE_SOURCE_DIR": ("build", "source_dir"),
        "QUIRE_OUTPUT_DIR": ("build", "output_dir"),
        "QUIRE_WORKERS": ("build", "workers"),
        "QUIRE_SITE_URL": ("site", "url"),
        "QUIRE_SITE_TITLE": ("site", "title"),
    }

    changed = False
    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value:
            data[section][field] = value
            changed = True

    if not changed:
        return config
    return QuireConfig.model_validate(data)
