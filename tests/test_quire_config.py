"""Tests for src/config.py: QuireConfig, TOML loading, env vars, CLI overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from quire.config import QuireConfig, SiteConfig, load_config, merge_cli_overrides


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Remove env vars and the global config so tests see TOML values."""
    for key in (
        "QUIRE_SOURCE_DIR", "QUIRE_OUTPUT_DIR", "QUIRE_WORKERS",
        "QUIRE_SITE_URL", "QUIRE_SITE_TITLE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("quire.config.GLOBAL_CONFIG", tmp_path / "global" / "config.toml")


class TestQuireConfigDefaults:
    def test_default_build(self):
        cfg = QuireConfig()
        assert cfg.build.source_dir == "_posts"
        assert cfg.build.output_dir == "_site"
        assert cfg.build.workers == 1
        assert cfg.build.feed_limit == 20
        assert cfg.build.include_drafts is False

    def test_default_site(self):
        cfg = QuireConfig()
        assert cfg.site.title == "Blog"
        assert cfg.site.url == ""
        assert cfg.site.base_path == "/"

    def test_paths(self):
        cfg = QuireConfig()
        assert cfg.source_path == Path("_posts")
        assert cfg.output_path == Path("_site")

    def test_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            QuireConfig.model_validate({"build": {"workers": 0}})


class TestSiteConfig:
    def test_url_gets_trailing_slash(self):
        assert SiteConfig(url="https://example.com").url == "https://example.com/"

    def test_base_path_from_url(self):
        assert SiteConfig(url="https://example.com/blog").base_path == "/blog/"
        assert SiteConfig(url="https://example.com").base_path == "/"


class TestLoadConfig:
    def test_load_from_explicit_path(self, tmp_path):
        toml_path = tmp_path / ".quire.toml"
        toml_path.write_text('[site]\ntitle = "Ruby Notes"\n[build]\nworkers = 4\n')
        cfg = load_config(toml_path)
        assert cfg.site.title == "Ruby Notes"
        assert cfg.build.workers == 4

    def test_load_missing_path_returns_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nonexistent.toml")
        assert cfg.build.source_dir == "_posts"

    def test_load_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".quire.toml").write_text('[build]\noutput_dir = "public"\n')
        monkeypatch.chdir(tmp_path)
        assert load_config().build.output_dir == "public"

    def test_load_global_config(self, tmp_path, monkeypatch):
        global_path = tmp_path / "global" / "config.toml"
        global_path.parent.mkdir()
        global_path.write_text('[site]\nauthor = "Sam"\n')
        monkeypatch.chdir(tmp_path)
        assert load_config().site.author == "Sam"

    def test_invalid_toml_returns_defaults(self, tmp_path):
        toml_path = tmp_path / ".quire.toml"
        toml_path.write_text("[site\ntitle = ")
        cfg = load_config(toml_path)
        assert cfg.site.title == "Blog"

    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        toml_path = tmp_path / ".quire.toml"
        toml_path.write_text('[site]\nurl = "https://a.example"\n')
        monkeypatch.setenv("QUIRE_SITE_URL", "https://b.example")
        monkeypatch.setenv("QUIRE_WORKERS", "3")
        cfg = load_config(toml_path)
        assert cfg.site.url == "https://b.example/"
        assert cfg.build.workers == 3


class TestMergeCliOverrides:
    def test_overrides_set_values(self):
        cfg = merge_cli_overrides(QuireConfig(), output_dir=Path("out"), workers=2)
        assert cfg.build.output_dir == "out"
        assert cfg.build.workers == 2

    def test_none_values_ignored(self):
        base = QuireConfig.model_validate({"build": {"source_dir": "posts"}})
        cfg = merge_cli_overrides(base, source_dir=None, include_drafts=None)
        assert cfg.build.source_dir == "posts"
        assert cfg.build.include_drafts is False

    def test_unknown_keys_ignored(self):
        cfg = merge_cli_overrides(QuireConfig(), verbose=True)
        assert cfg == QuireConfig()
