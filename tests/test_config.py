"""Tests for loading ``site.yaml`` into :class:`SiteConfig`."""

from __future__ import annotations

import typing as typ

import pytest

from sitepages.config import SiteConfigError, load_site_config

if typ.TYPE_CHECKING:
    from pathlib import Path


def _config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "site.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_resolve_relative_to_config(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    config = load_site_config(_config(tmp_path, "base_url: https://example.org/\n"))

    assert config.base_url == "https://example.org"
    assert config.content_dir == root / "content"
    assert config.output_dir == root / "public"
    assert config.data_dir is None
    assert config.languages == ["en"]
    assert config.pygments_style == "monokai"
    assert config.debug is False
    assert config.search_index_path("en") == root / "public" / "search-en.json"


def test_explicit_fields(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    config = load_site_config(
        _config(
            tmp_path,
            "base_url: https://example.org\n"
            "content_dir: src/content\n"
            "data_dir: src/data\n"
            "output_dir: /srv/site\n"
            "languages: [es, en, ES]\n"
            "pygments_style: default\n"
            "debug: 'yes'\n"
            "search_index: search/{lang}.json\n",
        )
    )

    assert config.content_dir == root / "src" / "content"
    assert config.data_dir == root / "src" / "data"
    assert str(config.output_dir) == "/srv/site"
    assert config.languages == ["en", "es"]
    assert config.debug is True
    assert config.search_index_path("es").as_posix() == "/srv/site/search/es.json"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")


def test_base_url_required(tmp_path: Path) -> None:
    with pytest.raises(SiteConfigError, match="base_url"):
        load_site_config(_config(tmp_path, "content_dir: content\n"))


def test_search_index_needs_placeholder(tmp_path: Path) -> None:
    path = _config(tmp_path, "base_url: https://x\nsearch_index: search.json\n")

    with pytest.raises(SiteConfigError, match="lang"):
        load_site_config(path)


def test_invalid_debug_flag(tmp_path: Path) -> None:
    path = _config(tmp_path, "base_url: https://x\ndebug: sometimes\n")

    with pytest.raises(SiteConfigError, match="debug"):
        load_site_config(path)


def test_search_index_path_under_output_override(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    config = load_site_config(
        _config(tmp_path, "base_url: https://x\nsearch_index: search/{lang}.json\n")
    )

    assert config.search_index_path("en", root / "dist") == (
        root / "dist" / "search" / "en.json"
    )
    assert config.search_index_path("en") == root / "public" / "search" / "en.json"
