"""Tests for the ``sitepages render`` command."""

from __future__ import annotations

import typing as typ

import msgspec
import pytest

from sitepages.cli import app, build_site, page_output_path
from sitepages.config import load_site_config
from sitepages.render import SearchDoc

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _run(tokens: list[str]) -> None:
    """Invoke the app, tolerating the clean exit newer Cyclopts releases raise."""
    try:
        app(tokens)
    except SystemExit as exc:
        assert exc.code in (0, None)


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Lay out a two-language site with global and page-local data."""
    _write(
        tmp_path / "site.yaml",
        "base_url: https://example.org\n"
        "data_dir: data\n"
        "languages: [en, es]\n",
    )
    _write(tmp_path / "data" / "tags" / "h1.yml", "biped:\n  id: bipd\n")
    content = tmp_path / "content"
    _write(content / "readme.md", "---\ntitle: Home\n---\nWelcome to the site.\n")
    _write(
        content / "h1" / "readme.md",
        "---\ntitle: Halo\n---\n"
        "{% dataTable %}\n"
        "dataPath: [tags/h1, weapons]\n"
        "columns:\n"
        "  - name: Name\n"
        "    key: key\n"
        "{% /dataTable %}\n",
    )
    _write(content / "h1" / "data.yml", "weapons:\n  pistol: {}\n")
    _write(
        content / "h1" / "readme_es.md",
        "---\ntitle: Halo\nslug: halo\nnoSearch: true\n---\nHola.\n",
    )
    return tmp_path


def test_page_output_path_for_root(tmp_path: Path) -> None:
    assert page_output_path(tmp_path, "/") == tmp_path / "index.html"


def test_build_site_writes_pages_and_indexes(site_root: Path) -> None:
    config = load_site_config(site_root / "site.yaml")

    written = build_site(config)

    public = site_root.resolve() / "public"
    assert written == [
        public / "index.html",
        public / "h1" / "index.html",
        public / "es" / "halo" / "index.html",
        public / "search-en.json",
        public / "search-es.json",
    ]
    docs = msgspec.json.decode(
        (public / "search-en.json").read_bytes(), type=list[SearchDoc]
    )
    assert [doc.path for doc in docs] == ["", "h1"]
    assert docs[1].text.splitlines() == ["Name", "biped", "pistol"]
    assert msgspec.json.decode((public / "search-es.json").read_bytes()) == []


def test_build_site_filters_page_and_lang(site_root: Path, tmp_path: Path) -> None:
    config = load_site_config(site_root / "site.yaml")
    out = tmp_path / "dist"

    written = build_site(config, page="h1", lang="es", output_dir=out)

    assert written == [out / "es" / "halo" / "index.html", out / "search-es.json"]


def test_build_site_rejects_empty_selection(site_root: Path) -> None:
    config = load_site_config(site_root / "site.yaml")

    with pytest.raises(ValueError, match="No pages"):
        build_site(config, page="missing")


def test_render_command_prints_written_paths(
    site_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(site_root)

    _run(["render", "--lang", "en"])

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "wrote public/index.html",
        "wrote public/h1/index.html",
        "wrote public/search-en.json",
    ]


def test_render_command_reads_environment(
    site_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("INPUT_CONFIG", str(site_root / "site.yaml"))
    monkeypatch.setenv("INPUT_PAGE", "h1")
    monkeypatch.setenv("INPUT_LANG", "en")
    monkeypatch.setenv("INPUT_OUTPUT_DIR", str(site_root / "env-out"))
    monkeypatch.chdir(site_root)

    _run(["render"])

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["wrote env-out/h1/index.html", "wrote env-out/search-en.json"]


def test_render_command_forwards_options(
    site_root: Path, mocker: typ.Any, capsys: pytest.CaptureFixture[str]
) -> None:
    build = mocker.patch(
        "sitepages.cli.build_site", return_value=[site_root / "out" / "index.html"]
    )

    _run(
        [
            "render",
            "--config",
            str(site_root / "site.yaml"),
            "--page",
            "h1",
            "--lang",
            "es",
            "--output-dir",
            str(site_root / "out"),
        ]
    )

    build.assert_called_once()
    _, kwargs = build.call_args
    assert kwargs == {"page": "h1", "lang": "es", "output_dir": site_root / "out"}
    assert capsys.readouterr().out.strip().endswith("index.html")


def test_build_site_places_nested_search_index_under_output_dir(
    site_root: Path, tmp_path: Path
) -> None:
    config = load_site_config(site_root / "site.yaml")
    config.search_index_template = "search/{lang}.json"
    out = tmp_path / "dist"

    written = build_site(config, page="h1", lang="en", output_dir=out)

    assert written == [out / "h1" / "index.html", out / "search" / "en.json"]
    assert (out / "search" / "en.json").is_file()
