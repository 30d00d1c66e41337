"""Cyclopts CLI entrypoint for rendering a site's pages and search indexes.

The ``sitepages`` console script loads ``site.yaml``, the global data tree,
and every page under the content directory, then renders each page variant to
``<output_dir><localized path>/index.html`` and writes one JSON search index
per language.

Examples
--------
Render the whole site:

>>> from sitepages.cli import main
>>> main()  # doctest: +SKIP

Render one page in Spanish into a scratch directory:

>>> from sitepages.cli import app
>>> app.run(
...     ["render", "--page", "h1/tags", "--lang", "es", "--output-dir", "dist"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
import msgspec
from cyclopts import App, Parameter

from .config import load_site_config
from .content import try_localized_path
from .content.loader import (
    build_page_index,
    load_global_data,
    load_local_data,
    load_page_sources,
)
from .render import RenderInput, SearchDoc, render_page
from .render.environment import build_environment

if typ.TYPE_CHECKING:
    from .config import SiteConfig

log = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("site.yaml")

app = App(name="sitepages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def page_output_path(output_dir: Path, localized_path: str) -> Path:
    """Return where the HTML document for ``localized_path`` is written.

    >>> page_output_path(Path("public"), "/es/h1/etiquetas").as_posix()
    'public/es/h1/etiquetas/index.html'
    """
    relative = localized_path.strip("/")
    target = output_dir / relative if relative else output_dir
    return target / "index.html"


def build_site(
    site_config: SiteConfig,
    *,
    page: str | None = None,
    lang: str | None = None,
    output_dir: Path | None = None,
) -> list[Path]:
    """Render the selected pages and search indexes, returning written paths.

    Parameters
    ----------
    site_config : SiteConfig
        Loaded site configuration.
    page : str or None, optional
        Page id to render; every page is rendered when ``None``.
    lang : str or None, optional
        Language to render; every configured language when ``None``.
    output_dir : Path or None, optional
        Override for the configured output directory.

    Returns
    -------
    list[Path]
        HTML documents followed by the search indexes, in write order.

    Raises
    ------
    ValueError
        If ``page`` or ``lang`` selects nothing to render.
    """
    destination = output_dir or site_config.output_dir
    languages = [lang] if lang else site_config.languages
    sources = load_page_sources(site_config.content_dir, site_config.default_lang)
    index = build_page_index(sources, site_config.default_lang)
    global_data = load_global_data(site_config.data_dir)
    env = build_environment()

    selected = [
        source
        for source in sources
        if source.lang in languages and (page is None or source.page_id == page)
    ]
    if not selected:
        msg = f"No pages match page={page!r} lang={lang!r}."
        raise ValueError(msg)

    written: list[Path] = []
    search_docs: dict[str, list[SearchDoc]] = {code: [] for code in languages}
    for source in selected:
        log.debug("Rendering %s (%s)", source.page_id or "/", source.lang)
        output = render_page(
            RenderInput(
                base_url=site_config.base_url,
                page_id=source.page_id,
                lang=source.lang,
                body=source.body,
                front=source.front,
                global_data=global_data,
                page_index=index,
                local_data=load_local_data(site_config.content_dir, source.page_id),
                debug=site_config.debug,
                pygments_style=site_config.pygments_style,
            ),
            env=env,
        )
        localized = try_localized_path(index, source.page_id, source.lang)
        target = page_output_path(destination, localized)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(output.html_doc, encoding="utf-8")
        written.append(target)
        if output.search_doc is not None:
            search_docs[source.lang].append(output.search_doc)

    for code, docs in search_docs.items():
        target = site_config.search_index_path(code, destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(msgspec.json.encode(docs))
        written.append(target)
    return written


@app.command(help="Render site pages to HTML and write per-language search indexes.")
def render(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    page: typ.Annotated[
        str | None, Parameter(help="Page id to render", env_var="INPUT_PAGE")
    ] = None,
    lang: typ.Annotated[
        str | None, Parameter(help="Language to render", env_var="INPUT_LANG")
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
) -> None:
    """Render pages for the requested site configuration.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    page : str or None, optional
        Page id to render; when ``None`` (default) all pages are rendered.
    lang : str or None, optional
        Language to render; when ``None`` every configured language is.
    output_dir : Path or None, optional
        Override the output directory from the configuration.
    """
    site_config = load_site_config(config)
    for path in build_site(site_config, page=page, lang=lang, output_dir=output_dir):
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``sitepages`` command."""
    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()


__all__ = ["app", "build_site", "main", "page_output_path", "render"]
