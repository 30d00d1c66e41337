"""Typed dataclasses describing sitepages site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from sitepages._constants import DEFAULT_LANG, SEARCH_INDEX_TEMPLATE


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteConfig:
    """A fully resolved site definition sourced from YAML config.

    Attributes
    ----------
    base_url : str
        Absolute URL the site is served from; used for canonical links.
    content_dir : Path
        Directory holding one sub-directory per page id.
    data_dir : Path or None
        Directory of YAML files merged into the global data tree.
    output_dir : Path
        Destination for rendered HTML and search indexes.
    default_lang : str
        Language whose pages live at unprefixed paths.
    languages : list[str]
        Languages rendered by the CLI, default language first.
    pygments_style : str
        Pygments style used for code highlighting.
    debug : bool
        Render unresolved page links as placeholders instead of failing.
    search_index_template : str
        Filename template for per-language search indexes.
    """

    base_url: str
    content_dir: Path
    output_dir: Path
    data_dir: Path | None = None
    default_lang: str = DEFAULT_LANG
    languages: list[str] = dc.field(default_factory=lambda: [DEFAULT_LANG])
    pygments_style: str = "monokai"
    debug: bool = False
    search_index_template: str = SEARCH_INDEX_TEMPLATE

    def search_index_path(
        self, lang: str, output_dir: Path | None = None
    ) -> Path:
        """Return the search index path for ``lang`` under ``output_dir``.

        ``output_dir`` defaults to the configured output directory.
        """
        base = output_dir or self.output_dir
        return base / self.search_index_template.format(lang=lang)


__all__ = ["SiteConfig", "SiteConfigError"]
