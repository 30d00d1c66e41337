"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from sitepages._constants import DEFAULT_LANG, SEARCH_INDEX_TEMPLATE
from sitepages.data import optional_str

from .helpers import _normalize_languages, _parse_bool, _resolve_dir
from .models import SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a site to render.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``site.yaml``). Relative directories inside it resolve against the
        file's parent directory.

    Returns
    -------
    SiteConfig
        Parsed site configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required fields are missing or invalid (for example, no
        ``base_url`` is configured).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from sitepages.config import load_site_config
    >>> config = load_site_config(Path("site.yaml"))  # doctest: +SKIP
    >>> config.languages  # doctest: +SKIP
    ['en', 'es']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.resolve().parent

    base_url = optional_str(raw.get("base_url"))
    if not base_url:
        msg = "Site configuration is missing 'base_url'."
        raise SiteConfigError(msg)

    default_lang = (optional_str(raw.get("default_lang")) or DEFAULT_LANG).lower()
    content_dir = _resolve_dir(raw.get("content_dir"), base_dir, "content")
    output_dir = _resolve_dir(raw.get("output_dir"), base_dir, "public")
    data_dir = _resolve_dir(raw.get("data_dir"), base_dir, None)
    search_index_template = (
        optional_str(raw.get("search_index")) or SEARCH_INDEX_TEMPLATE
    )
    if "{lang}" not in search_index_template:
        msg = "Field 'search_index' must contain a '{lang}' placeholder."
        raise SiteConfigError(msg)

    return SiteConfig(
        base_url=base_url.rstrip("/"),
        content_dir=typ.cast("Path", content_dir),
        output_dir=typ.cast("Path", output_dir),
        data_dir=data_dir,
        default_lang=default_lang,
        languages=_normalize_languages(raw.get("languages"), default_lang),
        pygments_style=optional_str(raw.get("pygments_style")) or "monokai",
        debug=_parse_bool(raw.get("debug", False), field="debug"),
        search_index_template=search_index_template,
    )


__all__ = ["load_site_config"]
