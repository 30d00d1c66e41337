"""Utility helpers shared by the sitepages configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from sitepages.data import optional_str

from .models import SiteConfigError

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _resolve_dir(
    value: object | None, base_dir: Path, default: str | None
) -> Path | None:
    """Resolve a configured directory relative to the config file location."""
    text = optional_str(value) or default
    if text is None:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else base_dir / path


def _parse_bool(value: object, *, field: str) -> bool:
    """Coerce YAML booleans and their common string spellings."""
    match value:
        case bool():
            return value
        case str() as text if text.strip().lower() in TRUE_VALUES:
            return True
        case str() as text if text.strip().lower() in FALSE_VALUES:
            return False
        case None:
            return False
        case _:
            msg = f"Field '{field}' must be a boolean, got {value!r}."
            raise SiteConfigError(msg)


def _normalize_languages(value: object | None, default_lang: str) -> list[str]:
    """Return the configured languages with the default language first."""
    if value is None:
        return [default_lang]
    if isinstance(value, str):
        candidates: list[typ.Any] = value.split()
    elif isinstance(value, list):
        candidates = value
    else:
        msg = "Field 'languages' must be a list of language codes."
        raise SiteConfigError(msg)
    languages = [default_lang]
    for candidate in candidates:
        lang = str(candidate).strip().lower()
        if lang and lang not in languages:
            languages.append(lang)
    return languages


__all__ = [
    "_normalize_languages",
    "_parse_bool",
    "_resolve_dir",
]
