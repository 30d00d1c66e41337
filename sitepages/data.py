r"""Helpers for walking and merging loosely structured page data.

Page data arrives as nested mappings and lists loaded from YAML. The helpers
here look values up by ``/``-delimited key paths, deep-merge the global data
tree with page-local overrides, and derive URL-safe slugs.

Example
-------
>>> from sitepages.data import get_path, merge_data, slugify
>>> tree = {"tags": {"h1": [{"id": "bipd"}]}}
>>> get_path(tree, "tags/h1/0/id")
'bipd'
>>> merge_data({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
{'a': {'b': 1, 'c': 3}}
>>> slugify("Thanks & Credits")
'thanks-credits'
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
import unicodedata

PATH_SEPARATOR = "/"
SLUG_PATTERN = re.compile(r"[^a-z0-9]+")

_MISSING = object()


def split_path(path: str | cabc.Sequence[str]) -> list[str]:
    """Return the key segments of a ``/``-delimited path."""
    if isinstance(path, str):
        return [segment for segment in path.split(PATH_SEPARATOR) if segment]
    return list(path)


def get_path(
    data: object, path: str | cabc.Sequence[str], default: typ.Any = None
) -> typ.Any:
    """Return the value found by walking ``path`` into ``data``.

    Parameters
    ----------
    data : object
        Root of the data tree; mappings are indexed by key and lists by
        integer segments.
    path : str or sequence of str
        ``/``-delimited path or pre-split segments.
    default : Any, optional
        Value returned when any segment along the path is missing.

    Returns
    -------
    Any
        The value at ``path`` or ``default``.
    """
    current: typ.Any = data
    for segment in split_path(path):
        current = _step(current, segment)
        if current is _MISSING:
            return default
    return current


def _step(node: object, segment: str) -> typ.Any:
    """Descend one level into ``node`` or return the missing sentinel."""
    if isinstance(node, cabc.Mapping):
        return node.get(segment, _MISSING)
    if isinstance(node, list) and segment.lstrip("-").isdigit():
        index = int(segment)
        if -len(node) <= index < len(node):
            return node[index]
    return _MISSING


def merge_data(
    base: cabc.Mapping[str, typ.Any] | None,
    override: cabc.Mapping[str, typ.Any] | None,
) -> dict[str, typ.Any]:
    """Deep-merge ``override`` onto ``base`` without mutating either input.

    Mappings merge key by key, the override wins on any other conflict, and
    lists are replaced wholesale rather than concatenated.
    """
    merged: dict[str, typ.Any] = dict(base or {})
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, cabc.Mapping) and isinstance(value, cabc.Mapping):
            merged[key] = merge_data(current, value)
        else:
            merged[key] = value
    return merged


def optional_str(value: object | None) -> str | None:
    """Return ``value`` as a stripped string, or None when it is blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def slugify(value: object) -> str:
    """Convert ``value`` into a lowercase hyphen-separated ASCII slug."""
    text = unicodedata.normalize("NFKD", str(value))
    ascii_text = text.encode("ascii", "ignore").decode("ascii")
    return SLUG_PATTERN.sub("-", ascii_text.lower()).strip("-")


def unique_slug(base: str, used: set[str]) -> str:
    """Return a unique slug, appending numeric suffixes and mutating ``used``."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


__all__ = [
    "PATH_SEPARATOR",
    "get_path",
    "merge_data",
    "optional_str",
    "slugify",
    "split_path",
    "unique_slug",
]
