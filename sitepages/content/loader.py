r"""Load page sources, the page index, and data trees from disk.

Pages live in a content directory where each page id is a directory holding
``readme.md`` (default language) and optional ``readme_<lang>.md`` variants.
Every page file starts with a YAML front matter block delimited by ``---``
lines. An optional ``data.yml`` next to the readme supplies page-local data,
and every ``*.yml`` file under the data directory is merged into the global
data tree under its path-derived keys (``data/tags/h1.yml`` becomes
``data["tags"]["h1"]``).

Example
-------
>>> from sitepages.content.loader import split_front_matter
>>> front, body = split_front_matter("---\ntitle: Biped\n---\n# Biped\n")
>>> front["title"], body
('Biped', '# Biped\n')
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from sitepages.data import merge_data

from .models import ContentError, PageFrontMatter, PageIndex

if typ.TYPE_CHECKING:
    import collections.abc as cabc

log = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?\n?", re.DOTALL | re.MULTILINE
)
PAGE_FILE_PATTERN = re.compile(r"^readme(?:_(?P<lang>[a-z]{2,3}))?\.md$")
LOCAL_DATA_FILENAME = "data.yml"


@dc.dataclass(slots=True)
class PageSource:
    """A page file loaded from disk, ready to be rendered."""

    page_id: str
    lang: str
    front: PageFrontMatter
    body: str
    path: Path


def _yaml_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def split_front_matter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Separate the YAML front matter block from the markdown body.

    Parameters
    ----------
    text : str
        Full page file contents.

    Returns
    -------
    tuple[dict[str, Any], str]
        Parsed front matter (empty when the file has none) and the body.

    Raises
    ------
    ContentError
        If the front matter is not a YAML mapping.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return {}, text
    loaded = _yaml_loader().load(match.group(1)) or {}
    if not isinstance(loaded, dict):
        msg = "Front matter must be a YAML mapping."
        raise ContentError(msg)
    return dict(loaded), text[match.end() :]


def load_page_file(path: Path, *, page_id: str, lang: str) -> PageSource:
    """Read a single page file into a :class:`PageSource`."""
    text = path.read_text(encoding="utf-8")
    try:
        raw_front, body = split_front_matter(text)
        front = PageFrontMatter.from_mapping(raw_front)
    except ContentError as exc:
        msg = f"Invalid front matter in '{path}': {exc}"
        raise ContentError(msg) from exc
    return PageSource(page_id=page_id, lang=lang, front=front, body=body, path=path)


def load_page_sources(content_dir: Path, default_lang: str) -> list[PageSource]:
    """Load every page file under ``content_dir`` ordered by page id and language."""
    if not content_dir.is_dir():
        msg = f"Content directory '{content_dir}' not found."
        raise FileNotFoundError(msg)
    sources: list[PageSource] = []
    for path in sorted(content_dir.rglob("readme*.md")):
        match = PAGE_FILE_PATTERN.match(path.name)
        if not match:
            log.debug("Skipping unrecognized page file %s", path)
            continue
        page_id = path.parent.relative_to(content_dir).as_posix()
        if page_id == ".":
            page_id = ""
        lang = match.group("lang") or default_lang
        sources.append(load_page_file(path, page_id=page_id, lang=lang))
    return sorted(sources, key=lambda source: (source.page_id, source.lang))


def build_page_index(
    sources: cabc.Iterable[PageSource], default_lang: str
) -> PageIndex:
    """Assemble the page index from loaded page sources."""
    index = PageIndex(default_lang=default_lang)
    for source in sources:
        index.add(source.page_id, source.lang, source.front)
    return index


def load_local_data(content_dir: Path, page_id: str) -> dict[str, typ.Any] | None:
    """Return the page-local data tree, or ``None`` when the page has none."""
    path = content_dir / page_id / LOCAL_DATA_FILENAME
    if not path.is_file():
        return None
    return _load_mapping(path)


def load_global_data(data_dir: Path | None) -> dict[str, typ.Any]:
    """Merge every YAML file under ``data_dir`` into one data tree."""
    merged: dict[str, typ.Any] = {}
    if data_dir is None or not data_dir.is_dir():
        return merged
    for path in sorted([*data_dir.rglob("*.yml"), *data_dir.rglob("*.yaml")]):
        keys = path.relative_to(data_dir).with_suffix("").parts
        payload: typ.Any = _load_value(path)
        for key in reversed(keys):
            payload = {key: payload}
        merged = merge_data(merged, payload)
    return merged


def _load_value(path: Path) -> typ.Any:
    with path.open("r", encoding="utf-8") as handle:
        return _yaml_loader().load(handle)


def _load_mapping(path: Path) -> dict[str, typ.Any]:
    loaded = _load_value(path) or {}
    if not isinstance(loaded, dict):
        msg = f"Data file '{path}' must contain a YAML mapping."
        raise ContentError(msg)
    return dict(loaded)


__all__ = [
    "PageSource",
    "build_page_index",
    "load_global_data",
    "load_local_data",
    "load_page_file",
    "load_page_sources",
    "split_front_matter",
]
