"""Typed dataclasses describing pages and the site-wide page index."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from sitepages._constants import DEFAULT_LANG
from sitepages.data import optional_str


class ContentError(ValueError):
    """Raised when a page file or its front matter is malformed."""


class PageResolutionError(LookupError):
    """Raised when a page reference cannot be resolved from the page index."""


@dc.dataclass(slots=True)
class PageFrontMatter:
    """Per-page metadata parsed from the YAML block preceding the body.

    Attributes
    ----------
    title : str or None
        Page title shown in the article heading and navigation.
    img : str or None
        Image shown in the metabox and used for OpenGraph previews.
    caption : str or None
        Markdown caption rendered beneath the metabox image.
    info : str or None
        Markdown rendered in the metabox body.
    about : str or None
        ``type`` or ``type:argument`` directive selecting metabox content.
    keywords : list[str]
        Extra search keywords.
    thanks : dict[str, str]
        Contributor name mapped to a description of their contribution.
    stub : bool
        Whether the page is flagged as incomplete.
    no_search : bool
        Suppresses the search document for this page.
    related : list[str]
        Page id tails of related pages.
    slug : str or None
        Localized path segment replacing the page's directory name.
    """

    title: str | None = None
    img: str | None = None
    caption: str | None = None
    info: str | None = None
    about: str | None = None
    keywords: list[str] = dc.field(default_factory=list)
    thanks: dict[str, str] = dc.field(default_factory=dict)
    stub: bool = False
    no_search: bool = False
    related: list[str] = dc.field(default_factory=list)
    slug: str | None = None

    @classmethod
    def from_mapping(
        cls, payload: cabc.Mapping[str, typ.Any] | None
    ) -> PageFrontMatter:
        """Build front matter from the camelCase mapping authors write."""
        if payload is None:
            return cls()
        if not isinstance(payload, cabc.Mapping):
            msg = "Front matter must be a mapping."
            raise ContentError(msg)
        thanks = payload.get("thanks") or {}
        if not isinstance(thanks, cabc.Mapping):
            msg = "Front matter 'thanks' must map contributors to contributions."
            raise ContentError(msg)
        return cls(
            title=optional_str(payload.get("title")),
            img=optional_str(payload.get("img")),
            caption=optional_str(payload.get("caption")),
            info=optional_str(payload.get("info")),
            about=optional_str(payload.get("about")),
            keywords=_text_list(payload.get("keywords")),
            thanks={str(name): str(what or "") for name, what in thanks.items()},
            stub=bool(payload.get("stub", False)),
            no_search=bool(payload.get("noSearch", False)),
            related=_text_list(payload.get("related")),
            slug=optional_str(payload.get("slug")),
        )


@dc.dataclass(slots=True, frozen=True)
class PageLink:
    """A resolved reference to a page, optionally pointing at a heading."""

    title: str
    url: str
    page_id: str


@dc.dataclass(slots=True)
class PageEntry:
    """One page of the site together with its localized front matter."""

    page_id: str
    langs: dict[str, PageFrontMatter] = dc.field(default_factory=dict)

    @property
    def segments(self) -> list[str]:
        """Return the page id split into path segments."""
        return [segment for segment in self.page_id.split("/") if segment]


@dc.dataclass(slots=True)
class PageIndex:
    """Site-wide graph of pages keyed by page id."""

    pages: dict[str, PageEntry] = dc.field(default_factory=dict)
    default_lang: str = DEFAULT_LANG

    def get(self, page_id: str) -> PageEntry | None:
        """Return the entry for ``page_id`` or ``None``."""
        return self.pages.get(page_id)

    def add(self, page_id: str, lang: str, front: PageFrontMatter) -> PageEntry:
        """Register ``front`` for ``page_id`` in ``lang``, creating the entry."""
        entry = self.pages.setdefault(page_id, PageEntry(page_id=page_id))
        entry.langs[lang] = front
        return entry


def _text_list(value: object | None) -> list[str]:
    """Normalize a scalar or list of scalars into a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    msg = f"Expected a string or list of strings, got {type(value).__name__}."
    raise ContentError(msg)


__all__ = [
    "ContentError",
    "PageEntry",
    "PageFrontMatter",
    "PageIndex",
    "PageLink",
    "PageResolutionError",
]
