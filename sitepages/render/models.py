"""Shared records passed into and out of the page render pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec
from markupsafe import Markup

if typ.TYPE_CHECKING:
    from sitepages.content import PageFrontMatter, PageIndex

    from .headings import Heading


class SearchDoc(msgspec.Struct, frozen=True):
    """Plaintext record consumed by the search index builder."""

    lang: str
    text: str
    path: str
    title: str
    keywords: str


@dc.dataclass(slots=True)
class RenderedContent:
    """Markdown body converted to HTML alongside its plaintext and headings.

    Attributes
    ----------
    html : Markup
        Rendered HTML body, safe to embed in templates.
    plaintext : str
        Text used for previews and search, with data tables in their
        plaintext form.
    headings : list[Heading]
        Headings in document order with their assigned ids.
    """

    html: Markup
    plaintext: str
    headings: list[Heading] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class RenderInput:
    """Everything needed to render one page in one language."""

    base_url: str
    page_id: str
    lang: str
    body: str
    front: PageFrontMatter
    global_data: dict[str, typ.Any]
    page_index: PageIndex
    local_data: dict[str, typ.Any] | None = None
    debug: bool = False
    pygments_style: str = "monokai"


@dc.dataclass(slots=True)
class RenderOutput:
    """Rendered HTML document and the optional search record."""

    html_doc: str
    search_doc: SearchDoc | None


__all__ = ["RenderInput", "RenderOutput", "RenderedContent", "SearchDoc"]
