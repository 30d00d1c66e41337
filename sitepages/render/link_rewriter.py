"""Markdown extension resolving ``~`` page references into site links."""

from __future__ import annotations

import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from .context import PageLinkResolver
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any
    PageLinkResolver = typ.Any

PAGE_LINK_PREFIX = "~"


def parse_page_reference(target: str | None) -> tuple[str, str | None] | None:
    """Split ``~id-tail#heading`` into its id tail and optional heading id.

    Returns ``None`` for any target that is not a page reference.
    """
    if not target or not target.startswith(PAGE_LINK_PREFIX):
        return None
    reference = target[len(PAGE_LINK_PREFIX) :]
    id_tail, _, heading_id = reference.partition("#")
    return id_tail, heading_id or None


class PageLinkExtension(Extension):
    """Rewrite page references in markdown links to resolved page URLs.

    Authors link pages by id tail, ``[Tags](~h1/tags#group-ids)``; the tail is
    resolved relative to the page being rendered. Links with no text take the
    target page's title.
    """

    def __init__(self, resolver: PageLinkResolver) -> None:
        super().__init__()
        self.resolver = resolver

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the page-link treeprocessor on the Markdown instance."""
        processor = PageLinkTreeprocessor(md, self.resolver)
        md.treeprocessors.register(processor, "sitepages_page_links", 15)


class PageLinkTreeprocessor(Treeprocessor):
    """Resolve ``~`` anchors in the parsed markdown tree."""

    def __init__(self, md: Markdown, resolver: PageLinkResolver) -> None:
        super().__init__(md)
        self.resolver = resolver

    def run(self, root: Element) -> Element:
        """Rewrite page-reference anchors, filling in empty link text."""
        for element in root.iter("a"):
            reference = parse_page_reference(element.get("href"))
            if reference is None:
                continue
            id_tail, heading_id = reference
            link = self.resolver.resolve(id_tail, heading_id)
            element.set("href", link.url)
            if not (element.text or "").strip() and len(element) == 0:
                element.text = link.title
        return root


__all__ = [
    "PAGE_LINK_PREFIX",
    "PageLinkExtension",
    "PageLinkTreeprocessor",
    "parse_page_reference",
]
