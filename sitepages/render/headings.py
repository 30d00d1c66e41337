"""Collect headings from rendered markdown and nest them into an outline.

Headings are discovered while the markdown tree is processed: each one gets a
slug id, unique within the page, and is recorded in document order. The
navigation builder then nests the flat list by level under a synthetic root,
tolerating skipped levels by attaching a heading to the nearest shallower
ancestor.

Example
-------
>>> from sitepages.render.headings import Heading, build_nav_tree
>>> tree = build_nav_tree(
...     [Heading(1, "A", "a"), Heading(2, "B", "b"), Heading(1, "C", "c")]
... )
>>> [(node.title, [child.title for child in node.children]) for node in tree]
[('A', ['B']), ('C', [])]
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from markdown import util
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from sitepages.data import slugify, unique_slug
from sitepages.localization import PAGE_LOCALIZATIONS, localizer

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from sitepages.content import PageFrontMatter

    from .context import RenderContext
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
ESCAPED_CHAR_PATTERN = re.compile(f"{util.STX}([0-9]+){util.ETX}")
PLACEHOLDER_PATTERN = re.compile(f"{util.STX}[^{util.ETX}]*{util.ETX}")


@dc.dataclass(slots=True, frozen=True)
class Heading:
    """A heading found in the page body."""

    level: int
    title: str
    id: str


@dc.dataclass(slots=True)
class NavHeading:
    """A node of the table-of-contents tree."""

    level: int
    title: str
    id: str
    children: list[NavHeading] = dc.field(default_factory=list)


def build_nav_tree(headings: cabc.Iterable[Heading]) -> list[NavHeading]:
    """Nest a flat, document-ordered heading list by level.

    Each heading becomes a child of the most recent node whose level is
    strictly lower; the synthetic level-0 root collects top-level headings.
    """
    root = NavHeading(level=0, title="root", id="")
    chain = [root]
    for heading in headings:
        while len(chain) > 1 and chain[-1].level >= heading.level:
            chain.pop()
        node = NavHeading(level=heading.level, title=heading.title, id=heading.id)
        chain[-1].children.append(node)
        chain.append(node)
    return root.children


def thanks_heading(lang: str, headings: cabc.Sequence[Heading]) -> Heading:
    """Return the localized thanks heading with an id unused by ``headings``."""
    title = localizer(PAGE_LOCALIZATIONS, lang)("thanksHeadingText")
    used = {heading.id for heading in headings}
    return Heading(level=1, title=title, id=unique_slug(slugify(title), used))


def get_nav_headings(
    front: PageFrontMatter | None,
    ctx: RenderContext,
    headings: cabc.Sequence[Heading],
) -> list[NavHeading]:
    """Build the page outline, appending the thanks heading when needed."""
    found = list(headings)
    if front is not None and front.thanks:
        found.append(thanks_heading(ctx.lang, headings))
    return build_nav_tree(found)


def heading_text(element: Element) -> str:
    """Return the plain text of a processed heading element."""
    text = "".join(element.itertext())
    text = ESCAPED_CHAR_PATTERN.sub(lambda match: chr(int(match.group(1))), text)
    return PLACEHOLDER_PATTERN.sub("", text).strip()


class HeadingExtension(Extension):
    """Assign unique slug ids to headings and record them in order."""

    def __init__(self) -> None:
        super().__init__()
        self.headings: list[Heading] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading treeprocessor on the Markdown instance."""
        md.registerExtension(self)
        processor = HeadingTreeprocessor(md, self.headings)
        md.treeprocessors.register(processor, "sitepages_headings", 14)

    def reset(self) -> None:
        """Forget headings recorded by a previous conversion."""
        self.headings.clear()


class HeadingTreeprocessor(Treeprocessor):
    """Give every heading an id and append it to the shared heading list."""

    def __init__(self, md: Markdown, headings: list[Heading]) -> None:
        super().__init__(md)
        self.headings = headings

    def run(self, root: Element) -> Element:
        """Walk headings in document order, assigning unique ids."""
        used: set[str] = set()
        for element in root.iter():
            level = HEADING_TAGS.get(str(element.tag))
            if level is None:
                continue
            title = heading_text(element)
            anchor = element.get("id") or unique_slug(slugify(title) or "section", used)
            used.add(anchor)
            element.set("id", anchor)
            self.headings.append(Heading(level=level, title=title, id=anchor))
        return root


__all__ = [
    "Heading",
    "HeadingExtension",
    "HeadingTreeprocessor",
    "NavHeading",
    "build_nav_tree",
    "get_nav_headings",
    "heading_text",
    "thanks_heading",
]
