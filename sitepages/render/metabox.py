"""Derive metabox content from a page's ``about`` directive.

The ``about`` front-matter field names what a page documents, as ``type`` or
``type:argument``. The type selects an icon and CSS class; tags additionally
look up their entry in the data tree to show the tag's canonical id and its
place in the tag hierarchy, and tags, tools, and resources list the
workflows that create or consume them.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from markupsafe import Markup

from sitepages._constants import DEFAULT_TAG_GAME
from sitepages.content import PageResolutionError
from sitepages.data import get_path
from sitepages.localization import PAGE_LOCALIZATIONS, localizer

if typ.TYPE_CHECKING:
    from sitepages.content import PageFrontMatter

    from .context import RenderContext
    from .markdown import MarkdownRenderer

TAG_HELP_PAGE = "h1/tags"
TAG_HELP_HEADING = "group-ids"
WORKFLOW_TYPES = frozenset({"tag", "tool", "resource"})


@dc.dataclass(slots=True, frozen=True)
class MetaboxStyle:
    """Icon and class defaults for one ``about`` type."""

    icon: str
    icon_title: str
    css_class: str | None = None


METABOX_STYLES: dict[str, MetaboxStyle] = {
    "tool": MetaboxStyle(icon="tool", icon_title="Tool", css_class="content-tool"),
    "resource": MetaboxStyle(icon="file", icon_title="Resource"),
    "tag": MetaboxStyle(icon="share-2", icon_title="Tag", css_class="content-tag"),
    "guide": MetaboxStyle(
        icon="book-open", icon_title="Guide", css_class="content-guide"
    ),
}


@dc.dataclass(slots=True)
class MetaboxSection:
    """A titled block of metabox content."""

    title: str
    body: Markup


@dc.dataclass(slots=True)
class MetaboxProps:
    """Display descriptor for the panel beside a page's title."""

    title: Markup | str | None = None
    img: str | None = None
    caption: Markup | None = None
    info: Markup | None = None
    icon: str | None = None
    icon_title: str | None = None
    css_class: str | None = None
    sections: list[MetaboxSection] = dc.field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether there is nothing beyond the title to show."""
        return not (self.img or self.caption or self.info or self.icon or self.sections)


@dc.dataclass(slots=True)
class AboutContent:
    """Metabox props together with keywords extracted for search."""

    metabox: MetaboxProps
    keywords: list[str] = dc.field(default_factory=list)


def parse_about(about: str | None) -> tuple[str | None, str | None]:
    """Split an ``about`` directive into its type and argument."""
    if not about:
        return None, None
    parts = about.split(":")
    about_type = parts[0].strip() or None
    about_arg = parts[1].strip() if len(parts) > 1 else ""
    return about_type, about_arg or None


def _entity_link(ctx: RenderContext, name: str) -> Markup:
    """Link ``name`` to its page when one exists, otherwise show it as code."""
    try:
        target = ctx.resolve_page(name)
    except PageResolutionError:
        return Markup("<code>{}</code>").format(name)
    return Markup('<a href="{}">{}</a>').format(target.url, target.title)


def _link_list(ctx: RenderContext, names: cabc.Iterable[str]) -> Markup:
    items = Markup("").join(
        Markup("<li>{}</li>").format(_entity_link(ctx, name)) for name in names
    )
    return Markup("<ul>{}</ul>").format(items)


def _tag_help_link(ctx: RenderContext) -> Markup:
    """Return a superscript link explaining tag group ids, if that page exists."""
    try:
        target = ctx.resolve_page(TAG_HELP_PAGE, TAG_HELP_HEADING)
    except PageResolutionError:
        return Markup("")
    return Markup('<sup><a class="wat" href="{}" title="{}">?</a></sup>').format(
        target.url, target.title
    )


def get_tag_sections(
    ctx: RenderContext, tags: cabc.Mapping[str, typ.Any], tag_name: str
) -> list[MetaboxSection]:
    """Return sections describing a tag's parents and children."""
    localize = localizer(PAGE_LOCALIZATIONS, ctx.lang)
    sections: list[MetaboxSection] = []

    parents: list[str] = []
    current = tags.get(tag_name) or {}
    while isinstance(current, cabc.Mapping) and current.get("parent"):
        parent = str(current["parent"])
        if parent in parents or parent == tag_name:
            break
        parents.append(parent)
        current = tags.get(parent) or {}
    if parents:
        sections.append(
            MetaboxSection(title=localize("tagParents"), body=_link_list(ctx, parents))
        )

    children = sorted(
        name
        for name, tag in tags.items()
        if isinstance(tag, cabc.Mapping) and tag.get("parent") == tag_name
    )
    if children:
        sections.append(
            MetaboxSection(
                title=localize("tagChildren"), body=_link_list(ctx, children)
            )
        )
    return sections


def get_workflow_sections(ctx: RenderContext, item_name: str) -> list[MetaboxSection]:
    """Return sections listing workflows that produce or consume ``item_name``."""
    localize = localizer(PAGE_LOCALIZATIONS, ctx.lang)
    workflows = ctx.data.get("workflows") or []
    created_by: list[Markup] = []
    used_for: list[Markup] = []
    for flow in workflows:
        if not isinstance(flow, cabc.Mapping):
            continue
        using = flow.get("using")
        suffix = Markup(" ({})").format(_entity_link(ctx, str(using))) if using else ""
        if flow.get("to") == item_name and flow.get("from"):
            created_by.append(_entity_link(ctx, str(flow["from"])) + suffix)
        if flow.get("from") == item_name and flow.get("to"):
            used_for.append(_entity_link(ctx, str(flow["to"])) + suffix)

    sections: list[MetaboxSection] = []
    for title_key, entries in (("workflowFrom", created_by), ("workflowTo", used_for)):
        if entries:
            items = Markup("").join(Markup("<li>{}</li>").format(e) for e in entries)
            sections.append(
                MetaboxSection(
                    title=localize(title_key), body=Markup("<ul>{}</ul>").format(items)
                )
            )
    return sections


def get_about_content(
    renderer: MarkdownRenderer, front: PageFrontMatter | None
) -> AboutContent:
    """Build the metabox for a page and collect keywords it contributes.

    Parameters
    ----------
    renderer : MarkdownRenderer
        Renderer bound to the page; renders captions and info text and
        exposes the page context.
    front : PageFrontMatter or None
        Page front matter; supplies the ``about`` directive and explicit
        title, image, caption, and info overrides.

    Returns
    -------
    AboutContent
        Metabox props and the search keywords derived from the directive
        (for tags, the tag's canonical id).
    """
    ctx = renderer.ctx
    about_type, about_arg = parse_about(front.about if front else None)
    style = METABOX_STYLES.get(about_type or "")
    metabox = MetaboxProps(
        title=front.title if front else None,
        img=front.img if front else None,
        caption=renderer.inline(front.caption) if front and front.caption else None,
        info=renderer.block(front.info) if front and front.info else None,
        icon=style.icon if style else None,
        icon_title=style.icon_title if style else None,
        css_class=style.css_class if style else None,
    )
    keywords: list[str] = []
    if about_type and about_arg:
        if about_type == "tag":
            tag_path = about_arg.split("/")
            game = tag_path[0] if len(tag_path) > 1 else DEFAULT_TAG_GAME
            tag_name = tag_path[1] if len(tag_path) > 1 else tag_path[0]
            tags = get_path(ctx.data, ["tags", game]) or {}
            tag = tags.get(tag_name) if isinstance(tags, cabc.Mapping) else None
            if isinstance(tag, cabc.Mapping) and tag.get("id"):
                tag_id = str(tag["id"])
                metabox.title = Markup("{} (<code>{}</code>{})").format(
                    tag_name, tag_id, _tag_help_link(ctx)
                )
                keywords.append(tag_id)
                metabox.sections.extend(get_tag_sections(ctx, tags, tag_name))
        if about_type in WORKFLOW_TYPES:
            metabox.sections.extend(get_workflow_sections(ctx, about_arg))
    return AboutContent(metabox=metabox, keywords=keywords)


__all__ = [
    "METABOX_STYLES",
    "AboutContent",
    "MetaboxProps",
    "MetaboxSection",
    "MetaboxStyle",
    "get_about_content",
    "get_tag_sections",
    "get_workflow_sections",
    "parse_about",
]
