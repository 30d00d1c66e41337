"""Render one page into an HTML document and a search record.

:func:`render_page` is the single entry point of the render pipeline. It
builds the page's :class:`~sitepages.render.context.RenderContext` (global
data deep-merged with page-local data, a page-link resolver bound to the page
index), converts the markdown body, gathers navigation from the page index,
nests the heading outline, selects the metabox, and renders ``page.jinja``.

Example
-------
>>> from sitepages.content import PageFrontMatter, PageIndex
>>> from sitepages.render import RenderInput, render_page
>>> front = PageFrontMatter(title="Biped")
>>> index = PageIndex()
>>> _ = index.add("h1/tags/biped", "en", front)
>>> output = render_page(
...     RenderInput(
...         base_url="https://example.org",
...         page_id="h1/tags/biped",
...         lang="en",
...         body="Bipeds walk on two legs.",
...         front=front,
...         global_data={},
...         page_index=index,
...     )
... )
>>> output.html_doc.startswith("<!DOCTYPE html>")
True
>>> output.search_doc.text
'Bipeds walk on two legs.'
"""

from __future__ import annotations

import typing as typ

from sitepages._constants import PREVIEW_LENGTH_CHARS
from sitepages.content import (
    get_all_thanks,
    get_page_children,
    get_page_other_langs,
    get_page_parents,
    get_page_related,
    try_localized_path,
)
from sitepages.data import merge_data
from sitepages.localization import PAGE_LOCALIZATIONS, localizer

from .context import PageLinkResolver, RenderContext
from .environment import build_environment
from .headings import get_nav_headings, thanks_heading
from .markdown import MarkdownRenderer
from .metabox import get_about_content
from .models import RenderInput, RenderOutput, SearchDoc

if typ.TYPE_CHECKING:
    from jinja2 import Environment


def create_plaintext_preview(plaintext: str | None) -> str | None:
    """Trim body plaintext into a one-line preview for OpenGraph metadata.

    Text longer than the preview length is cut and suffixed with ``...``;
    text already starting with ``...`` yields no preview.
    """
    if not plaintext or plaintext.startswith("..."):
        return None
    if len(plaintext) > PREVIEW_LENGTH_CHARS:
        plaintext = f"{plaintext[:PREVIEW_LENGTH_CHARS]}..."
    return plaintext.replace("\n", " ").strip()


def build_render_context(render_input: RenderInput) -> RenderContext:
    """Assemble the per-page context from the render input."""
    resolver = PageLinkResolver(
        render_input.page_index,
        render_input.page_id,
        render_input.lang,
        debug=render_input.debug,
    )
    return RenderContext(
        lang=render_input.lang,
        page_id=render_input.page_id,
        title=render_input.front.title,
        resolver=resolver,
        data=merge_data(render_input.global_data, render_input.local_data),
        all_thanks=get_all_thanks(render_input.page_index, render_input.lang),
    )


def _image_url(base_url: str, page_path: str, img: str | None) -> str | None:
    """Return the absolute URL of an image stored beside the page."""
    if not img:
        return None
    if img.startswith(("http://", "https://", "/")):
        return img
    return f"{base_url}{page_path.rstrip('/')}/{img}"


def render_page(
    render_input: RenderInput, *, env: Environment | None = None
) -> RenderOutput:
    """Render ``render_input`` into an HTML document and optional search doc.

    Parameters
    ----------
    render_input : RenderInput
        Page body, front matter, data trees, and the page index.
    env : Environment, optional
        Jinja environment to reuse across pages; a default environment is
        built when omitted.

    Returns
    -------
    RenderOutput
        The HTML document (starting with ``<!DOCTYPE html>``) and the search
        document, or ``None`` in its place when the page opts out of search.

    Raises
    ------
    PageResolutionError
        If the body links to a page that does not exist and debug mode is
        off.
    UnsupportedFormatError
        If a data table column names an unknown format.
    DataTableError
        If a data table declaration is malformed.
    """
    front = render_input.front
    index = render_input.page_index
    page_id = render_input.page_id
    lang = render_input.lang
    environment = env or build_environment()

    ctx = build_render_context(render_input)
    renderer = MarkdownRenderer(
        ctx, env=environment, pygments_style=render_input.pygments_style
    )
    content = renderer.convert(render_input.body)

    nav_parents = get_page_parents(index, page_id, lang)
    nav_children = get_page_children(index, page_id, lang)
    nav_related = get_page_related(index, page_id, lang)
    nav_other_langs = get_page_other_langs(index, page_id, lang)
    nav_headings = get_nav_headings(front, ctx, content.headings)
    localized_path = try_localized_path(index, page_id, lang)
    about = get_about_content(renderer, front)
    localize = localizer(PAGE_LOCALIZATIONS, lang)
    thanks_section = thanks_heading(lang, content.headings)

    template = environment.get_template("page.jinja")
    html = template.render(
        lang=lang,
        title=front.title,
        base_url=render_input.base_url,
        localized_path=localized_path,
        no_search=front.no_search,
        og_description=create_plaintext_preview(content.plaintext),
        og_img=_image_url(render_input.base_url, localized_path, front.img),
        og_other_langs=list(nav_other_langs),
        og_tags=front.keywords,
        pygments_css=renderer.stylesheet,
        nav_parents=nav_parents,
        nav_children=nav_children,
        nav_related=nav_related,
        nav_headings=nav_headings,
        other_langs=nav_other_langs,
        stub=front.stub,
        metabox=about.metabox,
        content=content.html,
        thanks=front.thanks,
        thanks_heading=thanks_section.title,
        thanks_heading_id=thanks_section.id,
        debug=render_input.debug,
        body_plaintext=content.plaintext,
        localize=localize,
    )

    search_doc = None
    if not front.no_search:
        search_doc = SearchDoc(
            lang=lang,
            text=content.plaintext,
            path=page_id,
            title=front.title or "",
            keywords=" ".join([*about.keywords, *front.keywords]),
        )
    return RenderOutput(html_doc=f"<!DOCTYPE html>\n{html}", search_doc=search_doc)


__all__ = [
    "build_render_context",
    "create_plaintext_preview",
    "render_page",
]
