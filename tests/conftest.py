"""Shared fixtures building page indexes, render contexts, and renderers."""

from __future__ import annotations

import typing as typ

import pytest

from sitepages.content import PageFrontMatter, PageIndex
from sitepages.render.context import PageLinkResolver, RenderContext
from sitepages.render.environment import build_environment
from sitepages.render.markdown import MarkdownRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment


@pytest.fixture
def page_index() -> PageIndex:
    """Return a small two-language site: a game, its tags, and two tools."""
    index = PageIndex()
    index.add("h1", "en", PageFrontMatter(title="Halo CE"))
    index.add("h1/tags", "en", PageFrontMatter(title="Tags"))
    index.add("h1/tags", "es", PageFrontMatter(title="Etiquetas", slug="etiquetas"))
    index.add("h1/tags/biped", "en", PageFrontMatter(title="biped", about="tag:biped"))
    index.add("h1/tags/unit", "en", PageFrontMatter(title="unit"))
    index.add("h1/guides", "en", PageFrontMatter(title="Guides"))
    index.add("h1/tools/tool", "en", PageFrontMatter(title="Tool"))
    index.add("h2/tags", "en", PageFrontMatter(title="H2 Tags"))
    return index


@pytest.fixture
def jinja_env() -> Environment:
    """Return the packaged template environment."""
    return build_environment()


@pytest.fixture
def make_renderer(
    page_index: PageIndex, jinja_env: Environment
) -> cabc.Callable[..., MarkdownRenderer]:
    """Return a factory building a renderer for a page of ``page_index``."""

    def _make(
        data: dict[str, typ.Any] | None = None,
        *,
        page_id: str = "h1/tags",
        lang: str = "en",
        debug: bool = False,
    ) -> MarkdownRenderer:
        resolver = PageLinkResolver(page_index, page_id, lang, debug=debug)
        ctx = RenderContext(
            lang=lang, page_id=page_id, title=None, resolver=resolver, data=data or {}
        )
        return MarkdownRenderer(ctx, env=jinja_env)

    return _make
