"""Tests for page index queries and page-link resolution."""

from __future__ import annotations

import pytest

from sitepages._constants import UNRESOLVED_TITLE
from sitepages.content import (
    PageFrontMatter,
    PageIndex,
    PageResolutionError,
    get_all_thanks,
    get_page_children,
    get_page_other_langs,
    get_page_parents,
    get_page_related,
    resolve_page_global,
    try_localized_path,
)
from sitepages.render.context import PageLinkResolver


def test_localized_path_uses_slugs_and_language_prefix(page_index: PageIndex) -> None:
    assert try_localized_path(page_index, "h1/tags", "en") == "/h1/tags"
    assert try_localized_path(page_index, "h1/tags", "es") == "/es/h1/etiquetas"
    assert try_localized_path(page_index, "h1/tags/biped", "es") == (
        "/es/h1/etiquetas/biped"
    )
    assert try_localized_path(page_index, "", "en") == "/"


def test_resolve_prefers_pages_near_the_origin(page_index: PageIndex) -> None:
    from_h2 = resolve_page_global(page_index, "en", "h2/tags", "tags")
    from_h1 = resolve_page_global(page_index, "en", "h1/guides", "tags")

    assert from_h2 is not None
    assert from_h2.page_id == "h2/tags"
    assert from_h1 is not None
    assert from_h1.page_id == "h1/tags"


def test_resolve_appends_heading(page_index: PageIndex) -> None:
    link = resolve_page_global(page_index, "es", "h1", "h1/tags", "group-ids")

    assert link is not None
    assert link.url == "/es/h1/etiquetas#group-ids"
    assert link.title == "Etiquetas"


def test_resolve_falls_back_to_default_language(page_index: PageIndex) -> None:
    link = resolve_page_global(page_index, "es", "h1", "biped")

    assert link is not None
    assert link.url == "/h1/tags/biped"


def test_resolve_requires_whole_segments(page_index: PageIndex) -> None:
    assert resolve_page_global(page_index, "en", "h1", "ped") is None
    assert resolve_page_global(page_index, "en", "h1", "") is None


def test_resolver_raises_without_debug(page_index: PageIndex) -> None:
    resolver = PageLinkResolver(page_index, "h1", "en")

    with pytest.raises(PageResolutionError, match="missing"):
        resolver.resolve("missing")


def test_resolver_returns_placeholder_in_debug(
    page_index: PageIndex, caplog: pytest.LogCaptureFixture
) -> None:
    resolver = PageLinkResolver(page_index, "h1", "en", debug=True)

    with caplog.at_level("WARNING"):
        link = resolver.resolve("missing")

    assert link.title == UNRESOLVED_TITLE
    assert link.url == "#"
    assert "missing" in caplog.text


def test_parents_are_existing_ancestors_root_first(page_index: PageIndex) -> None:
    parents = get_page_parents(page_index, "h1/tags/biped", "en")

    assert [link.page_id for link in parents] == ["h1", "h1/tags"]


def test_children_sorted_by_title(page_index: PageIndex) -> None:
    children = get_page_children(page_index, "h1", "en")

    assert [link.title for link in children] == ["Guides", "Tags"]


def test_related_pages_in_both_directions() -> None:
    index = PageIndex()
    index.add("a", "en", PageFrontMatter(title="A", related=["b"]))
    index.add("b", "en", PageFrontMatter(title="B"))
    index.add("c", "en", PageFrontMatter(title="C", related=["a", "missing"]))

    assert [link.page_id for link in get_page_related(index, "a", "en")] == [
        "b",
        "c",
    ]
    assert [link.page_id for link in get_page_related(index, "b", "en")] == ["a"]


def test_other_langs(page_index: PageIndex) -> None:
    others = get_page_other_langs(page_index, "h1/tags", "en")

    assert list(others) == ["es"]
    assert others["es"].url == "/es/h1/etiquetas"
    assert get_page_other_langs(page_index, "h1/tags/unit", "en") == {}


def test_all_thanks_groups_pages_by_contributor() -> None:
    index = PageIndex()
    index.add("a", "en", PageFrontMatter(title="A", thanks={"zed": "x", "Amy": "y"}))
    index.add("b", "en", PageFrontMatter(title="B", thanks={"Amy": "z"}))

    thanks = get_all_thanks(index, "en")

    assert list(thanks) == ["Amy", "zed"]
    assert [link.page_id for link in thanks["Amy"]] == ["a", "b"]
