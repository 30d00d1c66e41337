"""Tests for heading collection and table-of-contents nesting."""

from __future__ import annotations

import typing as typ

from sitepages.content import PageFrontMatter
from sitepages.render.headings import (
    Heading,
    build_nav_tree,
    get_nav_headings,
    thanks_heading,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitepages.render.headings import NavHeading
    from sitepages.render.markdown import MarkdownRenderer


def _shape(nodes: list[NavHeading]) -> list[tuple[str, list[typ.Any]]]:
    return [(node.title, _shape(node.children)) for node in nodes]


def test_nav_tree_nests_by_level() -> None:
    tree = build_nav_tree(
        [Heading(1, "A", "a"), Heading(2, "B", "b"), Heading(1, "C", "c")]
    )

    assert _shape(tree) == [("A", [("B", [])]), ("C", [])]


def test_nav_tree_tolerates_skipped_levels() -> None:
    tree = build_nav_tree(
        [
            Heading(1, "A", "a"),
            Heading(3, "Deep", "deep"),
            Heading(2, "Mid", "mid"),
            Heading(4, "Deeper", "deeper"),
        ]
    )

    assert _shape(tree) == [("A", [("Deep", []), ("Mid", [("Deeper", [])])])]


def test_nav_tree_starting_below_top_level() -> None:
    tree = build_nav_tree([Heading(3, "C", "c"), Heading(2, "B", "b")])

    assert _shape(tree) == [("C", []), ("B", [])]


def test_nav_tree_of_nothing_is_empty() -> None:
    assert build_nav_tree([]) == []


def test_nav_headings_append_thanks(
    make_renderer: cabc.Callable[..., MarkdownRenderer],
) -> None:
    renderer = make_renderer(lang="es")
    front = PageFrontMatter(title="Tags", thanks={"Conscars": "research"})

    tree = get_nav_headings(front, renderer.ctx, [Heading(1, "Intro", "intro")])

    assert [(node.title, node.id) for node in tree] == [
        ("Intro", "intro"),
        ("Agradecimientos", "agradecimientos"),
    ]


def test_thanks_heading_avoids_body_heading_ids(
    make_renderer: cabc.Callable[..., MarkdownRenderer],
) -> None:
    renderer = make_renderer()
    front = PageFrontMatter(title="Tags", thanks={"Conscars": "research"})
    body = [Heading(1, "Acknowledgements", "acknowledgements")]

    tree = get_nav_headings(front, renderer.ctx, body)

    assert [node.id for node in tree] == ["acknowledgements", "acknowledgements-2"]
    assert thanks_heading("en", body).id == "acknowledgements-2"
    assert thanks_heading("en", []).id == "acknowledgements"


def test_nav_headings_without_thanks(
    make_renderer: cabc.Callable[..., MarkdownRenderer],
) -> None:
    renderer = make_renderer()

    tree = get_nav_headings(PageFrontMatter(), renderer.ctx, [])

    assert tree == []


def test_convert_assigns_unique_heading_ids(
    make_renderer: cabc.Callable[..., MarkdownRenderer],
) -> None:
    renderer = make_renderer()
    body = "# Usage\n\ntext\n\n## Notes\n\n## Notes\n\n### `code` *title*\n"

    content = renderer.convert(body)

    assert [(h.level, h.title, h.id) for h in content.headings] == [
        (1, "Usage", "usage"),
        (2, "Notes", "notes"),
        (2, "Notes", "notes-2"),
        (3, "code title", "code-title"),
    ]
    assert 'id="notes-2"' in content.html
