"""Unit tests for data-tree path lookups, deep merges, and slugs."""

from __future__ import annotations

from sitepages.data import (
    get_path,
    merge_data,
    optional_str,
    slugify,
    split_path,
    unique_slug,
)


def test_split_path_drops_empty_segments() -> None:
    assert split_path("/tags//h1/") == ["tags", "h1"]
    assert split_path(["a", "b"]) == ["a", "b"]


def test_get_path_walks_mappings_and_lists() -> None:
    tree = {"tags": {"h1": [{"id": "bipd"}, {"id": "unit"}]}}

    assert get_path(tree, "tags/h1/1/id") == "unit"
    assert get_path(tree, ["tags", "h1", "0", "id"]) == "bipd"


def test_get_path_returns_default_for_missing_segments() -> None:
    tree = {"tags": {"h1": [{"id": "bipd"}]}}

    assert get_path(tree, "tags/h2") is None
    assert get_path(tree, "tags/h1/5/id", "") == ""
    assert get_path(tree, "tags/h1/id", "fallback") == "fallback"
    assert get_path("scalar", "anything") is None


def test_get_path_keeps_falsy_values() -> None:
    assert get_path({"count": 0}, "count", 7) == 0


def test_merge_data_overrides_and_preserves_inputs() -> None:
    base = {"tags": {"h1": {"biped": 1}}, "list": [1, 2]}
    override = {"tags": {"h1": {"unit": 2}}, "list": [3]}

    merged = merge_data(base, override)

    assert merged == {"tags": {"h1": {"biped": 1, "unit": 2}}, "list": [3]}
    assert base == {"tags": {"h1": {"biped": 1}}, "list": [1, 2]}


def test_merge_data_accepts_missing_sides() -> None:
    assert merge_data(None, {"a": 1}) == {"a": 1}
    assert merge_data({"a": 1}, None) == {"a": 1}


def test_slugify_normalizes_text() -> None:
    assert slugify("Thanks & Credits") == "thanks-credits"
    assert slugify("Señor Tag") == "senor-tag"
    assert slugify("weapons-Assault Rifle") == "weapons-assault-rifle"


def test_unique_slug_appends_suffixes() -> None:
    used: set[str] = set()

    assert unique_slug("intro", used) == "intro"
    assert unique_slug("intro", used) == "intro-2"
    assert unique_slug("intro", used) == "intro-3"


def test_optional_str_strips_and_blanks_to_none() -> None:
    assert optional_str("  title ") == "title"
    assert optional_str(42) == "42"
    assert optional_str("   ") is None
    assert optional_str(None) is None
