"""Queries over the site-wide page index.

Page ids are ``/``-delimited paths (``h1/tags/biped``); a page's parents are
the existing pages at each shorter prefix and its children are the pages one
segment deeper. Links are localized per language by replacing each path
segment with the ``slug`` of the page at that prefix and prefixing
non-default languages with ``/<lang>``.

Example
-------
>>> from sitepages.content import PageFrontMatter, PageIndex
>>> from sitepages.content.index import resolve_page_global
>>> index = PageIndex()
>>> _ = index.add("h1", "en", PageFrontMatter(title="Halo"))
>>> _ = index.add("h1/tags", "en", PageFrontMatter(title="Tags"))
>>> resolve_page_global(index, "en", "h1", "tags", "group-ids").url
'/h1/tags#group-ids'
"""

from __future__ import annotations

from .models import PageEntry, PageFrontMatter, PageIndex, PageLink


def _split(page_id: str) -> list[str]:
    return [segment for segment in page_id.strip("/").split("/") if segment]


def _front(index: PageIndex, entry: PageEntry, lang: str) -> PageFrontMatter:
    """Return the front matter in ``lang``, falling back to the default language."""
    front = entry.langs.get(lang) or entry.langs.get(index.default_lang)
    if front is None:
        front = next(iter(entry.langs.values()), PageFrontMatter())
    return front


def _title(index: PageIndex, entry: PageEntry, lang: str) -> str:
    segments = entry.segments
    fallback = segments[-1] if segments else entry.page_id
    return _front(index, entry, lang).title or fallback


def try_localized_path(index: PageIndex, page_id: str, lang: str) -> str:
    """Return the URL path of ``page_id`` in ``lang``.

    Segments whose page is missing from the index, or which have no localized
    ``slug``, keep their original spelling.
    """
    segments = _split(page_id)
    localized: list[str] = []
    for depth, segment in enumerate(segments, start=1):
        entry = index.get("/".join(segments[:depth]))
        front = entry.langs.get(lang) if entry else None
        localized.append(front.slug if front and front.slug else segment)
    prefix = "" if lang == index.default_lang else f"/{lang}"
    path = "/".join(localized)
    if not path:
        return prefix or "/"
    return f"{prefix}/{path}"


def page_link(
    index: PageIndex, entry: PageEntry, lang: str, heading_id: str | None = None
) -> PageLink:
    """Build a link to ``entry`` in ``lang``, or its default language."""
    link_lang = lang if lang in entry.langs else index.default_lang
    url = try_localized_path(index, entry.page_id, link_lang)
    if heading_id:
        url = f"{url}#{heading_id}"
    return PageLink(title=_title(index, entry, lang), url=url, page_id=entry.page_id)


def resolve_page_global(
    index: PageIndex,
    lang: str,
    from_page_id: str,
    id_tail: str,
    heading_id: str | None = None,
) -> PageLink | None:
    """Resolve a page reference written on ``from_page_id``.

    ``id_tail`` matches a page whose id equals it or ends with ``/<id_tail>``.
    When several pages match, the one sharing the longest id prefix with the
    current page wins, then the shortest id, then the alphabetically first.

    Returns
    -------
    PageLink or None
        The resolved link, or ``None`` when nothing matches.
    """
    tail = "/".join(_split(id_tail))
    candidates = [
        entry
        for page_id, entry in index.pages.items()
        if page_id.strip("/") == tail or page_id.endswith(f"/{tail}")
    ]
    if not tail or not candidates:
        return None
    origin = _split(from_page_id)

    def _rank(entry: PageEntry) -> tuple[int, int, str]:
        shared = 0
        for ours, theirs in zip(origin, entry.segments, strict=False):
            if ours != theirs:
                break
            shared += 1
        return (-shared, len(entry.segments), entry.page_id)

    best = min(candidates, key=_rank)
    return page_link(index, best, lang, heading_id)


def get_page_parents(index: PageIndex, page_id: str, lang: str) -> list[PageLink]:
    """Return links to the existing ancestors of ``page_id``, root first."""
    segments = _split(page_id)
    parents: list[PageLink] = []
    for depth in range(len(segments)):
        entry = index.get("/".join(segments[:depth]))
        if entry is not None:
            parents.append(page_link(index, entry, lang))
    return parents


def get_page_children(index: PageIndex, page_id: str, lang: str) -> list[PageLink]:
    """Return links to the direct children of ``page_id`` sorted by title."""
    segments = _split(page_id)
    children = [
        page_link(index, entry, lang)
        for entry in index.pages.values()
        if len(entry.segments) == len(segments) + 1
        and entry.segments[: len(segments)] == segments
    ]
    return sorted(children, key=lambda link: (link.title.casefold(), link.page_id))


def get_page_related(index: PageIndex, page_id: str, lang: str) -> list[PageLink]:
    """Return pages related to ``page_id`` in either direction, sorted by title."""
    entry = index.get(page_id)
    if entry is None:
        return []
    related: dict[str, PageLink] = {}
    for id_tail in _front(index, entry, lang).related:
        link = resolve_page_global(index, lang, page_id, id_tail)
        if link is not None:
            related[link.page_id] = link
    for other in index.pages.values():
        if other.page_id == page_id or other.page_id in related:
            continue
        for id_tail in _front(index, other, lang).related:
            target = resolve_page_global(index, lang, other.page_id, id_tail)
            if target is not None and target.page_id == page_id:
                related[other.page_id] = page_link(index, other, lang)
                break
    related.pop(page_id, None)
    return sorted(
        related.values(), key=lambda link: (link.title.casefold(), link.page_id)
    )


def get_page_other_langs(
    index: PageIndex, page_id: str, lang: str
) -> dict[str, PageLink]:
    """Return links to the other language variants of ``page_id``."""
    entry = index.get(page_id)
    if entry is None:
        return {}
    return {
        other_lang: page_link(index, entry, other_lang)
        for other_lang in sorted(entry.langs)
        if other_lang != lang
    }


def get_all_thanks(index: PageIndex, lang: str) -> dict[str, list[PageLink]]:
    """Return every thanked contributor mapped to the pages thanking them."""
    thanks: dict[str, list[PageLink]] = {}
    for page_id in sorted(index.pages):
        entry = index.pages[page_id]
        for contributor in _front(index, entry, lang).thanks:
            thanks.setdefault(contributor, []).append(page_link(index, entry, lang))
    return dict(sorted(thanks.items(), key=lambda item: item[0].casefold()))


__all__ = [
    "get_all_thanks",
    "get_page_children",
    "get_page_other_langs",
    "get_page_parents",
    "get_page_related",
    "page_link",
    "resolve_page_global",
    "try_localized_path",
]
