"""Page content model, page index queries, and content loaders.

This subpackage describes the pages of a site (:class:`PageFrontMatter`,
:class:`PageEntry`, :class:`PageIndex`), answers navigation queries over the
index (parents, children, related pages, language variants, page-link
resolution), and loads page files and data trees from disk.

Examples
--------
>>> from sitepages.content import PageFrontMatter, PageIndex
>>> index = PageIndex()
>>> entry = index.add("h1/tags", "en", PageFrontMatter(title="Tags"))
>>> entry.segments
['h1', 'tags']
"""

from .index import (
    get_all_thanks,
    get_page_children,
    get_page_other_langs,
    get_page_parents,
    get_page_related,
    page_link,
    resolve_page_global,
    try_localized_path,
)
from .models import (
    ContentError,
    PageEntry,
    PageFrontMatter,
    PageIndex,
    PageLink,
    PageResolutionError,
)

__all__ = [
    "ContentError",
    "PageEntry",
    "PageFrontMatter",
    "PageIndex",
    "PageLink",
    "PageResolutionError",
    "get_all_thanks",
    "get_page_children",
    "get_page_other_langs",
    "get_page_parents",
    "get_page_related",
    "page_link",
    "resolve_page_global",
    "try_localized_path",
]
