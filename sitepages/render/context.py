"""Per-page render state and the page-link resolver bound to it."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from sitepages._constants import UNRESOLVED_TITLE
from sitepages.content import PageLink, PageResolutionError, resolve_page_global

if typ.TYPE_CHECKING:
    from sitepages.content import PageIndex

log = logging.getLogger(__name__)


class PageLinkResolver:
    """Resolve page references written on one page in one language.

    In debug mode an unresolvable reference degrades to an ``[Unresolved]``
    placeholder link so authors can preview pages with broken links; otherwise
    :class:`~sitepages.content.PageResolutionError` is raised.
    """

    def __init__(
        self, page_index: PageIndex, page_id: str, lang: str, *, debug: bool = False
    ) -> None:
        self.page_index = page_index
        self.page_id = page_id
        self.lang = lang
        self.debug = debug

    def resolve(self, id_tail: str, heading_id: str | None = None) -> PageLink:
        """Return the link for ``id_tail``, optionally anchored at ``heading_id``.

        Raises
        ------
        PageResolutionError
            If the reference matches no page and debug mode is off.
        """
        page = resolve_page_global(
            self.page_index, self.lang, self.page_id, id_tail, heading_id
        )
        if page is not None:
            return page
        if not self.debug:
            msg = f"Failed to resolve page {id_tail} from {self.page_id} ({self.lang})"
            raise PageResolutionError(msg)
        log.warning(
            "Unresolved page link %s on %s (%s)", id_tail, self.page_id, self.lang
        )
        return PageLink(title=UNRESOLVED_TITLE, url="#", page_id=id_tail)


@dc.dataclass(slots=True)
class RenderContext:
    """State shared by every component rendering one page.

    Attributes
    ----------
    lang : str
        Language being rendered.
    page_id : str
        Id of the page being rendered.
    title : str or None
        Page title from front matter.
    resolver : PageLinkResolver
        Resolver bound to the page index, this page, and this language.
    data : dict[str, Any]
        Global data deep-merged with page-local data.
    all_thanks : dict[str, list[PageLink]]
        Every thanked contributor across the site.
    """

    lang: str
    page_id: str
    title: str | None
    resolver: PageLinkResolver
    data: dict[str, typ.Any] = dc.field(default_factory=dict)
    all_thanks: dict[str, list[PageLink]] = dc.field(default_factory=dict)

    def resolve_page(self, id_tail: str, heading_id: str | None = None) -> PageLink:
        """Shortcut for ``self.resolver.resolve``."""
        return self.resolver.resolve(id_tail, heading_id)


__all__ = ["PageLinkResolver", "RenderContext"]
