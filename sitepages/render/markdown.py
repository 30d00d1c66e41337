"""Render page markdown, inline fragments, and highlighted code.

:class:`MarkdownRenderer` binds Python-Markdown, Pygments, and the project
extensions (page links, heading ids, data-table directives) to one page's
:class:`~sitepages.render.context.RenderContext`. Page bodies convert to a
:class:`~sitepages.render.models.RenderedContent`; table cells and metabox
captions use the lighter inline and block helpers, which skip heading
collection and data-table directives.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from bs4 import BeautifulSoup
from markdown import Markdown
from markupsafe import Markup
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .data_table import TABLE_WRAPPER_CLASS, DataTableExtension
from .headings import HeadingExtension
from .link_rewriter import PageLinkExtension
from .models import RenderedContent

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment
    from markdown.extensions import Extension

    from .context import RenderContext
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
SINGLE_PARAGRAPH_PATTERN = re.compile(r"<p>(.*)</p>", re.DOTALL)
BLANK_LINES_PATTERN = re.compile(r"\n\s*\n+")


def extract_plaintext(html: str, tables: cabc.Sequence[str] = ()) -> str:
    """Return the visible text of ``html``.

    Data-table wrappers are swapped, in document order, for the plaintext
    renderings in ``tables`` so search text carries one line per row instead
    of the jump index and anchor cells.
    """
    soup = BeautifulSoup(html, "html.parser")
    wrappers = soup.select(f"div.{TABLE_WRAPPER_CLASS}")
    for wrapper, table_text in zip(wrappers, tables, strict=False):
        wrapper.replace_with(f"\n{table_text}\n")
    return BLANK_LINES_PATTERN.sub("\n\n", soup.get_text()).strip()


class MarkdownRenderer:
    """Render markdown and code snippets for one page."""

    def __init__(
        self,
        ctx: RenderContext,
        *,
        env: Environment,
        pygments_style: str = "monokai",
    ) -> None:
        """Bind the renderer to a page context and template environment.

        Parameters
        ----------
        ctx : RenderContext
            Context of the page being rendered; supplies the page-link
            resolver and the data tree read by data tables.
        env : Environment
            Jinja environment providing the ``data_table.jinja`` template.
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults
            to ``"monokai"``.
        """
        self.ctx = ctx
        self.env = env
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def convert(self, text: str) -> RenderedContent:
        """Render a full page body, collecting headings and table plaintext."""
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return RenderedContent(html=Markup(""), plaintext="")
        headings = HeadingExtension()
        tables = DataTableExtension(self)
        md = self._build_markdown(headings, tables)
        html = self._annotate_codehilite(md.convert(normalized), normalized)
        return RenderedContent(
            html=Markup(html),
            plaintext=extract_plaintext(html, tables.plaintexts),
            headings=list(headings.headings),
        )

    def block(self, text: str) -> Markup:
        """Render a markdown fragment such as a metabox info block."""
        return Markup(self._convert_fragment(text))

    def inline(self, text: str) -> Markup:
        """Render a markdown fragment, unwrapping a lone paragraph."""
        html = self._convert_fragment(text)
        match = SINGLE_PARAGRAPH_PATTERN.fullmatch(html)
        if match and "<p>" not in match.group(1):
            html = match.group(1)
        return Markup(html)

    def plaintext(self, text: str) -> str:
        """Render a markdown fragment and return its trimmed text."""
        return extract_plaintext(self._convert_fragment(text))

    def code_block(self, code: str, language: str | None = None) -> Markup:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails.

        Returns
        -------
        Markup
            HTML containing the highlighted block with ``data-language``
            metadata applied.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return Markup(self._attach_language_attribute(html, lang))

    def _convert_fragment(self, text: str) -> str:
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        html = self._build_markdown().convert(normalized)
        return self._annotate_codehilite(html, normalized)

    def _build_markdown(self, *extra: Extension) -> Markdown:
        """Return a fresh Markdown instance with the page extensions loaded."""
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
            PageLinkExtension(self.ctx.resolver),
            *extra,
        ]
        return Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = ["CODE_BLOCK_PATTERN", "MarkdownRenderer", "extract_plaintext"]
