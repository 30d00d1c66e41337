"""Render pages, data tables, and search records from parsed content."""

from .context import PageLinkResolver, RenderContext
from .data_table import (
    ColumnFormat,
    DataTableError,
    DataTableProps,
    UnsupportedFormatError,
)
from .headings import Heading, NavHeading, build_nav_tree
from .markdown import MarkdownRenderer
from .metabox import AboutContent, MetaboxProps, get_about_content
from .models import RenderedContent, RenderInput, RenderOutput, SearchDoc
from .page import create_plaintext_preview, render_page

__all__ = [
    "AboutContent",
    "ColumnFormat",
    "DataTableError",
    "DataTableProps",
    "Heading",
    "MarkdownRenderer",
    "MetaboxProps",
    "NavHeading",
    "PageLinkResolver",
    "RenderContext",
    "RenderInput",
    "RenderOutput",
    "RenderedContent",
    "SearchDoc",
    "UnsupportedFormatError",
    "build_nav_tree",
    "create_plaintext_preview",
    "get_about_content",
    "render_page",
]
