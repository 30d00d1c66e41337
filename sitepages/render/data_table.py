r"""Project nested page data into sortable, filterable HTML tables.

A data table is declared in a page body with a YAML block naming where its
rows come from and which columns to show::

    {% dataTable %}
    dataPath: tags/h1
    rowSortKey: key
    linkCol: 0
    columns:
      - name: Tag
        key: key
      - name: ID
        key: value/id
        format: code
    {% /dataTable %}

Rows are gathered from every data path (mappings become ``{key, value}``
rows), sorted, reversed, and filtered, then rendered through the
``data_table.jinja`` template. Each row gets an anchor id, and large sorted
tables get a jump index keyed by the first letter of the sort value. A
parallel plaintext rendering feeds the search index.

Example
-------
>>> from sitepages.render.data_table import DataTableProps, gather_rows
>>> props = DataTableProps.from_mapping(
...     {"dataPath": "weapons", "columns": [{"name": "Name", "key": "key"}]}
... )
>>> gathered = gather_rows({"weapons": {"pistol": 1, "rifle": 2}}, props)
>>> gathered.id, [row["key"] for row in gathered.rows]
('weapons', ['pistol', 'rifle'])
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import re
import typing as typ

from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markupsafe import Markup
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from sitepages._constants import AUTO_INDEX_THRESHOLD
from sitepages.content import PageResolutionError
from sitepages.data import get_path, optional_str, slugify, split_path

if typ.TYPE_CHECKING:
    from markdown import Markdown

    from .markdown import MarkdownRenderer
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    MarkdownRenderer = typ.Any

log = logging.getLogger(__name__)

TABLE_WRAPPER_CLASS = "table-wrapper"
INDEX_SEPARATOR = " · "
DIRECTIVE_PATTERN = re.compile(
    r"^\{%\s*dataTable\s*%\}[ \t]*\n(?P<body>.*?)^\{%\s*/dataTable\s*%\}[ \t]*$",
    re.MULTILINE | re.DOTALL,
)


class DataTableError(ValueError):
    """Raised when a data-table declaration is malformed."""


class UnsupportedFormatError(ValueError):
    """Raised when a column names a cell format that does not exist."""

    def __init__(self, format_tag: str) -> None:
        self.format_tag = format_tag
        super().__init__(f"unsupported column format: {format_tag}")


class ColumnFormat(enum.Enum):
    """How a cell's content is presented."""

    TEXT = "text"
    CODE = "code"
    ANCHOR = "anchor"
    PAGE_LINK = "pageLink"
    PAGE_LINK_RAW = "pageLinkRaw"
    CODEBLOCK = "codeblock"


def parse_format(format_tag: str | None) -> tuple[ColumnFormat, str | None]:
    """Parse a column format tag into its format and optional code language.

    ``codeblock`` accepts a ``-lang`` suffix (``codeblock-yaml``); every other
    tag must match a :class:`ColumnFormat` value exactly.

    Raises
    ------
    UnsupportedFormatError
        If ``format_tag`` names no known format.
    """
    tag = format_tag or ColumnFormat.TEXT.value
    if tag.startswith(ColumnFormat.CODEBLOCK.value):
        _, _, language = tag.partition("-")
        return ColumnFormat.CODEBLOCK, language or None
    try:
        return ColumnFormat(tag), None
    except ValueError as exc:
        raise UnsupportedFormatError(tag) from exc


@dc.dataclass(slots=True, frozen=True)
class Column:
    """One displayed column: header text, data key path, style, and format."""

    name: str
    key: str
    style: str | None = None
    format: str | None = None


@dc.dataclass(slots=True)
class DataTableProps:
    """Declarative table configuration written in page source.

    Attributes
    ----------
    data_path : list[str]
        ``/``-delimited paths into the page data tree supplying rows.
    columns : list[Column]
        Displayed columns, in order. Must not be empty.
    id : str or None
        Explicit table id; derived from the data paths when omitted.
    row_sort_key : str or None
        Key path rows are sorted by, case-insensitively.
    row_sort_reverse : bool
        Reverse the rows after sorting.
    row_filter_key : str or None
        Key path tested by the row filter.
    row_filter_value : Any
        Value the filter field must equal or contain; any truthy field
        passes when unset.
    row_filter_not : bool
        Invert the filter.
    link_col : bool, int, or None
        ``True`` adds a jump-anchor column; an integer wraps that column's
        cells in jump anchors.
    no_clear : bool
        Adds the ``no-clear`` class to the table.
    wrap_pre : bool
        Adds the ``wrap-pre`` class to the table.
    link_slug_key : str or None
        Key path used to build row anchor ids.
    """

    data_path: list[str]
    columns: list[Column]
    id: str | None = None
    row_sort_key: str | None = None
    row_sort_reverse: bool = False
    row_filter_key: str | None = None
    row_filter_value: typ.Any = None
    row_filter_not: bool = False
    link_col: bool | int | None = None
    no_clear: bool = False
    wrap_pre: bool = False
    link_slug_key: str | None = None

    def __post_init__(self) -> None:
        if not self.columns:
            msg = "A data table needs at least one column."
            raise DataTableError(msg)
        link_col = self.link_col
        if link_col is not None and not isinstance(link_col, bool):
            if not isinstance(link_col, int) or not 0 <= link_col < len(self.columns):
                msg = f"linkCol {link_col!r} does not index one of the columns."
                raise DataTableError(msg)

    @property
    def has_link_col(self) -> bool:
        """Whether rows link to themselves through a jump anchor."""
        return self.link_col is not None and self.link_col is not False

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> DataTableProps:
        """Build props from the camelCase mapping authors write.

        Raises
        ------
        DataTableError
            If the mapping is missing columns or contains malformed entries.
        """
        if not isinstance(payload, cabc.Mapping):
            msg = "Data table props must be a mapping."
            raise DataTableError(msg)
        raw_paths = payload.get("dataPath") or []
        data_path = [raw_paths] if isinstance(raw_paths, str) else list(raw_paths)
        return cls(
            data_path=[str(path) for path in data_path],
            columns=[_build_column(entry) for entry in payload.get("columns") or []],
            id=optional_str(payload.get("id")),
            row_sort_key=optional_str(payload.get("rowSortKey")),
            row_sort_reverse=bool(payload.get("rowSortReverse", False)),
            row_filter_key=optional_str(payload.get("rowFilterKey")),
            row_filter_value=payload.get("rowFilterValue"),
            row_filter_not=bool(payload.get("rowFilterNot", False)),
            link_col=payload.get("linkCol"),
            no_clear=bool(payload.get("noClear", False)),
            wrap_pre=bool(payload.get("wrapPre", False)),
            link_slug_key=optional_str(payload.get("linkSlugKey")),
        )


def _build_column(entry: object) -> Column:
    if not isinstance(entry, cabc.Mapping) or "name" not in entry or "key" not in entry:
        msg = f"Each column needs a 'name' and a 'key', got {entry!r}."
        raise DataTableError(msg)
    return Column(
        name=str(entry["name"]),
        key=str(entry["key"]),
        style=optional_str(entry.get("style")),
        format=optional_str(entry.get("format")),
    )


@dc.dataclass(slots=True)
class GatheredRows:
    """Rows selected for a table together with the table id."""

    rows: list[typ.Any]
    id: str


@dc.dataclass(slots=True, frozen=True)
class IndexEntry:
    """One jump-index link: a leading character and the first row carrying it."""

    key: str
    id: str


def _source_rows(value: object) -> list[typ.Any]:
    """Normalize a resolved data path into a list of rows."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, cabc.Mapping):
        return [{"key": key, "value": item} for key, item in value.items()]
    log.debug("Ignoring scalar data table source %r", value)
    return []


def _sort_value(row: object, sort_key: str) -> tuple[int, float, str]:
    """Return a sort key placing rows with a missing or falsy value first.

    Numbers sort by value ahead of text, and text sorts case-insensitively,
    so a column mixing both never compares a number with a string.
    """
    value = get_path(row, sort_key)
    if not value:
        return (0, 0.0, "")
    if isinstance(value, int | float) and not isinstance(value, bool):
        return (1, value, "")
    return (2, 0.0, str(value).upper())


def _loose_equals(value: object, expected: object) -> bool:
    """Compare loosely, so ``"2"`` matches ``2`` but ``None`` matches only itself."""
    if value is None or expected is None:
        return value is expected
    if isinstance(value, str) and isinstance(expected, str):
        return value == expected
    try:
        return float(typ.cast("typ.Any", value)) == float(typ.cast("typ.Any", expected))
    except (TypeError, ValueError):
        return str(value) == str(expected)


def _row_matches(row: object, props: DataTableProps) -> bool:
    value = get_path(row, typ.cast("str", props.row_filter_key))
    if not props.row_filter_value:
        matched = bool(value)
    elif isinstance(value, list):
        matched = props.row_filter_value in value
    else:
        matched = _loose_equals(value, props.row_filter_value)
    return not matched if props.row_filter_not else matched


def gather_rows(
    data: cabc.Mapping[str, typ.Any], props: DataTableProps
) -> GatheredRows:
    """Collect, sort, and filter the rows for ``props`` from ``data``.

    Missing data paths contribute no rows. Sorting is stable and reversal is
    applied to the sorted rows, so rows sharing a sort value come out in
    reversed source order when ``row_sort_reverse`` is set.

    Parameters
    ----------
    data : Mapping[str, Any]
        Merged page data tree.
    props : DataTableProps
        Table configuration.

    Returns
    -------
    GatheredRows
        Final rows and the table id.
    """
    paths = [split_path(path) for path in props.data_path]
    table_id = props.id or "-".join(
        segments[-1] if segments else "" for segments in paths
    )

    rows: list[typ.Any] = []
    for segments in paths:
        rows.extend(_source_rows(get_path(data, segments)))
    if props.row_sort_key:
        sort_key = props.row_sort_key
        rows.sort(key=lambda row: _sort_value(row, sort_key))
    if props.row_sort_reverse:
        rows.reverse()
    if props.row_filter_key:
        rows = [row for row in rows if _row_matches(row, props)]
    return GatheredRows(rows=rows, id=table_id)


def row_id(table_id: str, props: DataTableProps, row: object, index: int) -> str:
    """Return the anchor id of the row at ``index`` (zero-based).

    Without a link column, or with ``link_col=True`` and no slug key, the id
    is positional (``<table>-<n>``). Otherwise it is the slug of the table id
    and the row's value at the slug key, which defaults to the link column's
    key. Duplicate values produce duplicate ids.
    """
    positional = f"{table_id}-{index + 1}"
    if not props.has_link_col:
        return positional
    if props.link_col is True:
        if not props.link_slug_key:
            return positional
        slug_key = props.link_slug_key
    else:
        column = props.columns[typ.cast("int", props.link_col)]
        slug_key = props.link_slug_key or column.key
    return slugify(f"{table_id}-{get_path(row, slug_key, '')}")


def build_row_index(
    table_id: str, props: DataTableProps, rows: cabc.Sequence[object]
) -> list[IndexEntry]:
    """Return jump-index entries for large sorted tables with a link column.

    The index assumes rows are already sorted alphabetically by the sort key;
    an entry is emitted each time the upper-cased first character changes.

    Any configured link column enables the index, including column ``0``;
    only ``None`` and ``False`` leave a table without one.
    """
    if (
        not props.row_sort_key
        or not props.has_link_col
        or len(rows) < AUTO_INDEX_THRESHOLD
    ):
        return []
    entries: list[IndexEntry] = []
    for index, row in enumerate(rows):
        value = get_path(row, props.row_sort_key)
        index_key = str(value)[:1].upper() if value else ""
        if not index_key:
            continue
        if not entries or entries[-1].key != index_key:
            anchor = row_id(table_id, props, row, index)
            entries.append(IndexEntry(key=index_key, id=anchor))
    return entries


def _cell_text(content: object) -> str:
    if isinstance(content, list):
        return ", ".join(_cell_text(item) for item in content)
    return str(content)


def render_cell(
    renderer: MarkdownRenderer, format_tag: str | None, content: object
) -> Markup:
    """Render one cell to an HTML fragment.

    Empty content renders as an empty string whatever the format. Page
    references that fail to resolve fall back to the raw content.

    Raises
    ------
    UnsupportedFormatError
        If ``format_tag`` is not a known format and the cell has content.
    """
    if not content:
        return Markup("")
    cell_format, language = parse_format(format_tag)
    text = _cell_text(content)
    match cell_format:
        case ColumnFormat.TEXT:
            return renderer.inline(text)
        case ColumnFormat.CODE:
            return Markup("<code>{}</code>").format(text)
        case ColumnFormat.ANCHOR | ColumnFormat.PAGE_LINK:
            try:
                target = renderer.ctx.resolve_page(text)
            except PageResolutionError:
                return Markup.escape(text)
            return Markup('<a href="{}">{}</a>').format(target.url, target.title)
        case ColumnFormat.PAGE_LINK_RAW:
            try:
                target = renderer.ctx.resolve_page(text)
            except PageResolutionError:
                return Markup.escape(text)
            return Markup('<a href="{}">{}</a>').format(target.url, text)
        case ColumnFormat.CODEBLOCK:
            return renderer.code_block(text, language)


def render_cell_plaintext(
    renderer: MarkdownRenderer, format_tag: str | None, content: object
) -> str:
    """Render one cell to plaintext for search indexing."""
    if not content:
        return ""
    cell_format, _language = parse_format(format_tag)
    text = _cell_text(content)
    match cell_format:
        case ColumnFormat.TEXT:
            return renderer.plaintext(text)
        case ColumnFormat.ANCHOR | ColumnFormat.PAGE_LINK:
            try:
                return renderer.ctx.resolve_page(text).title
            except PageResolutionError:
                return text
        case ColumnFormat.CODEBLOCK:
            return f"{text}\n"
        case ColumnFormat.CODE | ColumnFormat.PAGE_LINK_RAW:
            return text


def render_data_table(renderer: MarkdownRenderer, props: DataTableProps) -> Markup:
    """Render the table HTML, including the jump index for large tables."""
    gathered = gather_rows(renderer.ctx.data, props)
    classes = []
    if props.no_clear:
        classes.append("no-clear")
    if props.wrap_pre:
        classes.append("wrap-pre")
    jump_col = None if isinstance(props.link_col, bool) else props.link_col

    headers = [
        {
            "content": render_cell(renderer, ColumnFormat.TEXT.value, column.name),
            "style": column.style,
            "colspan": 2 if props.link_col is True and position == 0 else 1,
        }
        for position, column in enumerate(props.columns)
    ]
    rows = []
    for index, row in enumerate(gathered.rows):
        rows.append(
            {
                "id": row_id(gathered.id, props, row, index),
                "cells": [
                    {
                        "content": render_cell(
                            renderer, column.format, get_path(row, column.key)
                        ),
                        "style": column.style,
                        "jump": position == jump_col,
                    }
                    for position, column in enumerate(props.columns)
                ],
            }
        )

    template = renderer.env.get_template("data_table.jinja")
    html = template.render(
        wrapper_class=TABLE_WRAPPER_CLASS,
        index_entries=build_row_index(gathered.id, props, gathered.rows),
        index_separator=INDEX_SEPARATOR,
        table_class=" ".join(classes),
        anchor_col=props.link_col is True,
        headers=headers,
        rows=rows,
    )
    return Markup(html.strip())


def render_plaintext(renderer: MarkdownRenderer, props: DataTableProps) -> str:
    """Render the table as text: a header line followed by one line per row."""
    gathered = gather_rows(renderer.ctx.data, props)
    header = " ".join(column.name for column in props.columns)
    body = "\n".join(
        " ".join(
            render_cell_plaintext(renderer, column.format, get_path(row, column.key))
            for column in props.columns
        )
        for row in gathered.rows
    )
    return f"{header}\n{body}"


def parse_directive(body: str) -> DataTableProps:
    """Parse the YAML body of a ``dataTable`` directive."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        payload = loader.load(body)
    except YAMLError as exc:
        msg = f"Invalid data table declaration: {exc}"
        raise DataTableError(msg) from exc
    return DataTableProps.from_mapping(payload or {})


class DataTableExtension(Extension):
    """Replace ``dataTable`` directives with rendered tables.

    The plaintext rendering of each table is kept, in document order, for
    search text extraction.
    """

    def __init__(self, renderer: MarkdownRenderer) -> None:
        super().__init__()
        self.renderer = renderer
        self.plaintexts: list[str] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the directive preprocessor after fenced code is stashed."""
        md.registerExtension(self)
        processor = DataTablePreprocessor(md, self)
        md.preprocessors.register(processor, "sitepages_data_table", 22)

    def reset(self) -> None:
        """Forget tables rendered by a previous conversion."""
        self.plaintexts.clear()


class DataTablePreprocessor(Preprocessor):
    """Swap each directive block for a stashed HTML table."""

    def __init__(self, md: Markdown, extension: DataTableExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: list[str]) -> list[str]:
        """Render every directive in the page source."""
        text = "\n".join(lines)

        def _replace(match: re.Match[str]) -> str:
            props = parse_directive(match.group("body"))
            renderer = self.extension.renderer
            html = str(render_data_table(renderer, props))
            placeholder = self.md.htmlStash.store(html)
            self.extension.plaintexts.append(render_plaintext(renderer, props))
            return f"\n\n{placeholder}\n\n"

        return DIRECTIVE_PATTERN.sub(_replace, text).split("\n")


__all__ = [
    "AUTO_INDEX_THRESHOLD",
    "Column",
    "ColumnFormat",
    "DataTableError",
    "DataTableExtension",
    "DataTableProps",
    "GatheredRows",
    "IndexEntry",
    "UnsupportedFormatError",
    "build_row_index",
    "gather_rows",
    "parse_directive",
    "parse_format",
    "render_cell",
    "render_cell_plaintext",
    "render_data_table",
    "render_plaintext",
    "row_id",
]
