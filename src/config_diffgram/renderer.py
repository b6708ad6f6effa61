"""Render a diffgram dataset as one nested HTML table.

The tables of a dataset form a hierarchy by position. Each physical output
row is one path from a top-level row down to a leaf row; a parent cell spans
all the leaf rows below it, and paths that end above the deepest level are
padded with placeholder cells so every output row has the same width.
"""

import logging
from collections import defaultdict
from typing import Any, Sequence

from .bookmarks import bookmark_code
from .diffgram import ROW_STATE_COLUMN, DiffgramDataset, old_column_name
from .markup import MarkupWriter
from .models import Column, RowState, normalize_value

logger = logging.getLogger(__name__)

Record = dict[str, Any]


def _to_text(value: Any) -> str:
    value = normalize_value(value)
    return "" if value is None else str(value)


class HierarchicalRenderer:
    """Writes the rows of a diffgram dataset into a markup sink."""

    def __init__(self, diffgram: DiffgramDataset, writer: MarkupWriter, placeholder: str = "-"):
        """Index the diffgram for rendering.

        Args:
            diffgram: Diffgram dataset of one section
            writer: Markup sink receiving the table
            placeholder: Text of the cells padding rows that end above the
                deepest table level
        """
        self.diffgram = diffgram
        self.writer = writer
        self.placeholder = placeholder
        self.print_spec = diffgram.print_spec

        self._records: list[list[Record]] = [table.records() for table in diffgram.tables]
        self._frame_columns: list[list[str]] = [
            list(table.frame.columns) for table in diffgram.tables
        ]
        self._children = [self._index_children(i) for i in range(len(diffgram.tables))]
        self._max_cells = self.print_spec.visible_count()

    def _index_children(self, table_index: int) -> dict[tuple[Any, ...], list[Record]]:
        """Group the rows of the next table by the parent key they belong to."""
        tables = self.diffgram.tables
        if table_index + 1 >= len(tables):
            return {}

        parent_key = tables[table_index].primary_key
        child_prefix = tables[table_index + 1].primary_key[: len(parent_key)]
        if len(child_prefix) < len(parent_key):
            logger.warning(
                f"Table '{tables[table_index + 1].name}' has a shorter key than its parent "
                f"'{tables[table_index].name}'; no child rows will be rendered"
            )
            return {}

        index: dict[tuple[Any, ...], list[Record]] = defaultdict(list)
        for record in self._records[table_index + 1]:
            index[tuple(record[name] for name in child_prefix)].append(record)
        return index

    def child_rows(self, row: Record, table_index: int) -> list[Record]:
        """Rows of table `table_index + 1` whose key starts with the key of `row`."""
        key = tuple(row[name] for name in self.diffgram.tables[table_index].primary_key)
        return self._children[table_index].get(key, [])

    def _descendant_span(self, row: Record, table_index: int) -> int:
        span = 0
        for i, child in enumerate(self.child_rows(row, table_index)):
            if i > 0:
                span += 1
            span += self._descendant_span(child, table_index + 1)
        return span

    def row_span(self, row: Record, table_index: int) -> int:
        """Number of output rows covered by the cells of `row` (its leaf count)."""
        return self._descendant_span(row, table_index) + 1

    def render_table(self, css_class: str | None = None, headers: Sequence[str] | None = None):
        """Write the whole section as a single <table> element."""
        self.writer.begin_element("table")
        if css_class:
            self.writer.write_attribute("class", css_class)

        if headers:
            self.writer.begin_element("tr")
            for header in headers:
                self.writer.begin_element("th")
                self.writer.write_text(header)
                self.writer.end_element("th")
            self.writer.end_element("tr")
            self.writer.write_line()

        if self._records:
            logger.debug(
                f"Rendering '{self.diffgram.name}': {len(self._records[0])} top-level rows, "
                f"{self._max_cells} columns"
            )
            self.render_rows(self._records[0], 0)

        self.writer.end_element("table")
        self.writer.write_line()

    def render_rows(self, rows: list[Record], table_index: int, row_open: bool = False) -> None:
        """Write rows of one table level and, recursively, their descendants.

        Args:
            rows: Rows of table `table_index` to write, in order
            table_index: Level of the rows in the table hierarchy
            row_open: An ancestor already opened the current output row; only
                the first row of the level continues it
        """
        table = self.diffgram.tables[table_index]
        visible = self.print_spec.visible_columns(table_index)
        columns = [column for column in table.columns if column.ordinal in visible]
        first_cell = self.print_spec.visible_count(before_table=table_index)

        for row in rows:
            state = row[ROW_STATE_COLUMN]

            if not row_open:
                self.writer.begin_element("tr")
                self.writer.write_attribute("class", state)

            row_span = self.row_span(row, table_index)
            for column in columns:
                self.render_cell(row, column, row_span, table_index)

            children = self.child_rows(row, table_index)
            if children:
                self.render_rows(children, table_index + 1, row_open=True)
            else:
                for _ in range(first_cell + len(columns), self._max_cells):
                    self.writer.begin_element("td")
                    self.writer.write_attribute("class", state)
                    self.writer.write_attribute("rowspan", "1")
                    self.writer.write_text(self.placeholder)
                    self.writer.end_element("td")

                self.writer.end_element("tr")
                self.writer.write_line()

            # the last descendant closed the output row
            row_open = False

    def render_cell(self, row: Record, column: Column, row_span: int, table_index: int) -> None:
        """Write one <td>; modified values show the prior value struck out."""
        state = row[ROW_STATE_COLUMN]
        bookmark_index, jump_index = self.print_spec.bookmark_settings(
            table_index, column.ordinal
        )

        self.writer.begin_element("td")
        self.writer.write_attribute("class", state)
        self.writer.write_attribute("rowspan", str(row_span))

        text = _to_text(row[column.name])

        if column.is_key:
            self._write_value(row, text, state, table_index, bookmark_index, jump_index)
        elif state == RowState.MODIFIED:
            old_text = _to_text(row[old_column_name(column.name)])
            if old_text != text:
                self.writer.begin_element("span")
                self.writer.write_attribute("class", RowState.DELETED.value)
                self._write_value(
                    row, old_text, RowState.DELETED.value, table_index, bookmark_index, jump_index
                )
                self.writer.end_element("span")

            self.writer.begin_element("span")
            self.writer.write_attribute("class", RowState.MODIFIED.value)
            self._write_value(
                row, text, RowState.MODIFIED.value, table_index, bookmark_index, jump_index
            )
            self.writer.end_element("span")
        elif state == RowState.DELETED:
            old_text = _to_text(row[old_column_name(column.name)])
            self._write_value(
                row, old_text, RowState.DELETED.value, table_index, bookmark_index, jump_index
            )
        else:
            self._write_value(row, text, state, table_index, bookmark_index, jump_index)

        self.writer.end_element("td")

    def _write_value(
        self,
        row: Record,
        text: str,
        css_class: str,
        table_index: int,
        bookmark_index: int | None,
        jump_index: int | None,
    ) -> None:
        if bookmark_index is None and jump_index is None:
            self.writer.write_text(text)
            return

        source = bookmark_index if bookmark_index is not None else jump_index
        section_id = _to_text(row[self._frame_columns[table_index][source]])
        code = bookmark_code(text, section_id)

        self.writer.begin_element("a")
        self.writer.write_attribute("class", css_class)
        if bookmark_index is not None:
            self.writer.write_attribute("name", code)
        else:
            self.writer.write_attribute("href", f"#{code}")
        self.writer.write_text(text)
        self.writer.end_element("a")
