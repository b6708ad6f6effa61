"""Print specification: per-column display, sort, bookmark and change settings.

Every table of a dataset is described column by column. An entry decides
whether the column is rendered, whether it takes part in the sort of the
diffgram, whether its values become bookmark anchors or links, and whether
changes to it are ignored when rows are compared.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator

import pandas as pd

from .errors import RowInsertionError

logger = logging.getLogger(__name__)

PRINT_COLUMNS = [
    "TableIndex",
    "ColumnIndex",
    "Hidden",
    "SortOrder",
    "BookmarkIndex",
    "JumpToBookmarkIndex",
    "ChangeIgnored",
]

_PRINT_DTYPES = {
    "TableIndex": "int64",
    "ColumnIndex": "int64",
    "Hidden": "bool",
    "SortOrder": "int64",
    "BookmarkIndex": "int64",
    "JumpToBookmarkIndex": "int64",
    "ChangeIgnored": "bool",
}

NOT_SET = -1


@dataclass(frozen=True)
class PrintSetting:
    """Print settings for one column of one table.

    Attributes:
        table_index: Position of the table in its dataset
        column_index: Ordinal of the column in that table
        hidden: Column is not rendered
        sort_order: Sort precedence (ascending), -1 if not a sort key
        bookmark_index: Ordinal of the column whose value names the anchor
            written for this column, -1 for none
        jump_to_bookmark_index: Same as bookmark_index, but a link is written
        change_ignored: Column is left out when rows are compared
    """

    table_index: int
    column_index: int
    hidden: bool = False
    sort_order: int = NOT_SET
    bookmark_index: int = NOT_SET
    jump_to_bookmark_index: int = NOT_SET
    change_ignored: bool = False

    @property
    def key(self) -> tuple[int, int]:
        return (self.table_index, self.column_index)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "TableIndex": self.table_index,
            "ColumnIndex": self.column_index,
            "Hidden": self.hidden,
            "SortOrder": self.sort_order,
            "BookmarkIndex": self.bookmark_index,
            "JumpToBookmarkIndex": self.jump_to_bookmark_index,
            "ChangeIgnored": self.change_ignored,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrintSetting":
        """Create from dictionary loaded from JSON."""
        return cls(
            table_index=int(data["TableIndex"]),
            column_index=int(data["ColumnIndex"]),
            hidden=bool(data.get("Hidden", False)),
            sort_order=int(data.get("SortOrder", NOT_SET)),
            bookmark_index=int(data.get("BookmarkIndex", NOT_SET)),
            jump_to_bookmark_index=int(data.get("JumpToBookmarkIndex", NOT_SET)),
            change_ignored=bool(data.get("ChangeIgnored", False)),
        )


class PrintSpecification:
    """Print settings of a dataset, keyed by (table index, column index)."""

    def __init__(self, settings: list[PrintSetting] | None = None):
        self._settings: dict[tuple[int, int], PrintSetting] = {}
        self._frame: pd.DataFrame | None = None
        for setting in settings or []:
            self.add_setting(setting)

    def __len__(self) -> int:
        return len(self._settings)

    def __iter__(self) -> Iterator[PrintSetting]:
        return iter(self._settings.values())

    def add_setting(self, setting: PrintSetting) -> bool:
        """Add an entry; a duplicate (table, column) key is logged and skipped.

        Returns:
            True if the entry was added
        """
        try:
            self._insert(setting)
        except RowInsertionError as e:
            logger.error(f"Skipping print setting: {e}")
            return False
        return True

    def _insert(self, setting: PrintSetting) -> None:
        if setting.key in self._settings:
            raise RowInsertionError(
                f"Print setting for table {setting.table_index}, "
                f"column {setting.column_index} already exists"
            )
        self._settings[setting.key] = setting
        self._frame = None

    def add(
        self,
        table_index: int,
        column_index: int,
        *,
        hidden: bool = False,
        sort_order: int = NOT_SET,
        bookmark_index: int = NOT_SET,
        jump_to_bookmark_index: int = NOT_SET,
        change_ignored: bool = False,
    ) -> bool:
        """Add an entry built from keyword settings."""
        return self.add_setting(
            PrintSetting(
                table_index=table_index,
                column_index=column_index,
                hidden=hidden,
                sort_order=sort_order,
                bookmark_index=bookmark_index,
                jump_to_bookmark_index=jump_to_bookmark_index,
                change_ignored=change_ignored,
            )
        )

    def get(self, table_index: int, column_index: int) -> PrintSetting | None:
        return self._settings.get((table_index, column_index))

    @property
    def frame(self) -> pd.DataFrame:
        """All entries as a typed DataFrame with the PRINT_COLUMNS columns."""
        if self._frame is None:
            records = [setting.to_dict() for setting in self._settings.values()]
            self._frame = pd.DataFrame(records, columns=PRINT_COLUMNS).astype(_PRINT_DTYPES)
        return self._frame

    def sort_columns(self, table_index: int) -> list[int]:
        """Column indexes of the sort keys of a table, in ascending sort order."""
        frame = self.frame
        selected = frame[(frame["TableIndex"] == table_index) & (frame["SortOrder"] != NOT_SET)]
        selected = selected.sort_values("SortOrder", kind="stable")
        return [int(index) for index in selected["ColumnIndex"]]

    def ignored_columns(self, table_index: int) -> list[int]:
        """Column indexes of a table that are ignored when rows are compared."""
        frame = self.frame
        selected = frame[(frame["TableIndex"] == table_index) & frame["ChangeIgnored"]]
        return sorted(int(index) for index in selected["ColumnIndex"])

    def visible_columns(self, table_index: int) -> list[int]:
        """Column indexes of a table that are rendered, in ordinal order."""
        frame = self.frame
        selected = frame[(frame["TableIndex"] == table_index) & ~frame["Hidden"]]
        return sorted(int(index) for index in selected["ColumnIndex"])

    def visible_count(self, before_table: int | None = None) -> int:
        """Number of rendered columns, overall or for tables before `before_table`."""
        frame = self.frame
        mask = ~frame["Hidden"]
        if before_table is not None:
            mask = mask & (frame["TableIndex"] < before_table)
        return int(mask.sum())

    def bookmark_settings(self, table_index: int, column_index: int) -> tuple[int | None, int | None]:
        """Return (bookmark_index, jump_to_bookmark_index), None where not set."""
        setting = self.get(table_index, column_index)
        if setting is None:
            return None, None

        bookmark = setting.bookmark_index if setting.bookmark_index != NOT_SET else None
        jump = (
            setting.jump_to_bookmark_index if setting.jump_to_bookmark_index != NOT_SET else None
        )
        return bookmark, jump

    def copy(self) -> "PrintSpecification":
        return PrintSpecification(list(self._settings.values()))

    def to_list(self) -> list[dict[str, Any]]:
        """Entries as dictionaries for JSON serialization."""
        return [setting.to_dict() for setting in self._settings.values()]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> "PrintSpecification":
        """Create from a list of dictionaries loaded from JSON."""
        return cls([PrintSetting.from_dict(entry) for entry in data])
