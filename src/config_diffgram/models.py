"""Data models for configuration snapshots.

A snapshot section is a Dataset: an ordered list of Tables plus the print
specification that says how to compare and render them. Tables are linked by
position: the rows of table i+1 are the children of the table i row whose
primary key matches the leading primary-key values of the child.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Iterator, Sequence

import pandas as pd

from .errors import InvalidInputError, RowInsertionError
from .printspec import PrintSpecification

logger = logging.getLogger(__name__)

DTYPES: dict[str, type | tuple[type, ...]] = {
    "object": object,
    "str": str,
    "int": int,
    "float": (int, float),
    "bool": bool,
}


class RowState(StrEnum):
    """Classification of a row after comparing pilot with production."""

    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    UNCHANGED = "Unchanged"


@dataclass(frozen=True)
class Column:
    """A table column.

    Attributes:
        name: Column name, unique within its table
        dtype: Declared value type (object, str, int, float or bool)
        ordinal: Position of the column in its table
        is_key: Column is part of the primary key
    """

    name: str
    dtype: str = "object"
    ordinal: int = -1
    is_key: bool = False

    def accepts(self, value: Any) -> bool:
        """Check a non-null value against the declared type."""
        if self.dtype in ("int", "float") and isinstance(value, bool):
            return False
        return isinstance(value, DTYPES[self.dtype])


@dataclass(frozen=True)
class Row:
    """Values of one row, aligned with the table's columns.

    A vanity row is a placeholder: when it would be reported as deleted it is
    dropped from the diff instead.
    """

    values: tuple[Any, ...]
    vanity: bool = False


def normalize_value(value: Any) -> Any:
    """Map pandas/numpy missing values to None."""
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    return value


def _as_int(value: Any) -> Any:
    """Undo the float upcast pandas applies to integer columns with missing values."""
    if pd.api.types.is_integer(value):
        return int(value)
    if pd.api.types.is_float(value) and not pd.isna(value) and float(value).is_integer():
        return int(value)
    return value


class Table:
    """An ordered set of rows with a composite primary key."""

    def __init__(self, name: str, columns: Sequence[Column | str], primary_key: Sequence[str]):
        """Create an empty table.

        Args:
            name: Table name
            columns: Columns in output order; plain strings become object columns
            primary_key: Names of the key columns, in key order

        Raises:
            InvalidInputError: If the key is empty or names unknown columns, if
                column names repeat, or if a declared type is unknown
        """
        if not primary_key:
            raise InvalidInputError(f"Table '{name}' needs at least one primary key column")

        self.name = name
        self.columns: list[Column] = []
        for ordinal, column in enumerate(columns):
            if isinstance(column, str):
                column = Column(column)
            if column.dtype not in DTYPES:
                raise InvalidInputError(
                    f"Table '{name}': unknown type '{column.dtype}' for column '{column.name}'"
                )
            self.columns.append(
                replace(column, ordinal=ordinal, is_key=column.name in primary_key)
            )

        names = self.column_names
        if len(set(names)) != len(names):
            raise InvalidInputError(f"Table '{name}' has duplicate column names: {names}")

        missing = [key for key in primary_key if key not in names]
        if missing:
            raise InvalidInputError(f"Table '{name}': primary key columns not found: {missing}")

        self.primary_key: list[str] = list(primary_key)
        self._rows: list[Row] = []
        self._keys: set[tuple[Any, ...]] = set()

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={self.column_names}, rows={len(self._rows)})"

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    @property
    def rows(self) -> list[Row]:
        return list(self._rows)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    @property
    def key_ordinals(self) -> list[int]:
        """Ordinals of the primary key columns, in key order."""
        names = self.column_names
        return [names.index(key) for key in self.primary_key]

    def column(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    def key_of(self, row: Row) -> tuple[Any, ...]:
        """Primary key tuple of a row of this table."""
        return tuple(row.values[ordinal] for ordinal in self.key_ordinals)

    def add_row(self, row: Row) -> bool:
        """Append a row; a row that violates the table constraints is logged and skipped.

        Returns:
            True if the row was added
        """
        try:
            self._insert(row)
        except RowInsertionError as e:
            logger.error(f"Skipping row in table '{self.name}': {e}")
            return False
        return True

    def add_values(self, values: Sequence[Any], vanity: bool = False) -> bool:
        """Append a row built from raw values (see add_row)."""
        return self.add_row(Row(tuple(values), vanity=vanity))

    def _insert(self, row: Row) -> None:
        if len(row.values) != len(self.columns):
            raise RowInsertionError(
                f"expected {len(self.columns)} values, got {len(row.values)}: {row.values}"
            )

        values = tuple(normalize_value(value) for value in row.values)
        for column, value in zip(self.columns, values):
            if value is None:
                if column.is_key:
                    raise RowInsertionError(f"NULL value in primary key column '{column.name}'")
                continue
            if not column.accepts(value):
                raise RowInsertionError(
                    f"value {value!r} in column '{column.name}' is not of type {column.dtype}"
                )

        normalized = Row(values, vanity=row.vanity)
        key = self.key_of(normalized)
        if key in self._keys:
            raise RowInsertionError(f"duplicate primary key {key}")

        self._keys.add(key)
        self._rows.append(normalized)

    def clone(self) -> "Table":
        """Copy of the schema without rows."""
        return Table(self.name, self.columns, self.primary_key)

    def same_schema(self, other: "Table") -> bool:
        """True if both tables have the same columns, types and key."""
        return [(c.name, c.dtype) for c in self.columns] == [
            (c.name, c.dtype) for c in other.columns
        ] and self.primary_key == other.primary_key

    def to_frame(self) -> pd.DataFrame:
        """Rows as an object-dtype DataFrame (vanity flags are not included)."""
        return pd.DataFrame(
            [row.values for row in self._rows], columns=self.column_names, dtype=object
        )

    @classmethod
    def from_frame(
        cls,
        name: str,
        df: pd.DataFrame,
        primary_key: Sequence[str],
        dtypes: dict[str, str] | None = None,
    ) -> "Table":
        """Build a table from a DataFrame; invalid rows are logged and skipped.

        Args:
            name: Table name
            df: Source rows; column order becomes the table's column order
            primary_key: Names of the key columns
            dtypes: Optional declared type per column name (default: object)

        Integral floats in "int" columns (pandas stores an integer column with
        missing values as float) are turned back into ints.
        """
        dtypes = dtypes or {}
        table = cls(
            name,
            [Column(str(col), dtypes.get(str(col), "object")) for col in df.columns],
            primary_key,
        )
        int_ordinals = [column.ordinal for column in table.columns if column.dtype == "int"]
        for values in df.astype(object).itertuples(index=False, name=None):
            values = list(values)
            for ordinal in int_ordinals:
                values[ordinal] = _as_int(values[ordinal])
            table.add_values(values)
        return table


@dataclass
class Dataset:
    """Positionally linked tables plus their print specification.

    Attributes:
        name: Section name
        tables: Tables in hierarchy order (parent level first)
        print_spec: Print settings keyed by table index and column index
    """

    name: str
    tables: list[Table] = field(default_factory=list)
    print_spec: PrintSpecification = field(default_factory=PrintSpecification)

    def add_table(self, table: Table) -> int:
        """Append a table and return its index."""
        self.tables.append(table)
        return len(self.tables) - 1

    def table(self, name: str) -> Table:
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(name)

    def clone(self) -> "Dataset":
        """Copy of every table schema and the print specification, without rows."""
        return Dataset(
            name=self.name,
            tables=[table.clone() for table in self.tables],
            print_spec=self.print_spec.copy(),
        )
