"""Row-level diff of pilot and production tables.

A diffgram table holds, for every row of either side, the current values, a
ROW-STATE column (Added, Modified, Deleted or Unchanged) and one OLD-<name>
column per non-key column carrying the production value of modified and
deleted rows.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Sequence

import pandas as pd

from .errors import InvalidInputError
from .models import Column, Dataset, Row, RowState, Table
from .printspec import PrintSpecification
from .sorting import sort_by_columns

logger = logging.getLogger(__name__)

ROW_STATE_COLUMN = "ROW-STATE"
OLD_COLUMN_PREFIX = "OLD-"


def old_column_name(name: str) -> str:
    """Name of the shadow column holding the prior value of `name`."""
    return OLD_COLUMN_PREFIX + name


@dataclass
class DiffgramTable:
    """Diff result for one table pair.

    Attributes:
        name: Name of the compared table
        columns: Columns of the compared table (current values)
        primary_key: Key column names of the compared table
        frame: Object-dtype rows; source columns, then ROW-STATE, then OLD-<name>
            for each non-key column
    """

    name: str
    columns: list[Column]
    primary_key: list[str]
    frame: pd.DataFrame

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def __len__(self) -> int:
        return len(self.frame)

    def records(self) -> list[dict[str, Any]]:
        """Rows as dictionaries keyed by frame column name."""
        return self.frame.to_dict(orient="records")

    def rows_in_state(self, state: RowState) -> pd.DataFrame:
        return self.frame[self.frame[ROW_STATE_COLUMN] == state.value]

    def state_counts(self) -> dict[str, int]:
        """Number of rows per row state (every state is present)."""
        counts = self.frame[ROW_STATE_COLUMN].value_counts()
        return {state.value: int(counts.get(state.value, 0)) for state in RowState}

    def has_changes(self) -> bool:
        counts = self.state_counts()
        return counts[RowState.UNCHANGED.value] != len(self.frame)

    def sorted(self, columns: list[int]) -> "DiffgramTable":
        """Copy sorted by column positions (see sorting.sort_by_columns)."""
        return replace(self, frame=sort_by_columns(self.frame, columns))


@dataclass
class DiffgramDataset:
    """Diffgram tables of a dataset pair with the print specification used."""

    name: str
    tables: list[DiffgramTable]
    print_spec: PrintSpecification

    def has_changes(self) -> bool:
        return any(table.has_changes() for table in self.tables)


def _values_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return bool(a == b)


def _check_tables(pilot: Table, production: Table, ignored_columns: Iterable[int]) -> None:
    if pilot is None:
        raise InvalidInputError("Pilot table is missing")
    if production is None:
        raise InvalidInputError("Production table is missing")

    if pilot.primary_key != production.primary_key:
        raise InvalidInputError(
            f"Table '{pilot.name}': primary keys differ - pilot {pilot.primary_key}, "
            f"production {production.primary_key}"
        )
    if not pilot.same_schema(production):
        raise InvalidInputError(
            f"Table '{pilot.name}': column schemas differ - pilot {pilot.column_names}, "
            f"production {production.column_names}"
        )

    key_ordinals = set(pilot.key_ordinals)
    for ordinal in ignored_columns:
        if not 0 <= ordinal < len(pilot.columns):
            raise InvalidInputError(f"Table '{pilot.name}': ignored column {ordinal} out of range")
        if ordinal in key_ordinals:
            raise InvalidInputError(
                f"Table '{pilot.name}': key column {ordinal} cannot be ignored"
            )


def diff_tables(
    pilot: Table, production: Table, ignored_columns: Sequence[int] = ()
) -> DiffgramTable:
    """Classify the rows of a pilot/production table pair.

    Args:
        pilot: Table holding the current configuration
        production: Table holding the prior configuration (same schema)
        ignored_columns: Ordinals of non-key columns left out of the comparison;
            they are still carried to the output

    Returns:
        DiffgramTable with Unchanged, Modified and Added rows in pilot order,
        followed by Deleted rows in production order

    Raises:
        InvalidInputError: If a table is missing, schemas or keys differ, or an
            ignored ordinal is out of range or names a key column

    Rows are matched on equal primary-key tuples. Production rows flagged as
    vanity rows are never reported as deleted.
    """
    _check_tables(pilot, production, ignored_columns)

    ignored = set(ignored_columns)
    compared = [ordinal for ordinal in range(len(pilot.columns)) if ordinal not in ignored]
    non_key = [column for column in pilot.columns if not column.is_key]

    production_index = {production.key_of(row): row for row in production}
    matched: set[tuple[Any, ...]] = set()

    unchanged: list[Row] = []
    modified: list[tuple[Row, Row]] = []
    added: list[Row] = []

    for row in pilot:
        key = pilot.key_of(row)
        match = production_index.get(key)
        if match is None:
            added.append(row)
            continue

        matched.add(key)
        if all(_values_equal(row.values[i], match.values[i]) for i in compared):
            unchanged.append(row)
        else:
            modified.append((row, match))

    deleted: list[Row] = []
    for row in production:
        if production.key_of(row) in matched:
            continue
        if row.vanity:
            logger.debug(f"Table '{production.name}': dropping vanity row {row.values}")
            continue
        deleted.append(row)

    def record(values: tuple[Any, ...], state: RowState, prior: Row | None) -> list[Any]:
        old = [prior.values[c.ordinal] if prior is not None else None for c in non_key]
        return [*values, state.value, *old]

    records = [record(row.values, RowState.UNCHANGED, None) for row in unchanged]
    records += [record(row.values, RowState.MODIFIED, prior) for row, prior in modified]
    records += [record(row.values, RowState.ADDED, None) for row in added]
    records += [record(row.values, RowState.DELETED, row) for row in deleted]

    frame_columns = [
        *pilot.column_names,
        ROW_STATE_COLUMN,
        *(old_column_name(column.name) for column in non_key),
    ]

    logger.debug(
        f"Table '{pilot.name}': {len(unchanged)} unchanged, {len(modified)} modified, "
        f"{len(added)} added, {len(deleted)} deleted"
    )

    return DiffgramTable(
        name=pilot.name,
        columns=list(pilot.columns),
        primary_key=list(pilot.primary_key),
        frame=pd.DataFrame(records, columns=frame_columns, dtype=object),
    )


def diff_datasets(pilot: Dataset, production: Dataset) -> DiffgramDataset:
    """Diff every table of a dataset pair and sort each result.

    Tables are paired by position. Ignored and sort columns of table i come
    from the pilot print specification; the print specification is copied to
    the result unchanged.

    Raises:
        InvalidInputError: If a dataset is missing or the table counts differ
    """
    if pilot is None:
        raise InvalidInputError("Pilot dataset is missing")
    if production is None:
        raise InvalidInputError("Production dataset is missing")
    if len(pilot.tables) != len(production.tables):
        raise InvalidInputError(
            f"Dataset '{pilot.name}': pilot has {len(pilot.tables)} tables, "
            f"production has {len(production.tables)}"
        )

    print_spec = pilot.print_spec
    tables: list[DiffgramTable] = []

    for index, (pilot_table, production_table) in enumerate(
        zip(pilot.tables, production.tables)
    ):
        diffgram = diff_tables(
            pilot_table, production_table, print_spec.ignored_columns(index)
        ).sorted(print_spec.sort_columns(index))
        logger.info(f"{pilot.name}/{diffgram.name}: {diffgram.state_counts()}")
        tables.append(diffgram)

    return DiffgramDataset(name=pilot.name, tables=tables, print_spec=print_spec.copy())
