"""JSON snapshots of configuration datasets.

A snapshot file holds every section (dataset) extracted from one
configuration, pilot or production:

    {
      "version": 1,
      "datasets": [
        {
          "name": "Connectors",
          "tables": [
            {
              "name": "Connector",
              "columns": [{"name": "Name", "dtype": "str"}, ...],
              "primary_key": ["Name"],
              "rows": [["AD", "..."], {"values": ["None", ""], "vanity": true}]
            }
          ],
          "print_settings": [{"TableIndex": 0, "ColumnIndex": 0, ...}]
        }
      ]
    }

Rows are value lists; a row object with "vanity": true marks a placeholder row.
"""

import json
import logging
from typing import Any

from .errors import InvalidInputError
from .models import Column, Dataset, Row, Table
from .printspec import PrintSpecification
from .textio import write_text_atomic

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def table_to_dict(table: Table) -> dict[str, Any]:
    rows: list[Any] = []
    for row in table:
        if row.vanity:
            rows.append({"values": list(row.values), "vanity": True})
        else:
            rows.append(list(row.values))

    return {
        "name": table.name,
        "columns": [{"name": column.name, "dtype": column.dtype} for column in table.columns],
        "primary_key": list(table.primary_key),
        "rows": rows,
    }


def table_from_dict(data: dict[str, Any]) -> Table:
    table = Table(
        data["name"],
        [Column(column["name"], column.get("dtype", "object")) for column in data["columns"]],
        data["primary_key"],
    )
    for entry in data.get("rows", []):
        if isinstance(entry, dict):
            table.add_row(Row(tuple(entry["values"]), vanity=bool(entry.get("vanity", False))))
        else:
            table.add_values(entry)
    return table


def dataset_to_dict(dataset: Dataset) -> dict[str, Any]:
    return {
        "name": dataset.name,
        "tables": [table_to_dict(table) for table in dataset.tables],
        "print_settings": dataset.print_spec.to_list(),
    }


def dataset_from_dict(data: dict[str, Any]) -> Dataset:
    return Dataset(
        name=data["name"],
        tables=[table_from_dict(table) for table in data.get("tables", [])],
        print_spec=PrintSpecification.from_list(data.get("print_settings", [])),
    )


class SnapshotIO:
    """Read and write snapshot JSON files with deterministic formatting."""

    @staticmethod
    def write(datasets: list[Dataset], path: str) -> None:
        """Write datasets to a snapshot file.

        The output is formatted deterministically (sorted keys, 2-space
        indentation, UTF-8, LF newlines, trailing newline) and written
        atomically.
        """
        data = {
            "version": SNAPSHOT_VERSION,
            "datasets": [dataset_to_dict(dataset) for dataset in datasets],
        }
        json_str = json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False) + "\n"
        write_text_atomic(path, json_str)
        logger.info(f"Wrote {len(datasets)} dataset(s) to {path}")

    @staticmethod
    def read(path: str) -> list[Dataset]:
        """Read datasets from a snapshot file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
            InvalidInputError: If the JSON does not describe a snapshot
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict) or "datasets" not in data:
            raise InvalidInputError(f"{path}: not a snapshot file (no 'datasets' key)")

        version = data.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            raise InvalidInputError(f"{path}: unsupported snapshot version {version}")

        try:
            datasets = [dataset_from_dict(entry) for entry in data["datasets"]]
        except (KeyError, TypeError) as e:
            raise InvalidInputError(f"{path}: malformed snapshot: {e!r}") from e

        logger.info(f"Read {len(datasets)} dataset(s) from {path}")
        return datasets
