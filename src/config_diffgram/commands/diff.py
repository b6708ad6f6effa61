"""Diff command implementation - row-state counts for two snapshots."""

import json
import logging
from typing import Any

from rich.console import Console
from rich.table import Table as RichTable

from ..diffgram import DiffgramDataset, diff_datasets
from ..models import Dataset, RowState
from ..snapshot import SnapshotIO
from ..textio import write_text_atomic

logger = logging.getLogger(__name__)
console = Console()


def pair_datasets(
    pilot_datasets: list[Dataset], production_datasets: list[Dataset]
) -> list[tuple[Dataset, Dataset]]:
    """Pair datasets by name.

    Pilot order comes first, followed by datasets only found in production. A
    dataset missing on one side is paired with an empty copy of the other
    side's schema, so all its rows are reported as added or deleted.
    """
    production_by_name = {dataset.name: dataset for dataset in production_datasets}
    pilot_names = {dataset.name for dataset in pilot_datasets}

    pairs = []
    for pilot in pilot_datasets:
        production = production_by_name.get(pilot.name)
        if production is None:
            logger.warning(f"Section '{pilot.name}' only exists in pilot")
            production = pilot.clone()
        pairs.append((pilot, production))

    for production in production_datasets:
        if production.name not in pilot_names:
            logger.warning(f"Section '{production.name}' only exists in production")
            pairs.append((production.clone(), production))

    return pairs


def compute_diff(
    pilot_datasets: list[Dataset], production_datasets: list[Dataset]
) -> list[DiffgramDataset]:
    """Diff every section of two snapshots."""
    return [
        diff_datasets(pilot, production)
        for pilot, production in pair_datasets(pilot_datasets, production_datasets)
    ]


def summarize(diffgrams: list[DiffgramDataset]) -> dict[str, Any]:
    """Row-state counts per table, per section and in total."""
    totals = {state.value: 0 for state in RowState}
    sections = []

    for diffgram in diffgrams:
        tables = []
        for table in diffgram.tables:
            counts = table.state_counts()
            for state, count in counts.items():
                totals[state] += count
            tables.append({"table": table.name, "counts": counts})
        sections.append({"section": diffgram.name, "tables": tables})

    return {"sections": sections, "summary": totals}


def _print_summary(summary: dict[str, Any]) -> None:
    table = RichTable(title="Configuration changes")
    table.add_column("Section")
    table.add_column("Table")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Modified", justify="right", style="yellow")
    table.add_column("Deleted", justify="right", style="red")
    table.add_column("Unchanged", justify="right", style="dim")

    for section in summary["sections"]:
        for entry in section["tables"]:
            counts = entry["counts"]
            table.add_row(
                section["section"],
                entry["table"],
                *(str(counts[state.value]) for state in RowState),
            )

    console.print(table)


def has_changes(summary: dict[str, Any]) -> bool:
    totals = summary["summary"]
    return any(totals[state.value] for state in RowState if state != RowState.UNCHANGED)


def diff_snapshots(pilot: str, production: str, output: str | None = None) -> int:
    """Compare two snapshot files row by row.

    Args:
        pilot: Path to the pilot snapshot JSON
        production: Path to the production snapshot JSON
        output: Optional output file for the summary JSON (default: console table)

    Returns:
        0 if no differences found, 1 if differences found or errors occurred
    """
    try:
        diffgrams = compute_diff(SnapshotIO.read(pilot), SnapshotIO.read(production))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    summary = summarize(diffgrams)

    if output:
        try:
            write_text_atomic(output, json.dumps(summary, indent=2, ensure_ascii=False) + "\n")
            console.print(f"[green]✓[/green] Diff written to {output}")
        except Exception as e:
            console.print(f"[red]Error:[/red] Failed to write output: {e}")
            return 1
    else:
        _print_summary(summary)

    return 1 if has_changes(summary) else 0
