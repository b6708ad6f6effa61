"""Tests for diff command."""

import json

import pytest

from config_diffgram.commands.diff import (
    compute_diff,
    diff_snapshots,
    has_changes,
    pair_datasets,
    summarize,
)
from config_diffgram.models import Dataset
from config_diffgram.snapshot import SnapshotIO


@pytest.fixture
def snapshots(tmp_path, rules_dataset, tree_rows):
    """Write pilot/production snapshot files; production lacks step S2 and rule R2."""

    def write(pilot_datasets=None, production_datasets=None):
        if pilot_datasets is None:
            pilot_datasets = [rules_dataset(**tree_rows)]
        if production_datasets is None:
            production_datasets = [
                rules_dataset(
                    rules=[("R1", "first")],
                    flows=tree_rows["flows"],
                    steps=[("R1", "F1", "S1", "old")],
                )
            ]
        pilot = tmp_path / "pilot.json"
        production = tmp_path / "production.json"
        SnapshotIO.write(pilot_datasets, str(pilot))
        SnapshotIO.write(production_datasets, str(production))
        return str(pilot), str(production)

    return write


def test_pair_datasets_by_name(rules_dataset):
    pilot = [rules_dataset(name="A"), rules_dataset(name="B")]
    production = [rules_dataset(name="B"), rules_dataset(name="C")]

    pairs = pair_datasets(pilot, production)

    assert [(p.name, q.name) for p, q in pairs] == [("A", "A"), ("B", "B"), ("C", "C")]
    assert pairs[1][1] is production[0]


def test_section_only_in_production_is_deleted(rules_dataset, tree_rows, caplog):
    pilot = []
    production = [rules_dataset(**tree_rows)]

    diffgrams = compute_diff(pilot, production)

    assert "only exists in production" in caplog.text
    counts = [table.state_counts() for table in diffgrams[0].tables]
    assert [c["Deleted"] for c in counts] == [2, 3, 2]
    assert all(c["Deleted"] == sum(c.values()) for c in counts)


def test_section_only_in_pilot_is_added(rules_dataset, tree_rows):
    diffgrams = compute_diff([rules_dataset(**tree_rows)], [])

    assert diffgrams[0].tables[0].state_counts()["Added"] == 2


def test_summarize(rules_dataset, tree_rows):
    production = rules_dataset(
        rules=[("R1", "first")], flows=tree_rows["flows"], steps=[("R1", "F1", "S1", "old")]
    )
    diffgrams = compute_diff([rules_dataset(**tree_rows)], [production])

    summary = summarize(diffgrams)

    assert summary["summary"] == {"Added": 2, "Modified": 1, "Deleted": 0, "Unchanged": 4}
    section = summary["sections"][0]
    assert section["section"] == "SyncRules"
    assert [entry["table"] for entry in section["tables"]] == ["Rule", "Flow", "Step"]
    assert section["tables"][2]["counts"] == {
        "Added": 1,
        "Modified": 1,
        "Deleted": 0,
        "Unchanged": 0,
    }
    assert has_changes(summary)


def test_summarize_no_changes(rules_dataset, tree_rows):
    summary = summarize(compute_diff([rules_dataset(**tree_rows)], [rules_dataset(**tree_rows)]))

    assert summary["summary"]["Unchanged"] == 7
    assert not has_changes(summary)


def test_diff_snapshots_to_stdout(snapshots, capsys):
    pilot, production = snapshots()

    exit_code = diff_snapshots(pilot, production)

    assert exit_code == 1
    captured = capsys.readouterr()
    assert "SyncRules" in captured.out
    assert "Step" in captured.out


def test_diff_snapshots_to_file(snapshots, tmp_path):
    pilot, production = snapshots()
    output = tmp_path / "diff.json"

    exit_code = diff_snapshots(pilot, production, str(output))

    assert exit_code == 1
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["summary"]["Added"] == 2
    assert data["sections"][0]["tables"][0]["counts"]["Added"] == 1


def test_diff_snapshots_identical_returns_zero(snapshots, rules_dataset, tree_rows):
    pilot, production = snapshots(production_datasets=[rules_dataset(**tree_rows)])

    assert diff_snapshots(pilot, production) == 0


def test_diff_snapshots_missing_file(tmp_path, capsys):
    exit_code = diff_snapshots(str(tmp_path / "a.json"), str(tmp_path / "b.json"))

    assert exit_code == 1
    assert "Error" in capsys.readouterr().out


def test_diff_snapshots_schema_mismatch(snapshots, id_name_tables):
    items, _ = id_name_tables([(1, "A")], [])
    pilot, production = snapshots(production_datasets=[Dataset("SyncRules", [items])])

    assert diff_snapshots(pilot, production) == 1
