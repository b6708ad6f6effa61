"""Shared fixtures: small pilot/production datasets."""

import pytest

from config_diffgram.models import Column, Dataset, Table
from config_diffgram.printspec import PrintSpecification


def _rules_print_spec(hidden_tables=()) -> PrintSpecification:
    """Print settings of the Rule/Flow/Step dataset; `hidden_tables` hides whole levels."""
    print_spec = PrintSpecification()
    # Rule: Rule, Description
    print_spec.add(0, 0, sort_order=0, hidden=0 in hidden_tables)
    print_spec.add(0, 1, hidden=0 in hidden_tables)
    # Flow: Rule (hidden), Flow, Target
    print_spec.add(1, 0, hidden=True)
    print_spec.add(1, 1, sort_order=0, hidden=1 in hidden_tables)
    print_spec.add(1, 2, hidden=1 in hidden_tables)
    # Step: Rule, Flow (hidden), Step, Value
    print_spec.add(2, 0, hidden=True)
    print_spec.add(2, 1, hidden=True)
    print_spec.add(2, 2, sort_order=0, hidden=2 in hidden_tables)
    print_spec.add(2, 3, hidden=2 in hidden_tables)
    return print_spec


@pytest.fixture
def rules_dataset():
    """Factory for a three-level Rule -> Flow -> Step dataset.

    Args of the factory:
        rules: (rule, description) tuples
        flows: (rule, flow, target) tuples
        steps: (rule, flow, step, value) tuples
        hidden_tables: indexes of levels whose columns are all hidden
    """

    def build(rules=(), flows=(), steps=(), name="SyncRules", hidden_tables=()):
        rule_table = Table("Rule", [Column("Rule", "str"), Column("Description", "str")], ["Rule"])
        flow_table = Table(
            "Flow",
            [Column("Rule", "str"), Column("Flow", "str"), Column("Target", "str")],
            ["Rule", "Flow"],
        )
        step_table = Table(
            "Step",
            [Column("Rule", "str"), Column("Flow", "str"), Column("Step", "str"), Column("Value")],
            ["Rule", "Flow", "Step"],
        )
        for values in rules:
            rule_table.add_values(values)
        for values in flows:
            flow_table.add_values(values)
        for values in steps:
            step_table.add_values(values)

        return Dataset(
            name, [rule_table, flow_table, step_table], _rules_print_spec(hidden_tables)
        )

    return build


@pytest.fixture
def tree_rows():
    """R1 has flows F1 (steps S1, S2), F2 and F3; R2 has no flows."""
    return {
        "rules": [("R1", "first"), ("R2", "second")],
        "flows": [("R1", "F1", "t1"), ("R1", "F2", "t2"), ("R1", "F3", "t3")],
        "steps": [("R1", "F1", "S1", "v1"), ("R1", "F1", "S2", "v2")],
    }


@pytest.fixture
def id_name_tables():
    """Factory for a pilot/production pair keyed by an integer Id."""

    def build(pilot_rows, production_rows, extra_columns=()):
        columns = [Column("Id", "int"), Column("Name", "str"), *extra_columns]
        pilot = Table("Items", columns, ["Id"])
        production = Table("Items", columns, ["Id"])
        for values in pilot_rows:
            pilot.add_values(values)
        for values in production_rows:
            production.add_values(values)
        return pilot, production

    return build
