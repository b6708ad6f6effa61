"""Builders for generic single-table sections.

Many configuration areas are flat lists of settings. Two shapes cover them:

- simple settings: name/value style rows keyed and sorted by the first column;
- simple ordered settings: rows whose order matters, keyed by a hidden integer
  position plus the leading value columns, and sorted by that position.

Each builder returns an empty (pilot, production) dataset pair with identical
schemas, ready to be filled by the caller.
"""

from .errors import InvalidInputError
from .models import Column, Dataset, Table
from .printspec import PrintSpecification

SIMPLE_SETTINGS = "SimpleSettings"
SIMPLE_ORDERED_SETTINGS = "SimpleOrderedSettings"


def _column_names(column_count: int) -> list[str]:
    return [f"Column{i + 1}" for i in range(column_count)]


def simple_settings_print_spec(column_count: int) -> PrintSpecification:
    print_spec = PrintSpecification()
    for i in range(column_count):
        print_spec.add(0, i, sort_order=0 if i == 0 else -1)
    return print_spec


def simple_settings_datasets(
    column_count: int, name: str = SIMPLE_SETTINGS
) -> tuple[Dataset, Dataset]:
    """Create the dataset pair of a simple settings section.

    Args:
        column_count: Number of columns; the first one is the key
        name: Section name

    Returns:
        (pilot, production) datasets with one empty table
    """
    if column_count < 1:
        raise InvalidInputError("A simple settings section needs at least one column")

    table = Table(SIMPLE_SETTINGS, _column_names(column_count), ["Column1"])
    pilot = Dataset(name, [table], simple_settings_print_spec(column_count))
    return pilot, pilot.clone()


def simple_ordered_settings_print_spec(column_count: int) -> PrintSpecification:
    print_spec = PrintSpecification()
    for i in range(column_count):
        print_spec.add(0, i, hidden=i == 0, sort_order=0 if i == 0 else -1)
    return print_spec


def simple_ordered_settings_datasets(
    column_count: int, key_count: int = 2, name: str = SIMPLE_ORDERED_SETTINGS
) -> tuple[Dataset, Dataset]:
    """Create the dataset pair of a simple ordered settings section.

    Args:
        column_count: Number of columns; Column1 is the hidden integer position
        key_count: Number of leading columns forming the primary key
        name: Section name

    Returns:
        (pilot, production) datasets with one empty table
    """
    if not 1 <= key_count <= column_count:
        raise InvalidInputError(
            f"Key count must be between 1 and the column count ({column_count}), got {key_count}"
        )

    names = _column_names(column_count)
    columns = [Column(names[0], "int")] + [Column(col) for col in names[1:]]
    table = Table(SIMPLE_ORDERED_SETTINGS, columns, names[:key_count])
    pilot = Dataset(name, [table], simple_ordered_settings_print_spec(column_count))
    return pilot, pilot.clone()
