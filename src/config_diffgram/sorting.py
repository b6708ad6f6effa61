"""Deterministic multi-column row sorting for diffgram tables."""

import logging

import pandas as pd

logger = logging.getLogger(__name__)

_NUMERIC_KINDS = {"integer", "floating", "mixed-integer-float"}


def _string_form(value):
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    return str(value)


def _sort_key(series: pd.Series) -> pd.Series:
    """Numeric columns sort by value, every other column by its string form."""
    kind = pd.api.types.infer_dtype(series, skipna=True)
    if kind in _NUMERIC_KINDS:
        return pd.to_numeric(series)
    return series.map(_string_form)


def sort_by_columns(df: pd.DataFrame, columns: list[int]) -> pd.DataFrame:
    """Sort DataFrame rows by column positions in ascending precedence.

    Args:
        df: DataFrame to sort
        columns: Column positions, first one has the highest precedence

    Returns:
        New sorted DataFrame (does not modify original)

    Sorting semantics:
        - Any number of sort columns
        - Stable: ties keep their current order
        - No sort columns: current order is kept
        - Numeric columns compare numerically, others as case-sensitive strings
        - None values sort last
    """
    if df.empty or not columns:
        return df.copy()

    names = list(df.columns)
    invalid = [position for position in columns if not 0 <= position < len(names)]
    if invalid:
        raise IndexError(f"Sort column positions {invalid} out of range for {len(names)} columns")

    by = [names[position] for position in columns]
    logger.debug(f"Sorting {len(df)} rows by {by}")

    df_sorted = df.sort_values(by=by, key=_sort_key, kind="stable", na_position="last")
    return df_sorted.reset_index(drop=True)
