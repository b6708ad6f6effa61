"""Exceptions raised while building, diffing and rendering configuration tables."""


class ConfigDiffgramError(Exception):
    """Base class for all config-diffgram errors."""


class InvalidInputError(ConfigDiffgramError, ValueError):
    """Tables, datasets or snapshot files that cannot be compared."""


class RowInsertionError(ConfigDiffgramError):
    """A row violates the constraints of the table it is added to."""
