"""config-diffgram - row-level change reports for pilot and production configurations."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("config-diffgram")
except PackageNotFoundError:
    __version__ = "unknown"
