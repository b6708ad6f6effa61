from .diff import diff_snapshots
from .report import generate_report

__all__ = ["diff_snapshots", "generate_report"]
