"""Atomic text file output."""

import os
import tempfile
from pathlib import Path


def write_text_atomic(path: str | Path, content: str) -> None:
    """Write text to a file through a temporary file and an atomic rename.

    Args:
        path: Destination file; parent directories are created
        content: Text to write (UTF-8, LF newlines)

    The temporary file lives next to the destination and is removed if
    anything fails, so the destination is either fully written or untouched.
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    tmp_fd, tmp_path = tempfile.mkstemp(
        dir=path_obj.parent, prefix=f".{path_obj.name}.", suffix=".tmp", text=True
    )

    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)

        os.replace(tmp_path, path_obj)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
