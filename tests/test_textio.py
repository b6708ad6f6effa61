"""Tests for atomic text output."""

import pytest

from config_diffgram.textio import write_text_atomic


def test_write_creates_parents(tmp_path):
    path = tmp_path / "a" / "b" / "out.txt"

    write_text_atomic(path, "line\n")

    assert path.read_bytes() == b"line\n"


def test_write_replaces_existing(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old", encoding="utf-8")

    write_text_atomic(str(path), "new")

    assert path.read_text(encoding="utf-8") == "new"


def test_failed_write_keeps_destination(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old", encoding="utf-8")

    with pytest.raises(TypeError):
        write_text_atomic(path, None)

    assert path.read_text(encoding="utf-8") == "old"
    assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]
