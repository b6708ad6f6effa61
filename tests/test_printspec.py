"""Tests for the print specification."""

import logging

import pytest

from config_diffgram.printspec import PRINT_COLUMNS, PrintSetting, PrintSpecification


@pytest.fixture
def print_spec():
    spec = PrintSpecification()
    spec.add(0, 0, sort_order=1)
    spec.add(0, 1, hidden=True)
    spec.add(0, 2, sort_order=0, change_ignored=True)
    spec.add(0, 3, bookmark_index=0)
    spec.add(1, 0, hidden=True, sort_order=0)
    spec.add(1, 1, jump_to_bookmark_index=0)
    return spec


def test_sort_columns_follow_sort_order(print_spec):
    assert print_spec.sort_columns(0) == [2, 0]
    assert print_spec.sort_columns(1) == [0]
    assert print_spec.sort_columns(5) == []


def test_ignored_columns(print_spec):
    assert print_spec.ignored_columns(0) == [2]
    assert print_spec.ignored_columns(1) == []


def test_visible_columns(print_spec):
    assert print_spec.visible_columns(0) == [0, 2, 3]
    assert print_spec.visible_columns(1) == [1]


def test_visible_count(print_spec):
    assert print_spec.visible_count() == 4
    assert print_spec.visible_count(before_table=0) == 0
    assert print_spec.visible_count(before_table=1) == 3
    assert print_spec.visible_count(before_table=2) == 4


def test_bookmark_settings(print_spec):
    assert print_spec.bookmark_settings(0, 3) == (0, None)
    assert print_spec.bookmark_settings(1, 1) == (None, 0)
    assert print_spec.bookmark_settings(0, 0) == (None, None)
    assert print_spec.bookmark_settings(9, 9) == (None, None)


def test_frame_columns_and_types(print_spec):
    frame = print_spec.frame
    assert frame.columns.tolist() == PRINT_COLUMNS
    assert len(frame) == 6
    assert frame["Hidden"].dtype == bool


def test_empty_specification():
    spec = PrintSpecification()
    assert len(spec) == 0
    assert spec.sort_columns(0) == []
    assert spec.visible_columns(0) == []
    assert spec.visible_count() == 0


def test_duplicate_entry_logged_and_skipped(print_spec, caplog):
    with caplog.at_level(logging.ERROR):
        assert print_spec.add(0, 0, hidden=True) is False
    assert print_spec.get(0, 0).hidden is False
    assert "already exists" in caplog.text


def test_frame_refreshed_after_add(print_spec):
    assert print_spec.visible_count() == 4
    print_spec.add(1, 2)
    assert print_spec.visible_count() == 5


def test_copy_is_independent(print_spec):
    copy = print_spec.copy()
    copy.add(2, 0)
    assert len(copy) == 7
    assert len(print_spec) == 6


def test_setting_dict_uses_column_names():
    setting = PrintSetting(0, 1, sort_order=2)
    data = setting.to_dict()
    assert list(data) == PRINT_COLUMNS
    assert PrintSetting.from_dict(data) == setting


def test_from_dict_defaults():
    setting = PrintSetting.from_dict({"TableIndex": 1, "ColumnIndex": 2})
    assert setting == PrintSetting(1, 2)
    assert setting.sort_order == -1
