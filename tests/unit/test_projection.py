from __future__ import annotations

from fleet_split.services.projection import DEFAULT_EXCLUDED_COLUMNS, RowProjector


def test_project_removes_excluded_columns_and_keeps_order():
    row = {"a": "1", "sync time": "2024-01-01", "b": "2", "planDeliveryDate": "2024-01-02", "c": "3"}
    result = RowProjector().project(row)
    assert result == {"a": "1", "b": "2", "c": "3"}
    assert list(result) == ["a", "b", "c"]


def test_project_without_excluded_columns_is_noop():
    row = {"a": "1", "b": "2"}
    result = RowProjector().project(row)
    assert result == row
    assert result is not row


def test_project_does_not_mutate_source_row():
    row = {"a": "1", "sync time": "x"}
    RowProjector().project(row)
    assert row == {"a": "1", "sync time": "x"}


def test_project_only_one_excluded_present():
    assert RowProjector().project({"planDeliveryDate": "d", "z": "1"}) == {"z": "1"}


def test_project_all_and_custom_columns():
    rows = [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]
    assert RowProjector(excluded=["b"]).project_all(rows) == [{"a": "1"}, {"a": "3"}]


def test_default_excluded_columns():
    assert set(DEFAULT_EXCLUDED_COLUMNS) == {"sync time", "planDeliveryDate"}
