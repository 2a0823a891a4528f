"""Tests for recordkit_excel.cursor.SheetCursor."""

from __future__ import annotations

import pytest

from recordkit_excel.cursor import CursorState, SheetCursor
from recordkit_excel.errors import (
    ErrorCode,
    SheetIndexOutOfRangeError,
    SheetNotFoundError,
)


def _first_values(cursor: SheetCursor) -> list[object]:
    values = []
    while cursor.advance():
        values.append(cursor.current_row().cell(0).value)
    return values


@pytest.fixture()
def three_sheets(memory_workbook):
    return memory_workbook({
        "First": [["h"], ["a1"], ["a2"]],
        "Second": [["b0"], ["b1"]],
        "Third": [["c0"]],
    })


class TestSingleSheet:
    def test_selected_by_name(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.sheet_selection = "Second"
        assert _first_values(cursor) == ["b0", "b1"]

    def test_selected_by_index(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.sheet_selection = "2"
        assert _first_values(cursor) == ["c0"]

    def test_header_skipped_on_selected_sheet(self, three_sheets):
        headers = []
        cursor = SheetCursor(three_sheets, on_header=headers.append)
        cursor.sheet_selection = "Second"
        cursor.use_first_row_as_header = True
        assert _first_values(cursor) == ["b1"]
        assert [row.index for row in headers] == [0]

    def test_index_out_of_range(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.sheet_selection = "3"
        with pytest.raises(SheetIndexOutOfRangeError) as info:
            cursor.advance()
        assert str(info.value) == "Sheet index 3 is out of range: [0..2]"
        assert info.value.code == ErrorCode.E_SHEET_INDEX_OUT_OF_RANGE.value
        assert cursor.started is False

    def test_negative_index_out_of_range(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.sheet_selection = "-1"
        with pytest.raises(SheetIndexOutOfRangeError):
            cursor.advance()

    def test_name_not_found(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.sheet_selection = "Missing"
        with pytest.raises(SheetNotFoundError) as info:
            cursor.advance()
        assert str(info.value) == "Sheet 'Missing' not found in workbook."
        assert info.value.error.sheet_name == "Missing"

    def test_selected_sheet_does_not_continue(self, memory_workbook):
        wb = memory_workbook({"A": [["a"]], "B": [["b"]]})
        cursor = SheetCursor(wb)
        cursor.sheet_selection = "A"
        assert _first_values(cursor) == ["a"]

    def test_empty_selected_sheet(self, memory_workbook):
        wb = memory_workbook({"A": [], "B": [["b"]]})
        cursor = SheetCursor(wb)
        cursor.sheet_selection = "A"
        assert cursor.advance() is False
        assert cursor.state == CursorState.EXHAUSTED


class TestConcatenation:
    def test_all_sheets_in_order(self, three_sheets):
        assert _first_values(SheetCursor(three_sheets)) == [
            "h", "a1", "a2", "b0", "b1", "c0",
        ]

    def test_two_sheets_one_row_each(self, memory_workbook):
        wb = memory_workbook({"S0": [["R0"]], "S1": [["R1"]]})
        assert _first_values(SheetCursor(wb)) == ["R0", "R1"]

    def test_header_only_on_sheet_zero(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.use_first_row_as_header = True
        assert _first_values(cursor) == ["a1", "a2", "b0", "b1", "c0"]

    def test_empty_sheets_skipped(self, memory_workbook):
        wb = memory_workbook({
            "S0": [["x"]],
            "Empty1": [],
            "Empty2": [[None, None]],
            "S3": [["y"]],
            "Empty4": [],
        })
        cursor = SheetCursor(wb)
        values = []
        positions = []
        while cursor.advance():
            values.append(cursor.current_row().cell(0).value)
            positions.append(cursor.position)
        assert values == ["x", "y"]
        assert positions == [(0, 0), (3, 0)]

    def test_leading_empty_sheet(self, memory_workbook):
        wb = memory_workbook({"Empty": [], "Data": [["d0"], ["d1"]]})
        cursor = SheetCursor(wb)
        cursor.use_first_row_as_header = True
        assert _first_values(cursor) == ["d0", "d1"]

    def test_header_only_first_sheet(self, memory_workbook):
        wb = memory_workbook({"Header": [["Name"]], "Data": [["Alice"]]})
        headers = []
        cursor = SheetCursor(wb, on_header=headers.append)
        cursor.use_first_row_as_header = True
        assert _first_values(cursor) == ["Alice"]
        assert len(headers) == 1

    def test_all_sheets_empty(self, memory_workbook):
        wb = memory_workbook({"A": [], "B": []})
        assert SheetCursor(wb).advance() is False

    def test_no_sheets(self, memory_workbook):
        with pytest.raises(SheetIndexOutOfRangeError):
            SheetCursor(memory_workbook({})).advance()


class TestStateMachine:
    def test_initial_state(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        assert cursor.state == CursorState.NOT_STARTED
        assert cursor.started is False
        assert cursor.position == (-1, -1)
        with pytest.raises(IndexError):
            cursor.current_row()

    def test_exhausted_stays_exhausted(self, memory_workbook):
        exhausted = []
        wb = memory_workbook({"A": [["a"]]})
        cursor = SheetCursor(wb, on_exhausted=lambda: exhausted.append(True))
        assert cursor.advance() is True
        assert cursor.advance() is False
        assert cursor.advance() is False
        assert cursor.state == CursorState.EXHAUSTED
        assert exhausted == [True]

    def test_rewind_replays_same_rows(self, three_sheets):
        headers = []
        cursor = SheetCursor(three_sheets, on_header=headers.append)
        cursor.use_first_row_as_header = True
        first = _first_values(cursor)
        cursor.rewind()
        assert cursor.state == CursorState.NOT_STARTED
        assert cursor.use_first_row_as_header is True
        assert _first_values(cursor) == first
        assert len(headers) == 2

    def test_rewind_mid_traversal(self, three_sheets):
        cursor = SheetCursor(three_sheets)
        cursor.advance()
        cursor.advance()
        cursor.rewind()
        assert cursor.advance() is True
        assert cursor.position == (0, 0)

    def test_trailing_blank_rows_not_yielded(self, memory_workbook):
        wb = memory_workbook({"A": [["a"], [None], ["b"], [None], [None]]})
        rows = []
        cursor = SheetCursor(wb)
        while cursor.advance():
            rows.append(cursor.current_row().index)
        assert rows == [0, 1, 2]
