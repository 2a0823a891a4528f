"""Shared test fixtures for recordkit-excel tests.

Provides an in-memory ``SheetReader`` for building workbooks from plain
Python values, a generator of real .xlsx files via openpyxl, and mock xlrd
books for the legacy binary backend.
"""

from __future__ import annotations

import datetime
import io
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import openpyxl
import pytest
import xlrd

from recordkit_excel.config import ExcelSourceConfig
from recordkit_excel.workbook import Cell, CellKind, Workbook


def to_cell(row: int, column: int, value: object) -> Cell:
    """Build a Cell from a plain Python value."""
    if value is None:
        return Cell(row=row, column=column, kind=CellKind.BLANK)
    if isinstance(value, bool):
        return Cell(row=row, column=column, kind=CellKind.BOOLEAN, value=value)
    if isinstance(value, (int, float)):
        return Cell(row=row, column=column, kind=CellKind.NUMERIC, value=float(value))
    return Cell(row=row, column=column, kind=CellKind.TEXT, value=str(value))


class MemorySheetReader:
    """In-memory reader satisfying the ``SheetReader`` protocol."""

    def __init__(self, sheets: dict[str, list[list[object]]], datemode: int = 0) -> None:
        self._sheets = sheets
        self._datemode = datemode
        self.reads: list[int] = []
        self.closed = False

    @property
    def datemode(self) -> int:
        return self._datemode

    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def read_sheet(self, index: int) -> list[list[Cell]]:
        self.reads.append(index)
        rows = list(self._sheets.values())[index]
        return [
            [to_cell(r, c, value) for c, value in enumerate(row)]
            for r, row in enumerate(rows)
        ]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def default_config() -> ExcelSourceConfig:
    """Return an ExcelSourceConfig with all defaults."""
    return ExcelSourceConfig()


@pytest.fixture()
def memory_workbook():
    """Factory building a :class:`Workbook` from ``{sheet: rows}``."""

    def _build(sheets: dict[str, list[list[object]]], datemode: int = 0) -> Workbook:
        return Workbook(MemorySheetReader(sheets, datemode), "memory")

    return _build


def _xlsx_bytes(sheets: dict[str, list[list[object]]]) -> bytes:
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    wb.close()
    return buffer.getvalue()


@pytest.fixture()
def xlsx_bytes():
    """Factory returning the bytes of a real .xlsx holding ``{sheet: rows}``."""
    return _xlsx_bytes


@pytest.fixture()
def xlsx_file(tmp_path: Path):
    """Factory writing a real .xlsx to a temp file and returning its path."""

    def _write(sheets: dict[str, list[list[object]]], filename: str = "test.xlsx") -> str:
        file_path = tmp_path / filename
        file_path.write_bytes(_xlsx_bytes(sheets))
        return str(file_path)

    return _write


def _xlrd_cell(value: object) -> SimpleNamespace:
    if value is None:
        return SimpleNamespace(ctype=xlrd.XL_CELL_EMPTY, value="")
    if isinstance(value, tuple):
        ctype, raw = value
        return SimpleNamespace(ctype=ctype, value=raw)
    if isinstance(value, bool):
        return SimpleNamespace(ctype=xlrd.XL_CELL_BOOLEAN, value=int(value))
    if isinstance(value, (int, float)):
        return SimpleNamespace(ctype=xlrd.XL_CELL_NUMBER, value=float(value))
    if isinstance(value, datetime.datetime):
        serial = xlrd.xldate.xldate_from_datetime_tuple(value.timetuple()[:6], 0)
        return SimpleNamespace(ctype=xlrd.XL_CELL_DATE, value=serial)
    return SimpleNamespace(ctype=xlrd.XL_CELL_TEXT, value=str(value))


@pytest.fixture()
def xlrd_book():
    """Factory returning a mock xlrd ``Book``.

    Cell values may be plain Python values or ``(ctype, raw)`` tuples.
    """

    def _build(sheets: dict[str, list[list[object]]], datemode: int = 0) -> MagicMock:
        mock_sheets = []
        for name, rows in sheets.items():
            sheet = MagicMock()
            sheet.name = name
            sheet.nrows = len(rows)
            sheet.row.side_effect = lambda r, _rows=rows: [_xlrd_cell(v) for v in _rows[r]]
            mock_sheets.append(sheet)

        book = MagicMock()
        book.datemode = datemode
        book.sheet_names.return_value = list(sheets)
        book.sheet_by_index.side_effect = lambda i: mock_sheets[i]
        return book

    return _build


@pytest.fixture()
def memory_reader():
    """Factory returning a bare :class:`MemorySheetReader`."""
    return MemorySheetReader
