"""openpyxl backend for zipped-XML (``.xlsx``) workbooks.

Workbooks are opened with ``data_only=True`` so formula cells expose their
cached results.  Date-formatted cells are turned back into serial numbers
so every backend reports dates the same way.
"""

from __future__ import annotations

import datetime
from typing import IO

import openpyxl
from openpyxl.utils.datetime import MAC_EPOCH, WINDOWS_EPOCH, to_excel

from recordkit_excel.workbook import Cell, CellKind, Workbook

_DATE_TYPES = (datetime.datetime, datetime.date, datetime.time, datetime.timedelta)


class OpenpyxlSheetReader:
    """:class:`~recordkit_excel.workbook.SheetReader` over an openpyxl workbook."""

    def __init__(self, book: openpyxl.Workbook) -> None:
        self._book = book
        self._worksheets = list(book.worksheets)
        self._epoch = getattr(book, "epoch", WINDOWS_EPOCH)

    @property
    def datemode(self) -> int:
        return 1 if self._epoch == MAC_EPOCH else 0

    def sheet_names(self) -> list[str]:
        return [ws.title for ws in self._worksheets]

    def read_sheet(self, index: int) -> list[list[Cell]]:
        ws = self._worksheets[index]
        rows: list[list[Cell]] = []
        for r, row in enumerate(ws.iter_rows()):
            rows.append([self._to_cell(r, c, cell) for c, cell in enumerate(row)])
        return rows

    def close(self) -> None:
        self._book.close()

    def _to_cell(self, row: int, column: int, cell) -> Cell:
        value = cell.value
        if value is None:
            return Cell(row=row, column=column, kind=CellKind.BLANK)
        if isinstance(value, bool):
            return Cell(row=row, column=column, kind=CellKind.BOOLEAN, value=value)
        if isinstance(value, (int, float)):
            return Cell(row=row, column=column, kind=CellKind.NUMERIC, value=float(value))
        if isinstance(value, _DATE_TYPES):
            return Cell(
                row=row,
                column=column,
                kind=CellKind.NUMERIC,
                value=float(to_excel(value, self._epoch)),
                is_date=True,
            )
        if getattr(cell, "data_type", None) == "e":
            return Cell(row=row, column=column, kind=CellKind.ERROR, value=str(value))
        return Cell(row=row, column=column, kind=CellKind.TEXT, value=str(value))


def open_xlsx(stream: IO[bytes]) -> Workbook:
    """Decode a zipped-XML workbook from a seekable binary stream."""
    book = openpyxl.load_workbook(stream, data_only=True)
    return Workbook(OpenpyxlSheetReader(book), "xlsx")
