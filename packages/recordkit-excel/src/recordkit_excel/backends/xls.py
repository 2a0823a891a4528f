"""xlrd backend for legacy binary (``.xls``) workbooks."""

from __future__ import annotations

from typing import IO

import xlrd  # type: ignore[import-untyped]

from recordkit_excel.workbook import Cell, CellKind, Workbook


class XlrdSheetReader:
    """:class:`~recordkit_excel.workbook.SheetReader` over an xlrd ``Book``."""

    def __init__(self, book) -> None:
        self._book = book

    @property
    def datemode(self) -> int:
        return self._book.datemode

    def sheet_names(self) -> list[str]:
        return list(self._book.sheet_names())

    def read_sheet(self, index: int) -> list[list[Cell]]:
        sheet = self._book.sheet_by_index(index)
        rows: list[list[Cell]] = []
        for r in range(sheet.nrows):
            rows.append(
                [self._to_cell(r, c, cell) for c, cell in enumerate(sheet.row(r))]
            )
        return rows

    def close(self) -> None:
        self._book.release_resources()

    def _to_cell(self, row: int, column: int, cell) -> Cell:
        ctype = cell.ctype
        if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return Cell(row=row, column=column, kind=CellKind.BLANK)
        if ctype == xlrd.XL_CELL_NUMBER:
            return Cell(row=row, column=column, kind=CellKind.NUMERIC, value=float(cell.value))
        if ctype == xlrd.XL_CELL_DATE:
            return Cell(
                row=row,
                column=column,
                kind=CellKind.NUMERIC,
                value=float(cell.value),
                is_date=True,
            )
        if ctype == xlrd.XL_CELL_BOOLEAN:
            return Cell(row=row, column=column, kind=CellKind.BOOLEAN, value=bool(cell.value))
        if ctype == xlrd.XL_CELL_ERROR:
            text = xlrd.error_text_from_code.get(cell.value, "#ERROR")
            return Cell(row=row, column=column, kind=CellKind.ERROR, value=text)
        return Cell(row=row, column=column, kind=CellKind.TEXT, value=str(cell.value))


def open_xls(stream: IO[bytes]) -> Workbook:
    """Decode a legacy binary workbook from a binary stream."""
    book = xlrd.open_workbook(file_contents=stream.read())
    return Workbook(XlrdSheetReader(book), "xls")
