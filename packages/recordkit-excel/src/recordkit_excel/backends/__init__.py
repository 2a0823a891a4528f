"""Spreadsheet decoding backends.

Each backend adapts a third-party decoding library to the
:class:`~recordkit_excel.workbook.SheetReader` protocol.
"""

from __future__ import annotations

from typing import Any

import openpyxl
import xlrd  # type: ignore[import-untyped]

from recordkit_excel.backends.xls import XlrdSheetReader, open_xls
from recordkit_excel.backends.xlsx import OpenpyxlSheetReader, open_xlsx
from recordkit_excel.workbook import SheetReader, Workbook


def is_workbook_object(obj: Any) -> bool:
    """True for objects ``Workbook.wrap()`` accepts instead of a byte stream."""
    return isinstance(
        obj, (Workbook, openpyxl.Workbook, xlrd.book.Book, SheetReader)
    )


def reader_for(book: Any) -> tuple[SheetReader, str]:
    """Return a reader and format name for a library workbook object."""
    if isinstance(book, openpyxl.Workbook):
        return OpenpyxlSheetReader(book), "xlsx"
    if isinstance(book, xlrd.book.Book):
        return XlrdSheetReader(book), "xls"
    if isinstance(book, SheetReader):
        return book, "custom"
    raise TypeError(
        f"Unsupported workbook object of type {type(book).__name__}"
    )


__all__ = [
    "OpenpyxlSheetReader",
    "XlrdSheetReader",
    "is_workbook_object",
    "open_xls",
    "open_xlsx",
    "reader_for",
]
