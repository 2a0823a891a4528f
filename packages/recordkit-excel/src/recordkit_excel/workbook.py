"""In-memory workbook model shared by every spreadsheet backend.

A :class:`Workbook` wraps a backend :class:`SheetReader` and materializes
each :class:`Sheet` lazily on first access.  Sheets, rows, and cells are
read-only once built.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

logger = logging.getLogger("recordkit_excel")


class CellKind(str, Enum):
    """Native encoding of a cell.  Formula cells carry their cached result."""

    BLANK = "blank"
    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    ERROR = "error"


class Cell(BaseModel):
    """A single tagged cell value.

    NUMERIC cells always hold a ``float``; ``is_date`` marks serial numbers
    formatted as dates in the source workbook.
    """

    row: int
    column: int
    kind: CellKind
    value: str | float | bool | None = None
    is_date: bool = False

    @property
    def is_empty(self) -> bool:
        return self.kind == CellKind.BLANK


class Row:
    """Ordered cells of one sheet row."""

    def __init__(self, index: int, cells: list[Cell]) -> None:
        self.index = index
        self._cells = cells
        self._last_column_index = -1
        for cell in reversed(cells):
            if not cell.is_empty:
                self._last_column_index = cell.column
                break

    @property
    def last_column_index(self) -> int:
        """Index of the last occupied cell, -1 when the row is empty."""
        return self._last_column_index

    def cell(self, column: int) -> Cell | None:
        if 0 <= column < len(self._cells):
            return self._cells[column]
        return None

    def __len__(self) -> int:
        return self._last_column_index + 1

    def __repr__(self) -> str:
        return f"Row(index={self.index}, cells={len(self)})"


class Sheet:
    """Ordered rows of one worksheet.

    Trailing rows without any occupied cell are dropped, so
    ``last_row_index`` is -1 exactly when the sheet holds no data.
    """

    def __init__(self, name: str, rows: list[list[Cell]]) -> None:
        self.name = name
        last = len(rows) - 1
        while last >= 0 and all(c.is_empty for c in rows[last]):
            last -= 1
        self._rows = [Row(i, cells) for i, cells in enumerate(rows[: last + 1])]

    @property
    def last_row_index(self) -> int:
        return len(self._rows) - 1

    @property
    def is_empty(self) -> bool:
        return not self._rows

    def row(self, index: int) -> Row:
        if not 0 <= index < len(self._rows):
            raise IndexError(
                f"Row {index} is out of range for sheet '{self.name}'"
            )
        return self._rows[index]

    def __repr__(self) -> str:
        return f"Sheet(name={self.name!r}, rows={len(self._rows)})"


@runtime_checkable
class SheetReader(Protocol):
    """Backend interface that decodes sheets of an opened document."""

    @property
    def datemode(self) -> int:
        """0 for the 1900 date system, 1 for the 1904 date system."""
        ...

    def sheet_names(self) -> list[str]:
        """Names of all worksheets, in workbook order."""
        ...

    def read_sheet(self, index: int) -> list[list[Cell]]:
        """Decode every row of the sheet at *index* into cells."""
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...


class Workbook:
    """Ordered, lazily-materialized sheets of a decoded document.

    Parameters
    ----------
    reader:
        Backend reader producing the cells of each sheet.
    source_format:
        Short name of the container format (``"xlsx"`` or ``"xls"``).
    """

    def __init__(self, reader: SheetReader, source_format: str) -> None:
        self._reader: SheetReader | None = reader
        self._names = list(reader.sheet_names())
        self._datemode = reader.datemode
        self._sheets: dict[int, Sheet] = {}
        self.source_format = source_format

    @classmethod
    def wrap(cls, book: Any) -> Workbook:
        """Wrap a pre-built workbook object.

        Accepts a :class:`Workbook` (returned unchanged), an openpyxl
        ``Workbook``, or an xlrd ``Book``.
        """
        if isinstance(book, cls):
            return book
        # Imported here: backends import this module.
        from recordkit_excel.backends import reader_for

        reader, source_format = reader_for(book)
        return cls(reader, source_format)

    @property
    def sheet_count(self) -> int:
        return len(self._names)

    @property
    def sheet_names(self) -> list[str]:
        return list(self._names)

    @property
    def datemode(self) -> int:
        return self._datemode

    @property
    def closed(self) -> bool:
        return self._reader is None

    def sheet_index(self, name: str) -> int:
        """Return the index of the sheet called *name*, or -1."""
        try:
            return self._names.index(name)
        except ValueError:
            return -1

    def sheet_by_name(self, name: str) -> Sheet | None:
        index = self.sheet_index(name)
        return self.sheet_at(index) if index >= 0 else None

    def sheet_at(self, index: int) -> Sheet:
        if not 0 <= index < len(self._names):
            raise IndexError(f"Sheet index {index} is out of range")
        sheet = self._sheets.get(index)
        if sheet is None:
            if self._reader is None:
                raise ValueError("Workbook is closed")
            sheet = Sheet(self._names[index], self._reader.read_sheet(index))
            self._sheets[index] = sheet
            logger.debug(
                "recordkit_excel | sheet=%s | rows=%d | materialized",
                sheet.name,
                sheet.last_row_index + 1,
            )
        return sheet

    def close(self) -> None:
        """Release the backend and drop materialized sheets.  Idempotent."""
        reader, self._reader = self._reader, None
        self._sheets.clear()
        if reader is not None:
            reader.close()
