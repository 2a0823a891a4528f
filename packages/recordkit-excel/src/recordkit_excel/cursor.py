"""Traversal state machine over the sheets of a workbook.

:class:`SheetCursor` tracks ``(sheet_index, row_index)``.  With a sheet
selection it walks that one sheet; without one it concatenates every
non-empty sheet into a single stream.  When header inference is enabled,
the first row of the selected sheet (or of sheet 0 when concatenating) is
handed to a callback instead of being yielded.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Callable

from recordkit_excel.errors import SheetIndexOutOfRangeError, SheetNotFoundError
from recordkit_excel.workbook import Row, Sheet, Workbook

logger = logging.getLogger("recordkit_excel")

_INDEX_RE = re.compile(r"^[+-]?\d+$")


class CursorState(str, Enum):
    NOT_STARTED = "not_started"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


class SheetCursor:
    """Row cursor over one selected sheet or over all sheets in order.

    Parameters
    ----------
    workbook:
        The workbook to traverse.
    on_header:
        Called with the header row when ``use_first_row_as_header`` is set.
    on_exhausted:
        Called once each time the cursor runs past the last row.
    """

    def __init__(
        self,
        workbook: Workbook,
        on_header: Callable[[Row], None] | None = None,
        on_exhausted: Callable[[], None] | None = None,
    ) -> None:
        self._workbook = workbook
        self._on_header = on_header
        self._on_exhausted = on_exhausted
        self.sheet_selection: str | None = None
        self.use_first_row_as_header = False
        self._sheet_index = -1
        self._row_index = -1
        self._state = CursorState.NOT_STARTED

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def started(self) -> bool:
        return self._sheet_index >= 0

    @property
    def position(self) -> tuple[int, int]:
        return self._sheet_index, self._row_index

    @property
    def sheet(self) -> Sheet:
        return self._workbook.sheet_at(self._sheet_index)

    def current_row(self) -> Row:
        if self._state != CursorState.POSITIONED:
            raise IndexError("Cursor is not positioned on a row")
        return self.sheet.row(self._row_index)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def advance(self) -> bool:
        """Move to the next data row.  Returns False once exhausted."""
        if self._state == CursorState.EXHAUSTED:
            return False

        if self._sheet_index < 0:
            self._sheet_index = self._resolve_initial_sheet()

        concatenating = self.sheet_selection is None
        self._row_index += 1

        while True:
            sheet = self.sheet
            if (
                self.use_first_row_as_header
                and self._row_index == 0
                and (not concatenating or self._sheet_index == 0)
                and not sheet.is_empty
            ):
                if self._on_header is not None:
                    self._on_header(sheet.row(0))
                self._row_index += 1

            if self._row_index <= sheet.last_row_index:
                self._state = CursorState.POSITIONED
                return True

            next_index = self._next_non_empty_sheet() if concatenating else -1
            if next_index < 0:
                break
            logger.debug(
                "recordkit_excel | sheet=%s | next sheet=%s",
                sheet.name,
                self._workbook.sheet_names[next_index],
            )
            self._sheet_index = next_index
            self._row_index = 0

        self._state = CursorState.EXHAUSTED
        logger.debug(
            "recordkit_excel | sheet=%s | rows=%d | exhausted",
            self.sheet.name,
            self.sheet.last_row_index + 1,
        )
        if self._on_exhausted is not None:
            self._on_exhausted()
        return False

    def rewind(self) -> None:
        """Return to the not-started state.  Configuration is kept."""
        self._sheet_index = -1
        self._row_index = -1
        self._state = CursorState.NOT_STARTED

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_non_empty_sheet(self) -> int:
        for index in range(self._sheet_index + 1, self._workbook.sheet_count):
            if not self._workbook.sheet_at(index).is_empty:
                return index
        return -1

    def _resolve_initial_sheet(self) -> int:
        selection = self.sheet_selection
        last_index = self._workbook.sheet_count - 1
        if selection is None:
            if last_index < 0:
                raise SheetIndexOutOfRangeError(
                    "Workbook contains no sheets.", stage="advance"
                )
            return 0

        if _INDEX_RE.match(selection):
            index = int(selection)
            if not 0 <= index <= last_index:
                raise SheetIndexOutOfRangeError(
                    f"Sheet index {index} is out of range: [0..{last_index}]",
                    sheet_name=selection,
                    stage="advance",
                )
        else:
            index = self._workbook.sheet_index(selection)
            if index < 0:
                raise SheetNotFoundError(
                    f"Sheet '{selection}' not found in workbook.",
                    sheet_name=selection,
                    stage="advance",
                )

        logger.info(
            "recordkit_excel | selection=%s | sheet=%s | index=%d",
            selection,
            self._workbook.sheet_names[index],
            index,
        )
        return index
