"""Field-name to column-index resolution.

The :class:`ColumnResolver` owns the column map.  Names come from explicit
configuration, from the synthetic ``COLUMN_<i>`` convention, or from a
header row read once by the cursor.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from recordkit_excel.errors import ConfigurationError, ErrorCode, UnknownFieldError
from recordkit_excel.workbook import Cell, Row

logger = logging.getLogger("recordkit_excel")

SYNTHETIC_PREFIX = "COLUMN_"
_SYNTHETIC_RE = re.compile(r"^COLUMN_(\d+)$")


def synthetic_name(index: int) -> str:
    return f"{SYNTHETIC_PREFIX}{index}"


class ColumnResolver:
    """Ordered mapping of field names to column indexes."""

    def __init__(self) -> None:
        self._columns: dict[str, int] = {}
        self._header_applied = False

    @property
    def column_map(self) -> dict[str, int]:
        """A copy of the current mapping, in insertion order."""
        return dict(self._columns)

    @property
    def header_applied(self) -> bool:
        return self._header_applied

    # ------------------------------------------------------------------
    # Explicit configuration
    # ------------------------------------------------------------------

    def set_column_names(
        self, names: list[str], indexes: list[int] | None = None
    ) -> None:
        """Bind *names* to *indexes*, or to positions 0..N-1 when omitted.

        Existing entries with the same names are overwritten; others are
        kept.  The map is left untouched when the input is invalid.
        """
        if indexes is None:
            indexes = list(range(len(names)))
        elif len(names) != len(indexes):
            raise ConfigurationError(
                "The number of column names must be equal to the number of "
                f"column indexes ({len(names)} != {len(indexes)}).",
                stage="configure",
            )
        self._check_indexes(indexes)
        self._columns.update(zip(names, indexes))
        self._header_applied = False

    def set_column_indexes(self, indexes: list[int]) -> None:
        """Bind ``COLUMN_<i>`` to ``indexes[i]`` for every position *i*."""
        self._check_indexes(indexes)
        self._columns.update(
            (synthetic_name(i), index) for i, index in enumerate(indexes)
        )
        self._header_applied = False

    def reset_header(self) -> None:
        """Read the next header row again, against the current map."""
        self._header_applied = False

    @staticmethod
    def _check_indexes(indexes: list[int]) -> None:
        for index in indexes:
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise ConfigurationError(
                    f"Column index must be a non-negative integer, got {index!r}.",
                    stage="configure",
                )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, field_name: str) -> int:
        """Return the column index bound to *field_name*.

        Unmapped ``COLUMN_<n>`` names resolve to ``n`` without touching the
        map.
        """
        index = self._columns.get(field_name)
        if index is not None:
            return index
        match = _SYNTHETIC_RE.match(field_name)
        if match:
            return int(match.group(1))
        raise UnknownFieldError(
            f"Unknown column name : {field_name}",
            field_name=field_name,
            stage="fetch",
        )

    # ------------------------------------------------------------------
    # Header inference
    # ------------------------------------------------------------------

    def read_header(self, row: Row, text_of: Callable[[Cell], str]) -> None:
        """Derive field names from a header row.

        Runs once; later calls (e.g. after a rewind) are ignored until a
        setter or :meth:`reset_header` changes the configuration.  Without an
        existing map, every column up to the last occupied one is named
        after its header text, or ``COLUMN_<i>`` when the header is empty.
        With an existing map, each entry is renamed to the header text at its
        index and dropped when that header is empty.
        """
        if self._header_applied:
            logger.debug("recordkit_excel | header already applied | skipped")
            return

        def header_text(column: int) -> str:
            cell = row.cell(column)
            if cell is None or cell.is_empty:
                return ""
            return text_of(cell).strip()

        columns: dict[str, int] = {}
        if not self._columns:
            for column in range(row.last_column_index + 1):
                name = header_text(column) or synthetic_name(column)
                self._put(columns, name, column)
        else:
            for name, column in self._columns.items():
                text = header_text(column)
                if text:
                    self._put(columns, text, column)
                else:
                    logger.debug(
                        "recordkit_excel | field=%s | column=%d | empty header | dropped",
                        name,
                        column,
                    )

        self._columns = columns
        self._header_applied = True
        logger.info(
            "recordkit_excel | header row=%d | columns=%s",
            row.index,
            list(columns),
        )

    @staticmethod
    def _put(columns: dict[str, int], name: str, column: int) -> None:
        if name in columns:
            logger.warning(
                "recordkit_excel | code=%s | name=%s | columns=%d,%d",
                ErrorCode.W_DUPLICATE_HEADER.value,
                name,
                columns[name],
                column,
            )
        columns[name] = column
