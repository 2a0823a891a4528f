"""Conversion of raw cells into requested semantic types.

:class:`FieldValueConverter` receives the date and number format rules at
construction and dispatches over the closed :class:`FieldType` enum:

* ``TEXT`` -- textual rendering of any cell.
* ``BOOLEAN`` -- native booleans, else a textual boolean literal.
* ``INTEGER`` / ``FLOAT`` / ``DECIMAL`` -- native numbers narrowed to the
  subtype, else the number format, else a direct literal conversion.
* ``DATE`` / ``DATETIME`` -- native serial numbers via the workbook date
  mode, else the date format, else ISO 8601.

Blank cells convert to ``""`` as ``TEXT`` and to ``None`` for every other
type; cells past the end of a row convert to ``None``.  Textual dates that
do not match the date format are retried as ISO 8601.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal

import xlrd  # type: ignore[import-untyped]

from recordkit_core.models import FieldType
from recordkit_excel.errors import FieldConversionError, UnsupportedFieldTypeError
from recordkit_excel.formats import NumberFormat
from recordkit_excel.workbook import Cell, CellKind

logger = logging.getLogger("recordkit_excel")

_TRUE_LITERALS = frozenset({"true", "yes", "1"})
_FALSE_LITERALS = frozenset({"false", "no", "0"})


def parse_boolean(text: str) -> bool:
    """Parse a boolean literal (``true/false/yes/no/1/0``, any case)."""
    literal = text.strip().lower()
    if literal in _TRUE_LITERALS:
        return True
    if literal in _FALSE_LITERALS:
        return False
    raise ValueError(f"Not a boolean literal: {text!r}")


def format_number(value: float) -> str:
    """Render a float, dropping the ``.0`` of integral values."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


class FieldValueConverter:
    """Convert cells to typed values using explicit format rules.

    Parameters
    ----------
    date_format:
        ``strptime``/``strftime`` pattern for textual dates, or *None* for
        ISO 8601.
    number_format:
        Rule for textual numbers, or *None* for plain numeric literals.
    datemode:
        Workbook date system used to interpret serial dates (0 = 1900,
        1 = 1904).
    log_sample_data:
        Include cell values in failure logs.
    """

    def __init__(
        self,
        date_format: str | None = None,
        number_format: NumberFormat | None = None,
        datemode: int = 0,
        log_sample_data: bool = False,
    ) -> None:
        self.date_format = date_format
        self.number_format = number_format
        self.datemode = datemode
        self.log_sample_data = log_sample_data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def convert(
        self,
        cell: Cell | None,
        field_type: FieldType | type | str,
        field_name: str = "",
    ) -> object:
        """Convert *cell* into *field_type*.

        Raises
        ------
        UnsupportedFieldTypeError
            If *field_type* is not one of the supported semantic types.
        FieldConversionError
            If the cell value cannot be converted; the cause is chained.
        """
        requested = FieldType.coerce(field_type)
        if requested is None:
            type_name = getattr(field_type, "__name__", str(field_type))
            raise UnsupportedFieldTypeError(
                f"Field '{field_name}' is of type '{type_name}' and can not be converted",
                field_name=field_name,
                field_type=type_name,
                stage="fetch",
            )

        if cell is None:
            return None
        if cell.is_empty:
            return "" if requested == FieldType.TEXT else None

        try:
            if requested == FieldType.TEXT:
                return self.to_text(cell)
            if requested == FieldType.BOOLEAN:
                return self._to_boolean(cell)
            if requested.is_numeric:
                return self._to_number(cell, requested)
            return self._to_date(cell, requested)
        except Exception as exc:
            if self.log_sample_data:
                logger.warning(
                    "recordkit_excel | field=%s | type=%s | value=%r | conversion failed: %s",
                    field_name,
                    requested.value,
                    cell.value,
                    exc,
                )
            else:
                logger.warning(
                    "recordkit_excel | field=%s | type=%s | conversion failed: %s",
                    field_name,
                    requested.value,
                    type(exc).__name__,
                )
            raise FieldConversionError(
                f"Unable to get value for field '{field_name}' of type '{requested.value}'",
                field_name=field_name,
                field_type=requested.value,
                row_index=cell.row,
                stage="fetch",
            ) from exc

    def to_text(self, cell: Cell) -> str:
        """Textual rendering of *cell*, whatever its native encoding."""
        if cell.kind == CellKind.BLANK:
            return ""
        if cell.kind == CellKind.BOOLEAN:
            return "TRUE" if cell.value else "FALSE"
        if cell.kind == CellKind.NUMERIC:
            if cell.is_date:
                dt = self._serial_to_datetime(float(cell.value))  # type: ignore[arg-type]
                if self.date_format:
                    return dt.strftime(self.date_format)
                return dt.isoformat()
            return format_number(float(cell.value))  # type: ignore[arg-type]
        return str(cell.value)

    # ------------------------------------------------------------------
    # Per-type conversion
    # ------------------------------------------------------------------

    def _to_boolean(self, cell: Cell) -> bool:
        if cell.kind == CellKind.BOOLEAN:
            return bool(cell.value)
        return parse_boolean(self.to_text(cell))

    def _to_number(self, cell: Cell, requested: FieldType) -> int | float | Decimal:
        if cell.kind == CellKind.NUMERIC:
            value = float(cell.value)  # type: ignore[arg-type]
            if requested == FieldType.INTEGER:
                return int(value)
            if requested == FieldType.FLOAT:
                return value
            return Decimal(repr(value))

        text = self.to_text(cell)
        if self.number_format is not None:
            number = self.number_format.parse(text)
            if requested == FieldType.INTEGER:
                return int(number)
            if requested == FieldType.FLOAT:
                return float(number)
            return number

        if requested == FieldType.INTEGER:
            return int(text.strip())
        if requested == FieldType.FLOAT:
            return float(text.strip())
        number = Decimal(text.strip())
        if not number.is_finite():
            raise ValueError(f"Not a finite number: {text!r}")
        return number

    def _to_date(
        self, cell: Cell, requested: FieldType
    ) -> datetime.date | datetime.datetime:
        if cell.kind == CellKind.NUMERIC:
            dt = self._serial_to_datetime(float(cell.value))  # type: ignore[arg-type]
        else:
            text = self.to_text(cell).strip()
            dt = None
            if self.date_format is not None:
                try:
                    dt = datetime.datetime.strptime(text, self.date_format)
                except ValueError:
                    logger.debug(
                        "recordkit_excel | date_format=%s | no match | trying ISO 8601",
                        self.date_format,
                    )
            if dt is None:
                dt = datetime.datetime.fromisoformat(text)
        if requested == FieldType.DATE:
            return dt.date()
        return dt

    def _serial_to_datetime(self, serial: float) -> datetime.datetime:
        return xlrd.xldate_as_datetime(serial, self.datemode)
