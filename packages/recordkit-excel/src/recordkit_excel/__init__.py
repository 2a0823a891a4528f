"""recordkit-excel -- Spreadsheet record source for report engines.

Public API re-exports for convenient access.
"""

from recordkit_excel.columns import ColumnResolver
from recordkit_excel.config import ExcelSourceConfig
from recordkit_excel.converter import FieldValueConverter
from recordkit_excel.cursor import CursorState, SheetCursor
from recordkit_excel.errors import (
    ConfigurationAfterStartError,
    ConfigurationError,
    ErrorCode,
    ExcelSourceError,
    ExcelSourceException,
    FieldConversionError,
    LoadError,
    NotPositionedError,
    SheetIndexOutOfRangeError,
    SheetNotFoundError,
    UnknownFieldError,
    UnsupportedFieldTypeError,
)
from recordkit_excel.formats import NumberFormat
from recordkit_excel.loader import detect_format, format_from_signature, load_workbook
from recordkit_excel.source import ExcelRecordSource
from recordkit_excel.workbook import Cell, CellKind, Row, Sheet, Workbook

__all__ = [
    # Source
    "ExcelRecordSource",
    "ExcelSourceConfig",
    # Components
    "ColumnResolver",
    "FieldValueConverter",
    "SheetCursor",
    "CursorState",
    "NumberFormat",
    "detect_format",
    "format_from_signature",
    "load_workbook",
    # Workbook model
    "Workbook",
    "Sheet",
    "Row",
    "Cell",
    "CellKind",
    # Errors
    "ErrorCode",
    "ExcelSourceError",
    "ExcelSourceException",
    "LoadError",
    "SheetNotFoundError",
    "SheetIndexOutOfRangeError",
    "UnknownFieldError",
    "UnsupportedFieldTypeError",
    "FieldConversionError",
    "NotPositionedError",
    "ConfigurationError",
    "ConfigurationAfterStartError",
]
