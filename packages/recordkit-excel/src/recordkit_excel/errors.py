"""Error codes, structured error model, and exceptions for recordkit-excel.

``ErrorCode`` contains every error/warning code raised while reading a
spreadsheet.  ``ExcelSourceError`` extends ``BaseRecordError`` with sheet,
row, and field context.  Each exception class below wraps an
``ExcelSourceError`` and fixes its code, so callers can catch a specific
failure kind or inspect ``exc.error`` generically.
"""

from __future__ import annotations

from enum import Enum

from recordkit_core.errors import BaseRecordError, RecordSourceException


class ErrorCode(str, Enum):
    """Error codes for spreadsheet record sources.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = fatal, ``W_`` prefix = warning.
    """

    # Load
    E_LOAD_FAILED = "E_LOAD_FAILED"
    E_LOAD_EMPTY = "E_LOAD_EMPTY"
    E_LOAD_PASSWORD = "E_LOAD_PASSWORD"
    E_LOAD_TOO_LARGE = "E_LOAD_TOO_LARGE"
    E_LOCATION_NOT_FOUND = "E_LOCATION_NOT_FOUND"

    # Sheet selection
    E_SHEET_NOT_FOUND = "E_SHEET_NOT_FOUND"
    E_SHEET_INDEX_OUT_OF_RANGE = "E_SHEET_INDEX_OUT_OF_RANGE"

    # Field access
    E_FIELD_UNKNOWN = "E_FIELD_UNKNOWN"
    E_FIELD_TYPE_UNSUPPORTED = "E_FIELD_TYPE_UNSUPPORTED"
    E_FIELD_CONVERSION = "E_FIELD_CONVERSION"
    E_NOT_POSITIONED = "E_NOT_POSITIONED"

    # Configuration
    E_CONFIG_INVALID = "E_CONFIG_INVALID"
    E_CONFIG_AFTER_START = "E_CONFIG_AFTER_START"

    # Warnings (non-fatal)
    W_CLOSE_FAILED = "W_CLOSE_FAILED"
    W_DUPLICATE_HEADER = "W_DUPLICATE_HEADER"


class ExcelSourceError(BaseRecordError):
    """Structured error with spreadsheet-specific location context."""

    sheet_name: str | None = None
    row_index: int | None = None
    field_name: str | None = None
    field_type: str | None = None


class ExcelSourceException(RecordSourceException):
    """Base class of every exception raised by recordkit-excel."""

    error_model = ExcelSourceError


class LoadError(ExcelSourceException):
    """The input could not be decoded into a workbook."""

    default_code = ErrorCode.E_LOAD_FAILED.value


class SheetNotFoundError(ExcelSourceException):
    """The sheet selector names no sheet of the workbook."""

    default_code = ErrorCode.E_SHEET_NOT_FOUND.value


class SheetIndexOutOfRangeError(ExcelSourceException):
    """The sheet selector is an index outside ``[0, sheet_count - 1]``."""

    default_code = ErrorCode.E_SHEET_INDEX_OUT_OF_RANGE.value


class UnknownFieldError(ExcelSourceException):
    """No column mapping resolves the requested field name."""

    default_code = ErrorCode.E_FIELD_UNKNOWN.value


class UnsupportedFieldTypeError(ExcelSourceException):
    """The requested semantic type is not text, boolean, numeric, or date."""

    default_code = ErrorCode.E_FIELD_TYPE_UNSUPPORTED.value


class FieldConversionError(ExcelSourceException):
    """A cell could not be converted into the requested semantic type."""

    default_code = ErrorCode.E_FIELD_CONVERSION.value


class NotPositionedError(ExcelSourceException):
    """A field was fetched while the cursor is not on a record."""

    default_code = ErrorCode.E_NOT_POSITIONED.value


class ConfigurationError(ExcelSourceException):
    """A setter received invalid input."""

    default_code = ErrorCode.E_CONFIG_INVALID.value


class ConfigurationAfterStartError(ExcelSourceException):
    """A setter was called after reading started."""

    default_code = ErrorCode.E_CONFIG_AFTER_START.value
