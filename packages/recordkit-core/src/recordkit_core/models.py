"""Shared enumerations for the recordkit framework.

Contains ``FieldType`` (the semantic type a caller requests for a field)
and ``FormatHint`` (the container format of a spreadsheet input).
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum


class FieldType(str, Enum):
    """Semantic type requested for a field, independent of cell encoding.

    INTEGER, FLOAT and DECIMAL are the numeric subtypes; DATE and DATETIME
    are the date subtypes.
    """

    TEXT = "text"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_TYPES

    @property
    def is_date(self) -> bool:
        return self in _DATE_TYPES

    @classmethod
    def coerce(cls, value: object) -> FieldType | None:
        """Map a ``FieldType``, its string value, or a Python class to a member.

        Returns *None* when *value* names no supported semantic type.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                return None
        if isinstance(value, type):
            return _PYTHON_TYPES.get(value)
        return None


_NUMERIC_TYPES = frozenset({FieldType.INTEGER, FieldType.FLOAT, FieldType.DECIMAL})
_DATE_TYPES = frozenset({FieldType.DATE, FieldType.DATETIME})

_PYTHON_TYPES: dict[type, FieldType] = {
    str: FieldType.TEXT,
    bool: FieldType.BOOLEAN,
    int: FieldType.INTEGER,
    float: FieldType.FLOAT,
    Decimal: FieldType.DECIMAL,
    datetime.datetime: FieldType.DATETIME,
    datetime.date: FieldType.DATE,
}


class FormatHint(str, Enum):
    """Spreadsheet container format of an input stream."""

    AUTODETECT = "autodetect"
    LEGACY_BINARY = "xls"
    ZIPPED_XML = "xlsx"
