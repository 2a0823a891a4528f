"""Number parsing rule applied to textual cells requested as numbers."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, model_validator


class NumberFormat(BaseModel):
    """Locale-style number format: decimal and grouping separators.

    ``parse()`` accepts an optional sign, grouping separators anywhere in
    the integer part, and surrounding whitespace.  Anything else raises
    ``ValueError``.
    """

    decimal_separator: str = "."
    grouping_separator: str = ","

    @model_validator(mode="after")
    def _check_separators(self) -> NumberFormat:
        if len(self.decimal_separator) != 1:
            raise ValueError("decimal_separator must be a single character")
        if len(self.grouping_separator) > 1:
            raise ValueError("grouping_separator must be at most one character")
        if self.decimal_separator == self.grouping_separator:
            raise ValueError("decimal and grouping separators must differ")
        return self

    def parse(self, text: str) -> Decimal:
        cleaned = text.strip()
        if self.grouping_separator:
            integer_part, sep, fraction = cleaned.partition(self.decimal_separator)
            if self.grouping_separator in fraction:
                raise ValueError(f"Misplaced grouping separator in {text!r}")
            cleaned = integer_part.replace(self.grouping_separator, "") + sep + fraction
        cleaned = cleaned.replace(self.decimal_separator, ".")
        try:
            value = Decimal(cleaned)
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {text!r}") from exc
        if not value.is_finite():
            raise ValueError(f"Not a number: {text!r}")
        return value
