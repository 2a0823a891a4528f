"""Shared error codes, base error model, and raisable wrapper for recordkit.

``CoreErrorCode`` contains the codes common to every recordkit package.
``BaseRecordError`` is a Pydantic model that each package extends with its
own location fields (e.g. ``sheet_name`` for spreadsheets).
``RecordSourceException`` carries such a model through ``raise``/``except``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class CoreErrorCode(str, Enum):
    """Error codes shared across all recordkit packages.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = fatal, ``W_`` prefix = warning.
    """

    E_LOCATION_NOT_FOUND = "E_LOCATION_NOT_FOUND"
    E_CONFIG_INVALID = "E_CONFIG_INVALID"
    E_CONFIG_AFTER_START = "E_CONFIG_AFTER_START"

    W_CLOSE_FAILED = "W_CLOSE_FAILED"


class BaseRecordError(BaseModel):
    """Base structured error with code, message, and context.

    The ``code`` field is typed as ``str`` so it accepts any
    package-specific ``ErrorCode`` enum member.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False


class RecordSourceException(Exception):
    """Raisable exception wrapping a structured error model.

    Subclasses set ``error_model`` to their package's error model and may
    set ``default_code`` so callers only pass the message and context.
    The model is available as ``.error`` for inspection and serialization.
    """

    error_model: type[BaseRecordError] = BaseRecordError
    default_code: str | None = None

    def __init__(self, message: str, **kwargs: object) -> None:
        if "code" not in kwargs and self.default_code is not None:
            kwargs["code"] = self.default_code
        self.error = self.error_model(message=message, **kwargs)  # type: ignore[arg-type]
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def stage(self) -> str | None:
        return self.error.stage

    @property
    def recoverable(self) -> bool:
        return self.error.recoverable


class LocationNotFoundError(RecordSourceException):
    """A repository location could not be resolved to a readable stream."""

    default_code = CoreErrorCode.E_LOCATION_NOT_FOUND.value

    def __init__(self, location: str, message: str | None = None) -> None:
        self.location = location
        super().__init__(
            message or f"Location not found: {location}",
            stage="load",
        )
