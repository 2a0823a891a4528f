"""recordkit-core -- Shared primitives for the recordkit framework.

Re-exports all public types: errors, models, protocols, and the filesystem
repository service.
"""

from recordkit_core.errors import (
    BaseRecordError,
    CoreErrorCode,
    LocationNotFoundError,
    RecordSourceException,
)
from recordkit_core.models import FieldType, FormatHint
from recordkit_core.protocols import RecordSource, RepositoryService
from recordkit_core.repository import FileRepositoryService

__all__ = [
    # Errors
    "CoreErrorCode",
    "BaseRecordError",
    "RecordSourceException",
    "LocationNotFoundError",
    # Models
    "FieldType",
    "FormatHint",
    # Protocols
    "RecordSource",
    "RepositoryService",
    # Repository
    "FileRepositoryService",
]
