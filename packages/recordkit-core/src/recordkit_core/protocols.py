"""Collaborator protocols for recordkit.

Defines the structural-subtyping interfaces exchanged with the outside
world.  All protocols are ``@runtime_checkable`` so callers can optionally
verify conformance with ``isinstance`` checks.
"""

from __future__ import annotations

from typing import IO, Any, Protocol, runtime_checkable


@runtime_checkable
class RepositoryService(Protocol):
    """Resolves a location string to a readable binary stream."""

    def get_input_stream(self, location: str) -> IO[bytes]:
        """Open *location*; raise ``LocationNotFoundError`` when unresolvable."""
        ...


@runtime_checkable
class RecordSource(Protocol):
    """Pull-based record cursor consumed by a report engine."""

    @property
    def rewindable(self) -> bool:
        """True when :meth:`rewind` is supported."""
        ...

    def advance(self) -> bool:
        """Move to the next record. Returns False once exhausted."""
        ...

    def fetch_value(self, field_name: str, field_type: Any = ...) -> Any:
        """Return the current record's value for *field_name*."""
        ...

    def rewind(self) -> None:
        """Return to the position before the first record."""
        ...

    def close(self) -> None:
        """Release all resources held by the source."""
        ...
