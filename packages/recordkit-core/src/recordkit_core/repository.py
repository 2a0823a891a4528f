"""Filesystem implementation of :class:`RepositoryService`.

Resolves a location against an ordered list of search directories.
Directories that do not exist are skipped silently; absolute locations are
opened directly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

from recordkit_core.errors import LocationNotFoundError

logger = logging.getLogger("recordkit_core")


class FileRepositoryService:
    """Open locations relative to a list of search directories.

    Parameters
    ----------
    search_paths:
        Directories tried in order.  Entries that are missing or are not
        directories are ignored.  Defaults to the current working directory.
    """

    def __init__(self, search_paths: list[str] | None = None) -> None:
        candidates = [Path(p) for p in (search_paths or ["."])]
        self._search_paths = [p for p in candidates if p.is_dir()]
        skipped = len(candidates) - len(self._search_paths)
        if skipped:
            logger.debug(
                "recordkit_core | skipped %d missing search path(s)", skipped
            )

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def resolve(self, location: str) -> Path | None:
        """Return the first existing file for *location*, or None."""
        path = Path(location)
        if path.is_absolute():
            return path if path.is_file() else None
        for base in self._search_paths:
            candidate = base / path
            if candidate.is_file():
                return candidate
        return None

    def get_input_stream(self, location: str) -> IO[bytes]:
        path = self.resolve(location)
        if path is None:
            raise LocationNotFoundError(location)
        logger.debug("recordkit_core | location=%s | resolved=%s", location, path)
        return open(path, "rb")
