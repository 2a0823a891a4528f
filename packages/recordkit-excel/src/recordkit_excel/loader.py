"""Format detection and workbook loading.

``format_from_signature()`` classifies the leading bytes of a document and
``detect_format()`` peeks at them on a seekable or buffered stream without
consuming them.  ``load_workbook()`` reads the whole stream, decodes it with
the backend for the detected (or explicitly requested) format, and
normalizes every decoder failure into a
:class:`~recordkit_excel.errors.LoadError`.
"""

from __future__ import annotations

import io
import logging
from typing import IO

from recordkit_core.models import FormatHint
from recordkit_excel.backends import open_xls, open_xlsx
from recordkit_excel.errors import ErrorCode, LoadError
from recordkit_excel.workbook import Workbook

logger = logging.getLogger("recordkit_excel")

ZIP_SIGNATURE = b"PK\x03\x04"


def peek_signature(stream: IO[bytes], size: int = len(ZIP_SIGNATURE)) -> bytes:
    """Read the first *size* bytes of *stream* and leave its position unchanged."""
    if stream.seekable():
        position = stream.tell()
        try:
            return stream.read(size)
        finally:
            stream.seek(position)
    return stream.peek(size)[:size]  # type: ignore[attr-defined]


def format_from_signature(header: bytes) -> FormatHint:
    """Return ``ZIPPED_XML`` for a ``PK\\x03\\x04`` header, else ``LEGACY_BINARY``."""
    if header[: len(ZIP_SIGNATURE)] == ZIP_SIGNATURE:
        return FormatHint.ZIPPED_XML
    return FormatHint.LEGACY_BINARY


def detect_format(stream: IO[bytes]) -> FormatHint:
    """Classify a seekable or peekable *stream* without consuming it."""
    return format_from_signature(peek_signature(stream))


def load_workbook(
    stream: IO[bytes],
    format: FormatHint = FormatHint.AUTODETECT,
    max_file_size_mb: int | None = None,
) -> Workbook:
    """Decode *stream* into a :class:`Workbook`.

    Parameters
    ----------
    stream:
        Binary input positioned at the start of the document.
    format:
        Explicit container format, or ``AUTODETECT`` to sniff the leading
        bytes.  Explicit formats skip detection entirely.
    max_file_size_mb:
        Optional size limit; larger inputs are rejected before decoding.

    Raises
    ------
    LoadError
        If the input is empty, too large, encrypted, or cannot be decoded.
        The decoder's exception is chained as ``__cause__``.
    """
    format = FormatHint(format or FormatHint.AUTODETECT)

    # Short reads from pipes and sockets make peeking unreliable.
    data = stream.read()
    if not data:
        raise LoadError(
            "Input is empty (0 bytes).",
            code=ErrorCode.E_LOAD_EMPTY.value,
            stage="load",
        )
    if max_file_size_mb is not None:
        max_bytes = max_file_size_mb * 1024 * 1024
        if len(data) > max_bytes:
            raise LoadError(
                f"Input size {len(data)} bytes exceeds limit of {max_bytes} "
                f"bytes ({max_file_size_mb} MB)",
                code=ErrorCode.E_LOAD_TOO_LARGE.value,
                stage="load",
            )

    if format == FormatHint.AUTODETECT:
        format = format_from_signature(data)
        logger.debug("recordkit_excel | detected format=%s", format.value)

    opener = open_xlsx if format == FormatHint.ZIPPED_XML else open_xls
    try:
        workbook = opener(io.BytesIO(data))
    except Exception as exc:
        exc_msg = str(exc).lower()
        if "password" in exc_msg or "encrypted" in exc_msg:
            logger.error(
                "recordkit_excel | format=%s | code=%s | detail=%s",
                format.value,
                ErrorCode.E_LOAD_PASSWORD.value,
                exc,
            )
            raise LoadError(
                f"Workbook appears to be password-protected: {exc}",
                code=ErrorCode.E_LOAD_PASSWORD.value,
                stage="load",
            ) from exc
        logger.error(
            "recordkit_excel | format=%s | code=%s | detail=%s",
            format.value,
            ErrorCode.E_LOAD_FAILED.value,
            exc,
        )
        raise LoadError(
            f"Failed to load {format.value} workbook: {exc}",
            stage="load",
        ) from exc

    logger.info(
        "recordkit_excel | format=%s | bytes=%d | sheets=%d | loaded",
        workbook.source_format,
        len(data),
        workbook.sheet_count,
    )
    return workbook
