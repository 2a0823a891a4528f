"""ExcelRecordSource -- public record-source API over a spreadsheet.

Composes the loader, :class:`SheetCursor`, :class:`ColumnResolver`, and
:class:`FieldValueConverter` into the pull contract consumed by a report
engine:

1. ``advance()`` moves to the next record and returns False when done.
2. ``fetch_value(name, type)`` converts one field of the current record.
3. ``rewind()`` restarts the traversal.
4. ``close()`` releases the workbook and, when owned, the input stream.

Configuration setters are accepted while no traversal is in progress:
before the first ``advance()`` and again after ``rewind()``.
"""

from __future__ import annotations

import logging
import os
from typing import IO, Any, Iterator, Mapping

from recordkit_core.models import FieldType, FormatHint
from recordkit_core.protocols import RepositoryService
from recordkit_excel.backends import is_workbook_object
from recordkit_excel.columns import ColumnResolver
from recordkit_excel.config import ExcelSourceConfig
from recordkit_excel.converter import FieldValueConverter
from recordkit_excel.cursor import CursorState, SheetCursor
from recordkit_excel.errors import (
    ConfigurationAfterStartError,
    ErrorCode,
    ExcelSourceException,
    NotPositionedError,
)
from recordkit_excel.formats import NumberFormat
from recordkit_excel.loader import load_workbook
from recordkit_excel.workbook import Row, Workbook

logger = logging.getLogger("recordkit_excel")


class ExcelRecordSource:
    """Rewindable record source reading an ``.xlsx`` or ``.xls`` workbook.

    Parameters
    ----------
    source:
        A binary stream holding the document, or a pre-built workbook
        (:class:`Workbook`, openpyxl ``Workbook``, or xlrd ``Book``).
        Streams are decoded immediately; pre-built workbooks are never
        closed by this source.
    format:
        Container format of a stream.  Defaults to ``config.format``.
    config:
        Source configuration.  Uses defaults when *None*.
    """

    def __init__(
        self,
        source: IO[bytes] | Workbook | Any,
        format: FormatHint | None = None,
        config: ExcelSourceConfig | None = None,
    ) -> None:
        self._config = config or ExcelSourceConfig()
        self._format = FormatHint(format or self._config.format)
        self._stream: IO[bytes] | None = None
        self._owns_stream = False
        self._closed = False

        if not is_workbook_object(source):
            self._stream = source
            self._workbook = load_workbook(
                source, self._format, self._config.max_file_size_mb
            )
            self._owns_workbook = True
        else:
            self._workbook = Workbook.wrap(source)
            self._owns_workbook = False

        self._columns = ColumnResolver()
        self._converter = FieldValueConverter(
            datemode=self._workbook.datemode,
            log_sample_data=self._config.log_sample_data,
        )
        self._cursor = SheetCursor(
            self._workbook,
            on_header=self._read_header,
            on_exhausted=self._release_stream,
        )
        self._apply_config(self._config)

    # ------------------------------------------------------------------
    # Alternate constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_path(
        cls,
        path: str | os.PathLike[str],
        format: FormatHint | None = None,
        config: ExcelSourceConfig | None = None,
    ) -> ExcelRecordSource:
        """Open *path* and own the resulting stream."""
        stream = open(path, "rb")
        return cls._owning(stream, format, config)

    @classmethod
    def from_location(
        cls,
        location: str,
        repository: RepositoryService,
        format: FormatHint | None = None,
        config: ExcelSourceConfig | None = None,
    ) -> ExcelRecordSource:
        """Resolve *location* through *repository* and own the stream.

        Raises ``LocationNotFoundError`` when the repository cannot resolve
        the location.
        """
        stream = repository.get_input_stream(location)
        return cls._owning(stream, format, config)

    @classmethod
    def _owning(
        cls,
        stream: IO[bytes],
        format: FormatHint | None,
        config: ExcelSourceConfig | None,
    ) -> ExcelRecordSource:
        try:
            source = cls(stream, format=format, config=config)
        except BaseException:
            stream.close()
            raise
        source._owns_stream = True
        return source

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _apply_config(self, config: ExcelSourceConfig) -> None:
        self.set_date_format(config.date_format)
        self.set_number_format(config.number_format)
        if config.column_names is not None:
            self.set_column_names(config.column_names, config.column_indexes)
        elif config.column_indexes is not None:
            self.set_column_indexes(config.column_indexes)
        self.set_use_first_row_as_header(config.use_first_row_as_header)
        self.set_sheet_selection(config.sheet_selection)

    def _check_read_started(self) -> None:
        if self._cursor.started:
            raise ConfigurationAfterStartError(
                "Cannot modify data source properties after data reading has started.",
                stage="configure",
            )

    @property
    def format(self) -> FormatHint:
        return self._format

    @property
    def date_format(self) -> str | None:
        return self._converter.date_format

    def set_date_format(self, date_format: str | None) -> None:
        self._check_read_started()
        self._converter.date_format = date_format

    @property
    def number_format(self) -> NumberFormat | None:
        return self._converter.number_format

    def set_number_format(self, number_format: NumberFormat | None) -> None:
        self._check_read_started()
        self._converter.number_format = number_format

    @property
    def column_names(self) -> dict[str, int]:
        return self._columns.column_map

    def set_column_names(
        self, names: list[str], indexes: list[int] | None = None
    ) -> None:
        """Bind field names to columns 0..N-1, or to explicit *indexes*."""
        self._check_read_started()
        self._columns.set_column_names(names, indexes)

    def set_column_indexes(self, indexes: list[int]) -> None:
        """Bind ``COLUMN_<i>`` to ``indexes[i]``."""
        self._check_read_started()
        self._columns.set_column_indexes(indexes)

    @property
    def use_first_row_as_header(self) -> bool:
        return self._cursor.use_first_row_as_header

    def set_use_first_row_as_header(self, value: bool) -> None:
        self._check_read_started()
        self._cursor.use_first_row_as_header = bool(value)
        self._columns.reset_header()

    @property
    def sheet_selection(self) -> str | None:
        return self._cursor.sheet_selection

    def set_sheet_selection(self, selection: str | int | None) -> None:
        """Select one sheet by index or name; *None* reads every sheet."""
        self._check_read_started()
        self._cursor.sheet_selection = None if selection is None else str(selection)
        self._columns.reset_header()

    # ------------------------------------------------------------------
    # Record contract
    # ------------------------------------------------------------------

    @property
    def rewindable(self) -> bool:
        return True

    @property
    def state(self) -> CursorState:
        return self._cursor.state

    @property
    def position(self) -> tuple[int, int]:
        return self._cursor.position

    @property
    def workbook(self) -> Workbook:
        return self._workbook

    def advance(self) -> bool:
        """Move to the next record.  Returns False once every row is read."""
        if self._closed:
            return False
        return self._cursor.advance()

    def fetch_value(
        self,
        field_name: str,
        field_type: FieldType | type | str = FieldType.TEXT,
    ) -> object:
        """Return the current record's *field_name* converted to *field_type*."""
        if self._cursor.state != CursorState.POSITIONED or self._closed:
            raise NotPositionedError(
                f"Cannot fetch field '{field_name}': no current record.",
                field_name=field_name,
                stage="fetch",
            )
        column = self._columns.resolve(field_name)
        row = self._cursor.current_row()
        try:
            return self._converter.convert(row.cell(column), field_type, field_name)
        except ExcelSourceException as exc:
            if exc.error.sheet_name is None:
                exc.error.sheet_name = self._cursor.sheet.name
            raise

    def rewind(self) -> None:
        """Restart before the first record.

        The column map is kept and the setters are accepted again.
        """
        self._cursor.rewind()
        logger.debug("recordkit_excel | rewound")

    def iter_records(
        self, fields: Mapping[str, FieldType | type | str]
    ) -> Iterator[dict[str, object]]:
        """Advance through the remaining records, yielding one dict each."""
        while self.advance():
            yield {
                name: self.fetch_value(name, field_type)
                for name, field_type in fields.items()
            }

    def close(self) -> None:
        """Release owned resources.  Never raises; safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self._owns_workbook:
            try:
                self._workbook.close()
            except Exception as exc:
                logger.warning(
                    "recordkit_excel | code=%s | workbook close failed: %s",
                    ErrorCode.W_CLOSE_FAILED.value,
                    exc,
                )
        self._release_stream()
        logger.debug("recordkit_excel | closed")

    def __enter__(self) -> ExcelRecordSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_header(self, row: Row) -> None:
        self._columns.read_header(row, self._converter.to_text)

    def _release_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None or not self._owns_stream:
            return
        try:
            stream.close()
        except Exception as exc:
            logger.warning(
                "recordkit_excel | code=%s | stream close failed: %s",
                ErrorCode.W_CLOSE_FAILED.value,
                exc,
            )
