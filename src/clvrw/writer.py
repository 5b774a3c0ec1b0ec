"""
Writer: serializes rows into CLV (Constant-Length Values) lines.

Each call to :meth:`Writer.write_row` produces exactly one line of
``columns.total_length()`` characters plus the line terminator. Rows must use
exactly the column names as keys; see :func:`clvrw.codec.encode_row` for the
order in which a row is validated.
"""
from __future__ import annotations
import logging
from typing import Any, Iterable, Mapping

from .codec import encode_row
from .errors import ClvIOError
from .schema.columns import ColumnsSet
from .session import StreamSession
from .streams import StreamLike, is_binary, open_text_for_writing

logger = logging.getLogger(__name__)


class Writer(StreamSession):
    """
    Writer for CLV data.

    :param padding: Fill string used to right-pad short values (default: one space).
    :param trim_too_long_values: Silently truncate values wider than their
        column instead of raising :class:`~clvrw.errors.ClvValidationError`.
    :param encoding: Encoding used by :meth:`open` and for binary streams.
    :param line_terminator: Appended to every line.
    """
    role = "writer"

    def __init__(self, padding: str = " ", trim_too_long_values: bool = False, encoding: str = "utf-8",
                 line_terminator: str = "\n"):
        super().__init__()
        self.padding = padding
        self.trim_too_long_values = trim_too_long_values
        self.encoding = encoding
        self.line_terminator = line_terminator

    @property
    def padding(self) -> str:
        return self._padding

    @padding.setter
    def padding(self, value: str) -> None:
        if not isinstance(value, str) or value == "":
            raise ValueError(f"Padding must be a non-empty string, got {value!r}")
        self._padding = value

    def open(self, path: str, columns: ColumnsSet) -> "Writer":
        """
        Create (or truncate) a CLV file for writing. The writer owns and closes the handle.

        :param path: File system path.
        :param columns: Layout of the file.
        :return: This writer (chainable).
        :raises ClvIOError: If the file cannot be opened.
        """
        handle = open_text_for_writing(path, self.encoding)
        self._bind(handle, columns, owns_handle=True)
        logger.debug("Opened CLV file %s for writing", path)
        return self

    def assign(self, handle: StreamLike, columns: ColumnsSet) -> "Writer":
        """
        Write to an already open stream, e.g. ``sys.stdout``.

        :param handle: Open text or binary stream, owned by the caller.
        :param columns: Layout of the data.
        :return: This writer (chainable).
        """
        self._bind(handle, columns, owns_handle=False)
        return self

    def _init(self) -> None:
        self._line_number = 0
        self._initialized = True

    def write_row(self, row: Mapping[str, Any]) -> None:
        """
        Encode ``row`` and write it as one line.

        :param row: Mapping with exactly the column names as keys.
        :raises ClvValidationError: If the row is empty, has unexpected or
            missing fields, or holds a too long value while truncation is off.
        :raises ClvIOError: If the stream cannot be written.
        :raises UnassociatedStreamError: If no valid stream is assigned.
        """
        self._ensure_initialized()
        line = encode_row(row, self._get_columns(), self._padding, self.trim_too_long_values)
        line += self.line_terminator
        handle = self._get_valid_handle()
        self._line_number += 1
        data = line.encode(self.encoding) if is_binary(handle) else line
        try:
            handle.write(data)
        except OSError as e:
            raise ClvIOError(f"Failed to write CLV row at line {self._line_number}",
                             line_number=self._line_number) from e

    def write_rows(self, rows: Iterable[Mapping[str, Any]]) -> int:
        """Write every row of ``rows``; returns the number of lines written."""
        count = 0
        for row in rows:
            self.write_row(row)
            count += 1
        logger.debug("Wrote %d CLV row(s), %d in total", count, self.line_number)
        return count
