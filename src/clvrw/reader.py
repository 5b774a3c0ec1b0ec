"""
Reader: streams rows out of CLV (Constant-Length Values) files.

The reader is a forward cursor over a text or binary stream. Nothing is read
at ``open()``/``assign()`` time; the first call to :meth:`Reader.current_row`,
:meth:`Reader.current_index`, :meth:`Reader.is_valid`, :meth:`Reader.advance`
or :meth:`Reader.get_column_names` loads the first row, so read errors surface
on first use.

Example::

    columns = ColumnsSet([Column.create("A", 3), Column.create("B", 2)])
    with Reader().open("data.clv", columns) as reader:
        for row in reader:
            print(row)
"""
from __future__ import annotations
import logging
from typing import Iterator, List, Optional

from .codec import decode_line
from .errors import ClvIOError, ClvParseError, NotRewindableError
from .schema.columns import ColumnsSet
from .session import StreamSession
from .streams import StreamLike, is_seekable, open_text_for_reading
from .types import Row

logger = logging.getLogger(__name__)


class Reader(StreamSession):
    """
    Reader for text streams in CLV format.

    :param ignore_empty_data_lines: Skip blank lines instead of yielding ``{}``
        for them. Skipped lines do not consume a row index.
    :param encoding: Encoding used by :meth:`open` and to decode binary streams.
    """
    role = "reader"

    def __init__(self, ignore_empty_data_lines: bool = False, encoding: str = "utf-8"):
        super().__init__()
        self.ignore_empty_data_lines = ignore_empty_data_lines
        self.encoding = encoding
        self._current_index: Optional[int] = None
        self._current_row: Optional[Row] = None

    def open(self, path: str, columns: ColumnsSet) -> "Reader":
        """
        Open a CLV file for reading. The reader owns and closes the handle.

        :param path: File system path.
        :param columns: Layout of the file.
        :return: This reader (chainable).
        :raises ClvIOError: If the file cannot be opened.
        """
        handle = open_text_for_reading(path, self.encoding)
        self._bind(handle, columns, owns_handle=True)
        logger.debug("Opened CLV file %s for reading", path)
        return self

    def assign(self, handle: StreamLike, columns: ColumnsSet) -> "Reader":
        """
        Read from an already open stream, e.g. ``sys.stdin``.

        :param handle: Open text or binary stream, owned by the caller.
        :param columns: Layout of the data.
        :return: This reader (chainable).
        """
        self._bind(handle, columns, owns_handle=False)
        return self

    def unassign(self) -> None:
        super().unassign()
        self._current_index = None
        self._current_row = None

    def _init(self) -> None:
        self._line_number = 0
        self._current_index = -1
        self._current_row = None
        self._initialized = True
        self.advance()

    def current_row(self) -> Optional[Row]:
        """
        Row under the cursor: a dict for data lines, ``{}`` for blank lines,
        ``None`` once the stream is exhausted.
        """
        self._ensure_initialized()
        return self._current_row

    def current_index(self) -> Optional[int]:
        """0-based index of the current row, ``None`` once exhausted."""
        self._ensure_initialized()
        return self._current_index

    def is_valid(self) -> bool:
        self._ensure_initialized()
        return self._current_row is not None

    def advance(self) -> None:
        """
        Move the cursor to the next row.

        Calling it again after the end of the stream keeps the reader exhausted.

        :raises ClvIOError: If the stream cannot be read.
        :raises ClvParseError: If a line cannot be decoded.
        """
        if not self._initialized:
            self._init()
            return
        if self._current_index is None:
            return

        skipped = 0
        while True:
            row = self._read_row()
            if row is None:
                self._current_row = None
                self._current_index = None
                break
            if row == {} and self.ignore_empty_data_lines:
                skipped += 1
                continue
            self._current_index += 1
            self._current_row = row
            break
        if skipped:
            logger.debug("Skipped %d empty line(s) before line %d", skipped, self.line_number)

    def _read_row(self) -> Optional[Row]:
        """
        Read and decode the next line.

        :return: Row dict, ``{}`` for a blank line, ``None`` at end of stream.
        """
        handle = self._get_valid_handle()
        line_number = self.line_number + 1
        try:
            line = handle.readline()
        except OSError as e:
            raise ClvIOError(f"Failed to read from CLV file/stream at line {line_number}",
                             line_number=line_number) from e
        except UnicodeDecodeError as e:
            raise ClvParseError(f"Failed to parse CLV file/stream at line {line_number}: {e}",
                                line_number=line_number) from e
        if not line:
            return None
        self._line_number = line_number
        return decode_line(line, self._get_columns(), self.encoding, line_number)

    def rewind(self) -> None:
        """
        Return to the first row.

        A stream that has not been read from yet needs no seeking, so freshly
        assigned pipes can still be iterated once.

        :raises NotRewindableError: If the stream was read and cannot seek.
        """
        if self._line_number is not None:
            handle = self._get_valid_handle()
            if not is_seekable(handle):
                raise NotRewindableError("Cannot rewind not seekable stream")
            handle.seek(0)
            logger.debug("Rewound CLV stream %r", handle)
        self._init()

    def get_all_rows(self) -> List[Row]:
        """Collect all rows from the current position to the end of the stream."""
        rows: List[Row] = []
        while self.is_valid():
            rows.append(self._current_row)
            self.advance()
        return rows

    def __iter__(self) -> Iterator[Row]:
        self.rewind()
        while self.is_valid():
            yield self._current_row
            self.advance()
