from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .errors import UnassociatedStreamError
from .schema.columns import ColumnsSet
from .streams import is_closed

logger = logging.getLogger(__name__)


class StreamSession(ABC):
    """
    Handle bookkeeping shared by :class:`~clvrw.reader.Reader` and
    :class:`~clvrw.writer.Writer`.

    A session is bound to one stream and one :class:`ColumnsSet` at a time.
    Handles acquired by ``open()`` are owned by the session; handles passed to
    ``assign()`` stay owned by the caller, although ``close()`` closes them too.
    """
    role = "session"

    def __init__(self) -> None:
        self._handle: Any = None
        self._columns: Optional[ColumnsSet] = None
        self._owns_handle = False
        self._initialized = False
        self._line_number: Optional[int] = None

    @abstractmethod
    def _init(self) -> None:
        """Reset per-stream state on first access after assign/open."""

    def _bind(self, handle: Any, columns: ColumnsSet, owns_handle: bool) -> None:
        if not isinstance(columns, ColumnsSet):
            raise TypeError(f"Expected ColumnsSet, got {type(columns).__name__}")
        self._handle = handle
        self._columns = columns
        self._owns_handle = owns_handle
        self._initialized = False
        self._line_number = None

    def unassign(self) -> None:
        """Detach from the current stream without closing it."""
        self._handle = None
        self._columns = None
        self._owns_handle = False
        self._initialized = False
        self._line_number = None

    def close(self) -> None:
        """
        Close the current stream and reset internal state.

        :raises UnassociatedStreamError: If no valid stream is assigned.
        """
        handle = self._get_valid_handle()
        handle.close()
        logger.debug("CLV %s closed %r", self.role, handle)
        self.unassign()

    @property
    def file_handle(self) -> Any:
        return self._handle

    @property
    def line_number(self) -> int:
        return self._line_number or 0

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._init()

    def get_column_names(self) -> List[str]:
        self._ensure_initialized()
        return self._get_columns().names()

    def _get_columns(self) -> ColumnsSet:
        if self._columns is None:
            raise UnassociatedStreamError(f"CLV {self.role} not associated with any file or stream")
        return self._columns

    def _get_valid_handle(self) -> Any:
        if self._handle is None:
            raise UnassociatedStreamError(f"CLV {self.role} not associated with any file or stream")
        if is_closed(self._handle):
            raise UnassociatedStreamError(f"CLV {self.role} associated with not valid file handle")
        return self._handle

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._handle is None:
            return
        if self._owns_handle and not is_closed(self._handle):
            self.close()
        else:
            self.unassign()
