from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..schema.columns import ColumnsSet
from ..types import Row


class BaseOutput(ABC):
    """Abstract base for sinks receiving rows decoded from a CLV file.

    Concrete implementations must provide lifecycle and row handling methods.

    :param dest: Destination path / identifier.
    :param columns: Layout of the rows, used for column order.
    :param opts: Additional implementation-specific options.
    """
    def __init__(self, dest: str, columns: ColumnsSet, **opts: Any):
        self.dest = dest
        self.columns = columns
        self.opts = opts
        self.counters: Dict[str, int] = {"read": 0, "written": 0, "blank": 0}

    @abstractmethod
    def open(self) -> None:
        """Initialize resources (directories, files)."""
        ...

    @abstractmethod
    def write(self, row: Row) -> None:
        """Persist a single row. ``{}`` marks a blank line of the source.

        :param row: Row dictionary to write.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Finalize and release resources, flushing buffers as needed."""
        ...

    def _count(self, row: Row) -> None:
        self.counters["read"] += 1
        if not row:
            self.counters["blank"] += 1
