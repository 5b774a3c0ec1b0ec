"""JSON Lines output: one JSON object per decoded CLV row.

``dest`` is a file path, or ``-`` for standard output. Keys follow the column
order of the layout; blank source lines are written as ``{}``.
"""
from __future__ import annotations
import json
import logging
import sys
from typing import Any

from .base import BaseOutput
from ..schema.columns import ColumnsSet
from ..types import Row

logger = logging.getLogger(__name__)


class JSONLOutput(BaseOutput):
    def __init__(self, dest: str, columns: ColumnsSet, *, encoding: str = "utf-8", **kwargs: Any):
        super().__init__(dest, columns, **kwargs)
        self.encoding = encoding
        self._handle = None
        self._owns_handle = False

    def open(self) -> None:  # type: ignore[override]
        if self.dest == "-":
            self._handle = sys.stdout
            self._owns_handle = False
        else:
            self._handle = open(self.dest, "w", encoding=self.encoding, newline="")
            self._owns_handle = True

    def write(self, row: Row) -> None:  # type: ignore[override]
        self._count(row)
        self._handle.write(json.dumps(row, ensure_ascii=False) + "\n")
        self.counters["written"] += 1

    def close(self) -> None:  # type: ignore[override]
        if self._handle is None:
            return
        if self._owns_handle:
            self._handle.close()
        else:
            self._handle.flush()
        self._handle = None
        logger.info("JSONL output %s: %s", self.dest, self.counters)
