from __future__ import annotations

"""Parquet output writer.

Writes all rows of one CLV file to ``<dest>/<table>.parquet``. Every column is
a nullable UTF-8 string in layout order; CLV carries no types. Default mode is
vectorized via ``polars``: rows are buffered and written once. ``mode='chunked'``
streams row batches using ``pyarrow`` append writes (for files that would not
fit in memory).

Artifacts written under ``dest``:

* ``<table>.parquet`` – the rows (``data.parquet`` unless ``table`` is given)
* ``_manifest.json`` – summary counters: ``read``, ``written``, ``blank``

Blank source lines become rows where every column is null.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal

import polars as pl
import pyarrow as pa
import pyarrow.parquet as pq

from .base import BaseOutput
from ..schema.columns import ColumnsSet
from ..types import Row

logger = logging.getLogger(__name__)

ALLOWED_COMPRESSION = {"snappy", "gzip", "brotli", "zstd", "lz4", "uncompressed"}


class ParquetOutput(BaseOutput):
    """Parquet output writer for decoded CLV rows.

    :param dest: Output directory path (created if missing).
    :param columns: Layout of the rows; defines the Parquet schema.
    :param table: Base name of the Parquet file.
    :param mode: ``vectorized`` or ``chunked``.
    :param chunk_size: Row count threshold for flushing in ``chunked`` mode.
    :param compression: Parquet compression codec (default ``snappy``).
    """

    def __init__(
        self,
        dest: str,
        columns: ColumnsSet,
        *,
        table: str = "data",
        mode: str = "vectorized",
        chunk_size: int = 50_000,
        compression: str = "snappy",
        **kwargs: Any,
    ):
        super().__init__(dest, columns, **kwargs)
        if compression not in ALLOWED_COMPRESSION:
            raise ValueError(f"Unsupported compression '{compression}'. Allowed: {sorted(ALLOWED_COMPRESSION)}")
        self.compression: Literal["snappy", "gzip", "brotli", "zstd", "lz4", "uncompressed"] = compression  # type: ignore[assignment]
        self.mode = mode.lower()
        if self.mode not in {"vectorized", "chunked"}:
            raise ValueError("mode must be 'vectorized' or 'chunked'")
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.table = self._sanitize_table_name(table)
        self.row_buffer: List[Row] = []
        self._writer: pq.ParquetWriter | None = None
        self._arrow_schema = pa.schema([(name, pa.string()) for name in columns.names()])

    def open(self) -> None:  # type: ignore[override]
        self.output_dir = Path(self.dest)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.output_path = self.output_dir / f"{self.table}.parquet"

    # ---------------- Public write API -----------
    def write(self, row: Row) -> None:  # type: ignore[override]
        self._count(row)
        self.row_buffer.append(row)
        if self.mode == "chunked" and len(self.row_buffer) >= self.chunk_size:
            self._flush_chunk()

    # ---------------- Internal helpers ------------
    @staticmethod
    def _sanitize_table_name(name: str) -> str:
        base = Path(name).name
        return base.replace("/", "_").replace("\\", "_")

    @property
    def _arrow_compression(self) -> str:
        return "none" if self.compression == "uncompressed" else self.compression

    def _columnar(self, rows: List[Row]) -> Dict[str, List[Any]]:
        return {name: [row.get(name) for row in rows] for name in self.columns.names()}

    def _flush_chunk(self) -> None:
        if not self.row_buffer:
            return
        table_pa = pa.Table.from_pydict(self._columnar(self.row_buffer), schema=self._arrow_schema)
        if self._writer is None:
            self._writer = pq.ParquetWriter(str(self.output_path), self._arrow_schema, compression=self._arrow_compression)
        self._writer.write_table(table_pa)
        self.counters["written"] += len(self.row_buffer)
        self.row_buffer.clear()

    def _flush_all_chunked(self) -> None:
        self._flush_chunk()
        if self._writer is None:
            # no rows at all: still emit an empty file with the layout schema
            pq.write_table(self._arrow_schema.empty_table(), str(self.output_path), compression=self._arrow_compression)
            return
        self._writer.close()
        self._writer = None

    def _flush_vectorized(self) -> None:
        schema = {name: pl.Utf8 for name in self.columns.names()}
        df = pl.DataFrame(self._columnar(self.row_buffer), schema=schema)
        df.write_parquet(self.output_path, compression=self.compression)
        self.counters["written"] += len(self.row_buffer)
        self.row_buffer.clear()

    # ---------------- Lifecycle -------------------
    def close(self) -> None:  # type: ignore[override]
        try:
            if self.mode == "chunked":
                self._flush_all_chunked()
            else:
                self._flush_vectorized()
        finally:
            manifest = self.output_dir / "_manifest.json"
            manifest.write_text(json.dumps(self.counters, indent=2), encoding="utf-8")
            logger.info("Parquet output %s: %s", self.output_path, self.counters)
