from __future__ import annotations
from typing import Type

from ..outputs.base import BaseOutput


def get_output_cls(kind: str) -> Type[BaseOutput]:
    """
    Return the output class for the given kind.
    Supported kinds: "jsonl" (JSONLOutput), "parquet" (ParquetOutput).
    """
    if kind == "jsonl":
        from ..outputs.jsonl_output import JSONLOutput
        return JSONLOutput
    if kind == "parquet":
        from ..outputs.parquet_output import ParquetOutput
        return ParquetOutput
    raise KeyError(f"Unknown output kind: {kind}")
