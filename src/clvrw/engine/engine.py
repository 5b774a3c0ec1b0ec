from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from .registry import get_output_cls
from ..schema.layout import Layout

logger = logging.getLogger(__name__)


class Engine:
    def __init__(self, layout: Layout, output_kind: str = "jsonl", **output_opts: Any) -> None:
        """Wire a CLV reader built from ``layout`` to an output plugin.

        :param layout: Columns and reader options of the source file.
        :param output_kind: Registered output kind (``"jsonl"`` or ``"parquet"``).
        :param output_opts: Additional keyword options forwarded to the output class.
        """
        self.layout = layout
        self.output_kind = output_kind
        self.output_opts = output_opts
        self.Output = get_output_cls(output_kind)

    def run(self, source: str, dest: str) -> Dict[str, int]:
        """Read every row of ``source`` and hand it to the output.

        :param source: CLV file path, or ``-`` for standard input.
        :param dest: Output destination (see the output class).
        :return: Output counters (``read``, ``written``, ``blank``).
        :raises ClvError: On any read failure; the output is still closed.
        """
        output_opts = dict(self.output_opts)
        if self.output_kind == "parquet" and source != "-":
            output_opts.setdefault("table", Path(source).stem)
        output_plugin = self.Output(dest, self.layout.columns, **output_opts)

        reader = self.layout.make_reader()
        if source == "-":
            reader.assign(sys.stdin, self.layout.columns)
        else:
            reader.open(source, self.layout.columns)

        with reader:
            output_plugin.open()
            try:
                while reader.is_valid():
                    output_plugin.write(reader.current_row())
                    reader.advance()
                lines_read = reader.line_number
            finally:
                output_plugin.close()
        logger.info("Converted %s (%d line(s)) to %s", source, lines_read, dest)
        return dict(output_plugin.counters)
