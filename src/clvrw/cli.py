from __future__ import annotations
import argparse, json, logging, sys
from .engine.engine import Engine
from .errors import ClvError, ClvValidationError
from .schema.layout import load_layout
from . import __version__


def _write_clv(args: argparse.Namespace) -> None:
    layout = load_layout(args.layout)
    writer = layout.make_writer()
    if args.padding is not None:
        writer.padding = args.padding
    if args.trim_too_long:
        writer.trim_too_long_values = True
    if args.dest == "-":
        writer.assign(sys.stdout, layout.columns)
    else:
        writer.open(args.dest, layout.columns)
    with writer:
        for n, s in enumerate(sys.stdin, start=1):
            if not s.strip():
                continue
            try:
                row = json.loads(s)
            except json.JSONDecodeError as e:
                raise ClvValidationError(f"Invalid JSON on stdin line {n}: {e}", line_number=n) from e
            if not isinstance(row, dict):
                raise ClvValidationError(f"Expected a JSON object per line, got {type(row).__name__}",
                                         line_number=n)
            writer.write_row(row)


def main() -> None:
    p = argparse.ArgumentParser("clvrw")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    read = sub.add_parser("read", help="Decode a CLV file to JSON lines or Parquet")
    read.add_argument("source", help="CLV file, or - for stdin")
    read.add_argument("--layout", required=True, help="Path to JSON layout file")
    read.add_argument("--dest", default="-", help="Output file (jsonl, - for stdout) or directory (parquet)")
    read.add_argument("--format", choices=["jsonl", "parquet"], default="jsonl")
    read.add_argument("--mode", choices=["vectorized", "chunked"], default="vectorized")  # parquet
    read.add_argument("--ignore-empty-lines", action="store_true")

    write = sub.add_parser("write", help="Encode JSON lines from stdin as CLV")
    write.add_argument("--layout", required=True, help="Path to JSON layout file")
    write.add_argument("--dest", default="-", help="CLV file, or - for stdout")
    write.add_argument("--padding")
    write.add_argument("--trim-too-long", action="store_true")

    args = p.parse_args()
    logging.basicConfig(level=args.log_level, stream=sys.stderr,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        if args.cmd == "read":
            layout = load_layout(args.layout)
            if args.ignore_empty_lines:
                layout.ignore_empty_data_lines = True
            output_opts = {"mode": args.mode} if args.format == "parquet" else {}
            if args.format == "parquet" and args.dest == "-":
                p.error("--dest directory is required for parquet output")
            eng = Engine(layout, output_kind=args.format, **output_opts)
            eng.run(args.source, args.dest)
        elif args.cmd == "write":
            _write_clv(args)
    except ClvError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
