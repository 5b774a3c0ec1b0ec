"""
clvrw - reader and writer for CLV (Constant-Length Values) flat files.
"""
from .errors import (
    ClvError,
    ClvIOError,
    ClvParseError,
    ClvSchemaError,
    ClvValidationError,
    NotRewindableError,
    UnassociatedStreamError,
)
from .reader import Reader
from .schema import Column, ColumnsSet, Layout, load_layout
from .writer import Writer

__version__ = "0.1.0"
__all__ = [
    "Column",
    "ColumnsSet",
    "Layout",
    "load_layout",
    "Reader",
    "Writer",
    "ClvError",
    "ClvIOError",
    "ClvParseError",
    "ClvSchemaError",
    "ClvValidationError",
    "NotRewindableError",
    "UnassociatedStreamError",
]
