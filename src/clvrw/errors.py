"""
Exception types raised by the CLV reader, writer and layout loader.

Every error derives from :class:`ClvError` so callers may catch the whole
family at once, or tell I/O failures apart from validation failures by class:

* :class:`ClvIOError` – a stream could not be opened, read or written.
* :class:`ClvParseError` – a line could not be decoded into field windows.
* :class:`ClvValidationError` – a row handed to the writer is not writable.
* :class:`NotRewindableError` – rewind requested on a non-seekable stream.
* :class:`UnassociatedStreamError` – no valid stream is assigned.
* :class:`ClvSchemaError` – a column definition or layout document is invalid.
"""
from __future__ import annotations
from typing import Optional

__all__ = [
    "ClvError",
    "ClvIOError",
    "ClvParseError",
    "ClvValidationError",
    "NotRewindableError",
    "UnassociatedStreamError",
    "ClvSchemaError",
]


class ClvError(Exception):
    """Base class for all CLV errors.

    :param message: Human readable description.
    :param line_number: 1-based line number the error relates to, if any.
    """
    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class ClvIOError(ClvError):
    """Stream could not be opened, read from or written to."""


class ClvParseError(ClvError, ValueError):
    """Line could not be sliced into the expected field windows."""


class ClvValidationError(ClvError, ValueError):
    """Row rejected by the writer (empty, unexpected/missing fields, too long value)."""


class NotRewindableError(ClvError):
    """Rewind requested on a stream that is not seekable."""


class UnassociatedStreamError(ClvError):
    """Operation attempted without a valid stream assigned."""


class ClvSchemaError(ClvError, ValueError):
    """Invalid column definition or layout document."""
