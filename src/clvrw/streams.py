from __future__ import annotations
import io
from typing import Any, Protocol, Union

from .errors import ClvIOError


class StreamLike(Protocol):
    """
    Capabilities the reader and writer rely on.

    Text and binary file objects, ``io.StringIO``/``io.BytesIO`` and the
    standard streams all qualify. ``seekable`` is optional; objects without it
    are treated as not seekable.
    """
    closed: bool

    def readline(self) -> Union[str, bytes]: ...

    def write(self, data: Any) -> Any: ...

    def seek(self, offset: int, whence: int = 0) -> Any: ...

    def close(self) -> None: ...


def is_seekable(handle: Any) -> bool:
    seekable = getattr(handle, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except (OSError, ValueError):
        return False


def is_closed(handle: Any) -> bool:
    return bool(getattr(handle, "closed", False))


def is_binary(handle: Any) -> bool:
    """Best effort check whether ``handle`` expects/returns ``bytes``."""
    if hasattr(handle, "encoding"):
        return False
    mode = getattr(handle, "mode", None)
    if isinstance(mode, str):
        return "b" in mode
    return isinstance(handle, (io.RawIOBase, io.BufferedIOBase))


def open_text_for_reading(path: str, encoding: str = "utf-8"):
    """
    Open ``path`` as text for line-by-line reading.

    Line endings are kept as written (``newline=""``) so that column offsets
    are computed on the exact file content.

    :param path: File system path.
    :param encoding: Text encoding of the file.
    :return: Open text file object owned by the caller.
    :raises ClvIOError: If the file cannot be opened.
    """
    try:
        return open(path, "r", encoding=encoding, newline="")
    except (OSError, LookupError) as e:
        raise ClvIOError(f'Can\'t open file "{path}" for reading') from e


def open_text_for_writing(path: str, encoding: str = "utf-8"):
    """
    Create or truncate ``path`` for writing CLV lines.

    :raises ClvIOError: If the file cannot be opened.
    """
    try:
        return open(path, "w", encoding=encoding, newline="")
    except (OSError, LookupError) as e:
        raise ClvIOError(f'Can\'t open file "{path}" for writing') from e
