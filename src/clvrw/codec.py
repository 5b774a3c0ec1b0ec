"""
Field slicing and padding for CLV lines.

The reader and writer share these helpers so both sides agree on offsets.
Widths are counted in characters of the decoded text, so multi-byte UTF-8
values occupy as many positions as they have characters.

:class ClvRowCodec: Static helpers for a single field.
:func decode_line: Split one text line into a row dictionary.
:func encode_row: Build one fixed-width line (without terminator) from a row dictionary.
"""
from __future__ import annotations
from typing import Any, List, Mapping, Optional, Union

from .errors import ClvParseError, ClvValidationError
from .schema.columns import ColumnsSet
from .types import Row

LINE_TERMINATORS = "\r\n"
# Characters removed around values and blank lines; other Unicode spaces are data.
TRIM_CHARS = " \t\n\r\0\x0b"


class ClvRowCodec:
    @staticmethod
    def extract_field_value(text: str, start: int, field_length: int) -> str:
        """
        Extract the window ``[start, start + field_length)`` of a line.

        Windows running past the end of the line return whatever characters
        remain, possibly an empty string.

        :param str text: Decoded line without terminator.
        :param int start: 0-based start offset.
        :param int field_length: Width of the field.
        :returns: The raw, still padded field value.
        :rtype: str
        """
        return text[start:start + field_length]

    @staticmethod
    def handle_whitespace(field_value: str) -> str:
        """Strip trailing padding; leading whitespace is data."""
        return field_value.rstrip(TRIM_CHARS)

    @staticmethod
    def pad_value(value: str, length: int, padding: str) -> str:
        """
        Right-pad ``value`` to exactly ``length`` characters.

        A multi-character ``padding`` is repeated and cut at the field
        boundary. Values already at or above ``length`` are returned as is.

        :param str value: Field value.
        :param int length: Target width in characters.
        :param str padding: Fill string, at least one character.
        :rtype: str
        """
        missing = length - len(value)
        if missing <= 0:
            return value
        repeats = -(-missing // len(padding))
        return value + (padding * repeats)[:missing]

    @staticmethod
    def to_text(value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)


def is_blank_line(text: str) -> bool:
    return text.strip(TRIM_CHARS) == ""


def decode_bytes(raw: bytes, encoding: str, line_number: Optional[int] = None) -> str:
    """
    Decode a raw line read from a binary stream.

    :raises ClvParseError: If the bytes are not valid in ``encoding``.
    """
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise ClvParseError(f"Failed to parse CLV file/stream at line {line_number}: {e}",
                            line_number=line_number) from e


def decode_line(line: Union[str, bytes], columns: ColumnsSet, encoding: str = "utf-8",
                line_number: Optional[int] = None) -> Row:
    """
    Decode one CLV line into a row dictionary.

    Blank lines (only whitespace and terminators) decode to ``{}``. Otherwise
    every column takes its window of the line, trailing padding (``TRIM_CHARS``) removed.

    :param line: Line as read from the stream, terminator included or not.
    :param columns: Layout to apply.
    :param encoding: Encoding used when ``line`` is ``bytes``.
    :param line_number: Line number for error messages.
    :returns: Mapping of column name to value.
    :raises ClvParseError: If ``line`` is bytes that cannot be decoded.
    """
    text = decode_bytes(line, encoding, line_number) if isinstance(line, bytes) else line
    if is_blank_line(text):
        return {}
    text = text.rstrip(LINE_TERMINATORS)
    row: Row = {}
    offset = 0
    for column in columns:
        value = ClvRowCodec.extract_field_value(text, offset, column.length)
        row[column.name] = ClvRowCodec.handle_whitespace(value)
        offset += column.length
    return row


def _quoted(names: List[str]) -> str:
    return '"' + '", "'.join(names) + '"'


def encode_row(row: Mapping[str, Any], columns: ColumnsSet, padding: str = " ",
               trim_too_long_values: bool = False) -> str:
    """
    Encode a row dictionary into one fixed-width line, terminator excluded.

    Checks run in a fixed order: empty row, then unexpected keys (whole row),
    then per-column width (may abort mid-row), then missing keys (whole row).

    :param row: Mapping of column name to value; ``None`` is written as empty.
    :param columns: Layout to apply.
    :param padding: Fill string for short values.
    :param trim_too_long_values: Truncate values wider than their column
        instead of failing.
    :returns: The encoded line, exactly ``columns.total_length()`` characters.
    :raises ClvValidationError: If the row cannot be written.
    """
    if not row:
        raise ClvValidationError("Attempt to write empty row in CLV file")
    column_names = columns.names()
    unexpected = [key for key in row if key not in column_names]
    if unexpected:
        raise ClvValidationError(
            f"Passed data for CLV contains unexpected field(s): {_quoted([str(k) for k in unexpected])}"
            f" (expected: {_quoted(column_names)})")

    parts: List[str] = []
    missing: List[str] = []
    for column in columns:
        if column.name not in row:
            missing.append(column.name)
            continue
        value = ClvRowCodec.to_text(row[column.name])
        actual_length = len(value)
        if actual_length > column.length:
            if trim_too_long_values:
                value = value[:column.length]
            else:
                raise ClvValidationError(
                    f'Too long value "{value}" for column {column.name}'
                    f" (max {column.length} characters, got {actual_length})")
        parts.append(ClvRowCodec.pad_value(value, column.length, padding))
    if missing:
        raise ClvValidationError(
            f"Passed data for CLV missing field(s): {_quoted(missing)} (expected: {_quoted(column_names)})")
    return "".join(parts)
