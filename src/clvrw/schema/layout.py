"""
Layout documents: JSON descriptions of a CLV file.

A layout lists the fields in on-disk order and optionally carries reader and
writer options in an ``x-clv`` extension block::

    {
      "fields": [
        {"name": "Style Number", "length": 12},
        {"name": "Color Code", "start": 13, "end": 15}
      ],
      "x-clv": {"encoding": "utf-8", "padding": " ",
                "trimTooLongValues": false, "ignoreEmptyDataLines": false}
    }

A field gives either ``length`` or a 1-based inclusive ``start``/``end``
pair. CLV fields are contiguous, so an explicit ``start`` must follow the
previous field directly.

:class Layout: Columns plus options, with reader/writer factories.
:func load_layout: Parse and validate a layout from a path or a dict.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from ..errors import ClvSchemaError
from .columns import Column, ColumnsSet

LAYOUT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["fields"],
    "properties": {
        "fields": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "length": {"type": "integer", "minimum": 1},
                    "start": {"type": "integer", "minimum": 1},
                    "end": {"type": "integer", "minimum": 1},
                },
            },
        },
        "x-clv": {
            "type": "object",
            "properties": {
                "encoding": {"type": "string", "minLength": 1},
                "padding": {"type": "string", "minLength": 1},
                "trimTooLongValues": {"type": "boolean"},
                "ignoreEmptyDataLines": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
}


class LayoutValidator:
    def __init__(self, schema: Dict[str, Any] = LAYOUT_SCHEMA):
        self._validator = Draft202012Validator(schema)

    def validate(self, document: Dict[str, Any]) -> None:
        """
        :raises ClvSchemaError: Describing the first (most relevant) violation.
        """
        first = best_match(self._validator.iter_errors(document))
        if first is not None:
            where = "/".join(str(p) for p in first.absolute_path) or "<root>"
            raise ClvSchemaError(f"Invalid CLV layout at {where}: {first.message}")


def calculate_field_length(field: Dict[str, Any]) -> int:
    """
    Width of a field given ``length`` or ``start``/``end``.

    :raises ClvSchemaError: If both or neither are given, or ``end`` < ``start``.
    """
    length = field.get("length")
    end = field.get("end")
    if length is not None and end is not None:
        raise ClvSchemaError(f"Field '{field['name']}' cannot have both 'length' and 'end'.")
    if length is not None:
        return length
    if end is not None:
        if "start" not in field:
            raise ClvSchemaError(f"Field '{field['name']}' has 'end' without 'start'.")
        field_length = end - field["start"] + 1
        if field_length < 1:
            raise ClvSchemaError(f"Field '{field['name']}' has invalid 'end' < 'start'.")
        return field_length
    raise ClvSchemaError(f"Field '{field['name']}' must have either 'length' or 'end'.")


@dataclass
class Layout:
    columns: ColumnsSet
    encoding: str = "utf-8"
    padding: str = " "
    trim_too_long_values: bool = False
    ignore_empty_data_lines: bool = False

    def make_reader(self):
        from ..reader import Reader
        return Reader(ignore_empty_data_lines=self.ignore_empty_data_lines, encoding=self.encoding)

    def make_writer(self):
        from ..writer import Writer
        return Writer(padding=self.padding, trim_too_long_values=self.trim_too_long_values,
                      encoding=self.encoding)


def build_columns(fields: list) -> ColumnsSet:
    columns = ColumnsSet()
    offset = 0
    for field in fields:
        start = field.get("start")
        if start is not None and start != offset + 1:
            raise ClvSchemaError(
                f"Field '{field['name']}' starts at {start}, expected {offset + 1} (CLV fields are contiguous).")
        length = calculate_field_length(field)
        columns.add_column(Column.create(field["name"], length))
        offset += length
    return columns


def load_layout(source: Union[str, Path, Dict[str, Any]]) -> Layout:
    """
    Load a layout from a JSON file path or an already parsed dict.

    :param source: Path to a JSON layout file, or the layout dict itself.
    :return: Validated :class:`Layout`.
    :raises ClvSchemaError: If the document is not a valid layout.
    :raises FileNotFoundError: If the path does not exist.
    :raises json.JSONDecodeError: If the file is not valid JSON.
    """
    if isinstance(source, dict):
        document = source
    else:
        with open(source, encoding="utf-8") as f:
            document = json.load(f)
    LayoutValidator().validate(document)
    options = document.get("x-clv") or {}
    return Layout(
        columns=build_columns(document["fields"]),
        encoding=options.get("encoding", "utf-8"),
        padding=options.get("padding", " "),
        trim_too_long_values=options.get("trimTooLongValues", False),
        ignore_empty_data_lines=options.get("ignoreEmptyDataLines", False),
    )
