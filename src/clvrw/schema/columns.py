"""
Column definitions for CLV (Constant-Length Values) files.

A CLV line has no separators: every field occupies a fixed number of
characters and is right-padded to that width. :class:`ColumnsSet` keeps the
ordered list of :class:`Column` objects which defines both the left-to-right
layout of a line and the keys of decoded rows.

:class Column: Immutable name/length pair.
:class ColumnsSet: Ordered, indexable container of columns with unique names.
"""
from __future__ import annotations
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Iterator, List, overload

from ..errors import ClvSchemaError


@dataclass(frozen=True)
class Column:
    """
    A single fixed-width field.

    :param name: Field name, used as the row key.
    :param length: Field width in characters (not bytes).
    :raises ClvSchemaError: If the name is empty or the length is not a positive integer.
    """
    name: str
    length: int

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or self.name == "":
            raise ClvSchemaError(f"Column name must be a non-empty string, got {self.name!r}")
        # bool is an int subclass
        if isinstance(self.length, bool) or not isinstance(self.length, int) or self.length < 1:
            raise ClvSchemaError(f"Column '{self.name}' must have a positive integer length, got {self.length!r}")

    @classmethod
    def create(cls, name: str, length: int) -> "Column":
        return cls(name, length)


class ColumnsSet(Sequence):
    """
    Ordered set of columns for a CLV file.

    Insertion order is the on-disk field order. Names must be unique because
    rows are keyed by column name.

    :param columns: Initial columns, in layout order.
    """
    def __init__(self, columns: Iterable[Column] = ()):
        self._columns: List[Column] = []
        self.set_columns(columns)

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    def set_columns(self, columns: Iterable[Column]) -> "ColumnsSet":
        self.clear_columns()
        for column in columns:
            self.add_column(column)
        return self

    def clear_columns(self) -> "ColumnsSet":
        self._columns = []
        return self

    def add_column(self, column: Column) -> "ColumnsSet":
        """
        Append a column to the end of the layout.

        :param column: Column to append.
        :return: This set (chainable).
        :raises TypeError: If ``column`` is not a :class:`Column`.
        :raises ClvSchemaError: If a column with the same name already exists.
        """
        if not isinstance(column, Column):
            raise TypeError(f"Expected Column, got {type(column).__name__}")
        if column.name in self.names():
            raise ClvSchemaError(f"Duplicate column name '{column.name}'")
        self._columns.append(column)
        return self

    def names(self) -> List[str]:
        return [column.name for column in self._columns]

    def total_length(self) -> int:
        """Width of a full line in characters, line terminator excluded."""
        return sum(column.length for column in self._columns)

    @overload
    def __getitem__(self, index: int) -> Column: ...

    @overload
    def __getitem__(self, index: slice) -> List[Column]: ...

    def __getitem__(self, index):
        return self._columns[index]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __repr__(self) -> str:
        inner = ", ".join(f"{c.name}:{c.length}" for c in self._columns)
        return f"ColumnsSet([{inner}])"
