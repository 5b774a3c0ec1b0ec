import io
from pathlib import Path

import pytest

from clvrw.errors import ClvIOError, ClvParseError, UnassociatedStreamError
from clvrw.reader import Reader
from clvrw.schema.columns import Column, ColumnsSet
from clvrw.schema.layout import load_layout


def test_read_example_from_string_stream(ab_columns):
    reader = Reader().assign(io.StringIO("xy z1 \nabcde\n"), ab_columns)
    assert reader.current_index() == 0
    assert reader.current_row() == {"A": "xy", "B": "z1"}
    assert reader.is_valid()
    reader.advance()
    assert reader.current_index() == 1
    assert reader.current_row() == {"A": "abc", "B": "de"}
    reader.advance()
    assert reader.current_row() is None
    assert reader.current_index() is None
    assert not reader.is_valid()


def test_nothing_is_read_before_first_access(ab_columns):
    stream = io.StringIO("abcde\n")
    reader = Reader().assign(stream, ab_columns)
    assert stream.tell() == 0
    assert reader.line_number == 0
    reader.is_valid()
    assert stream.tell() == 6
    assert reader.line_number == 1


def test_exhaustion_is_idempotent(ab_columns):
    reader = Reader().assign(io.StringIO("abcde\n"), ab_columns)
    reader.advance()  # initializes and loads the first row
    assert reader.current_row() == {"A": "abc", "B": "de"}
    for _ in range(3):
        reader.advance()
        assert reader.current_row() is None
        assert not reader.is_valid()
    assert reader.line_number == 1


def test_empty_stream(ab_columns):
    reader = Reader().assign(io.StringIO(""), ab_columns)
    assert not reader.is_valid()
    assert reader.get_all_rows() == []
    assert list(reader) == []


def test_blank_lines_yield_empty_rows(ab_columns):
    reader = Reader().assign(io.StringIO("abcde\n\n   \nfghij\n"), ab_columns)
    assert reader.get_all_rows() == [{"A": "abc", "B": "de"}, {}, {}, {"A": "fgh", "B": "ij"}]


def test_blank_lines_skipped_and_not_indexed(ab_columns):
    reader = Reader(ignore_empty_data_lines=True).assign(io.StringIO("\nabcde\n\n   \nfghij\n\n"), ab_columns)
    seen = []
    while reader.is_valid():
        seen.append((reader.current_index(), reader.current_row()))
        reader.advance()
    assert seen == [(0, {"A": "abc", "B": "de"}), (1, {"A": "fgh", "B": "ij"})]
    assert reader.line_number == 6


def test_only_blank_lines_with_skipping(ab_columns):
    reader = Reader(ignore_empty_data_lines=True).assign(io.StringIO("\n\n  \n"), ab_columns)
    assert not reader.is_valid()


def test_get_all_rows_from_current_position(ab_columns):
    reader = Reader().assign(io.StringIO("aaa11\nbbb22\nccc33\n"), ab_columns)
    reader.advance()
    assert reader.get_all_rows() == [{"A": "bbb", "B": "22"}, {"A": "ccc", "B": "33"}]
    assert not reader.is_valid()


def test_iteration_rewinds(ab_columns):
    reader = Reader().assign(io.StringIO("aaa11\nbbb22\n"), ab_columns)
    reader.advance()
    assert [row["A"] for row in reader] == ["aaa", "bbb"]
    assert [row["A"] for row in reader] == ["aaa", "bbb"]


def test_last_line_without_terminator(ab_columns):
    reader = Reader().assign(io.StringIO("aaa11\nbb"), ab_columns)
    assert reader.get_all_rows() == [{"A": "aaa", "B": "11"}, {"A": "bb", "B": ""}]


def test_crlf_line_endings(ab_columns):
    reader = Reader().assign(io.StringIO("aaa11\r\nb  2 \r\n"), ab_columns)
    assert reader.get_all_rows() == [{"A": "aaa", "B": "11"}, {"A": "b", "B": "2"}]


def test_multibyte_text_stream():
    cols = ColumnsSet([Column.create("City", 6), Column.create("Code", 3)])
    reader = Reader().assign(io.StringIO("Kraków31 \nŁódź  90 \n"), cols)
    assert reader.get_all_rows() == [{"City": "Kraków", "Code": "31"}, {"City": "Łódź", "Code": "90"}]


def test_binary_stream_decoded_with_encoding():
    cols = ColumnsSet([Column.create("City", 6), Column.create("Code", 3)])
    data = "Kraków31\n".encode("latin-1")
    reader = Reader(encoding="latin-1").assign(io.BytesIO(data), cols)
    assert reader.current_row() == {"City": "Kraków", "Code": "31"}


def test_undecodable_bytes_raise_parse_error(ab_columns):
    reader = Reader().assign(io.BytesIO(b"abcde\n\xff\xff\xff12\n"), ab_columns)
    assert reader.current_row() == {"A": "abc", "B": "de"}
    with pytest.raises(ClvParseError, match="line 2") as e:
        reader.advance()
    assert e.value.line_number == 2


class _FailingStream(io.StringIO):
    def __init__(self, initial: str, fail_at: int):
        super().__init__(initial)
        self._reads = 0
        self._fail_at = fail_at

    def readline(self, *args):
        self._reads += 1
        if self._reads == self._fail_at:
            raise OSError("device error")
        return super().readline(*args)


def test_read_failure_is_tagged_with_line_number(ab_columns):
    reader = Reader().assign(_FailingStream("aaa11\nbbb22\n", fail_at=2), ab_columns)
    assert reader.is_valid()
    with pytest.raises(ClvIOError, match="at line 2") as e:
        reader.advance()
    assert e.value.line_number == 2
    assert isinstance(e.value.__cause__, OSError)


def test_read_failure_deferred_until_first_access(ab_columns):
    reader = Reader().assign(_FailingStream("aaa11\n", fail_at=1), ab_columns)
    with pytest.raises(ClvIOError, match="at line 1"):
        reader.current_row()


def test_get_column_names(ab_columns):
    reader = Reader().assign(io.StringIO("abcde\n"), ab_columns)
    assert reader.get_column_names() == ["A", "B"]


def test_unassigned_reader_raises():
    reader = Reader()
    with pytest.raises(UnassociatedStreamError, match="not associated with any file or stream"):
        reader.current_row()
    with pytest.raises(UnassociatedStreamError):
        reader.close()


def test_closed_handle_raises(ab_columns):
    stream = io.StringIO("abcde\n")
    reader = Reader().assign(stream, ab_columns)
    stream.close()
    with pytest.raises(UnassociatedStreamError, match="not valid file handle"):
        reader.is_valid()


def test_assign_requires_columns_set():
    with pytest.raises(TypeError):
        Reader().assign(io.StringIO(""), [Column.create("A", 1)])  # type: ignore[arg-type]


def test_unassign_does_not_close(ab_columns):
    stream = io.StringIO("abcde\n")
    reader = Reader().assign(stream, ab_columns)
    assert reader.is_valid()
    reader.unassign()
    assert not stream.closed
    assert reader.file_handle is None
    with pytest.raises(UnassociatedStreamError):
        reader.is_valid()


def test_close_closes_assigned_stream(ab_columns):
    stream = io.StringIO("abcde\n")
    reader = Reader().assign(stream, ab_columns)
    reader.close()
    assert stream.closed
    assert reader.file_handle is None


def test_reassign_resets_state(ab_columns):
    reader = Reader().assign(io.StringIO("aaa11\nbbb22\n"), ab_columns)
    reader.get_all_rows()
    reader.assign(io.StringIO("ccc33\n"), ab_columns)
    assert reader.current_index() == 0
    assert reader.current_row() == {"A": "ccc", "B": "33"}


def test_open_missing_file(tmp_path: Path, ab_columns):
    missing = tmp_path / "missing.clv"
    with pytest.raises(ClvIOError, match="for reading") as e:
        Reader().open(str(missing), ab_columns)
    assert isinstance(e.value.__cause__, FileNotFoundError)


def test_open_sample_file(sample_clv_path: Path, sample_layout_path: Path):
    layout = load_layout(sample_layout_path)
    with Reader().open(str(sample_clv_path), layout.columns) as reader:
        handle = reader.file_handle
        rows = list(reader)
    assert handle.closed
    assert len(rows) == 3
    assert rows[0]["Style Number"] == "BW1001"
    assert rows[0]["Style Description"] == "Classic Crew Tee"
    assert rows[0]["Sold Out Reason"] == ""
    assert rows[1]["Sold Out Date"] == "20240115"
    assert rows[2]["Color Description"] == "Navy Heather"
    assert rows[2]["HSCountry"] == "PRT"
    assert all(list(r) == layout.columns.names() for r in rows)


def test_context_manager_leaves_assigned_stream_open(ab_columns):
    stream = io.StringIO("abcde\n")
    with Reader().assign(stream, ab_columns) as reader:
        assert reader.is_valid()
    assert not stream.closed
    assert reader.file_handle is None


def test_blank_lines_file(data_dir: Path, sample_layout_path: Path):
    columns = load_layout(sample_layout_path).columns
    path = str(data_dir / "sample" / "blank_lines.clv")
    with Reader().open(path, columns) as reader:
        rows = reader.get_all_rows()
    assert [bool(r) for r in rows] == [True, False, False, True]
    with Reader(ignore_empty_data_lines=True).open(path, columns) as reader:
        rows = reader.get_all_rows()
    assert [r["Style Number"] for r in rows] == ["BW1001", "BW2040"]


def test_unicode_space_line_not_skipped_as_blank(ab_columns):
    reader = Reader(ignore_empty_data_lines=True).assign(io.StringIO("\u3000\u3000\u3000\u3000\u3000\n\x00\x00\n"), ab_columns)
    assert reader.get_all_rows() == [{"A": "\u3000\u3000\u3000", "B": "\u3000\u3000"}]


class _LineSource:
    closed = False

    def __init__(self, lines):
        self._lines = iter(lines)

    def readline(self):
        return next(self._lines, "")


def test_duck_typed_stream_without_seek(ab_columns):
    reader = Reader().assign(_LineSource(["xy z1\n"]), ab_columns)
    assert reader.get_all_rows() == [{"A": "xy", "B": "z1"}]
