from __future__ import annotations

import pytest

from krill.buffer import Buffer, Row, read_lines


class TestRow:
    def test_render_expands_tabs_to_next_stop(self):
        row = Row("a\tb")
        assert row.render == "a" + " " * 7 + "b"
        assert row.rsize == 9
        assert row.size == 3

    def test_render_of_leading_tab_is_full_stop(self):
        assert Row("\tx").render == " " * 8 + "x"

    def test_custom_tab_stop(self):
        assert Row("ab\tc", tab_stop=4).render == "ab  c"

    def test_cx_to_rx_with_tab(self):
        row = Row("a\tb")
        assert row.cx_to_rx(0) == 0
        assert row.cx_to_rx(1) == 1
        assert row.cx_to_rx(2) == 8
        assert row.cx_to_rx(3) == 9

    @pytest.mark.parametrize("text", ["", "hello", "x y z"])
    def test_cx_to_rx_is_identity_without_tabs(self, text):
        row = Row(text)
        assert [row.cx_to_rx(cx) for cx in range(row.size + 1)] == list(range(row.size + 1))

    def test_cx_to_rx_is_monotonic(self):
        row = Row("\ta\t\tbc\td")
        values = [row.cx_to_rx(cx) for cx in range(row.size + 1)]
        assert values == sorted(values)
        assert values[-1] == row.rsize


class TestBufferRows:
    def test_insert_row_clamps_position(self):
        buf = Buffer()
        buf.insert_row(5, "last")
        buf.insert_row(-3, "first")
        assert [r.chars for r in buf.rows] == ["first", "last"]
        assert buf.dirty == 2

    def test_insert_row_in_middle_shifts_down(self):
        buf = Buffer()
        buf.load(["a", "c"])
        buf.insert_row(1, "b")
        assert [r.chars for r in buf.rows] == ["a", "b", "c"]

    def test_insert_row_renders_immediately(self):
        buf = Buffer()
        buf.insert_row(0, "\t")
        assert buf.rows[0].render == " " * 8

    def test_delete_row(self):
        buf = Buffer()
        buf.load(["a", "b", "c"])
        buf.delete_row(1)
        assert [r.chars for r in buf.rows] == ["a", "c"]
        assert buf.dirty == 1

    @pytest.mark.parametrize("at", [-1, 3, 10])
    def test_delete_row_out_of_range_is_noop(self, at):
        buf = Buffer()
        buf.load(["a", "b", "c"])
        buf.delete_row(at)
        assert buf.numrows == 3
        assert buf.dirty == 0


class TestBufferChars:
    def test_insert_char_clamps_and_rerenders(self):
        buf = Buffer()
        buf.load(["ab"])
        row = buf.rows[0]
        buf.row_insert_char(row, 99, "\t")
        assert row.chars == "ab\t"
        assert row.render == "ab" + " " * 6
        buf.row_insert_char(row, -1, "x")
        assert row.chars == "xab\t"
        assert buf.dirty == 2

    def test_insert_then_delete_restores_row(self):
        buf = Buffer()
        buf.load(["hello"])
        row = buf.rows[0]
        buf.row_insert_char(row, 2, "Z")
        buf.row_delete_char(row, 2)
        assert row.chars == "hello"
        assert row.size == 5

    @pytest.mark.parametrize("at", [-1, 2, 5])
    def test_delete_char_out_of_range_is_noop(self, at):
        buf = Buffer()
        buf.load(["ab"])
        buf.row_delete_char(buf.rows[0], at)
        assert buf.rows[0].chars == "ab"
        assert buf.dirty == 0

    def test_append_string(self):
        buf = Buffer()
        buf.load(["ab", "\tcd"])
        buf.row_append_string(buf.rows[0], buf.rows[1].chars)
        assert buf.rows[0].chars == "ab\tcd"
        assert buf.rows[0].render == "ab      cd"
        assert buf.dirty == 1


class TestPersistence:
    def test_rows_to_string(self):
        buf = Buffer()
        buf.load(["one", "", "three"])
        assert buf.rows_to_string() == "one\n\nthree\n"

    def test_empty_buffer_flattens_to_nothing(self):
        assert Buffer().rows_to_string() == ""

    def test_read_lines_strips_line_endings(self, tmp_path):
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"one\r\ntwo\nthree")
        assert list(read_lines(str(path))) == ["one", "two", "three"]

    def test_load_then_flatten_round_trips(self, tmp_path):
        original = b"first line\n\tindented\n\nlast\n"
        path = tmp_path / "doc.txt"
        path.write_bytes(original)
        buf = Buffer()
        buf.load(read_lines(str(path)))
        assert buf.rows_to_string().encode() == original
        assert buf.dirty == 0

    def test_save_after_load_is_identical(self, tmp_path):
        original = "café\n".encode() + b"\xff\xfe raw bytes\n"
        path = tmp_path / "doc.txt"
        path.write_bytes(original)
        buf = Buffer(str(path))
        buf.load(read_lines(str(path)))
        written = buf.save_to_file()
        assert written == len(original)
        assert path.read_bytes() == original
        assert buf.dirty == 0

    def test_save_truncates_longer_file(self, tmp_path):
        path = tmp_path / "doc.txt"
        path.write_text("a much longer previous content\n")
        buf = Buffer(str(path))
        buf.load(["short"])
        buf.save_to_file()
        assert path.read_text() == "short\n"

    def test_save_failure_keeps_rows(self, tmp_path):
        buf = Buffer(str(tmp_path / "missing" / "doc.txt"))
        buf.load(["keep me"])
        buf.row_insert_char(buf.rows[0], 0, "!")
        with pytest.raises(OSError):
            buf.save_to_file()
        assert buf.rows[0].chars == "!keep me"
        assert buf.dirty == 1
