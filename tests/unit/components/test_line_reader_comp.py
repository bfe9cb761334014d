"""Unit tests for linewise.components.text.line_reader_comp."""

import codecs

import pytest

from linewise.components.text.line_reader_comp import LineReader
from linewise.helpers.dto.file_dto import FileMetadata

UTF8_LF = FileMetadata(encoding="utf-8", newline="\n", has_trailing_newline=True)


class TestLineReader:
    @pytest.mark.unit
    def test_mixed_terminators_are_stripped(self, make_file) -> None:
        path = make_file(b"a\r\nb\nc\rd")
        with LineReader(path, UTF8_LF) as reader:
            assert list(reader) == [(1, "a"), (2, "b"), (3, "c"), (4, "d")]
            assert not reader.final_line_terminated

    @pytest.mark.unit
    def test_final_terminator_tracked(self, make_file) -> None:
        with LineReader(make_file(b"a\nb\n"), UTF8_LF) as reader:
            lines = [text for _, text in reader]
        assert lines == ["a", "b"]
        assert reader.final_line_terminated

    @pytest.mark.unit
    def test_empty_line_before_eof(self, make_file) -> None:
        with LineReader(make_file(b"a\n\n"), UTF8_LF) as reader:
            assert [text for _, text in reader] == ["a", ""]

    @pytest.mark.unit
    def test_bom_is_skipped(self, make_file) -> None:
        metadata = FileMetadata(encoding="utf-8", newline="\n", has_trailing_newline=False, bom=codecs.BOM_UTF8)
        with LineReader(make_file(codecs.BOM_UTF8 + b"first\nsecond"), metadata) as reader:
            assert [text for _, text in reader] == ["first", "second"]

    @pytest.mark.unit
    def test_utf16_lines(self, make_file) -> None:
        metadata = FileMetadata(
            encoding="utf-16-le", newline="\r\n", has_trailing_newline=True, bom=codecs.BOM_UTF16_LE
        )
        path = make_file(codecs.BOM_UTF16_LE + "x\r\ny\r\n".encode("utf-16-le"))
        with LineReader(path, metadata) as reader:
            assert [text for _, text in reader] == ["x", "y"]

    @pytest.mark.unit
    def test_undecodable_bytes_survive_as_surrogates(self, make_file) -> None:
        with LineReader(make_file(b"ok\xff\n"), UTF8_LF) as reader:
            [(number, text)] = list(reader)
        assert number == 1
        assert text == "ok\udcff"
        assert text.encode("utf-8", "surrogateescape") == b"ok\xff"

    @pytest.mark.unit
    def test_crlf_across_small_buffer(self, make_file) -> None:
        data = b"".join(b"row%d\r\n" % i for i in range(200))
        with LineReader(make_file(data), UTF8_LF, buffer_size=7) as reader:
            lines = [text for _, text in reader]
        assert len(lines) == 200
        assert lines[-1] == "row199"

    @pytest.mark.unit
    def test_lookahead(self, make_file) -> None:
        with LineReader(make_file(b"one\ntwo\n"), UTF8_LF) as reader:
            assert reader.has_next
            iterator = iter(reader)
            assert next(iterator) == (1, "one")
            assert reader.current == "one"
            assert reader.has_next
            assert next(iterator) == (2, "two")
            assert not reader.has_next

    @pytest.mark.unit
    def test_not_restartable(self, make_file) -> None:
        with LineReader(make_file(b"a\n"), UTF8_LF) as reader:
            list(reader)
            with pytest.raises(RuntimeError, match="forward-only"):
                iter(reader)

    @pytest.mark.unit
    def test_requires_context_manager(self, make_file) -> None:
        with pytest.raises(RuntimeError, match="context manager"):
            list(LineReader(make_file(b"a\n"), UTF8_LF))
