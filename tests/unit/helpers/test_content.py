"""Unit tests for linewise.helpers.content."""

import pytest

from linewise.helpers.content import (
    first_terminator,
    format_net,
    newline_from_name,
    normalize_eol,
    split_lines,
    to_content_lines,
)


class TestSplitLines:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", []),
            ("a", ["a"]),
            ("a\nb\n", ["a", "b"]),
            ("a\r\nb", ["a", "b"]),
            ("a\rb\r", ["a", "b"]),
            ("\n", [""]),
            ("a\n\n", ["a", ""]),
        ],
    )
    def test_split(self, text: str, expected: list[str]) -> None:
        assert split_lines(text) == expected


class TestToContentLines:
    @pytest.mark.unit
    def test_none_is_empty(self) -> None:
        assert to_content_lines(None) == []

    @pytest.mark.unit
    def test_items_are_split_and_stringified(self) -> None:
        assert to_content_lines(["a\nb", 3, ""]) == ["a", "b", "3", ""]

    @pytest.mark.unit
    def test_string_content(self) -> None:
        assert to_content_lines("x\r\ny") == ["x", "y"]


class TestNewlines:
    @pytest.mark.unit
    def test_normalize_eol(self) -> None:
        assert normalize_eol("a\r\nb\rc\nd", "\r\n") == "a\r\nb\r\nc\r\nd"
        assert normalize_eol("a\r\nb", "\n") == "a\nb"

    @pytest.mark.unit
    def test_first_terminator(self) -> None:
        assert first_terminator("abc\r\ndef\n") == "\r\n"
        assert first_terminator("abc\rdef") == "\r"
        assert first_terminator("abc") is None

    @pytest.mark.unit
    def test_newline_from_name(self) -> None:
        assert newline_from_name("CRLF") == "\r\n"
        with pytest.raises(ValueError, match="Unknown newline style"):
            newline_from_name("nel")

    @pytest.mark.unit
    def test_format_net(self) -> None:
        assert format_net(2) == "+2"
        assert format_net(-3) == "-3"
        assert format_net(0) == "+0"
