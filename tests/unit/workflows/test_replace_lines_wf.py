"""Unit tests for linewise.workflows.text.replace_lines_wf."""

from pathlib import Path

import pytest

from linewise.components.text.edit_preview_comp import omitted_marker
from linewise.helpers.exceptions import InvalidRangeError, NotFoundError
from linewise.helpers.line_range import LineRange
from linewise.workflows.text.replace_lines_wf import replace_lines_workflow

FIVE = b"Line1\r\nLine2\r\nLine3\r\nLine4\r\nLine5\r\n"


class TestReplaceRange:
    @pytest.mark.unit
    def test_shrinking_replace(self, five_line_crlf: Path, engine_config) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["X"], LineRange(2, 4))
        assert five_line_crlf.read_bytes() == b"Line1\r\nX\r\nLine5\r\n"
        assert result.lines_affected == 3
        assert result.net_line_delta == -2
        assert result.summary == "Replaced 3 line(s) with 1 line(s) (net: -2)"
        assert result.display == ["  1- Line1", "  2: X", "  3- Line5"]
        assert result.changed

    @pytest.mark.unit
    def test_growing_replace(self, five_line_crlf: Path, engine_config) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["a", "b", "c"], LineRange(5, 5))
        assert five_line_crlf.read_bytes() == b"Line1\r\nLine2\r\nLine3\r\nLine4\r\na\r\nb\r\nc\r\n"
        assert result.summary == "Replaced 1 line(s) with 3 line(s) (net: +2)"

    @pytest.mark.unit
    def test_same_size_replace(self, five_line_crlf: Path, engine_config) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["a", "b"], LineRange(1, 2))
        assert result.summary == "Replaced 2 line(s)"
        assert result.net_line_delta == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("content", [None, [], ""])
    def test_empty_content_deletes(self, five_line_crlf: Path, engine_config, content) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, content, LineRange(2, 3))
        assert five_line_crlf.read_bytes() == b"Line1\r\nLine4\r\nLine5\r\n"
        assert result.summary == "Removed 2 line(s) (net: -2)"
        assert result.display == ["  1- Line1", "   :", "  2- Line4", "  3- Line5"]

    @pytest.mark.unit
    @pytest.mark.parametrize("end", [-1, 0, -99])
    def test_to_end_sentinel(self, five_line_crlf: Path, engine_config, end: int) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["Z"], LineRange(3, end))
        assert five_line_crlf.read_bytes() == b"Line1\r\nLine2\r\nZ\r\n"
        assert result.lines_affected == 3
        assert result.notices == []

    @pytest.mark.unit
    def test_end_beyond_file_is_clamped(self, five_line_crlf: Path, engine_config) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["Z"], LineRange(4, 200))
        assert five_line_crlf.read_bytes() == b"Line1\r\nLine2\r\nLine3\r\nZ\r\n"
        assert result.lines_affected == 2
        assert result.notices == ["Warning: End line 200 exceeds file length (5 lines). Using lines 4-5."]

    @pytest.mark.unit
    def test_start_beyond_file(self, five_line_crlf: Path, engine_config) -> None:
        with pytest.raises(InvalidRangeError):
            replace_lines_workflow(five_line_crlf, engine_config, ["Z"], LineRange(9, 12))
        assert five_line_crlf.read_bytes() == FIVE

    @pytest.mark.unit
    def test_range_on_missing_file(self, tmp_path: Path, engine_config) -> None:
        with pytest.raises(NotFoundError):
            replace_lines_workflow(tmp_path / "missing.txt", engine_config, ["x"], LineRange(1, 1))

    @pytest.mark.unit
    def test_no_trailing_newline_kept(self, make_file, engine_config) -> None:
        path = make_file(b"a\nb\nc")
        replace_lines_workflow(path, engine_config, ["B"], LineRange(2, 2))
        assert path.read_bytes() == b"a\nB\nc"

    @pytest.mark.unit
    def test_long_preview_collapses(self, five_line_crlf: Path, engine_config) -> None:
        content = [f"new{i}" for i in range(1, 11)]
        result = replace_lines_workflow(five_line_crlf, engine_config, content, LineRange(2, 2))
        assert result.display == [
            "  1- Line1",
            "  2: new1",
            "  3: new2",
            omitted_marker(6),
            " 10: new9",
            " 11: new10",
            " 12- Line3",
            " 13- Line4",
        ]


class TestReplaceWholeFile:
    @pytest.mark.unit
    def test_keeps_newline_style(self, five_line_crlf: Path, engine_config) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["a", "b"])
        assert five_line_crlf.read_bytes() == b"a\r\nb\r\n"
        assert result.summary == "Replaced 5 line(s) with 2 line(s) (net: -3)"
        assert result.lines_affected == 5

    @pytest.mark.unit
    def test_creates_missing_file(self, tmp_path: Path, engine_config) -> None:
        path = tmp_path / "fresh.txt"
        result = replace_lines_workflow(path, engine_config, ["x"], backup=True)
        assert path.read_bytes() == b"x\n"
        assert result.summary == f"Created {path}: 1 line(s) (net: +1)"
        assert result.notices == ["Warning: Backup ignored for new file creation."]
        assert result.backup_path is None

    @pytest.mark.unit
    def test_clearing_file(self, five_line_crlf: Path, engine_config) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, None)
        assert five_line_crlf.read_bytes() == b""
        assert result.display == ["   :"]

    @pytest.mark.unit
    def test_backup_of_pre_image(self, five_line_crlf: Path, engine_config, backups_of) -> None:
        result = replace_lines_workflow(five_line_crlf, engine_config, ["x"], backup=True)
        [backup] = backups_of(five_line_crlf)
        assert backup.read_bytes() == FIVE
        assert result.backup_path == str(backup)
