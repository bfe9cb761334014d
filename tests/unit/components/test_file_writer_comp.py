"""Unit tests for linewise.components.text.file_writer_comp."""

import codecs
import errno
import os
import stat
from datetime import datetime
from pathlib import Path

import pytest

from linewise.components.text import file_writer_comp
from linewise.components.text.file_writer_comp import (
    AtomicRewrite,
    EditState,
    EditTracker,
    backup_path_for,
)
from linewise.helpers.dto.file_dto import FileMetadata
from linewise.helpers.exceptions import IOFailureError

CRLF = FileMetadata(encoding="utf-8", newline="\r\n", has_trailing_newline=True)


def temp_files(directory: Path) -> list[Path]:
    return list(directory.glob(".*.tmp"))


class TestAtomicRewrite:
    @pytest.mark.unit
    def test_lines_joined_with_file_newline(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("a")
            writer.write_line("b")
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == b"a\r\nb\r\n"
        assert temp_files(tmp_path) == []

    @pytest.mark.unit
    def test_no_trailing_newline(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("a")
            writer.commit(trailing_newline=False)
        assert target.read_bytes() == b"a"

    @pytest.mark.unit
    def test_embedded_newlines_become_separate_lines(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("a\nb")
            assert writer.lines_written == 2
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == b"a\r\nb\r\n"

    @pytest.mark.unit
    def test_empty_output_has_no_terminator(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        with AtomicRewrite(target, CRLF) as writer:
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == b""

    @pytest.mark.unit
    def test_bom_and_encoding(self, tmp_path: Path) -> None:
        metadata = FileMetadata(
            encoding="utf-16-le", newline="\n", has_trailing_newline=True, bom=codecs.BOM_UTF16_LE
        )
        target = tmp_path / "wide.txt"
        with AtomicRewrite(target, metadata) as writer:
            writer.write_line("hé")
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == codecs.BOM_UTF16_LE + "hé\n".encode("utf-16-le")

    @pytest.mark.unit
    def test_surrogates_round_trip(self, tmp_path: Path) -> None:
        target = tmp_path / "raw.txt"
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("ok\udcff")
            writer.commit(trailing_newline=False)
        assert target.read_bytes() == b"ok\xff"

    @pytest.mark.unit
    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "er" / "new.txt"
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("x")
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == b"x\r\n"

    @pytest.mark.unit
    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_permissions_preserved(self, tmp_path: Path) -> None:
        target = tmp_path / "script.sh"
        target.write_bytes(b"old\n")
        target.chmod(0o750)
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("new")
            writer.commit(trailing_newline=True)
        assert stat.S_IMODE(target.stat().st_mode) == 0o750

    @pytest.mark.unit
    def test_backup_holds_original_bytes(self, tmp_path: Path) -> None:
        target = tmp_path / "keep.txt"
        target.write_bytes(b"before\n")
        with AtomicRewrite(target, CRLF) as writer:
            writer.write_line("after")
            writer.commit(trailing_newline=True, backup=True)
        assert writer.backup_path is not None
        assert writer.backup_path.read_bytes() == b"before\n"
        assert writer.backup_path.name.startswith("keep.txt.")
        assert writer.backup_path.suffix == ".bak"

    @pytest.mark.unit
    def test_failure_mid_stream_leaves_original(self, tmp_path: Path) -> None:
        target = tmp_path / "keep.txt"
        target.write_bytes(b"original\n")
        tracker = EditTracker(target)
        with pytest.raises(ValueError, match="boom"), AtomicRewrite(target, CRLF, tracker) as writer:
            writer.write_line("partial")
            raise ValueError("boom")
        assert target.read_bytes() == b"original\n"
        assert temp_files(tmp_path) == []
        assert tracker.state is EditState.ABORTED

    @pytest.mark.unit
    def test_leaving_without_commit_discards_temp(self, tmp_path: Path) -> None:
        target = tmp_path / "keep.txt"
        target.write_bytes(b"original\n")
        tracker = EditTracker(target)
        with AtomicRewrite(target, CRLF, tracker) as writer:
            writer.write_line("unused")
        assert target.read_bytes() == b"original\n"
        assert temp_files(tmp_path) == []
        assert tracker.state is EditState.IDLE

    @pytest.mark.unit
    def test_commit_reaches_swapped(self, tmp_path: Path) -> None:
        tracker = EditTracker(tmp_path / "x.txt")
        with AtomicRewrite(tmp_path / "x.txt", CRLF, tracker) as writer:
            writer.write_line("x")
            writer.commit(trailing_newline=True)
        assert tracker.state is EditState.SWAPPED

    @pytest.mark.unit
    def test_failed_rename_is_classified(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "keep.txt"
        target.write_bytes(b"original\n")
        tracker = EditTracker(target)

        def no_space(src, dst):
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(file_writer_comp.os, "replace", no_space)
        with pytest.raises(IOFailureError, match="No space left"), AtomicRewrite(target, CRLF, tracker) as writer:
            writer.write_line("new")
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == b"original\n"
        assert temp_files(tmp_path) == []
        assert tracker.state is EditState.ABORTED

    @pytest.mark.unit
    def test_write_requires_context_manager(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="context manager"):
            AtomicRewrite(tmp_path / "x.txt", CRLF).write_line("x")

    @pytest.mark.unit
    def test_commit_requires_context_manager(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="context manager"):
            AtomicRewrite(tmp_path / "x.txt", CRLF).commit(trailing_newline=True)

    @pytest.mark.unit
    def test_second_commit_rejected(self, tmp_path: Path) -> None:
        target = tmp_path / "once.txt"
        with pytest.raises(RuntimeError, match="committed once"), AtomicRewrite(target, CRLF) as writer:
            writer.write_line("x")
            writer.commit(trailing_newline=True)
            writer.commit(trailing_newline=True)
        assert target.read_bytes() == b"x\r\n"


class TestBackupPath:
    @pytest.mark.unit
    def test_timestamped_sibling(self, tmp_path: Path) -> None:
        path = backup_path_for(tmp_path / "a.txt", now=datetime(2024, 3, 9, 14, 5, 7))
        assert path == tmp_path / "a.txt.20240309140507.bak"

    @pytest.mark.unit
    def test_custom_format(self, tmp_path: Path) -> None:
        path = backup_path_for(tmp_path / "a.txt", "%Y-%m-%d", now=datetime(2024, 3, 9))
        assert path.name == "a.txt.2024-03-09.bak"


class TestEditTracker:
    @pytest.mark.unit
    def test_reject(self, tmp_path: Path) -> None:
        tracker = EditTracker(tmp_path / "x.txt")
        tracker.advance(EditState.METADATA_DETECTED)
        tracker.reject()
        assert tracker.state is EditState.REJECTED
