"""Atomic file rewrite component.

New content is streamed into a temp file in the target's directory, then
``os.replace`` swaps it over the original. The rename is the only mutation
of the target, so any failure before it leaves the original untouched.

Edit lifecycle (EditState):
    IDLE -> METADATA_DETECTED -> STREAMING -> CONTENT_SUBSTITUTED -> WRITING -> SWAPPED
    any I/O or mid-stream failure before the rename -> ABORTED (temp removed)
    validation failure before any I/O -> REJECTED
"""

from __future__ import annotations

import enum
import io
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from types import TracebackType

from linewise.helpers.dto.file_dto import FileMetadata
from linewise.helpers.exceptions import classify_os_error

logger = logging.getLogger(__name__)


class EditState(enum.Enum):
    IDLE = "idle"
    METADATA_DETECTED = "metadata_detected"
    STREAMING = "streaming"
    CONTENT_SUBSTITUTED = "content_substituted"
    WRITING = "writing"
    SWAPPED = "swapped"
    ABORTED = "aborted"
    REJECTED = "rejected"


class EditTracker:
    """Records the lifecycle of one mutating call."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.state = EditState.IDLE

    def advance(self, state: EditState) -> None:
        logger.debug(f"[writer] {self.path.name}: {self.state.value} -> {state.value}")
        self.state = state

    def reject(self) -> None:
        self.advance(EditState.REJECTED)


def backup_path_for(path: Path, timestamp_format: str = "%Y%m%d%H%M%S", now: datetime | None = None) -> Path:
    """Timestamped sibling: ``<name>.<timestamp>.bak``."""
    stamp = (now or datetime.now()).strftime(timestamp_format)
    return path.with_name(f"{path.name}.{stamp}.bak")


def create_backup(path: Path, timestamp_format: str = "%Y%m%d%H%M%S") -> Path:
    """Copy the current file to a timestamped sibling and return its path."""
    target = backup_path_for(path, timestamp_format)
    try:
        shutil.copy2(path, target)
    except OSError as exc:
        raise classify_os_error(exc, target) from exc
    logger.info(f"[writer] Backup created: {target}")
    return target


class AtomicRewrite:
    """Scoped temp-file writer that swaps into place on commit.

    Lines are joined with the metadata newline; a terminator is written after
    the last line only when ``trailing_newline`` is set at commit. Leaving the
    ``with`` block without ``commit()`` (exception or no-op) removes the temp
    file and leaves the target untouched.
    """

    def __init__(self, path: Path, metadata: FileMetadata, tracker: EditTracker | None = None) -> None:
        self.path = path
        self.metadata = metadata
        self.tracker = tracker or EditTracker(path)
        self.lines_written = 0
        self.backup_path: Path | None = None
        self._tmp_path: Path | None = None
        self._stream: io.TextIOWrapper | None = None
        self._committed = False

    def __enter__(self) -> AtomicRewrite:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
                mode="wb",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            )
        except OSError as exc:
            raise classify_os_error(exc, self.path) from exc
        self._tmp_path = Path(handle.name)
        try:
            handle.write(self.metadata.bom)
            self._stream = io.TextIOWrapper(
                handle,
                encoding=self.metadata.encoding,
                errors="surrogateescape",
                newline="",
            )
        except BaseException:
            handle.close()
            self._discard()
            raise
        return self

    def write_line(self, text: str) -> None:
        """Write one logical line; embedded "\\n" splits it into several physical lines."""
        if self._stream is None:
            msg = "AtomicRewrite must be used as a context manager"
            raise RuntimeError(msg)
        newline = self.metadata.newline
        for piece in text.split("\n"):
            if self.lines_written:
                self._stream.write(newline)
            self._stream.write(piece)
            self.lines_written += 1

    def commit(self, trailing_newline: bool, backup: bool = False, timestamp_format: str = "%Y%m%d%H%M%S") -> None:
        """Finish the temp file and swap it over the target."""
        if self._stream is None or self._tmp_path is None:
            msg = "AtomicRewrite must be used as a context manager and committed once"
            raise RuntimeError(msg)
        self.tracker.advance(EditState.WRITING)
        try:
            if trailing_newline and self.lines_written:
                self._stream.write(self.metadata.newline)
            self._stream.flush()
            os.fsync(self._stream.fileno())
            self._stream.close()
            self._stream = None
            if self.path.exists():
                shutil.copymode(self.path, self._tmp_path)
                if backup:
                    self.backup_path = create_backup(self.path, timestamp_format)
            os.replace(self._tmp_path, self.path)
        except OSError as exc:
            raise classify_os_error(exc, self.path) from exc
        self._committed = True
        self.tracker.advance(EditState.SWAPPED)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._stream is not None:
            try:
                self._stream.close()
            except OSError:
                logger.debug(f"[writer] Failed to close temp file for {self.path}")
            self._stream = None
        if self._committed:
            return
        self._discard()
        if exc_type is not None:
            self.tracker.advance(EditState.ABORTED)
            logger.warning(f"[writer] Edit of {self.path} aborted: {exc}")

    def _discard(self) -> None:
        if self._tmp_path is not None:
            try:
                self._tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"[writer] Could not remove temp file {self._tmp_path}")
            self._tmp_path = None
