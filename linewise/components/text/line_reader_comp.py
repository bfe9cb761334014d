"""Forward-only line reader component.

Streams decoded lines with one-line lookahead. Lines split on CRLF, LF or CR
and are yielded without terminators. Undecodable bytes are carried through
as lone surrogates (``surrogateescape``) so a rewrite reproduces them.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from pathlib import Path
from types import TracebackType

from linewise.helpers.dto.file_dto import FileMetadata
from linewise.helpers.exceptions import IOFailureError, classify_os_error

logger = logging.getLogger(__name__)


def _strip_terminator(raw: str) -> tuple[str, bool]:
    if raw.endswith("\r\n"):
        return raw[:-2], True
    if raw.endswith(("\n", "\r")):
        return raw[:-1], True
    return raw, False


class LineReader:
    """Single-pass line enumerator over one file.

    Usage::

        with LineReader(path, metadata) as reader:
            for number, text in reader:
                ...

    ``has_next`` peeks without consuming; ``current`` is the most recently
    yielded line. Iterating a second time raises RuntimeError.
    """

    def __init__(self, path: Path, metadata: FileMetadata, buffer_size: int = 65536) -> None:
        self.path = path
        self.metadata = metadata
        self.buffer_size = buffer_size
        self._stream: io.TextIOWrapper | None = None
        self._lookahead: tuple[str, bool] | None = None
        self._exhausted = False
        self._started = False
        self.current: str | None = None
        self.line_number = 0
        self.final_line_terminated = False

    def __enter__(self) -> LineReader:
        try:
            raw = open(self.path, "rb", buffering=self.buffer_size)  # noqa: SIM115
        except OSError as exc:
            raise classify_os_error(exc, self.path) from exc
        try:
            bom = self.metadata.bom
            if bom and raw.peek(len(bom))[: len(bom)] == bom:
                raw.read(len(bom))
            self._stream = io.TextIOWrapper(
                raw,
                encoding=self.metadata.encoding,
                errors="surrogateescape",
                newline="",
            )
        except BaseException:
            raw.close()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def _read_raw(self) -> tuple[str, bool] | None:
        if self._exhausted:
            return None
        if self._stream is None:
            msg = "LineReader must be used as a context manager"
            raise RuntimeError(msg)
        try:
            raw = self._stream.readline()
        except UnicodeDecodeError as exc:
            msg = (
                f"Cannot decode {self.path} as {self.metadata.encoding} near line "
                f"{self.line_number + 1}; pin the correct encoding"
            )
            raise IOFailureError(msg) from exc
        except OSError as exc:
            raise classify_os_error(exc, self.path) from exc
        if raw == "":
            self._exhausted = True
            return None
        return _strip_terminator(raw)

    @property
    def has_next(self) -> bool:
        if self._lookahead is None:
            self._lookahead = self._read_raw()
        return self._lookahead is not None

    def __iter__(self) -> Iterator[tuple[int, str]]:
        if self._started:
            msg = "LineReader is forward-only and cannot be iterated twice"
            raise RuntimeError(msg)
        self._started = True
        return self._lines()

    def _lines(self) -> Iterator[tuple[int, str]]:
        while self.has_next:
            text, terminated = self._lookahead  # type: ignore[misc]
            self._lookahead = None
            self.line_number += 1
            self.current = text
            self.final_line_terminated = terminated
            yield self.line_number, text
        logger.debug(f"[reader] {self.path}: {self.line_number} line(s) read")

