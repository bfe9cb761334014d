"""Error taxonomy shared by every layer.

Rules:
- Only put exceptions here if they are raised in one layer and caught in another.
- Each error also derives from the closest builtin so callers can catch
  FileNotFoundError / ValueError / OSError without importing linewise.
- No I/O, no config loading, no complex logic.

An end line past end-of-file is NOT an error: operations clamp it and
report a warning notice instead.
"""

from __future__ import annotations

import errno
from pathlib import Path

# Windows sharing/lock violations surface as PermissionError with these codes
_WINERROR_SHARING_VIOLATION = 32
_WINERROR_LOCK_VIOLATION = 33

_BUSY_ERRNOS = frozenset({errno.EBUSY, errno.ETXTBSY})


class LinewiseError(Exception):
    """Base class for all errors raised by linewise operations."""


class NotFoundError(LinewiseError, FileNotFoundError):
    """Raised when an operation requires an existing file and the path is missing."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"File not found: {path}")


class InvalidRangeError(LinewiseError, ValueError):
    """Raised when a line range is malformed or starts past end-of-file."""


class ConflictingOptionsError(LinewiseError, ValueError):
    """Raised when mutually exclusive options are combined or a required one is missing."""


class UnencodableContentError(ConflictingOptionsError):
    """Raised when new content cannot be written in the file's (pinned) encoding."""

    def __init__(self, encoding: str, sample: str) -> None:
        self.encoding = encoding
        self.sample = sample
        super().__init__(
            f"Content cannot be encoded as {encoding}: {sample!r}. "
            "Pin a wider encoding (e.g. utf-8) or remove the unsupported characters."
        )


class MalformedPatternError(LinewiseError, ValueError):
    """Raised for invalid regular expressions, empty search text, or zero-length matches."""


class IOFailureError(LinewiseError, OSError):
    """Raised when reading or writing fails at the OS level (permissions, disk full, ...)."""


class BusyError(IOFailureError):
    """Raised when the file is held under a lock incompatible with the requested access."""


def classify_os_error(exc: OSError, path: str | Path) -> LinewiseError:
    """Map an OSError onto the linewise taxonomy.

    The caller is expected to chain the original: ``raise classify_os_error(e, p) from e``.

    Args:
        exc: Error raised by the OS call
        path: Path the call was operating on (for the message)

    Returns:
        NotFoundError, BusyError or IOFailureError

    """
    if isinstance(exc, LinewiseError):
        return exc
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(path)
    winerror = getattr(exc, "winerror", None)
    if exc.errno in _BUSY_ERRNOS or winerror in (
        _WINERROR_SHARING_VIOLATION,
        _WINERROR_LOCK_VIOLATION,
    ):
        return BusyError(f"File is locked by another process: {path}")
    if isinstance(exc, PermissionError):
        return IOFailureError(f"Permission denied: {path}")
    return IOFailureError(f"I/O failure on {path}: {exc.strerror or exc}")
