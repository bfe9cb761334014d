"""Content and line-ending helpers.

Pure string functions; no file I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

NEWLINE_NAMES = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}

_TERMINATOR_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split text on CRLF, LF or CR without producing a trailing empty element.

    ``"a\\nb\\n"`` and ``"a\\nb"`` both give ``["a", "b"]``; ``""`` gives ``[]``.
    """
    if not text:
        return []
    parts = _TERMINATOR_RE.split(text)
    if parts[-1] == "":
        parts.pop()
    return parts


def to_content_lines(content: str | Iterable[object] | None) -> list[str]:
    """Normalize caller content into a flat list of lines.

    Args:
        content: A string (split on any terminator), an iterable of items
            (each converted with ``str()`` and split likewise), or None

    Returns:
        List of lines without terminators; empty for None or ""

    """
    if content is None:
        return []
    if isinstance(content, str):
        return split_lines(content)
    lines: list[str] = []
    for item in content:
        text = item if isinstance(item, str) else str(item)
        if text == "":
            lines.append("")
            continue
        lines.extend(split_lines(text))
    return lines


def normalize_eol(text: str, target_eol: str) -> str:
    """Normalize line endings in text to target EOL style.

    Args:
        text: Text with any line ending style
        target_eol: "\\n", "\\r\\n" or "\\r"

    Returns:
        Text with normalized line endings

    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    if target_eol == "\n":
        return normalized
    return normalized.replace("\n", target_eol)


def newline_from_name(name: str) -> str:
    """Resolve a config newline name ("lf", "crlf", "cr") to its terminator."""
    try:
        return NEWLINE_NAMES[name.lower()]
    except KeyError:
        msg = f"Unknown newline style '{name}' (expected one of: {', '.join(NEWLINE_NAMES)})"
        raise ValueError(msg) from None


def first_terminator(text: str) -> str | None:
    """Return the first line terminator found in text, or None.

    A CR at the very end of ``text`` is reported as CR even though the next
    chunk might start with LF; callers pass a sample large enough for this
    not to matter in practice.
    """
    found = _TERMINATOR_RE.search(text)
    return found.group(0) if found else None


def has_non_ascii(lines: Iterable[str]) -> bool:
    return any(not line.isascii() for line in lines)


def format_net(delta: int) -> str:
    """Format a signed line delta as it appears in summaries (``+2``, ``-1``, ``+0``)."""
    return f"+{delta}" if delta >= 0 else str(delta)
