"""
File domain DTOs.

Rules:
- Import only stdlib and typing (no linewise.* imports)
- Pure data structures only (no I/O, no business logic)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class FileMetadata:
    """Encoding and line-ending facts detected once per call.

    ``encoding`` is a Python codec name without BOM semantics; ``bom`` holds
    the exact BOM bytes so they can be written back verbatim.
    """

    encoding: str
    newline: str
    has_trailing_newline: bool
    bom: bytes = b""
    explicitly_pinned: bool = False

    def with_encoding(self, encoding: str, bom: bytes = b"") -> FileMetadata:
        return replace(self, encoding=encoding, bom=bom)


@dataclass(frozen=True)
class Span:
    """Match span within one line.

    ``opens`` is False when the span is the continuation of a multi-line match
    that started on an earlier line; ``continues`` is True when the match
    carries past this line's end.
    """

    start: int
    end: int
    opens: bool = True
    continues: bool = False


@dataclass
class ClassifiedLine:
    """One decoded line with its match spans."""

    number: int
    text: str
    spans: list[Span] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.spans)
