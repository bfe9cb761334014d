"""
Config domain DTOs.

Rules:
- Import only stdlib and typing (no linewise.* imports)
- Pure data structures only (no I/O, no business logic)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for a single engine call, built by ConfigService.get_engine_config()."""

    sample_bytes: int = 65536
    tail_probe_bytes: int = 4
    buffer_size: int = 65536
    highlight: bool = True
    max_full_lines: int = 5
    head_lines: int = 2
    default_newline: str = "\n"
    new_file_trailing_newline: bool = True
    backup_timestamp_format: str = "%Y%m%d%H%M%S"

    def __post_init__(self) -> None:
        if self.sample_bytes < 1:
            raise ValueError(f"detection.sample_bytes must be >= 1, got {self.sample_bytes}")
        if self.tail_probe_bytes < 4:
            raise ValueError(f"detection.tail_probe_bytes must be >= 4, got {self.tail_probe_bytes}")
        if self.buffer_size < 1:
            raise ValueError(f"io.buffer_size must be >= 1, got {self.buffer_size}")
        if self.head_lines < 1:
            raise ValueError(f"display.head_lines must be >= 1, got {self.head_lines}")
        if self.max_full_lines <= self.head_lines:
            raise ValueError(
                f"display.max_full_lines ({self.max_full_lines}) must exceed display.head_lines ({self.head_lines})"
            )
        if self.default_newline not in ("\n", "\r\n", "\r"):
            raise ValueError(f"files.default_newline must be LF, CRLF or CR, got {self.default_newline!r}")

    @property
    def tail_ring_size(self) -> int:
        """Ring slots for collapsed previews: max_full_lines minus head_lines."""
        return self.max_full_lines - self.head_lines
