"""1-based inclusive line ranges with a to-end sentinel.

``end <= 0`` means "through the last line". The sentinel is never used in
arithmetic: ``to_end`` is checked before any comparison or subtraction.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from linewise.helpers.exceptions import InvalidRangeError

TO_END = -1


@dataclass(frozen=True)
class LineRange:
    """Inclusive line range; ``end <= 0`` is the to-end sentinel."""

    start: int
    end: int = TO_END

    def __post_init__(self) -> None:
        if self.start < 1:
            raise InvalidRangeError(f"Start line must be >= 1, got {self.start}")
        if self.end > 0 and self.end < self.start:
            raise InvalidRangeError(f"End line ({self.end}) must be >= start line ({self.start})")

    @property
    def to_end(self) -> bool:
        return self.end <= 0

    @classmethod
    def parse(cls, value: LineRange | int | Sequence[int] | None) -> LineRange | None:
        """Build a range from caller input.

        Accepts an existing LineRange, a single int (``start == end``), or a
        one/two element sequence. None passes through.
        """
        if value is None or isinstance(value, LineRange):
            return value
        if isinstance(value, bool):
            raise InvalidRangeError(f"Invalid line range: {value!r}")
        if isinstance(value, int):
            return cls(value, value)
        items = list(value)
        if len(items) == 1:
            return cls(int(items[0]), int(items[0]))
        if len(items) == 2:
            return cls(int(items[0]), int(items[1]))
        raise InvalidRangeError(f"Line range must have 1 or 2 values, got {len(items)}")

    def contains(self, line_number: int) -> bool:
        if line_number < self.start:
            return False
        if self.to_end:
            return True
        return line_number <= self.end

    def is_past(self, line_number: int) -> bool:
        """True once ``line_number`` is beyond the end of a bounded range."""
        if self.to_end:
            return False
        return line_number > self.end

    def clamp(self, total_lines: int) -> LineRange:
        """Resolve the sentinel and cap ``end`` at ``total_lines``.

        The start is not validated here; callers check it against ``total_lines`` first.
        """
        if self.to_end or self.end > total_lines:
            return LineRange(self.start, max(total_lines, self.start))
        return self

    def exceeds(self, total_lines: int) -> bool:
        """True when a bounded end lies past ``total_lines``."""
        if self.to_end:
            return False
        return self.end > total_lines

    def __str__(self) -> str:
        if self.to_end:
            return f"{self.start}-end"
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"
