"""Context window, range merging and display assembly.

ContextWindow holds the look-behind state for one streaming loop: a 2-slot
rotate buffer of preceding lines, an after-match countdown, the gap
candidate (the line right after the last emitted one) and the last emitted
line number.

RangeMerger decides how a new block joins what was already emitted: with
exactly one unshown line in between, that line is emitted as a bridge; with
two or more, a single "" gap marker stands in for them.

DisplayAssembler drives both and renders lines:
    "{n:>3}: text"   interesting line (match, inserted or updated)
    "{n:>3}- text"   context line
    ""               gap marker
    "   :"           position of removed lines
"""

from __future__ import annotations

import enum
import logging

from linewise.helpers.ansi import Style
from linewise.helpers.dto.file_dto import ClassifiedLine
from linewise.helpers.rotate_buffer import RotateBuffer

logger = logging.getLogger(__name__)

CONTEXT_LINES = 2
REMOVED_MARKER = "   :"
GAP_MARKER = ""


class ContextWindow:
    """Fixed look-behind/look-ahead state for one pass."""

    def __init__(self, before: int = CONTEXT_LINES, after: int = CONTEXT_LINES) -> None:
        self.before: RotateBuffer[ClassifiedLine] = RotateBuffer(before)
        self.after_size = after
        self.after_remaining = 0
        self.gap_candidate: ClassifiedLine | None = None
        self.last_emitted = 0

    def remember(self, line: ClassifiedLine) -> None:
        """Record a line that was not emitted."""
        self.before.add(line)
        if self.last_emitted and line.number == self.last_emitted + 1:
            self.gap_candidate = line

    def before_context(self, number: int) -> list[ClassifiedLine]:
        """Buffered lines that may precede a block starting at ``number``.

        Lines already emitted are excluded, so a line shown as after-context
        for one block is never repeated as before-context for the next.
        """
        return [entry for entry in self.before if self.last_emitted < entry.number < number]

    def arm(self) -> None:
        self.after_remaining = self.after_size

    def take_after(self) -> bool:
        """Consume one after-context slot; False when the countdown is spent."""
        if self.after_remaining <= 0:
            return False
        self.after_remaining -= 1
        return True

    def mark_emitted(self, number: int) -> None:
        self.last_emitted = number
        self.gap_candidate = None


class MergeDecision(enum.Enum):
    FIRST = "first"  # nothing emitted yet
    ADJACENT = "adjacent"  # block continues directly
    BRIDGE = "bridge"  # exactly one unshown line in between
    GAP = "gap"  # two or more unshown lines in between


class RangeMerger:
    """Decides how the next block joins the emitted stream."""

    def decide(self, window: ContextWindow, first_number: int) -> MergeDecision:
        if window.last_emitted == 0:
            return MergeDecision.FIRST
        between = first_number - window.last_emitted - 1
        if between <= 0:
            return MergeDecision.ADJACENT
        if between == 1:
            candidate = window.gap_candidate
            if candidate is not None and candidate.number == window.last_emitted + 1:
                return MergeDecision.BRIDGE
        return MergeDecision.GAP


class DisplayAssembler:
    """Renders a streamed sequence of lines into context blocks."""

    def __init__(self, style: Style | None = None, context_lines: int = CONTEXT_LINES) -> None:
        self.style = style or Style()
        self.window = ContextWindow(context_lines, context_lines)
        self.merger = RangeMerger()
        self.lines: list[str] = []
        self.interesting_count = 0
        self._marker_at = 0

    @property
    def after_pending(self) -> bool:
        """True while after-context is still owed to the last block."""
        return self.window.after_remaining > 0

    def header(self, path: str) -> None:
        self.lines.append(self.style.header(path))

    def add(self, line: ClassifiedLine, interesting: bool | None = None) -> None:
        """Feed the next line in file order.

        Args:
            line: Line with its match spans
            interesting: Whether the line opens/extends a block; defaults to ``line.matched``

        """
        if interesting is None:
            interesting = line.matched
        if interesting:
            self._open_block(line.number)
            self._emit(line, match=True)
            self.interesting_count += 1
            self.window.arm()
        elif self.window.take_after():
            self._emit(line, match=False)
        else:
            self.window.remember(line)

    def add_removed(self, number: int) -> None:
        """Record a removed line; consecutive removals share one marker."""
        if self._marker_at and self._marker_at == self.window.last_emitted == number - 1:
            self.window.mark_emitted(number)
            self._marker_at = number
            self.interesting_count += 1
            return
        self._open_block(number)
        self.lines.append(REMOVED_MARKER)
        self.window.mark_emitted(number)
        self._marker_at = number
        self.interesting_count += 1
        self.window.arm()

    def _open_block(self, number: int) -> None:
        before = self.window.before_context(number)
        first = before[0].number if before else number
        decision = self.merger.decide(self.window, first)
        bridge = self.window.gap_candidate
        if decision is MergeDecision.BRIDGE and bridge is not None:
            self._emit(bridge, match=False)
        elif decision is MergeDecision.GAP:
            self.lines.append(GAP_MARKER)
        for entry in before:
            self._emit(entry, match=False)

    def _emit(self, line: ClassifiedLine, *, match: bool) -> None:
        text = self.style.highlight_spans(line.text, [(s.start, s.end) for s in line.spans if s.end > s.start])
        mark = ":" if match else "-"
        self.lines.append(f"{line.number:>3}{mark} {text}")
        self.window.mark_emitted(line.number)
