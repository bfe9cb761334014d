"""Bounded preview of a range edit.

Shows up to two lines of context before the edited region, the new lines,
and up to two lines after. New lines beyond ``max_full_lines`` collapse to
the first ``head_lines``, an omission marker and the last ``head_lines``.

Memory stays bounded: a head list plus a rotate buffer of
``max_full_lines - head_lines`` slots hold the new lines, however many
there are.
"""

from __future__ import annotations

from linewise.components.text.context_window_comp import CONTEXT_LINES, REMOVED_MARKER
from linewise.helpers.ansi import Style
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.rotate_buffer import RotateBuffer

NumberedLine = tuple[int, str]


def omitted_marker(count: int) -> str:
    return f"   : ... ({count} lines omitted) ..."


class EditPreview:
    """Streaming collector for one edited region."""

    def __init__(self, config: EngineConfig, style: Style | None = None) -> None:
        self.style = style or Style()
        self.max_full_lines = config.max_full_lines
        self.head_lines = config.head_lines
        self._before: RotateBuffer[NumberedLine] = RotateBuffer(CONTEXT_LINES)
        self._head: list[NumberedLine] = []
        self._tail: RotateBuffer[NumberedLine] = RotateBuffer(config.tail_ring_size)
        self._after: list[NumberedLine] = []
        self._added = 0
        self._removed = False

    def context_before(self, number: int, text: str) -> None:
        self._before.add((number, text))

    def add(self, number: int, text: str) -> None:
        """Record a new (inserted or replacing) line at its post-edit number."""
        self._added += 1
        if len(self._head) < self.head_lines:
            self._head.append((number, text))
        else:
            self._tail.add((number, text))

    def mark_removed(self) -> None:
        self._removed = True

    def wants_after(self) -> bool:
        return len(self._after) < CONTEXT_LINES

    def context_after(self, number: int, text: str) -> None:
        if self.wants_after():
            self._after.append((number, text))

    def render(self) -> list[str]:
        lines = [self._context(n, t) for n, t in self._before]
        if self._added == 0:
            if self._removed:
                lines.append(REMOVED_MARKER)
        elif self._added <= self.max_full_lines:
            lines.extend(self._inserted(n, t) for n, t in [*self._head, *self._tail])
        else:
            tail = list(self._tail)[-self.head_lines :]
            lines.extend(self._inserted(n, t) for n, t in self._head)
            lines.append(omitted_marker(self._added - len(self._head) - len(tail)))
            lines.extend(self._inserted(n, t) for n, t in tail)
        lines.extend(self._context(n, t) for n, t in self._after)
        return lines

    def _context(self, number: int, text: str) -> str:
        return f"{number:>3}- {text}"

    def _inserted(self, number: int, text: str) -> str:
        return f"{number:>3}: {self.style.inserted(text)}"
