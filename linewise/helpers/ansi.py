"""ANSI escape sequences for rendered output.

Centralized so every display path styles matches, insertions and headers
the same way. ``Style`` bundles the sequences behind a single on/off switch.
"""

from __future__ import annotations

from dataclasses import dataclass

ESC = "\x1b"

RESET = f"{ESC}[0m"
BOLD = f"{ESC}[1m"
REVERSE = f"{ESC}[7m"
GREEN = f"{ESC}[32m"


@dataclass(frozen=True)
class Style:
    """Applies ANSI styling, or nothing at all when disabled."""

    enabled: bool = True

    def _wrap(self, code: str, text: str) -> str:
        return f"{code}{text}{RESET}" if self.enabled else text

    def header(self, path: str) -> str:
        return self._wrap(BOLD, f"==> {path} <==")

    def inserted(self, text: str) -> str:
        return self._wrap(GREEN, text)

    def highlight_spans(self, text: str, spans: list[tuple[int, int]], *, code: str = REVERSE) -> str:
        """Wrap each (start, end) span of ``text``; spans must be sorted and disjoint."""
        if not self.enabled or not spans:
            return text
        parts: list[str] = []
        last = 0
        for start, end in spans:
            parts.append(text[last:start])
            parts.append(f"{code}{text[start:end]}{RESET}")
            last = end
        parts.append(text[last:])
        return "".join(parts)
