"""Match engine component.

MatchSpec is a tagged variant: LiteralMatch (plain substring, optionally
spanning lines) or RegexMatch (compiled once at construction). Each variant
evaluates a single line into ordered, non-overlapping spans and can
substitute matched text.

Streaming helpers:
- LineClassifier: attaches spans to each line. A multi-line literal of k
  parts is decided over a sliding window of k lines, so lines leave the
  classifier up to k-1 lines late.
- LineRewriter: applies a replacement to classified lines, folding the lines
  of a multi-line match into one output line.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field

from linewise.helpers.content import normalize_eol
from linewise.helpers.dto.file_dto import ClassifiedLine, Span
from linewise.helpers.exceptions import ConflictingOptionsError, MalformedPatternError

logger = logging.getLogger(__name__)

Highlight = tuple[int, int]

# $$ | $& | $n | ${name}
_TEMPLATE_TOKEN = re.compile(r"\$(?:(\$)|(&)|(\d+)|\{(\w+)\})")


class MatchSpec(ABC):
    """Base for the match variants."""

    @property
    def multiline(self) -> bool:
        return False

    @abstractmethod
    def evaluate(self, text: str) -> list[Span]:
        """Return ordered, non-overlapping spans of matches within ``text``."""

    @abstractmethod
    def substitute(self, text: str, replacement: str) -> tuple[str, list[Highlight], int]:
        """Replace every match in ``text``.

        Returns:
            (new_text, highlight spans of inserted text in new_text, replacement count)

        """

    @abstractmethod
    def no_match_notice(self) -> str:
        """Notice reported when nothing matched."""

    def classifier(self) -> LineClassifier:
        return LineClassifier(self)


@dataclass(frozen=True)
class LiteralMatch(MatchSpec):
    """Plain substring match; a needle containing a newline spans lines."""

    text: str
    allow_multiline: bool = True
    parts: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.text:
            raise MalformedPatternError("Search text must not be empty")
        parts = tuple(normalize_eol(self.text, "\n").split("\n"))
        if len(parts) > 1 and not self.allow_multiline:
            raise ConflictingOptionsError(
                "Search text contains a line break but multi-line matching is disabled"
            )
        object.__setattr__(self, "parts", parts)

    @property
    def multiline(self) -> bool:
        return len(self.parts) > 1

    def _find_all(self, text: str) -> list[Highlight]:
        needle = "\n".join(self.parts)
        found: list[Highlight] = []
        start = text.find(needle)
        while start != -1:
            found.append((start, start + len(needle)))
            start = text.find(needle, start + len(needle))
        return found

    def evaluate(self, text: str) -> list[Span]:
        return [Span(start, end) for start, end in self._find_all(text)]

    def substitute(self, text: str, replacement: str) -> tuple[str, list[Highlight], int]:
        pieces: list[str] = []
        highlights: list[Highlight] = []
        length = 0
        last = 0
        for start, end in self._find_all(text):
            pieces.append(text[last:start])
            length += start - last
            pieces.append(replacement)
            highlights.append((length, length + len(replacement)))
            length += len(replacement)
            last = end
        pieces.append(text[last:])
        return "".join(pieces), highlights, len(highlights)

    def no_match_notice(self) -> str:
        return f"No lines contain: {self.text}"


@dataclass(frozen=True)
class RegexMatch(MatchSpec):
    """Regular expression match, compiled once per spec.

    Patterns that can match the empty string are rejected up front; a
    zero-length match found while scanning is also an error.
    """

    pattern: str
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern:
            raise MalformedPatternError("Pattern must not be empty")
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise MalformedPatternError(f"Invalid regular expression '{self.pattern}': {exc}") from exc
        if compiled.search("") is not None:
            raise MalformedPatternError(f"Pattern '{self.pattern}' can match an empty string")
        object.__setattr__(self, "compiled", compiled)

    def _matches(self, text: str) -> list[re.Match[str]]:
        matches = list(self.compiled.finditer(text))
        for m in matches:
            if m.start() == m.end():
                raise MalformedPatternError(
                    f"Pattern '{self.pattern}' produced a zero-length match at offset {m.start()}"
                )
        return matches

    def evaluate(self, text: str) -> list[Span]:
        return [Span(m.start(), m.end()) for m in self._matches(text)]

    def substitute(self, text: str, replacement: str) -> tuple[str, list[Highlight], int]:
        pieces: list[str] = []
        highlights: list[Highlight] = []
        length = 0
        last = 0
        matches = self._matches(text)
        template = parse_template(replacement, self.compiled) if matches else []
        for m in matches:
            expanded = expand_template(m, template)
            pieces.append(text[last : m.start()])
            length += m.start() - last
            pieces.append(expanded)
            highlights.append((length, length + len(expanded)))
            length += len(expanded)
            last = m.end()
        pieces.append(text[last:])
        return "".join(pieces), highlights, len(matches)

    def no_match_notice(self) -> str:
        return f"No lines matched pattern: {self.pattern}"


TemplatePart = str | int


def parse_template(replacement: str, compiled: re.Pattern[str]) -> list[TemplatePart]:
    """Split a regex replacement into literal text and group references.

    ``$n`` and ``${name}`` insert a group, ``$&`` the whole match and ``$$``
    a single dollar sign. Backslashes are literal, so ``C:\\new`` is written
    as typed. A ``$`` followed by anything else is kept as is.

    Raises:
        MalformedPatternError: reference to a group the pattern does not define

    """
    parts: list[TemplatePart] = []
    last = 0
    for token in _TEMPLATE_TOKEN.finditer(replacement):
        parts.append(replacement[last : token.start()])
        dollar, whole, number, name = token.groups()
        if dollar:
            parts.append("$")
        elif whole:
            parts.append(0)
        else:
            parts.append(_group_index(compiled, number or name, replacement))
        last = token.end()
    parts.append(replacement[last:])
    return [part for part in parts if part != ""]


def _group_index(compiled: re.Pattern[str], ref: str, replacement: str) -> int:
    if ref.isdigit():
        index = int(ref)
        if index <= compiled.groups:
            return index
    elif ref in compiled.groupindex:
        return compiled.groupindex[ref]
    raise MalformedPatternError(
        f"Invalid replacement template '{replacement}': pattern has no group '{ref}'"
    )


def expand_template(m: re.Match[str], template: list[TemplatePart]) -> str:
    # Groups that did not take part in the match expand to ""
    return "".join(part if isinstance(part, str) else (m.group(part) or "") for part in template)


def build_match_spec(
    contains: str | None = None,
    pattern: str | None = None,
    allow_multiline: bool = True,
) -> MatchSpec | None:
    """Build a MatchSpec from caller options.

    Raises:
        ConflictingOptionsError: both ``contains`` and ``pattern`` were given
        MalformedPatternError: empty search text or invalid pattern

    """
    if contains is not None and pattern is not None:
        raise ConflictingOptionsError("Cannot specify both contains and pattern")
    if contains is not None:
        return LiteralMatch(contains, allow_multiline=allow_multiline)
    if pattern is not None:
        return RegexMatch(pattern)
    return None


class LineClassifier:
    """Attach match spans to streamed lines.

    ``feed`` returns the lines that are fully decided so far, in order;
    ``flush`` returns whatever is still held once the input ends.
    """

    def __init__(self, spec: MatchSpec) -> None:
        self.spec = spec
        self._parts: tuple[str, ...] = spec.parts if isinstance(spec, LiteralMatch) else ()
        self._window: deque[ClassifiedLine] = deque()
        # Offset in the window head where the previous match ended
        self._search_from = 0

    def feed(self, number: int, text: str) -> list[ClassifiedLine]:
        if not self.spec.multiline:
            return [ClassifiedLine(number, text, self.spec.evaluate(text))]
        self._window.append(ClassifiedLine(number, text))
        ready: list[ClassifiedLine] = []
        while len(self._window) >= len(self._parts):
            ready.extend(self._step())
        return ready

    def flush(self) -> list[ClassifiedLine]:
        remaining = list(self._window)
        self._window.clear()
        self._search_from = 0
        return remaining

    def _step(self) -> list[ClassifiedLine]:
        k = len(self._parts)
        start = self._match_start()
        if start is None:
            self._search_from = 0
            return [self._window.popleft()]

        head = self._window[0]
        head.spans.append(Span(start, len(head.text), opens=True, continues=True))
        for j in range(1, k - 1):
            middle = self._window[j]
            middle.spans.append(Span(0, len(middle.text), opens=False, continues=True))
        last = self._window[k - 1]
        last.spans.append(Span(0, len(self._parts[-1]), opens=False, continues=False))

        # The last line stays at the head: another match may start after this one ends
        self._search_from = len(self._parts[-1])
        return [self._window.popleft() for _ in range(k - 1)]

    def _match_start(self) -> int | None:
        parts = self._parts
        head = self._window[0].text
        start = len(head) - len(parts[0])
        if start < self._search_from or not head.endswith(parts[0]):
            return None
        for j in range(1, len(parts) - 1):
            if self._window[j].text != parts[j]:
                return None
        if not self._window[len(parts) - 1].text.startswith(parts[-1]):
            return None
        return start


class LineRewriter:
    """Apply a replacement to classified lines.

    ``apply`` returns the rewritten text with highlight spans, or None when
    the line was folded into a multi-line match that continues on the next
    line. A rewritten text may contain "\\n" when the replacement does.
    """

    def __init__(self, spec: MatchSpec, replacement: str) -> None:
        self.spec = spec
        self.replacement = replacement
        self.replacements = 0
        self._carry: str | None = None
        self._carry_highlights: list[Highlight] = []

    @property
    def pending(self) -> bool:
        return self._carry is not None

    def apply(self, line: ClassifiedLine) -> tuple[str, list[Highlight]] | None:
        if not line.spans and self._carry is None:
            return line.text, []
        if not self.spec.multiline:
            new_text, highlights, count = self.spec.substitute(line.text, self.replacement)
            self.replacements += count
            return new_text, highlights
        return self._apply_spans(line)

    def _apply_spans(self, line: ClassifiedLine) -> tuple[str, list[Highlight]] | None:
        text = line.text
        out = self._carry or ""
        highlights = self._carry_highlights
        pos = 0
        for span in line.spans:
            if not span.opens:
                pos = span.end
                if span.continues:
                    return None
                continue
            out += text[pos : span.start]
            out_start = len(out)
            out += self.replacement
            highlights.append((out_start, len(out)))
            self.replacements += 1
            pos = span.end
            if span.continues:
                self._carry = out
                self._carry_highlights = highlights
                return None
        out += text[pos:]
        self._carry = None
        self._carry_highlights = []
        return out, highlights


def split_highlighted(text: str, highlights: list[Highlight]) -> list[tuple[str, list[Highlight]]]:
    """Split a rewritten text on "\\n", re-basing highlight spans per physical line."""
    if "\n" not in text:
        return [(text, highlights)]
    result: list[tuple[str, list[Highlight]]] = []
    offset = 0
    for piece in text.split("\n"):
        end = offset + len(piece)
        local = [
            (max(s, offset) - offset, min(e, end) - offset)
            for s, e in highlights
            if s < end and e > offset
        ]
        result.append((piece, local))
        offset = end + 1
    return result
