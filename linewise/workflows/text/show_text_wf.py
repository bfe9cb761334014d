"""
Workflow for displaying a file with line numbers.

Without a match spec every line in range is shown. With one, only matching
lines inside the range are shown, each with up to two lines of context, and
nearby blocks are merged (see DisplayAssembler). Context may extend past the
range edges.

Architecture:
- Pure workflow: takes config and options as parameters
- Does NOT import services
"""

from __future__ import annotations

import logging
from pathlib import Path

from linewise.components.text.context_window_comp import DisplayAssembler
from linewise.components.text.edit_summary_comp import EMPTY_FILE_NOTICE, clamp_notice, start_beyond_eof
from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.match_engine_comp import MatchSpec
from linewise.components.text.metadata_detector_comp import detect_file_metadata
from linewise.helpers.ansi import Style
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.dto.file_dto import ClassifiedLine
from linewise.helpers.line_range import LineRange
from linewise.response_models import ShowResult

logger = logging.getLogger(__name__)


def show_text_workflow(
    path: str | Path,
    config: EngineConfig,
    line_range: LineRange | None = None,
    match: MatchSpec | None = None,
    encoding: str | None = None,
) -> ShowResult:
    """
    Render a file (or part of it) with line numbers.

    Args:
        path: File to display
        config: Engine configuration
        line_range: Optional range; an end past end-of-file is clamped with a warning
        match: Optional match spec; when given only matches and their context are shown
        encoding: Optional pinned encoding

    Returns:
        ShowResult with header, rendered lines and notices

    Raises:
        NotFoundError: path does not exist
        InvalidRangeError: range start beyond end-of-file
        MalformedPatternError: zero-length regex match while scanning
    """
    path = Path(path)
    metadata, notices = detect_file_metadata(path, config, encoding)
    assembler = DisplayAssembler(Style(enabled=config.highlight))
    assembler.header(str(path))

    classifier = match.classifier() if match is not None else None
    stopped_early = False
    total = 0

    with LineReader(path, metadata, config.buffer_size) as reader:
        for number, text in reader:
            total = number
            if classifier is None:
                if line_range is not None:
                    if number < line_range.start:
                        continue
                    if line_range.is_past(number):
                        stopped_early = True
                        break
                assembler.add(ClassifiedLine(number, text), interesting=True)
                continue
            for line in classifier.feed(number, text):
                _add_ranged(assembler, line, line_range)
                if _context_spent(assembler, line.number, line_range):
                    stopped_early = True
            if stopped_early:
                break
        if classifier is not None and not stopped_early:
            for line in classifier.flush():
                _add_ranged(assembler, line, line_range)

    if total == 0:
        notices.append(EMPTY_FILE_NOTICE)
        return ShowResult(path=str(path), lines=assembler.lines, notices=notices, matched=False)

    if line_range is not None and not stopped_early:
        if line_range.start > total:
            raise start_beyond_eof(line_range, total)
        if line_range.exceeds(total):
            notices.append(clamp_notice(line_range, total))

    matched = match is not None and assembler.interesting_count > 0
    if match is not None and not matched:
        notices.append(match.no_match_notice())

    logger.debug(f"[show] {path}: {len(assembler.lines)} rendered line(s), matched={matched}")
    return ShowResult(path=str(path), lines=assembler.lines, notices=notices, matched=matched)


def _add_ranged(assembler: DisplayAssembler, line: ClassifiedLine, line_range: LineRange | None) -> None:
    # Only lines inside the range can match; lines outside still serve as context
    if line_range is None or line_range.contains(line.number):
        assembler.add(line)
    else:
        assembler.add(ClassifiedLine(line.number, line.text), interesting=False)


def _context_spent(assembler: DisplayAssembler, number: int, line_range: LineRange | None) -> bool:
    if line_range is None or line_range.to_end:
        return False
    return number >= line_range.end and not assembler.after_pending
