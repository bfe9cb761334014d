"""
Workflow for removing lines by range, by match, or both (AND).

A multi-line literal removes every line its match spans. When nothing is
removed the target is left untouched and an informational notice is
returned.
"""

from __future__ import annotations

import logging
from pathlib import Path

from linewise.components.text.context_window_comp import DisplayAssembler
from linewise.components.text.edit_summary_comp import NO_CHANGE_NOTICE, clamp_notice, start_beyond_eof
from linewise.components.text.file_writer_comp import AtomicRewrite, EditState, EditTracker
from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.match_engine_comp import MatchSpec
from linewise.components.text.metadata_detector_comp import detect_file_metadata
from linewise.helpers.ansi import Style
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.dto.file_dto import ClassifiedLine
from linewise.helpers.exceptions import ConflictingOptionsError
from linewise.helpers.line_range import LineRange
from linewise.response_models import EditResult

logger = logging.getLogger(__name__)


def is_spanned(line: ClassifiedLine) -> bool:
    """True when a match covers text on the line or carries through it.

    The empty edge span of a multi-line needle that starts or ends with a
    line break does not count; only its line break was matched.
    """
    return any(span.end > span.start or (not span.opens and span.continues) for span in line.spans)


def remove_lines_workflow(
    path: str | Path,
    config: EngineConfig,
    line_range: LineRange | None = None,
    match: MatchSpec | None = None,
    encoding: str | None = None,
    backup: bool = False,
) -> EditResult:
    """
    Remove lines in ``line_range`` that match ``match``.

    Raises:
        ConflictingOptionsError: neither a range nor a match was given
        NotFoundError: path does not exist
        InvalidRangeError: range start beyond end-of-file
    """
    path = Path(path)
    tracker = EditTracker(path)
    if line_range is None and match is None:
        tracker.reject()
        raise ConflictingOptionsError("Specify a line range, a match, or both")

    metadata, notices = detect_file_metadata(path, config, encoding)
    tracker.advance(EditState.METADATA_DETECTED)

    classifier = match.classifier() if match is not None else None
    assembler = DisplayAssembler(Style(enabled=config.highlight))
    removed = 0

    with AtomicRewrite(path, metadata, tracker) as writer:
        def emit(line: ClassifiedLine, selected: bool) -> None:
            nonlocal removed
            if selected:
                removed += 1
                assembler.add_removed(line.number)
                return
            writer.write_line(line.text)
            assembler.add(line, interesting=False)

        with LineReader(path, metadata, config.buffer_size) as reader:
            tracker.advance(EditState.STREAMING)
            for number, text in reader:
                in_range = line_range is None or line_range.contains(number)
                if classifier is None:
                    emit(ClassifiedLine(number, text), in_range)
                elif in_range:
                    for line in classifier.feed(number, text):
                        emit(line, is_spanned(line))
                else:
                    for line in classifier.flush():
                        emit(line, is_spanned(line))
                    emit(ClassifiedLine(number, text), False)
            if classifier is not None:
                for line in classifier.flush():
                    emit(line, is_spanned(line))

        # The source handle is closed before the swap
        total = reader.line_number
        if line_range is not None:
            if line_range.start > total:
                raise start_beyond_eof(line_range, total)
            if line_range.exceeds(total):
                notices.append(clamp_notice(line_range, total))

        if removed:
            tracker.advance(EditState.CONTENT_SUBSTITUTED)
            writer.commit(
                trailing_newline=reader.final_line_terminated,
                backup=backup,
                timestamp_format=config.backup_timestamp_format,
            )

    if not removed:
        if match is not None:
            notices.append(match.no_match_notice())
        logger.info(f"[remove] {path}: nothing removed, file not modified")
        return EditResult(
            path=str(path),
            lines_affected=0,
            net_line_delta=0,
            changed=False,
            encoding=metadata.encoding,
            summary=NO_CHANGE_NOTICE,
            notices=notices,
        )

    summary = f"Removed {removed} line(s) from {path} (net: -{removed})"
    logger.info(f"[remove] {summary}")
    return EditResult(
        path=str(path),
        lines_affected=removed,
        net_line_delta=-removed,
        backup_path=str(writer.backup_path) if writer.backup_path else None,
        changed=True,
        encoding=metadata.encoding,
        summary=summary,
        notices=notices,
        display=assembler.lines,
    )
