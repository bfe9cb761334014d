"""
Workflow for find-and-replace across a file or a line range.

A replacement of "" deletes the matched text. A multi-line literal folds the
lines it spans into one output line. Newlines inside the replacement are
written with the file's own newline. When nothing matches, the temp file is
discarded and the target is left byte-for-byte unchanged (no rename, no
backup).
"""

from __future__ import annotations

import logging
from pathlib import Path

from linewise.components.text.context_window_comp import DisplayAssembler
from linewise.components.text.edit_summary_comp import NO_CHANGE_NOTICE, clamp_notice, start_beyond_eof
from linewise.components.text.encoding_upgrade_comp import apply_encoding_policy
from linewise.components.text.file_writer_comp import AtomicRewrite, EditState, EditTracker
from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.match_engine_comp import LineRewriter, MatchSpec, split_highlighted
from linewise.components.text.metadata_detector_comp import detect_file_metadata
from linewise.helpers.ansi import Style
from linewise.helpers.content import normalize_eol
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.dto.file_dto import ClassifiedLine, Span
from linewise.helpers.exceptions import ConflictingOptionsError, LinewiseError
from linewise.helpers.line_range import LineRange
from linewise.response_models import EditResult

logger = logging.getLogger(__name__)


def find_and_replace_workflow(
    path: str | Path,
    match: MatchSpec | None,
    replacement: str | None,
    config: EngineConfig,
    line_range: LineRange | None = None,
    encoding: str | None = None,
    backup: bool = False,
) -> EditResult:
    """
    Replace every match of ``match`` with ``replacement``.

    Regex replacements use ``$n``, ``${name}``, ``$&`` and ``$$``; backslashes are literal.

    Returns:
        EditResult with replacement count and a preview of the updated lines

    Raises:
        ConflictingOptionsError: match or replacement missing, or replacement not encodable
        NotFoundError: path does not exist
        InvalidRangeError: range start beyond end-of-file
        MalformedPatternError: zero-length match or bad replacement template
    """
    path = Path(path)
    tracker = EditTracker(path)
    if match is None:
        tracker.reject()
        raise ConflictingOptionsError("A match (contains or pattern) is required for find and replace")
    if replacement is None:
        tracker.reject()
        raise ConflictingOptionsError('Replacement is required (use "" to delete matched text)')

    metadata, notices = detect_file_metadata(path, config, encoding)
    replacement = normalize_eol(replacement, "\n")
    try:
        out_metadata, policy_notices = apply_encoding_policy(metadata, replacement.split("\n"))
    except LinewiseError:
        tracker.reject()
        raise
    tracker.advance(EditState.METADATA_DETECTED)

    classifier = match.classifier()
    rewriter = LineRewriter(match, replacement)
    assembler = DisplayAssembler(Style(enabled=config.highlight))
    matched_lines = 0
    out_number = 0

    with AtomicRewrite(path, out_metadata, tracker) as writer:
        def emit(line: ClassifiedLine) -> None:
            nonlocal matched_lines, out_number
            if line.spans:
                matched_lines += 1
            rewritten = rewriter.apply(line)
            if rewritten is None:
                return
            new_text, highlights = rewritten
            changed = bool(line.spans)
            for piece, piece_highlights in split_highlighted(new_text, highlights):
                out_number += 1
                writer.write_line(piece)
                spans = [Span(s, e) for s, e in piece_highlights]
                assembler.add(ClassifiedLine(out_number, piece, spans), interesting=changed)

        with LineReader(path, metadata, config.buffer_size) as reader:
            tracker.advance(EditState.STREAMING)
            for number, text in reader:
                if line_range is None or line_range.contains(number):
                    for line in classifier.feed(number, text):
                        emit(line)
                else:
                    for line in classifier.flush():
                        emit(line)
                    emit(ClassifiedLine(number, text))
            for line in classifier.flush():
                emit(line)

        # The source handle is closed before the swap
        total = reader.line_number
        if line_range is not None:
            if line_range.start > total:
                raise start_beyond_eof(line_range, total)
            if line_range.exceeds(total):
                notices.append(clamp_notice(line_range, total))

        if rewriter.replacements:
            tracker.advance(EditState.CONTENT_SUBSTITUTED)
            writer.commit(
                trailing_newline=reader.final_line_terminated,
                backup=backup,
                timestamp_format=config.backup_timestamp_format,
            )

    if not rewriter.replacements:
        notices.append(match.no_match_notice())
        logger.info(f"[replace] {path}: no matches, file not modified")
        return EditResult(
            path=str(path),
            lines_affected=0,
            net_line_delta=0,
            replacements=0,
            changed=False,
            encoding=metadata.encoding,
            summary=NO_CHANGE_NOTICE,
            notices=notices,
        )

    notices.extend(policy_notices)
    summary = f"Updated {path}: {rewriter.replacements} replacement(s) made"
    logger.info(f"[replace] {summary}")
    return EditResult(
        path=str(path),
        lines_affected=matched_lines,
        net_line_delta=out_number - total,
        backup_path=str(writer.backup_path) if writer.backup_path else None,
        replacements=rewriter.replacements,
        changed=True,
        encoding=out_metadata.encoding,
        summary=summary,
        notices=notices,
        display=assembler.lines,
    )
