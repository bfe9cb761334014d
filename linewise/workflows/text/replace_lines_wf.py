"""
Workflow for replacing a line range (or the whole file).

Rules:
- No range: whole-file replace; a missing file is created
- Range with a missing file: NotFoundError
- Empty or omitted content deletes the range
- Start beyond end-of-file: InvalidRangeError; end beyond end-of-file: warning + clamp
- lines_affected counts the lines actually visited inside the range
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from linewise.components.text.edit_preview_comp import EditPreview
from linewise.components.text.edit_summary_comp import (
    clamp_notice,
    generate_result_message,
    new_file_notices,
    start_beyond_eof,
)
from linewise.components.text.encoding_upgrade_comp import apply_encoding_policy
from linewise.components.text.file_writer_comp import AtomicRewrite, EditState, EditTracker
from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.metadata_detector_comp import detect_file_metadata, metadata_for_new_file
from linewise.helpers.ansi import Style
from linewise.helpers.content import to_content_lines
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.dto.file_dto import FileMetadata
from linewise.helpers.exceptions import LinewiseError, NotFoundError
from linewise.helpers.line_range import LineRange
from linewise.response_models import EditResult

logger = logging.getLogger(__name__)


def _checked_metadata(
    metadata: FileMetadata, new_lines: list[str], tracker: EditTracker, notices: list[str]
) -> FileMetadata:
    try:
        out_metadata, policy_notices = apply_encoding_policy(metadata, new_lines)
    except LinewiseError:
        tracker.reject()
        raise
    notices.extend(policy_notices)
    tracker.advance(EditState.METADATA_DETECTED)
    return out_metadata


def _replace_whole_file(
    path: Path,
    new_lines: list[str],
    config: EngineConfig,
    tracker: EditTracker,
    encoding: str | None,
    backup: bool,
) -> EditResult:
    created = not path.exists()
    if created:
        metadata, notices = metadata_for_new_file(config, encoding)
        notices.extend(new_file_notices(None, backup))
        backup = False
    else:
        metadata, notices = detect_file_metadata(path, config, encoding)
    out_metadata = _checked_metadata(metadata, new_lines, tracker, notices)

    preview = EditPreview(config, Style(enabled=config.highlight))
    original = 0
    with AtomicRewrite(path, out_metadata, tracker) as writer:
        trailing = config.new_file_trailing_newline
        if not created:
            tracker.advance(EditState.STREAMING)
            with LineReader(path, metadata, config.buffer_size) as reader:
                original = sum(1 for _ in reader)
                if original:
                    trailing = reader.final_line_terminated
        for text in new_lines:
            writer.write_line(text)
            preview.add(writer.lines_written, text)
        if not new_lines and original:
            preview.mark_removed()
        tracker.advance(EditState.CONTENT_SUBSTITUTED)
        writer.commit(trailing_newline=trailing, backup=backup, timestamp_format=config.backup_timestamp_format)

    count = len(new_lines)
    if created:
        summary = f"Created {path}: {count} line(s) (net: +{count})"
    else:
        summary = generate_result_message(original, count)
    logger.info(f"[replace] {path}: {summary}")
    return EditResult(
        path=str(path),
        lines_affected=original,
        net_line_delta=count - original,
        backup_path=str(writer.backup_path) if writer.backup_path else None,
        changed=True,
        encoding=out_metadata.encoding,
        summary=summary,
        notices=notices,
        display=preview.render(),
    )


def replace_lines_workflow(
    path: str | Path,
    config: EngineConfig,
    content: str | Iterable[object] | None = None,
    line_range: LineRange | None = None,
    encoding: str | None = None,
    backup: bool = False,
) -> EditResult:
    """
    Replace ``line_range`` with ``content``; no range replaces the whole file.

    Args:
        path: Target file
        config: Engine configuration
        content: Replacement lines; None or empty deletes the range
        line_range: Lines to replace (end <= 0 means to end of file)
        encoding: Optional pinned encoding
        backup: Copy the pre-image to a timestamped sibling before swapping

    Returns:
        EditResult, e.g. summary "Replaced 3 line(s) with 1 line(s) (net: -2)"

    Raises:
        NotFoundError: range given and the file is missing
        InvalidRangeError: range start beyond end-of-file
        ConflictingOptionsError: content not encodable in a pinned encoding
    """
    path = Path(path)
    tracker = EditTracker(path)
    new_lines = to_content_lines(content)

    if line_range is None:
        return _replace_whole_file(path, new_lines, config, tracker, encoding, backup)

    if not path.exists():
        tracker.reject()
        raise NotFoundError(path)

    metadata, notices = detect_file_metadata(path, config, encoding)
    out_metadata = _checked_metadata(metadata, new_lines, tracker, notices)

    count = len(new_lines)
    preview = EditPreview(config, Style(enabled=config.highlight))
    removed = 0

    with AtomicRewrite(path, out_metadata, tracker) as writer:
        with LineReader(path, metadata, config.buffer_size) as reader:
            tracker.advance(EditState.STREAMING)
            for number, text in reader:
                if line_range.contains(number):
                    if number == line_range.start:
                        for offset, new_text in enumerate(new_lines):
                            writer.write_line(new_text)
                            preview.add(number + offset, new_text)
                        tracker.advance(EditState.CONTENT_SUBSTITUTED)
                    removed += 1
                    continue
                writer.write_line(text)
                if number < line_range.start:
                    preview.context_before(number, text)
                elif preview.wants_after():
                    preview.context_after(number + count - removed, text)

        # The source handle is closed before the swap
        total = reader.line_number
        if line_range.start > total:
            raise start_beyond_eof(line_range, total)
        if line_range.exceeds(total):
            notices.append(clamp_notice(line_range, total))
        if count == 0:
            preview.mark_removed()
        writer.commit(
            trailing_newline=reader.final_line_terminated,
            backup=backup,
            timestamp_format=config.backup_timestamp_format,
        )

    summary = generate_result_message(removed, count)
    logger.info(f"[replace] {path} lines {line_range}: {summary}")
    return EditResult(
        path=str(path),
        lines_affected=removed,
        net_line_delta=count - removed,
        backup_path=str(writer.backup_path) if writer.backup_path else None,
        changed=True,
        encoding=out_metadata.encoding,
        summary=summary,
        notices=notices,
        display=preview.render(),
    )
