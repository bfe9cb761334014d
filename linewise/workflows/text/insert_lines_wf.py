"""
Workflow for inserting lines into a file (or creating it).

Rules:
- at_line omitted, or at_line == total + 1: append
- at_line > total + 1: InvalidRangeError (detected while streaming; the write is aborted)
- Missing file: created with the content; at_line > 1 becomes line 1 with a warning
- The trailing-newline state of an existing non-empty file is preserved
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from linewise.components.text.edit_preview_comp import EditPreview
from linewise.components.text.edit_summary_comp import new_file_notices
from linewise.components.text.encoding_upgrade_comp import apply_encoding_policy
from linewise.components.text.file_writer_comp import AtomicRewrite, EditState, EditTracker
from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.metadata_detector_comp import detect_file_metadata, metadata_for_new_file
from linewise.helpers.ansi import Style
from linewise.helpers.content import to_content_lines
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.exceptions import ConflictingOptionsError, InvalidRangeError, LinewiseError
from linewise.response_models import EditResult

logger = logging.getLogger(__name__)


def _create_file(
    path: Path,
    new_lines: list[str],
    config: EngineConfig,
    tracker: EditTracker,
    at_line: int | None,
    encoding: str | None,
    backup: bool,
) -> EditResult:
    metadata, notices = metadata_for_new_file(config, encoding)
    notices.extend(new_file_notices(at_line, backup))
    try:
        metadata, policy_notices = apply_encoding_policy(metadata, new_lines)
    except LinewiseError:
        tracker.reject()
        raise
    notices.extend(policy_notices)
    tracker.advance(EditState.METADATA_DETECTED)

    preview = EditPreview(config, Style(enabled=config.highlight))
    with AtomicRewrite(path, metadata, tracker) as writer:
        tracker.advance(EditState.STREAMING)
        for text in new_lines:
            writer.write_line(text)
            preview.add(writer.lines_written, text)
        tracker.advance(EditState.CONTENT_SUBSTITUTED)
        writer.commit(trailing_newline=metadata.has_trailing_newline)

    count = len(new_lines)
    logger.info(f"[insert] Created {path} with {count} line(s)")
    return EditResult(
        path=str(path),
        lines_affected=count,
        net_line_delta=count,
        changed=True,
        encoding=metadata.encoding,
        summary=f"Created {path}: {count} line(s) (net: +{count})",
        notices=notices,
        display=preview.render(),
    )


def insert_lines_workflow(
    path: str | Path,
    content: str | Iterable[object],
    config: EngineConfig,
    at_line: int | None = None,
    encoding: str | None = None,
    backup: bool = False,
) -> EditResult:
    """
    Insert content before ``at_line``, or append when it is omitted.

    Args:
        path: Target file (created when missing)
        content: String or iterable of lines
        config: Engine configuration
        at_line: 1-based line the content is inserted before
        encoding: Optional pinned encoding
        backup: Copy the pre-image to a timestamped sibling before swapping

    Returns:
        EditResult with summary, notices and preview

    Raises:
        ConflictingOptionsError: no content supplied, or content not encodable
        InvalidRangeError: at_line < 1 or at_line > total + 1
    """
    path = Path(path)
    tracker = EditTracker(path)
    new_lines = to_content_lines(content)
    if not new_lines:
        tracker.reject()
        raise ConflictingOptionsError("Content is required for insert")
    if at_line is not None and at_line < 1:
        tracker.reject()
        raise InvalidRangeError(f"Line number must be >= 1, got {at_line}")

    if not path.exists():
        return _create_file(path, new_lines, config, tracker, at_line, encoding, backup)

    metadata, notices = detect_file_metadata(path, config, encoding)
    try:
        out_metadata, policy_notices = apply_encoding_policy(metadata, new_lines)
    except LinewiseError:
        tracker.reject()
        raise
    notices.extend(policy_notices)
    tracker.advance(EditState.METADATA_DETECTED)

    count = len(new_lines)
    preview = EditPreview(config, Style(enabled=config.highlight))
    inserted_at: int | None = None

    with AtomicRewrite(path, out_metadata, tracker) as writer:
        with LineReader(path, metadata, config.buffer_size) as reader:
            tracker.advance(EditState.STREAMING)
            for number, text in reader:
                if number == at_line:
                    for offset, new_text in enumerate(new_lines):
                        writer.write_line(new_text)
                        preview.add(number + offset, new_text)
                    inserted_at = number
                    tracker.advance(EditState.CONTENT_SUBSTITUTED)
                writer.write_line(text)
                if inserted_at is None:
                    preview.context_before(number, text)
                elif preview.wants_after():
                    preview.context_after(number + count, text)

        # The source handle is closed before the swap
        total = reader.line_number
        if inserted_at is None:
            if at_line is not None and at_line > total + 1:
                raise InvalidRangeError(
                    f"Line number {at_line} exceeds file length + 1 ({total + 1}). Use no line number to append."
                )
            for offset, new_text in enumerate(new_lines):
                writer.write_line(new_text)
                preview.add(total + 1 + offset, new_text)
            tracker.advance(EditState.CONTENT_SUBSTITUTED)

        # An empty file has no trailing-newline state to preserve
        trailing = reader.final_line_terminated if total else config.new_file_trailing_newline
        writer.commit(trailing_newline=trailing, backup=backup, timestamp_format=config.backup_timestamp_format)

    where = f"at line {inserted_at}" if inserted_at is not None else "at end"
    logger.info(f"[insert] Added {count} line(s) to {path} {where}")
    return EditResult(
        path=str(path),
        lines_affected=count,
        net_line_delta=count,
        backup_path=str(writer.backup_path) if writer.backup_path else None,
        changed=True,
        encoding=out_metadata.encoding,
        summary=f"Added {count} line(s) to {path} {where} (net: +{count})",
        notices=notices,
        display=preview.render(),
    )
