"""Summary and notice text shared by the text workflows."""

from __future__ import annotations

import logging

from linewise.helpers.content import format_net
from linewise.helpers.exceptions import InvalidRangeError
from linewise.helpers.line_range import LineRange

logger = logging.getLogger(__name__)

NO_CHANGE_NOTICE = "No lines matched. File not modified."
EMPTY_FILE_NOTICE = "File is empty"
BACKUP_IGNORED_NOTICE = "Warning: Backup ignored for new file creation."


def generate_result_message(removed: int, inserted: int) -> str:
    """Describe a range edit by the number of lines removed and inserted."""
    net = inserted - removed
    if removed == 0:
        return f"Created {inserted} line(s) (net: {format_net(net)})"
    if inserted == 0:
        return f"Removed {removed} line(s) (net: {format_net(net)})"
    if removed == inserted:
        return f"Replaced {removed} line(s)"
    return f"Replaced {removed} line(s) with {inserted} line(s) (net: {format_net(net)})"


def start_beyond_eof(line_range: LineRange, total: int) -> InvalidRangeError:
    return InvalidRangeError(f"Start line {line_range.start} exceeds file length ({total} lines)")


def clamp_notice(line_range: LineRange, total: int) -> str:
    """Warning for an end line past end-of-file; the range is clamped, not rejected."""
    logger.warning(f"[range] End line {line_range.end} exceeds file length ({total} lines), clamping")
    return (
        f"Warning: End line {line_range.end} exceeds file length ({total} lines). "
        f"Using lines {line_range.start}-{total}."
    )


def new_file_notices(at_line: int | None, backup: bool) -> list[str]:
    notices: list[str] = []
    if at_line is not None and at_line > 1:
        logger.warning(f"[insert] File does not exist; line {at_line} treated as line 1")
        notices.append(f"Warning: File does not exist. Creating new file. Line {at_line} will be treated as line 1.")
    if backup:
        logger.warning("[writer] Backup requested for a new file; ignored")
        notices.append(BACKUP_IGNORED_NOTICE)
    return notices
