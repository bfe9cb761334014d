"""
Workflow returning raw decoded lines, without numbering or styling.

The output feeds straight back into replace_lines for a byte-exact round trip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from linewise.components.text.edit_summary_comp import start_beyond_eof
from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.metadata_detector_comp import detect_file_metadata
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.line_range import LineRange

logger = logging.getLogger(__name__)


def read_lines_workflow(
    path: str | Path,
    config: EngineConfig,
    line_range: LineRange | None = None,
    encoding: str | None = None,
) -> list[str]:
    """
    Read lines (terminators stripped) from a file.

    Raises:
        NotFoundError: path does not exist
        InvalidRangeError: range start beyond end-of-file
    """
    path = Path(path)
    metadata, _ = detect_file_metadata(path, config, encoding)
    lines: list[str] = []
    with LineReader(path, metadata, config.buffer_size) as reader:
        for number, text in reader:
            if line_range is None or line_range.contains(number):
                lines.append(text)
            elif line_range.is_past(number):
                return lines
        total = reader.line_number

    if line_range is not None:
        if line_range.start > total:
            raise start_beyond_eof(line_range, total)
        if line_range.exceeds(total):
            logger.warning(f"[read] End line {line_range.end} exceeds file length ({total} lines), clamping")
    return lines
