"""
Workflow answering whether a file contains a match.

Stops reading at the first match.
"""

from __future__ import annotations

import logging
from pathlib import Path

from linewise.components.text.line_reader_comp import LineReader
from linewise.components.text.match_engine_comp import MatchSpec
from linewise.components.text.metadata_detector_comp import detect_file_metadata
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.line_range import LineRange

logger = logging.getLogger(__name__)


def contains_match_workflow(
    path: str | Path,
    match: MatchSpec,
    config: EngineConfig,
    line_range: LineRange | None = None,
    encoding: str | None = None,
) -> bool:
    """
    Return True as soon as any line in range matches.

    Raises:
        NotFoundError: path does not exist
        MalformedPatternError: zero-length regex match while scanning
    """
    path = Path(path)
    metadata, _ = detect_file_metadata(path, config, encoding)
    classifier = match.classifier()

    with LineReader(path, metadata, config.buffer_size) as reader:
        for number, text in reader:
            if line_range is not None:
                if number < line_range.start:
                    continue
                if line_range.is_past(number):
                    break
            if any(line.matched for line in classifier.feed(number, text)):
                logger.debug(f"[contains] {path}: first match decided at line {number}")
                return True
        return any(line.matched for line in classifier.flush())
