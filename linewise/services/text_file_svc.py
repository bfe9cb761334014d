"""Text file service - line-oriented display, search and editing."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from linewise.components.text.match_engine_comp import MatchSpec
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.line_range import LineRange
from linewise.response_models import EditResult, ShowResult
from linewise.services.config_svc import ConfigService
from linewise.workflows.text.contains_text_wf import contains_match_workflow
from linewise.workflows.text.find_replace_wf import find_and_replace_workflow
from linewise.workflows.text.insert_lines_wf import insert_lines_workflow
from linewise.workflows.text.read_lines_wf import read_lines_workflow
from linewise.workflows.text.remove_lines_wf import remove_lines_workflow
from linewise.workflows.text.replace_lines_wf import replace_lines_workflow
from linewise.workflows.text.show_text_wf import show_text_workflow

logger = logging.getLogger(__name__)

RangeInput = LineRange | int | Sequence[int] | None


class TextFileService:
    """Facade over the text workflows.

    Architecture note:
    - Service resolves configuration and normalizes caller input
    - Each operation delegates to one workflow in workflows/text/
    - No state is kept between calls beyond the resolved EngineConfig
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        config_service: ConfigService | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Explicit engine configuration (takes precedence)
            config_service: Source of configuration when ``config`` is omitted

        """
        if config is None:
            config = (config_service or ConfigService()).get_engine_config()
        self.config = config

    def show(
        self,
        path: str | Path,
        line_range: RangeInput = None,
        match: MatchSpec | None = None,
        encoding: str | None = None,
    ) -> ShowResult:
        return show_text_workflow(path, self.config, LineRange.parse(line_range), match, encoding)

    def contains_match(
        self,
        path: str | Path,
        match: MatchSpec,
        line_range: RangeInput = None,
        encoding: str | None = None,
    ) -> bool:
        return contains_match_workflow(path, match, self.config, LineRange.parse(line_range), encoding)

    def insert_lines(
        self,
        path: str | Path,
        content: str | Iterable[object],
        at_line: int | None = None,
        encoding: str | None = None,
        backup: bool = False,
    ) -> EditResult:
        return insert_lines_workflow(path, content, self.config, at_line, encoding, backup)

    def replace_lines(
        self,
        path: str | Path,
        content: str | Iterable[object] | None = None,
        line_range: RangeInput = None,
        encoding: str | None = None,
        backup: bool = False,
    ) -> EditResult:
        return replace_lines_workflow(path, self.config, content, LineRange.parse(line_range), encoding, backup)

    def find_and_replace(
        self,
        path: str | Path,
        match: MatchSpec | None,
        replacement: str | None,
        line_range: RangeInput = None,
        encoding: str | None = None,
        backup: bool = False,
    ) -> EditResult:
        return find_and_replace_workflow(
            path, match, replacement, self.config, LineRange.parse(line_range), encoding, backup
        )

    def remove_lines(
        self,
        path: str | Path,
        line_range: RangeInput = None,
        match: MatchSpec | None = None,
        encoding: str | None = None,
        backup: bool = False,
    ) -> EditResult:
        return remove_lines_workflow(path, self.config, LineRange.parse(line_range), match, encoding, backup)

    def read_lines(
        self,
        path: str | Path,
        line_range: RangeInput = None,
        encoding: str | None = None,
    ) -> list[str]:
        return read_lines_workflow(path, self.config, LineRange.parse(line_range), encoding)
