"""Unit tests for linewise.components.text.edit_preview_comp."""

import pytest

from linewise.components.text.edit_preview_comp import EditPreview, omitted_marker
from linewise.helpers.ansi import GREEN, RESET, Style
from linewise.helpers.dto.config_dto import EngineConfig


@pytest.fixture
def preview(engine_config: EngineConfig) -> EditPreview:
    return EditPreview(engine_config, Style(enabled=False))


class TestEditPreview:
    @pytest.mark.unit
    def test_short_edit_is_shown_in_full(self, preview: EditPreview) -> None:
        preview.context_before(1, "one")
        preview.context_before(2, "two")
        preview.add(3, "new")
        preview.context_after(4, "four")
        assert preview.render() == ["  1- one", "  2- two", "  3: new", "  4- four"]

    @pytest.mark.unit
    def test_only_last_two_lines_of_context_before(self, preview: EditPreview) -> None:
        for number in range(1, 6):
            preview.context_before(number, f"c{number}")
        preview.add(6, "x")
        assert preview.render()[:2] == ["  4- c4", "  5- c5"]

    @pytest.mark.unit
    def test_after_context_is_bounded(self, preview: EditPreview) -> None:
        preview.add(1, "x")
        for number in range(2, 6):
            preview.context_after(number, f"a{number}")
        assert not preview.wants_after()
        assert preview.render() == ["  1: x", "  2- a2", "  3- a3"]

    @pytest.mark.unit
    def test_five_lines_are_not_collapsed(self, preview: EditPreview) -> None:
        for number in range(1, 6):
            preview.add(number, f"n{number}")
        assert preview.render() == [f"  {n}: n{n}" for n in range(1, 6)]

    @pytest.mark.unit
    def test_long_edit_collapses(self, preview: EditPreview) -> None:
        for number in range(3, 11):
            preview.add(number, f"n{number}")
        assert preview.render() == [
            "  3: n3",
            "  4: n4",
            omitted_marker(4),
            "  9: n9",
            " 10: n10",
        ]

    @pytest.mark.unit
    def test_omitted_marker_text(self) -> None:
        assert omitted_marker(12) == "   : ... (12 lines omitted) ..."

    @pytest.mark.unit
    def test_pure_removal_shows_marker(self, preview: EditPreview) -> None:
        preview.context_before(1, "keep")
        preview.mark_removed()
        preview.context_after(2, "after")
        assert preview.render() == ["  1- keep", "   :", "  2- after"]

    @pytest.mark.unit
    def test_inserted_lines_are_styled(self, engine_config: EngineConfig) -> None:
        preview = EditPreview(engine_config, Style(enabled=True))
        preview.add(1, "new")
        assert preview.render() == [f"  1: {GREEN}new{RESET}"]

    @pytest.mark.unit
    def test_custom_collapse_threshold(self) -> None:
        preview = EditPreview(EngineConfig(max_full_lines=3, head_lines=1), Style(enabled=False))
        for number in range(1, 5):
            preview.add(number, str(number))
        assert preview.render() == ["  1: 1", omitted_marker(2), "  4: 4"]
