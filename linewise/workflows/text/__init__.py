"""
Text workflows: one module per operation.
"""

from .contains_text_wf import contains_match_workflow
from .find_replace_wf import find_and_replace_workflow
from .insert_lines_wf import insert_lines_workflow
from .read_lines_wf import read_lines_workflow
from .remove_lines_wf import remove_lines_workflow
from .replace_lines_wf import replace_lines_workflow
from .show_text_wf import show_text_workflow

__all__ = [
    "contains_match_workflow",
    "find_and_replace_workflow",
    "insert_lines_workflow",
    "read_lines_workflow",
    "remove_lines_workflow",
    "replace_lines_workflow",
    "show_text_workflow",
]
