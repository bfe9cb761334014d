"""Shared response models for the text operations.

Provides a consistent result structure across all operations:
- show
- insert_lines / replace_lines / find_and_replace / remove_lines
"""

from pydantic import BaseModel, Field


class ShowResult(BaseModel):
    """Rendered output of a read-only display call."""

    path: str = Field(description="Path that was displayed")
    lines: list[str] = Field(
        default_factory=list,
        description="Rendered lines: header, numbered content/context lines and '' gap markers",
    )
    notices: list[str] = Field(default_factory=list, description="Warnings and informational notices")
    matched: bool = Field(default=False, description="Whether any line matched the match spec")


class EditResult(BaseModel):
    """Result of a mutating call."""

    path: str = Field(description="Path that was edited or created")
    lines_affected: int = Field(description="Lines visited inside the target region (or matched lines)")
    net_line_delta: int = Field(description="Change in line count (new total minus old total)")
    backup_path: str | None = Field(default=None, description="Timestamped backup sibling, if one was made")
    replacements: int | None = Field(
        default=None, description="Number of text replacements (find_and_replace only)"
    )
    changed: bool = Field(description="False when nothing matched and the file was left untouched")
    encoding: str = Field(description="Codec the file was written with (or would have been)")
    summary: str = Field(description="One-line human-readable outcome")
    notices: list[str] = Field(default_factory=list, description="Warnings and informational notices")
    display: list[str] = Field(default_factory=list, description="Preview of the affected region")

    def model_post_init(self, __context, /) -> None:
        """Validate result invariants."""
        if not self.changed and self.backup_path is not None:
            msg = "backup_path set on an unchanged result (no-op edits never back up)"
            raise ValueError(msg)
        if self.lines_affected < 0:
            msg = f"lines_affected must be >= 0, got {self.lines_affected}"
            raise ValueError(msg)
