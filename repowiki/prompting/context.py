"""Renders the selected files into the single prompt payload."""

from __future__ import annotations

from ..config import SelectionLimits
from ..models import FileSelection, RepoRef
from ..templating import render_template


class ContextAssembler:
    """Builds the user message sent to the completion endpoint."""

    TEMPLATE = "context.j2"

    def __init__(self, max_files: int | None = None) -> None:
        self.max_files = SelectionLimits().max_prompt_files if max_files is None else max_files

    def assemble(self, repo: RepoRef, selection: FileSelection) -> str:
        # The file cap applies on top of the character budget.
        files = list(selection)[: self.max_files]
        return render_template(self.TEMPLATE, repo=repo, files=files)


__all__ = ["ContextAssembler"]
