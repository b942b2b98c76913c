"""Helper utilities for constructing snapshot directories in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from repowiki.models import FileSelection
from repowiki.selector import ContentSelector


class RepoBuilder:
    """Utility for writing files into a throwaway snapshot and selecting from it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self._selector = ContentSelector()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the snapshot."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_sized(self, relative: str, length: int, char: str = "x") -> Path:
        """Write a file of exactly ``length`` characters."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(char * length, encoding="utf-8")
        return path

    def select(self, selector: ContentSelector | None = None) -> FileSelection:
        """Return a fresh selection of the snapshot contents."""
        return (selector or self._selector).select(self.root)

    def path(self) -> Path:
        """Return the snapshot root path."""
        return self.root


__all__ = ["RepoBuilder"]
