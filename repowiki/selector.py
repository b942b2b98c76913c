"""Repository walking and prompt-budgeted file selection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Optional

from .config import SelectionLimits
from .logging import get_logger
from .models import FileSelection, SelectedFile

_EXCLUDED_DIRS = {".git"}

CODE_SUFFIXES: tuple[str, ...] = (
    ".cs",
    ".ts",
    ".js",
    ".go",
    ".py",
    ".java",
    ".rs",
    ".cpp",
    ".h",
    ".tsx",
    ".jsx",
    ".swift",
    ".kt",
    ".vue",
    ".rb",
)

NOISE_FRAGMENTS: tuple[str, ...] = ("node_modules", ".min.", "generated", "dist/")

IDENTITY_SUFFIXES: tuple[str, ...] = (
    "package.json",
    "go.mod",
    ".csproj",
    "Cargo.toml",
    "requirements.txt",
    "pom.xml",
    "pyproject.toml",
)

IDENTITY_NAMES: tuple[str, ...] = ("readme.md", "dockerfile")

TRUNCATION_MARKER = "\n... [TRUNCATED]"


def _iter_files(root: Path) -> Iterator[str]:
    """Yield posix paths relative to ``root`` in sorted walk order.

    Symlinked files are skipped so nothing outside the snapshot is ever read.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
        for filename in sorted(filenames):
            if (current_dir / filename).is_symlink():
                continue
            yield f"{rel_dir}/{filename}" if rel_dir else filename


def is_code_file(rel_path: str) -> bool:
    return rel_path.lower().endswith(CODE_SUFFIXES)


def is_noise_path(rel_path: str) -> bool:
    return any(fragment in rel_path for fragment in NOISE_FRAGMENTS)


def is_identity_file(rel_path: str) -> bool:
    if rel_path.endswith(IDENTITY_SUFFIXES):
        return True
    return rel_path.lower() in IDENTITY_NAMES


class ContentSelector:
    """Picks the code and manifest files that describe a repository."""

    def __init__(self, limits: SelectionLimits | None = None) -> None:
        self.limits = limits or SelectionLimits()
        self.logger = get_logger("selector")

    def select(self, root: Path | str) -> FileSelection:
        """Return selected files in walk order plus the budgeted character total."""
        root_path = Path(root)
        if not root_path.is_dir():
            raise NotADirectoryError(f"Snapshot path is not a directory: {root}")

        all_files = list(_iter_files(root_path))
        selection = FileSelection()
        self._select_code(root_path, all_files, selection)
        self._select_identity(root_path, all_files, selection)

        self.logger.info(
            "Read %d files (%s chars)", len(selection), f"{selection.total_chars:,}"
        )
        return selection

    def _select_code(self, root: Path, all_files: List[str], selection: FileSelection) -> None:
        limits = self.limits
        for rel_path in all_files:
            if not is_code_file(rel_path):
                continue
            # Budget is checked before each read, so one file may overshoot it.
            if selection.total_chars > limits.max_total_chars:
                break
            if is_noise_path(rel_path):
                continue
            content = self._read(root / rel_path)
            if content is None:
                continue
            if not limits.min_file_chars < len(content) < limits.max_file_chars:
                continue
            truncated = len(content) > limits.truncate_chars
            if truncated:
                content = content[: limits.truncate_chars] + TRUNCATION_MARKER
            selection.add(
                SelectedFile(
                    path=rel_path,
                    content=content,
                    length=len(content),
                    truncated=truncated,
                )
            )
            selection.total_chars += len(content)

    def _select_identity(
        self, root: Path, all_files: List[str], selection: FileSelection
    ) -> None:
        for rel_path in all_files:
            if not is_identity_file(rel_path):
                continue
            content = self._read(root / rel_path)
            if content is None or len(content) >= self.limits.max_identity_chars:
                continue
            selection.add(SelectedFile(path=rel_path, content=content, length=len(content)))

    def _read(self, path: Path) -> Optional[str]:
        """Return file text, or ``None`` when unreadable; callers skip the file."""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None


__all__ = [
    "CODE_SUFFIXES",
    "ContentSelector",
    "IDENTITY_NAMES",
    "IDENTITY_SUFFIXES",
    "NOISE_FRAGMENTS",
    "TRUNCATION_MARKER",
    "is_code_file",
    "is_identity_file",
    "is_noise_path",
]
