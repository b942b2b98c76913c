"""Core data models shared across repowiki components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import CompletionError, FetchError

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")
_URL_PREFIX = re.compile(r"^(?:https?://|git@)[^/:]+[/:]")
_SLUG_DROP = re.compile(r"[^a-z0-9-]")


def slugify(title: str) -> str:
    """Return the anchor slug used for a section title."""
    return _SLUG_DROP.sub("", title.lower().replace(" ", "-"))


@dataclass(frozen=True)
class RepoRef:
    """Identity of a remote repository (owner plus name)."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        for label, value in (("owner", self.owner), ("name", self.name)):
            if not value or not _NAME_PATTERN.match(value):
                raise ValueError(f"Invalid repository {label}: {value!r}")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def clone_url(self, host: str = "github.com") -> str:
        return f"https://{host}/{self.owner}/{self.name}.git"

    @classmethod
    def parse(cls, value: str) -> "RepoRef":
        """Parse ``owner/name``, ``owner/name.git`` or a clone URL."""
        text = _URL_PREFIX.sub("", value.strip()).strip("/")
        if text.endswith(".git"):
            text = text[: -len(".git")]
        parts = text.split("/")
        if len(parts) != 2:
            raise ValueError(f"Expected an owner/repo reference, got {value!r}")
        return cls(owner=parts[0], name=parts[1])

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class IngestionRun:
    """One ingestion run: the repository and the workspace it owns."""

    repo: RepoRef
    token: str
    path: Path


@dataclass
class SelectedFile:
    """A repository file chosen for the prompt, possibly truncated."""

    path: str
    content: str
    length: int
    truncated: bool = False


@dataclass
class FileSelection:
    """Ordered set of selected files plus the budgeted character count."""

    files: List[SelectedFile] = field(default_factory=list)
    total_chars: int = 0

    @property
    def paths(self) -> List[str]:
        return [item.path for item in self.files]

    def get(self, path: str) -> Optional[SelectedFile]:
        for item in self.files:
            if item.path == path:
                return item
        return None

    def add(self, selected: SelectedFile) -> None:
        """Insert or replace ``selected``, keeping first-seen order."""
        for index, item in enumerate(self.files):
            if item.path == selected.path:
                self.files[index] = selected
                return
        self.files.append(selected)

    def __iter__(self) -> Iterator[SelectedFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass
class Section:
    """A documentation section produced by the model."""

    title: str
    content: str
    summary: str = ""
    level: int = 2
    kind: str = "content"
    files: List[str] = field(default_factory=list)

    @property
    def slug(self) -> str:
        return slugify(self.title)


@dataclass
class Relation:
    """Directed link between two sections, referenced by title."""

    source: str
    target: str
    kind: str = "references"
    description: Optional[str] = None


@dataclass
class Diagram:
    """Diagram source text (mermaid unless stated otherwise)."""

    title: str
    content: str
    kind: str = "mermaid"


@dataclass
class DocumentGraph:
    """Structured documentation for one repository."""

    overview: str = ""
    sections: List[Section] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    diagrams: List[Diagram] = field(default_factory=list)
    source_files: List[str] = field(default_factory=list)
    degraded: bool = False

    def resolve_relations(self) -> List[Tuple[int, int, Relation]]:
        """Return ``(source_index, target_index, relation)`` for relations naming known sections."""
        index_by_title: Dict[str, int] = {}
        for index, section in enumerate(self.sections):
            index_by_title.setdefault(section.title, index)
        resolved: List[Tuple[int, int, Relation]] = []
        for relation in self.relations:
            source = index_by_title.get(relation.source)
            target = index_by_title.get(relation.target)
            if source is None or target is None:
                continue
            resolved.append((source, target, relation))
        return resolved


@dataclass
class FetchResult:
    """Outcome of a repository clone."""

    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass
class CompletionResult:
    """Outcome of a completion call: raw text or a typed failure."""

    content: Optional[str] = None
    error: Optional[CompletionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        if self.content is None:
            raise CompletionError("Completion returned no content", kind=CompletionError.EMPTY)
        return self.content


__all__ = [
    "CompletionResult",
    "Diagram",
    "DocumentGraph",
    "FetchResult",
    "FileSelection",
    "IngestionRun",
    "Relation",
    "RepoRef",
    "Section",
    "SelectedFile",
    "slugify",
]
