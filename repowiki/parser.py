"""Turns free-form completion text into a DocumentGraph.

The model is asked for a single JSON object but may wrap it in prose or code
fences. ``find_json_object`` scans for balanced top-level ``{...}`` spans while
honouring string literals, and ``ResponseParser`` maps the first span that
decodes into the typed graph. Parsing never fails: anything unusable yields the
degraded single-section document.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .logging import get_logger
from .models import Diagram, DocumentGraph, Relation, Section
from .prompting.constants import OVERVIEW_SUMMARY, OVERVIEW_TITLE


class ExtractionError(ValueError):
    """A required field was missing or had the wrong type."""


def _match_brace(text: str, start: int) -> Optional[int]:
    """Return the index just past the brace closing ``text[start]``, if any."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def iter_object_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` for each balanced top-level brace span in ``text``.

    An opening brace that never closes is skipped and the scan resumes just
    after it, so stray prose braces do not hide a later object.
    """
    position = 0
    while True:
        start = text.find("{", position)
        if start < 0:
            return
        end = _match_brace(text, start)
        if end is None:
            position = start + 1
            continue
        yield start, end
        position = end


def find_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first balanced span of ``text`` that decodes to a JSON object."""
    for start, end in iter_object_spans(text):
        try:
            candidate = json.loads(text[start:end])
        except (ValueError, RecursionError):
            continue
        if isinstance(candidate, dict):
            return candidate
    return None


def _required_str(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    if value is None and key in item:
        return ""
    if not isinstance(value, str):
        raise ExtractionError(f"missing required string field '{key}'")
    return value


def _optional_str(item: Dict[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = item.get(key)
    return value if isinstance(value, str) else default


def _optional_int(item: Dict[str, Any], key: str, default: int) -> int:
    value = item.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


def _optional_list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _as_object(element: Any, label: str) -> Dict[str, Any]:
    if not isinstance(element, dict):
        raise ExtractionError(f"{label} entry is not an object")
    return element


def _extract_section(element: Any) -> Section:
    item = _as_object(element, "section")
    files = [
        entry for entry in _optional_list(item, "files") if isinstance(entry, str) and entry
    ]
    return Section(
        title=_required_str(item, "title"),
        content=_required_str(item, "content"),
        summary=_optional_str(item, "summary", "") or "",
        level=_optional_int(item, "level", 2),
        kind=_optional_str(item, "type", "content") or "content",
        files=files,
    )


def _extract_relation(element: Any) -> Relation:
    item = _as_object(element, "relation")
    return Relation(
        source=_required_str(item, "from"),
        target=_required_str(item, "to"),
        kind=_optional_str(item, "type", "references") or "references",
        description=_optional_str(item, "description", None),
    )


def _extract_diagram(element: Any) -> Diagram:
    item = _as_object(element, "diagram")
    return Diagram(
        title=_required_str(item, "title"),
        content=_required_str(item, "content"),
        kind=_optional_str(item, "type", "mermaid") or "mermaid",
    )


def fallback_section(raw: str) -> Section:
    return Section(title=OVERVIEW_TITLE, content=raw, level=1, kind="overview")


class ResponseParser:
    """Maps completion text onto a DocumentGraph, degrading instead of failing."""

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    def parse(self, raw: str, known_files: Sequence[str] = ()) -> DocumentGraph:
        source_files = list(known_files)
        data = find_json_object(raw)
        if data is None:
            self.logger.warning("No JSON object found in completion; using raw text as overview")
            return self._degraded(raw, source_files)

        try:
            graph = self._extract(data)
        except ExtractionError as exc:
            # One bad element discards the whole parse.
            self.logger.error("Failed to parse AI response: %s", exc)
            return self._degraded(raw, source_files)

        graph.source_files = source_files
        if not graph.sections:
            self.logger.warning("Completion produced no sections; using raw text as overview")
            graph.sections.append(fallback_section(raw))
            graph.degraded = True
        return graph

    def _extract(self, data: Dict[str, Any]) -> DocumentGraph:
        graph = DocumentGraph()

        overview = data.get("overview")
        if overview is None and "overview" in data:
            overview = ""
        if isinstance(overview, str):
            graph.overview = overview
            graph.sections.append(
                Section(
                    title=OVERVIEW_TITLE,
                    content=overview,
                    summary=OVERVIEW_SUMMARY,
                    level=1,
                    kind="overview",
                )
            )

        graph.sections.extend(_extract_section(item) for item in _optional_list(data, "sections"))
        graph.relations.extend(
            _extract_relation(item) for item in _optional_list(data, "relations")
        )
        graph.diagrams.extend(_extract_diagram(item) for item in _optional_list(data, "diagrams"))
        return graph

    @staticmethod
    def _degraded(raw: str, source_files: List[str]) -> DocumentGraph:
        return DocumentGraph(
            overview=raw,
            sections=[fallback_section(raw)],
            source_files=source_files,
            degraded=True,
        )


__all__ = [
    "ExtractionError",
    "ResponseParser",
    "fallback_section",
    "find_json_object",
    "iter_object_spans",
]
