"""Markdown and JSON views of a DocumentGraph."""

from __future__ import annotations

from typing import Any, Dict

from .models import DocumentGraph, slugify
from .templating import render_template

SECTION_SEPARATOR = "\n\n---\n\n"
DIAGRAMS_HEADING = "## Architecture Diagrams"


def render_markdown(graph: DocumentGraph) -> str:
    """Join sections into one document, followed by any diagrams.

    A graph without sections renders its overview text in their place.
    """
    return render_template(
        "document.md.j2",
        overview=graph.overview,
        sections=graph.sections,
        diagrams=graph.diagrams,
        separator=SECTION_SEPARATOR,
        diagrams_heading=DIAGRAMS_HEADING,
    )


def graph_to_dict(graph: DocumentGraph) -> Dict[str, Any]:
    return {
        "overview": graph.overview,
        "degraded": graph.degraded,
        "sections": [
            {
                "title": section.title,
                "slug": section.slug,
                "level": section.level,
                "type": section.kind,
                "summary": section.summary,
                "content": section.content,
                "files": list(section.files),
            }
            for section in graph.sections
        ],
        "relations": [
            {
                "from": relation.source,
                "to": relation.target,
                "type": relation.kind,
                "description": relation.description,
            }
            for relation in graph.relations
        ],
        "diagrams": [
            {"title": diagram.title, "type": diagram.kind, "content": diagram.content}
            for diagram in graph.diagrams
        ],
        "source_files": list(graph.source_files),
    }


__all__ = ["DIAGRAMS_HEADING", "SECTION_SEPARATOR", "graph_to_dict", "render_markdown", "slugify"]
