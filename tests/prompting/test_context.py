"""Tests for the context assembler."""

from __future__ import annotations

from repowiki.models import FileSelection, RepoRef, SelectedFile
from repowiki.prompting.context import ContextAssembler


def _selection(count: int) -> FileSelection:
    selection = FileSelection()
    for index in range(count):
        content = f"print({index})"
        selection.add(SelectedFile(path=f"src/mod_{index:02d}.py", content=content, length=len(content)))
    return selection


def test_assemble_renders_header_and_fenced_files() -> None:
    payload = ContextAssembler().assemble(RepoRef("octo", "demo"), _selection(2))

    assert payload == (
        "REPOSITORY: octo/demo\n"
        "CODE FILES:\n"
        "\n### src/mod_00.py\n```\nprint(0)\n```\n"
        "\n### src/mod_01.py\n```\nprint(1)\n```\n"
    )


def test_assemble_caps_file_count() -> None:
    payload = ContextAssembler().assemble(RepoRef("octo", "demo"), _selection(35))

    assert payload.count("### ") == 30
    assert "src/mod_29.py" in payload
    assert "src/mod_30.py" not in payload


def test_assemble_with_custom_cap_and_no_files() -> None:
    assembler = ContextAssembler(max_files=1)

    assert assembler.assemble(RepoRef("octo", "demo"), _selection(3)).count("### ") == 1
    assert assembler.assemble(RepoRef("octo", "demo"), FileSelection()) == (
        "REPOSITORY: octo/demo\nCODE FILES:\n"
    )
