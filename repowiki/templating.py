"""Jinja environment shared by prompt assembly and document rendering."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).with_name("templates")


@lru_cache(maxsize=None)
def get_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    loader = FileSystemLoader(str(templates_dir))
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_template(name: str, **context: object) -> str:
    return get_environment().get_template(name).render(**context)


__all__ = ["TEMPLATES_DIR", "get_environment", "render_template"]
