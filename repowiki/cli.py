"""CLI entrypoint for repowiki."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .errors import CompletionError, ConfigError, FetchError
from .logging import configure_logging
from .models import RepoRef
from .pipeline import IngestionPipeline
from .render import graph_to_dict, render_markdown


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repowiki",
        description="Generate structured documentation for a remote repository.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Clone a repository and generate its documentation.",
    )
    _add_verbose_option(ingest_parser, suppress_default=True)
    ingest_parser.add_argument("repository", help="Repository as owner/repo or clone URL.")
    ingest_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .repowiki.yml or its directory (defaults to the current directory).",
    )
    ingest_parser.add_argument(
        "--format",
        choices=("markdown", "json"),
        default="markdown",
        help="Output format (defaults to markdown).",
    )
    ingest_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the document to this file instead of stdout.",
    )
    ingest_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug-level trace of the run to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repowiki commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command != "ingest":  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    try:
        ref = RepoRef.parse(args.repository)
        config = load_config(args.config if args.config is not None else Path.cwd())
    except (ValueError, ConfigError) as exc:
        parser.exit(1, f"{exc}\n")

    pipeline = IngestionPipeline(config)
    try:
        graph = pipeline.process_repository(ref.owner, ref.name)
    except (FetchError, CompletionError) as exc:
        parser.exit(1, f"repowiki ingest failed: {exc}\nRun with --verbose for more details.\n")

    if args.format == "json":
        output = json.dumps(graph_to_dict(graph), indent=2) + "\n"
    else:
        output = render_markdown(graph).rstrip("\n") + "\n"

    if args.output is not None:
        args.output.write_text(output, encoding="utf-8")
        print(f"Documentation for {ref} written to {args.output}")
    else:
        sys.stdout.write(output)


if __name__ == "__main__":
    main(sys.argv[1:])
