"""Ingestion pipeline: clone, select, assemble, complete, parse."""

from __future__ import annotations

import asyncio
import functools

from .config import PipelineConfig
from .git.fetcher import RepositoryFetcher
from .llm.client import CompletionClient
from .logging import get_logger
from .models import DocumentGraph, RepoRef
from .parser import ResponseParser
from .prompting.context import ContextAssembler
from .selector import ContentSelector
from .workspace import acquire


class IngestionPipeline:
    """Runs one repository through every stage inside a disposable workspace.

    Only ``FetchError`` and ``CompletionError`` escape ``process_repository``;
    unreadable files, unparseable completions and cleanup failures are absorbed
    so that a document is produced whenever the clone and the completion call
    both succeed.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        fetcher: RepositoryFetcher | None = None,
        selector: ContentSelector | None = None,
        assembler: ContextAssembler | None = None,
        client: CompletionClient | None = None,
        parser: ResponseParser | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.fetcher = fetcher or RepositoryFetcher(
            host=self.config.git.host, executable=self.config.git.executable
        )
        self.selector = selector or ContentSelector(self.config.selection)
        self.assembler = assembler or ContextAssembler(self.config.selection.max_prompt_files)
        self.client = client or CompletionClient(self.config.llm)
        self.parser = parser or ResponseParser()
        self.logger = get_logger("pipeline")

    def process_repository(self, owner: str, repo: str) -> DocumentGraph:
        """Generate a DocumentGraph for ``owner/repo``."""
        ref = RepoRef(owner=owner, name=repo)
        self.logger.info("Starting ingestion for %s", ref)
        with acquire(ref, self.config.workspace_root) as workspace:
            self.logger.info("Step 1: cloning repository")
            self.fetcher.fetch(ref, workspace.path).unwrap()

            self.logger.info("Step 2: reading source files")
            selection = self.selector.select(workspace.path)

            self.logger.info("Step 3: generating documentation")
            payload = self.assembler.assemble(ref, selection)
            raw = self.client.generate_structured_docs(payload).unwrap()

            self.logger.info("Step 4: parsing sections, relations and diagrams")
            graph = self.parser.parse(raw, selection.paths)

        self.logger.info(
            "Finished %s: %d sections, %d relations, %d diagrams%s",
            ref,
            len(graph.sections),
            len(graph.relations),
            len(graph.diagrams),
            " (degraded)" if graph.degraded else "",
        )
        return graph

    async def process_repository_async(self, owner: str, repo: str) -> DocumentGraph:
        """Run ``process_repository`` off the event loop as a single awaitable unit."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(self.process_repository, owner, repo)
        )


def process_repository(
    owner: str, repo: str, config: PipelineConfig | None = None
) -> DocumentGraph:
    return IngestionPipeline(config).process_repository(owner, repo)


__all__ = ["IngestionPipeline", "process_repository"]
