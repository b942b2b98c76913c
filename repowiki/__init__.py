"""Repository ingestion and structured documentation synthesis."""

from .config import PipelineConfig, load_config
from .errors import CompletionError, ConfigError, FetchError, RepoWikiError
from .models import Diagram, DocumentGraph, Relation, RepoRef, Section
from .pipeline import IngestionPipeline, process_repository

__all__ = [
    "CompletionError",
    "ConfigError",
    "Diagram",
    "DocumentGraph",
    "FetchError",
    "IngestionPipeline",
    "PipelineConfig",
    "Relation",
    "RepoRef",
    "RepoWikiError",
    "Section",
    "load_config",
    "process_repository",
]
