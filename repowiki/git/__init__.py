"""Version-control adapters."""

from .fetcher import RepositoryFetcher

__all__ = ["RepositoryFetcher"]
