"""Exception types raised across repowiki components."""

from __future__ import annotations

from typing import Optional


class RepoWikiError(RuntimeError):
    """Base class for repowiki failures."""


class ConfigError(RepoWikiError):
    """Raised when the configuration file cannot be parsed."""


class FetchError(RepoWikiError):
    """Raised when the repository snapshot could not be cloned."""

    def __init__(self, message: str, *, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class CompletionError(RepoWikiError):
    """Raised when the completion endpoint does not yield usable text."""

    STATUS = "status"
    NETWORK = "network"
    EMPTY = "empty"

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.body = body


__all__ = ["CompletionError", "ConfigError", "FetchError", "RepoWikiError"]
