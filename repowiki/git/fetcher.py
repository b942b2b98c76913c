"""Shallow repository snapshots via the git CLI."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Sequence

from ..errors import FetchError
from ..logging import get_logger
from ..models import FetchResult, RepoRef

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class RepositoryFetcher:
    """Clones a single revision of a remote repository into a directory."""

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        host: str = "github.com",
        executable: str = "git",
    ) -> None:
        self._runner = runner or self._default_runner
        self.host = host
        self.executable = executable
        self.logger = get_logger("git.fetcher")

    def clone_command(self, repo: RepoRef) -> list[str]:
        return [
            self.executable,
            "clone",
            "--depth",
            "1",
            "--single-branch",
            repo.clone_url(self.host),
            ".",
        ]

    def fetch(self, repo: RepoRef, into: Path | str) -> FetchResult:
        """Clone ``repo`` into ``into``; one attempt, failures carried in the result."""
        target = Path(into)
        args = self.clone_command(repo)
        self.logger.info("Cloning %s", repo.clone_url(self.host))
        try:
            completed = self._runner(args, cwd=target)
        except FileNotFoundError:
            return FetchResult(
                error=FetchError(
                    f"Unable to locate '{self.executable}'. Install git or configure git.executable."
                )
            )
        if completed.returncode != 0:
            detail = (completed.stderr or "").strip() or (completed.stdout or "").strip()
            message = detail or f"exit code {completed.returncode}"
            self.logger.debug("git clone exited with %s: %s", completed.returncode, message)
            return FetchResult(
                error=FetchError(
                    f"Git clone failed: {message}", returncode=completed.returncode
                )
            )
        self.logger.info("Repository %s cloned", repo)
        return FetchResult()

    @staticmethod
    def _default_runner(
        args: Sequence[str], *, cwd: Path
    ) -> "subprocess.CompletedProcess[str]":
        return subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            text=True,
            capture_output=True,
        )


__all__ = ["RepositoryFetcher"]
