"""Disposable per-run workspaces for repository snapshots."""

from __future__ import annotations

import shutil
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .logging import get_logger
from .models import IngestionRun, RepoRef

WORKSPACE_DIRNAME = "repowiki-repos"

logger = get_logger("workspace")


class Workspace:
    """Handle on a run's scratch directory; ``release`` deletes it once."""

    def __init__(self, run: IngestionRun) -> None:
        self.run = run
        self._released = False

    @property
    def path(self) -> Path:
        return self.run.path

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        """Delete the workspace tree. Returns ``False`` when deletion failed.

        Failures are logged and never raised so they cannot mask the outcome
        of the run that owned the workspace.
        """
        if self._released:
            return True
        self._released = True
        if not self.path.exists():
            return True
        try:
            shutil.rmtree(self.path)
        except OSError as exc:
            logger.warning("Failed to clean up workspace %s: %s", self.path, exc)
            return False
        logger.info("Cleaned up workspace for %s", self.run.repo)
        return True


def create_workspace(repo: RepoRef, base_dir: Path | None = None) -> Workspace:
    """Create a uniquely named directory for ``repo`` and return its handle."""
    parent = Path(base_dir) if base_dir is not None else Path(tempfile.gettempdir())
    token = uuid.uuid4().hex
    path = parent / WORKSPACE_DIRNAME / f"{repo.owner}-{repo.name}-{token}"
    path.mkdir(parents=True)
    logger.debug("Created workspace %s", path)
    return Workspace(IngestionRun(repo=repo, token=token, path=path))


@contextmanager
def acquire(repo: RepoRef, base_dir: Path | None = None) -> Iterator[Workspace]:
    """Yield a fresh workspace and release it on every exit path."""
    workspace = create_workspace(repo, base_dir)
    try:
        yield workspace
    finally:
        # Release reports failure through its return value; cleanup is best-effort.
        workspace.release()


__all__ = ["WORKSPACE_DIRNAME", "Workspace", "acquire", "create_workspace"]
