"""Tests for the repository fetcher."""

from __future__ import annotations

import subprocess
from pathlib import Path

from repowiki.errors import FetchError
from repowiki.git.fetcher import RepositoryFetcher
from repowiki.models import RepoRef


def _completed(args, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)


def test_fetch_runs_shallow_single_branch_clone(tmp_path: Path) -> None:
    calls = []

    def runner(args, cwd):
        calls.append((list(args), Path(cwd)))
        return _completed(args)

    result = RepositoryFetcher(runner=runner).fetch(RepoRef("octo", "demo"), tmp_path)

    assert result.ok
    assert calls == [
        (
            [
                "git",
                "clone",
                "--depth",
                "1",
                "--single-branch",
                "https://github.com/octo/demo.git",
                ".",
            ],
            tmp_path,
        )
    ]


def test_fetch_uses_configured_host_and_executable(tmp_path: Path) -> None:
    calls = []

    def runner(args, cwd):
        calls.append(list(args))
        return _completed(args)

    fetcher = RepositoryFetcher(runner=runner, host="git.example.com", executable="/usr/bin/git")
    fetcher.fetch(RepoRef("team", "service"), tmp_path)

    assert calls[0][0] == "/usr/bin/git"
    assert "https://git.example.com/team/service.git" in calls[0]


def test_fetch_failure_carries_stderr(tmp_path: Path) -> None:
    def runner(args, cwd):
        return _completed(args, returncode=128, stderr="fatal: repository not found\n")

    result = RepositoryFetcher(runner=runner).fetch(RepoRef("octo", "missing"), tmp_path)

    assert not result.ok
    assert isinstance(result.error, FetchError)
    assert result.error.returncode == 128
    assert "repository not found" in str(result.error)


def test_fetch_failure_without_output_reports_exit_code(tmp_path: Path) -> None:
    def runner(args, cwd):
        return _completed(args, returncode=1)

    result = RepositoryFetcher(runner=runner).fetch(RepoRef("octo", "demo"), tmp_path)

    assert "exit code 1" in str(result.error)


def test_fetch_reports_missing_executable(tmp_path: Path) -> None:
    def runner(args, cwd):
        raise FileNotFoundError(args[0])

    result = RepositoryFetcher(runner=runner, executable="no-git").fetch(
        RepoRef("octo", "demo"), tmp_path
    )

    assert not result.ok
    assert "no-git" in str(result.error)
