"""Tests for scopepub.output.errors."""

from __future__ import annotations

from pathlib import Path

import pytest

from scopepub.core.errors import ErrorCode
from scopepub.output.console import MockConsole, Style
from scopepub.output.errors import print_publish_error, publish_error_exit_code
from scopepub.services.publish_errors import (
    AuthRequired,
    BuildFailed,
    DirtyPackages,
    GitQueryFailed,
    InstallFailed,
    NotAGitRepository,
    PackagesDirMissing,
    PublishError,
    RestoreFailed,
    ToolMissing,
    UntrackedManifests,
)

ALL_ERRORS: list[PublishError] = [
    ToolMissing(tool="npm", hint="Install Node.js"),
    AuthRequired(),
    PackagesDirMissing(path=Path("/ws/packages")),
    NotAGitRepository(path=Path("/ws")),
    DirtyPackages(paths=("packages/a/package.json",)),
    UntrackedManifests(paths=("packages/new/package.json",)),
    GitQueryFailed(command="status", message="fatal: bad index"),
    InstallFailed(returncode=1),
    BuildFailed(returncode=2),
    RestoreFailed(pathspec="packages", message="index.lock exists"),
]


@pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
def test_every_error_prints_and_exits_one(error: PublishError) -> None:
    console = MockConsole()
    print_publish_error(error, console)
    assert console.has_error()
    assert publish_error_exit_code(error) == int(ErrorCode.FAILURE)


def test_auth_hint() -> None:
    console = MockConsole()
    print_publish_error(AuthRequired(), console)
    assert console.messages == ["✘ Not logged in to npm.", "hint: Run: npm login"]


def test_dirty_paths_are_truncated() -> None:
    console = MockConsole()
    paths = tuple(f"packages/p{i}/package.json" for i in range(14))

    print_publish_error(DirtyPackages(paths=paths), console)

    listed = [o for o in console.outputs if o.style == Style.DIM and "packages/p" in o.message]
    assert len(listed) == 10
    assert console.find("... and 4 more")
    assert console.find("--allow-dirty")


def test_restore_hint_names_pathspec() -> None:
    console = MockConsole()
    print_publish_error(RestoreFailed(pathspec="libs", message="boom"), console)
    assert console.find("git checkout -- libs")


def test_untracked_manifests_listed_with_hint() -> None:
    console = MockConsole()
    print_publish_error(UntrackedManifests(paths=("packages/new/package.json",)), console)

    assert console.find("not tracked by git")
    assert console.find("packages/new/package.json")
    assert console.find("git add")


def test_git_query_failure_carries_git_message() -> None:
    console = MockConsole()
    print_publish_error(GitQueryFailed(command="status", message="fatal: bad index"), console)

    assert console.messages == ["✘ git status failed: fatal: bad index"]
