"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scopepub.core.errors import ErrorCode
from scopepub.output.console import Style
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

if TYPE_CHECKING:
    from scopepub.output.console import ConsoleProtocol

__all__ = ["print_publish_error", "publish_error_exit_code"]

_MAX_LISTED_PATHS = 10


def _print_paths(paths: tuple[str, ...], console: ConsoleProtocol) -> None:
    for p in paths[:_MAX_LISTED_PATHS]:
        console.print(f"      {p}", Style.DIM)
    if len(paths) > _MAX_LISTED_PATHS:
        console.print(f"      ... and {len(paths) - _MAX_LISTED_PATHS} more", Style.DIM)


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    """Print a fatal publish error with its hint."""
    match error:
        case ToolMissing(tool=tool, hint=hint):
            console.error(f"{tool} is not installed")
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case AuthRequired(tool=tool, hint=hint):
            console.error(f"Not logged in to {tool}.")
            console.print(f"hint: {hint}", Style.DIM)
        case PackagesDirMissing(path=path):
            console.error(f"packages directory not found: {path}")
            console.print("hint: set publish.packages_dir in scopepub.toml", Style.DIM)
        case NotAGitRepository(path=path):
            console.error(f"not a git work tree: {path}")
            console.print("hint: manifests are restored with git; publish from a checkout", Style.DIM)
        case DirtyPackages(paths=paths):
            console.error("packages directory has uncommitted changes that would be discarded")
            _print_paths(paths, console)
            console.print("hint: commit or stash them, or pass --allow-dirty", Style.DIM)
        case UntrackedManifests(paths=paths):
            console.error("manifests not tracked by git would stay rewritten after the run")
            _print_paths(paths, console)
            console.print("hint: git add or commit these packages first", Style.DIM)
        case GitQueryFailed(command=command, message=message):
            console.error(f"git {command} failed: {message}")
        case InstallFailed(returncode=rc):
            console.error(f"npm ci failed (exit {rc})")
        case BuildFailed(returncode=rc):
            console.error(f"build failed (exit {rc})")
        case RestoreFailed(pathspec=pathspec, message=message):
            console.error(f"could not restore manifests: {message}")
            console.print(f"hint: run 'git checkout -- {pathspec}' before committing", Style.DIM)


def publish_error_exit_code(error: PublishError) -> int:
    """Get exit code for a publish error.

    Every fatal error exits 1; the mapping exists so new error kinds get an
    explicit decision.
    """
    match error:
        case ToolMissing() | AuthRequired() | PackagesDirMissing() | NotAGitRepository():
            return int(ErrorCode.FAILURE)
        case DirtyPackages() | UntrackedManifests() | GitQueryFailed():
            return int(ErrorCode.FAILURE)
        case InstallFailed() | BuildFailed() | RestoreFailed():
            return int(ErrorCode.FAILURE)
    return int(ErrorCode.FAILURE)
