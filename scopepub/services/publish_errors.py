from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ToolMissing:
    tool: str
    hint: str


@dataclass(frozen=True, slots=True)
class AuthRequired:
    tool: str = "npm"
    hint: str = "Run: npm login"


@dataclass(frozen=True, slots=True)
class PackagesDirMissing:
    path: Path


@dataclass(frozen=True, slots=True)
class NotAGitRepository:
    path: Path


@dataclass(frozen=True, slots=True)
class DirtyPackages:
    paths: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class UntrackedManifests:
    paths: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class GitQueryFailed:
    command: str
    message: str


@dataclass(frozen=True, slots=True)
class InstallFailed:
    returncode: int


@dataclass(frozen=True, slots=True)
class BuildFailed:
    returncode: int


@dataclass(frozen=True, slots=True)
class RestoreFailed:
    pathspec: str
    message: str


PublishError = (
    ToolMissing
    | AuthRequired
    | PackagesDirMissing
    | NotAGitRepository
    | DirtyPackages
    | UntrackedManifests
    | GitQueryFailed
    | InstallFailed
    | BuildFailed
    | RestoreFailed
)
