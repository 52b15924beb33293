"""Workspace detection and paths.

The workspace is the root of an npm monorepo whose packages are published.

It is identified by either:
- a ``scopepub.toml`` file, or
- a ``package.json`` next to a ``packages/`` directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILENAME, DEFAULT_PACKAGES_DIR
from .result import Err, Ok, Result

__all__ = [
    "ENV_VAR",
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
    "is_workspace_root",
]

ENV_VAR = "SCOPEPUB_ROOT"


@dataclass(frozen=True, slots=True)
class WorkspaceError:
    """Error when workspace cannot be detected."""

    message: str
    searched_from: Path | None = None
    hint: str | None = "Pass --root or run from inside the workspace"


@dataclass(frozen=True, slots=True)
class Workspace:
    """A detected npm workspace.

    The workspace root contains:
    - package.json (npm workspaces root)
    - packages/ (one directory per publishable package)
    - scopepub.toml (optional)
    """

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to scopepub.toml."""
        return self.root / CONFIG_FILENAME

    def packages_path(self, packages_dir: str = DEFAULT_PACKAGES_DIR) -> Path:
        """Path to the packages directory (relative paths resolve from root)."""
        p = Path(packages_dir)
        return p if p.is_absolute() else self.root / p


def is_workspace_root(path: Path) -> bool:
    """Check if a path is a workspace root."""
    if (path / CONFIG_FILENAME).is_file():
        return True
    return (path / "package.json").is_file() and (path / DEFAULT_PACKAGES_DIR).is_dir()


def find_workspace_upward(start: Path) -> Path | None:
    """Search upward from start directory for a workspace root."""
    for parent in (start, *start.parents):
        if is_workspace_root(parent):
            return parent
    return None


def detect_workspace(
    *,
    root: Path | None = None,
    start_dir: Path | None = None,
    env_var: str = ENV_VAR,
) -> Result[Workspace, WorkspaceError]:
    """Detect the workspace root directory.

    Detection order:
    1. Explicit root (``--root``); only needs to be a directory
    2. SCOPEPUB_ROOT environment variable (if set and valid)
    3. Search upward from start_dir (or cwd) for workspace markers
    """
    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            return Err(WorkspaceError(message=f"invalid --root: {e}"))
        if not resolved.is_dir():
            return Err(
                WorkspaceError(
                    message=f"--root '{resolved}' is not a directory",
                    searched_from=resolved,
                )
            )
        return Ok(Workspace(root=resolved))

    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_workspace_root(env_path):
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"${env_var} is set to '{env_value}' but it is not a valid workspace",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_workspace_upward(search_start)
    if found:
        return Ok(Workspace(root=found))

    return Err(
        WorkspaceError(
            message=(
                f"Could not find workspace ({CONFIG_FILENAME} or "
                f"package.json + {DEFAULT_PACKAGES_DIR}/ not found)"
            ),
            searched_from=search_start,
        )
    )
