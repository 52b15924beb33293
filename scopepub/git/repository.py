"""Git repository abstraction.

The publish run only needs a few things from git: confirm the workspace is
a work tree, list uncommitted changes and tracked files under the packages
directory, and restore that directory to its committed state afterwards.

Usage:
    repo = Repository(workspace_root)

    match repo.status("packages"):
        case Ok(status) if status.tracked_changes:
            print(f"{len(status.tracked_changes)} modified files")
        case Err(e):
            print(f"Error: {e.message}")

    repo.restore("packages")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from scopepub.core.result import Err, Ok, Result
from scopepub.platform.process import ProcessError, which
from scopepub.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in ``git status --porcelain``.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path, relative to the repository top level
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"

    @property
    def is_ignored(self) -> bool:
        return self.xy == "!!"

    @property
    def is_tracked_change(self) -> bool:
        """True for staged or unstaged changes to tracked files."""
        return not (self.is_untracked or self.is_ignored)


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed working tree status for a pathspec."""

    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def tracked_changes(self) -> list[StatusEntry]:
        """Entries a ``git checkout --`` restore would discard."""
        return [e for e in self.entries if e.is_tracked_change]


class Repository:
    """Git operations rooted at a workspace directory.

    Attributes:
        path: Directory git commands run from (any path inside the work tree)
    """

    tool = "git"

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_available(self) -> bool:
        """Check if the git executable is on PATH."""
        return which(self.tool) is not None

    def is_work_tree(self) -> bool:
        """Check if ``path`` is inside a git work tree."""
        result = self._run(["rev-parse", "--is-inside-work-tree"])
        match result:
            case Ok(stdout):
                return stdout.strip() == "true"
            case Err(_):
                return False

    def status(self, pathspec: str = ".") -> Result[GitStatus, GitError]:
        """Get working tree status limited to ``pathspec``.

        Runs `git status --porcelain=v1 -- <pathspec>` and parses the output.
        """
        result = self._run(["status", "--porcelain=v1", "--", pathspec])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="status",
                        message=e.stderr.strip() or "git status failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def tracked_files(self, pathspec: str = ".") -> Result[frozenset[str], GitError]:
        """Files under ``pathspec`` that are in the index.

        Runs `git ls-files -z -- <pathspec>`. Paths are relative to ``path``
        and use forward slashes.
        """
        result = self._run(["ls-files", "-z", "--", pathspec])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="ls-files",
                        message=e.stderr.strip() or "git ls-files failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(frozenset(p for p in stdout.split("\0") if p))

    def restore(self, pathspec: str) -> Result[None, GitError]:
        """Discard working tree changes to tracked files under ``pathspec``.

        Runs `git checkout -- <pathspec>`. Untracked files (build output)
        are left alone.
        """
        result = self._run(["checkout", "--", pathspec])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=f"checkout -- {pathspec}",
                        message=e.stderr.strip() or e.stdout.strip() or "checkout failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(_):
                return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    def _parse_status(self, output: str) -> GitStatus:
        entries: list[StatusEntry] = []
        for line in output.splitlines():
            entry = self._parse_entry(line)
            if entry:
                entries.append(entry)
        return GitStatus(entries=tuple(entries))

    def _parse_entry(self, line: str) -> StatusEntry | None:
        """Parse a single status entry line: ``XY path``."""
        if len(line) < 4:
            return None
        return StatusEntry(xy=line[:2], path=line[3:])
