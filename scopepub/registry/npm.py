"""npm CLI wrapper.

Thin layer over the ``npm`` executable. Every method maps to a single npm
invocation and returns the raw ``ProcessError`` on failure; deciding whether
a failure is fatal is the caller's job.
"""

from __future__ import annotations

from pathlib import Path

from scopepub.core.result import Err, Ok, Result
from scopepub.platform.process import ProcessError, run, run_live, which

__all__ = ["NPM_TIMEOUT_SECONDS", "NpmRegistry", "publish_args"]

# npm whoami hits the registry
NPM_TIMEOUT_SECONDS = 60.0


def publish_args(*, access: str, dry_run: bool) -> list[str]:
    """Arguments for ``npm publish`` (without the executable)."""
    args = ["publish", "--access", access]
    if dry_run:
        args.append("--dry-run")
    return args


class NpmRegistry:
    """The npm registry, driven through the npm CLI."""

    tool = "npm"

    def __init__(self, executable: str = "npm") -> None:
        self.executable = executable

    def is_available(self) -> bool:
        return which(self.executable) is not None

    def whoami(self, root: Path) -> Result[str, ProcessError]:
        """Return the logged-in registry user."""
        result = run([self.executable, "whoami"], cwd=root, timeout=NPM_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return result
        user = result.value.strip()
        if not user:
            return Err(
                ProcessError(
                    command=(self.executable, "whoami"),
                    returncode=0,
                    stdout="",
                    stderr="npm whoami returned no user",
                )
            )
        return Ok(user)

    def install(self, root: Path) -> Result[None, ProcessError]:
        """Clean install of the workspace dependencies (`npm ci --silent`)."""
        return run_live([self.executable, "ci", "--silent"], cwd=root)

    def build(self, root: Path) -> Result[None, ProcessError]:
        """Run the build script in every workspace package."""
        return run_live([self.executable, "run", "build", "--workspaces"], cwd=root)

    def publish(self, package_dir: Path, *, access: str, dry_run: bool) -> Result[None, ProcessError]:
        """Publish the package in ``package_dir``."""
        return run_live(
            [self.executable, *publish_args(access=access, dry_run=dry_run)],
            cwd=package_dir,
        )
