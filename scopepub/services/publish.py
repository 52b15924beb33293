"""Publish orchestration for workspace packages.

A run goes through three phases:

1. Pre-flight: tools on PATH, registry login, workspace layout, clean
   packages directory, every manifest to be rewritten tracked by git, then
   ``npm ci`` and the workspace build. Any failure here is fatal and
   happens before a manifest is touched.
2. Per-package loop: each directory under the packages directory is
   classified as Published, Skipped or Failed. A failed publish never
   stops the loop.
3. Restore: the loop runs inside ``ManifestRestore``, which reverts the
   packages directory through git however the loop exits.

Results are folded into an immutable ``PublishReport``; nothing is kept in
module or instance state between runs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path
from types import TracebackType
from typing import Protocol

from scopepub.core.config import Config, RunConfig
from scopepub.core.errors import ErrorCode
from scopepub.core.result import Err, Ok, Result
from scopepub.core.workspace import Workspace
from scopepub.git.repository import GitError, GitStatus, Repository
from scopepub.output.console import ConsoleProtocol
from scopepub.platform.process import ProcessError
from scopepub.registry.npm import NpmRegistry

from .base import BaseService
from .manifest import (
    Manifest,
    ManifestError,
    discover_package_dirs,
    read_manifest,
    retarget_name,
    rewrite_manifest,
)
from .publish_errors import (
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

__all__ = [
    "Failed",
    "ManifestRestore",
    "PackagePlan",
    "Published",
    "PublishOutcome",
    "PublishReport",
    "PublishService",
    "Registry",
    "Skipped",
    "VersionControl",
]

_TOOL_HINTS = {
    "npm": "Install Node.js (ships npm): https://nodejs.org/",
    "git": "Install git: https://git-scm.com/downloads",
}


class Registry(Protocol):
    tool: str

    def is_available(self) -> bool: ...

    def whoami(self, root: Path) -> Result[str, ProcessError]: ...

    def install(self, root: Path) -> Result[None, ProcessError]: ...

    def build(self, root: Path) -> Result[None, ProcessError]: ...

    def publish(
        self, package_dir: Path, *, access: str, dry_run: bool
    ) -> Result[None, ProcessError]: ...


class VersionControl(Protocol):
    tool: str

    def is_available(self) -> bool: ...

    def is_work_tree(self) -> bool: ...

    def status(self, pathspec: str = ".") -> Result[GitStatus, GitError]: ...

    def tracked_files(self, pathspec: str = ".") -> Result[frozenset[str], GitError]: ...

    def restore(self, pathspec: str) -> Result[None, GitError]: ...


# -----------------------------------------------------------------------------
# Outcomes
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Published:
    name: str
    version: str

    @property
    def label(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True, slots=True)
class Skipped:
    name: str
    reason: str

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Failed:
    name: str
    version: str
    reason: str = ""

    @property
    def label(self) -> str:
        return f"{self.name}@{self.version}"


PublishOutcome = Published | Skipped | Failed


@dataclass(frozen=True, slots=True)
class PublishReport:
    """Classification of every package directory that holds a manifest."""

    published: tuple[Published, ...] = ()
    skipped: tuple[Skipped, ...] = ()
    failed: tuple[Failed, ...] = ()
    dry_run: bool = False
    restore_error: RestoreFailed | None = None

    def add(self, outcome: PublishOutcome) -> PublishReport:
        match outcome:
            case Published():
                return replace(self, published=(*self.published, outcome))
            case Skipped():
                return replace(self, skipped=(*self.skipped, outcome))
            case Failed():
                return replace(self, failed=(*self.failed, outcome))

    @classmethod
    def fold(cls, outcomes: Iterable[PublishOutcome], *, dry_run: bool = False) -> PublishReport:
        report = cls(dry_run=dry_run)
        for outcome in outcomes:
            report = report.add(outcome)
        return report

    @property
    def total(self) -> int:
        return len(self.published) + len(self.skipped) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed and self.restore_error is None

    @property
    def exit_code(self) -> ErrorCode:
        return ErrorCode.OK if self.ok else ErrorCode.FAILURE


# -----------------------------------------------------------------------------
# Cleanup guard
# -----------------------------------------------------------------------------


class ManifestRestore:
    """Context manager that reverts ``pathspec`` through git on exit.

    The restore runs on normal exit and when an exception (including
    KeyboardInterrupt) unwinds through the block. A failed restore is kept
    in ``error`` and never masks an in-flight exception.
    """

    def __init__(self, vcs: VersionControl, pathspec: str, console: ConsoleProtocol) -> None:
        self._vcs = vcs
        self._pathspec = pathspec
        self._console = console
        self.error: RestoreFailed | None = None

    def __enter__(self) -> ManifestRestore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self._console.info("Reverting package.json changes...")
        result = self._vcs.restore(self._pathspec)
        if isinstance(result, Err):
            self.error = RestoreFailed(pathspec=self._pathspec, message=result.error.message)
            self._console.error(f"git checkout -- {self._pathspec} failed: {result.error.message}")
        return False


# -----------------------------------------------------------------------------
# Listing
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PackagePlan:
    """What a publish run would do with one package directory."""

    directory: Path
    manifest: Manifest | None = None
    publish_name: str | None = None
    error: ManifestError | None = None


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------


class PublishService(BaseService):
    """Publish every package of a workspace under the target scope."""

    def __init__(
        self,
        *,
        workspace: Workspace,
        config: Config,
        console: ConsoleProtocol,
        registry: Registry | None = None,
        vcs: VersionControl | None = None,
    ) -> None:
        super().__init__(workspace=workspace, config=config, console=console)
        self._registry: Registry = registry or NpmRegistry()
        self._vcs: VersionControl = vcs or Repository(workspace.root)

    def plan(self) -> Result[list[PackagePlan], PublishError]:
        """Read every manifest without touching anything."""
        if not self.packages_dir.is_dir():
            return Err(PackagesDirMissing(path=self.packages_dir))

        scope = self._config.scope
        plans: list[PackagePlan] = []
        for pkg_dir in discover_package_dirs(self.packages_dir):
            manifest_path = pkg_dir / self._config.publish.manifest
            if not manifest_path.is_file():
                continue
            match read_manifest(manifest_path):
                case Ok(manifest):
                    plans.append(
                        PackagePlan(
                            directory=pkg_dir,
                            manifest=manifest,
                            publish_name=retarget_name(manifest.name, scope.source, scope.target),
                        )
                    )
                case Err(error):
                    plans.append(PackagePlan(directory=pkg_dir, error=error))
        return Ok(plans)

    def run(self, run_config: RunConfig) -> Result[PublishReport, PublishError]:
        """Execute a full publish run.

        Returns:
            Ok(PublishReport) once the loop ran (check ``report.ok``)
            Err(PublishError) if a pre-flight step failed
        """
        preflight = self._preflight(run_config)
        if isinstance(preflight, Err):
            return preflight

        guard = ManifestRestore(self._vcs, self.packages_pathspec, self._console)
        with guard:
            report = PublishReport.fold(
                self._publish_all(run_config),
                dry_run=run_config.dry_run,
            )

        if guard.error is not None:
            report = replace(report, restore_error=guard.error)
        return Ok(report)

    # -------------------------------------------------------------------------
    # Pre-flight
    # -------------------------------------------------------------------------

    def _preflight(self, run_config: RunConfig) -> Result[None, PublishError]:
        root = self._workspace.root

        for tool in (self._registry, self._vcs):
            if not tool.is_available():
                return Err(ToolMissing(tool=tool.tool, hint=_TOOL_HINTS.get(tool.tool, "")))

        match self._registry.whoami(root):
            case Err(_):
                return Err(AuthRequired(tool=self._registry.tool))
            case Ok(user):
                self._console.info(f"Logged in as {user}")

        if not self.packages_dir.is_dir():
            return Err(PackagesDirMissing(path=self.packages_dir))

        if not self._vcs.is_work_tree():
            return Err(NotAGitRepository(path=root))

        if not run_config.allow_dirty:
            dirty = self._dirty_paths()
            if isinstance(dirty, Err):
                return dirty
            if dirty.value:
                return Err(DirtyPackages(paths=dirty.value))

        untracked = self._untracked_manifests()
        if isinstance(untracked, Err):
            return untracked
        if untracked.value:
            return Err(UntrackedManifests(paths=untracked.value))

        self._console.info("Installing dependencies...")
        installed = self._registry.install(root)
        if isinstance(installed, Err):
            return Err(InstallFailed(returncode=installed.error.returncode))

        self._console.info("Building all packages...")
        built = self._registry.build(root)
        if isinstance(built, Err):
            return Err(BuildFailed(returncode=built.error.returncode))

        return Ok(None)

    def _dirty_paths(self) -> Result[tuple[str, ...], PublishError]:
        result = self._vcs.status(self.packages_pathspec)
        if isinstance(result, Err):
            return Err(GitQueryFailed(command=result.error.command, message=result.error.message))
        return Ok(tuple(e.path for e in result.value.tracked_changes))

    def _untracked_manifests(self) -> Result[tuple[str, ...], PublishError]:
        """Manifests the loop would rewrite but ``git checkout`` cannot revert."""
        listed = self._vcs.tracked_files(self.packages_pathspec)
        if isinstance(listed, Err):
            return Err(GitQueryFailed(command=listed.error.command, message=listed.error.message))

        plans = self.plan()
        if isinstance(plans, Err):
            return plans

        untracked: list[str] = []
        for plan in plans.value:
            if plan.manifest is None or plan.manifest.private:
                continue
            pathspec = self.relative_pathspec(plan.manifest.path)
            if pathspec not in listed.value:
                untracked.append(pathspec)
        return Ok(tuple(untracked))

    # -------------------------------------------------------------------------
    # Per-package loop
    # -------------------------------------------------------------------------

    def _publish_all(self, run_config: RunConfig) -> list[PublishOutcome]:
        outcomes: list[PublishOutcome] = []
        for pkg_dir in discover_package_dirs(self.packages_dir):
            outcome = self._publish_one(pkg_dir, run_config)
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes

    def _publish_one(self, pkg_dir: Path, run_config: RunConfig) -> PublishOutcome | None:
        manifest_path = pkg_dir / self._config.publish.manifest
        if not manifest_path.is_file():
            return None

        original = read_manifest(manifest_path)
        if isinstance(original, Err):
            self._console.error(f"Unreadable manifest in {pkg_dir.name}: {original.error.message}")
            return Failed(name=pkg_dir.name, version="?", reason=original.error.message)

        if original.value.private:
            self._console.warning(f"Skipping private package: {original.value.name}")
            return Skipped(name=original.value.name, reason="private")

        scope = self._config.scope
        rewritten = rewrite_manifest(
            manifest_path,
            source=scope.source,
            target=scope.target,
            version=run_config.version,
        )
        if isinstance(rewritten, Err):
            self._console.error(f"Could not rewrite {manifest_path}: {rewritten.error.message}")
            return Failed(
                name=original.value.name,
                version=original.value.version,
                reason=rewritten.error.message,
            )

        manifest = rewritten.value
        if manifest.scope != scope.target:
            self._console.warning(f"{manifest.name} is not in {scope.source}; publishing as-is")

        self._console.info(f"Publishing {manifest.label} ...")
        result = self._registry.publish(
            pkg_dir,
            access=self._config.publish.access,
            dry_run=run_config.dry_run,
        )
        match result:
            case Ok(_):
                self._console.success(manifest.label)
                return Published(name=manifest.name, version=manifest.version)
            case Err(error):
                self._console.error(f"Failed to publish {manifest.label}")
                return Failed(name=manifest.name, version=manifest.version, reason=str(error))
