from __future__ import annotations

from pathlib import Path

from scopepub.core.config import Config
from scopepub.core.workspace import Workspace
from scopepub.output.console import ConsoleProtocol


class BaseService:
    """Shared state for services bound to one workspace."""

    def __init__(
        self,
        *,
        workspace: Workspace,
        config: Config,
        console: ConsoleProtocol,
    ) -> None:
        self._workspace = workspace
        self._config = config
        self._console = console

    @property
    def packages_dir(self) -> Path:
        return self._workspace.packages_path(self._config.publish.packages_dir)

    @property
    def packages_pathspec(self) -> str:
        return self.relative_pathspec(self.packages_dir)

    def relative_pathspec(self, path: Path) -> str:
        """``path`` as a git pathspec, relative to the root when possible."""
        try:
            return path.relative_to(self._workspace.root).as_posix() or "."
        except ValueError:
            return str(path)
