from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from scopepub.core.config import Config, load_config_or_default
from scopepub.core.errors import ErrorCode
from scopepub.core.result import Err
from scopepub.core.workspace import Workspace, detect_workspace
from scopepub.output.console import ConsoleProtocol, RichConsole, Style


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: Config
    console: ConsoleProtocol


def build_context(
    *,
    root: Path | None = None,
    from_scope: str | None = None,
    to_scope: str | None = None,
) -> CLIContext:
    console = RichConsole()

    workspace_result = detect_workspace(root=root)
    if isinstance(workspace_result, Err):
        error = workspace_result.error
        console.error(error.message)
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    workspace = workspace_result.value

    config_result = load_config_or_default(workspace.config_path)
    if isinstance(config_result, Err):
        error = config_result.error
        console.error(error.message)
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    try:
        config = config_result.value.with_scopes(from_scope, to_scope)
    except ValueError as e:
        console.error(str(e))
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(workspace=workspace, config=config, console=console)
