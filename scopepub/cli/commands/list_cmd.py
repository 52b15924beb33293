"""List command - show how each package would be published."""

from __future__ import annotations

from pathlib import Path

import typer

from scopepub.cli.commands._helpers import ROOT_HELP, exit_with_code
from scopepub.cli.context import build_context
from scopepub.core.errors import ErrorCode
from scopepub.core.result import Err
from scopepub.output.console import Style
from scopepub.output.errors import print_publish_error, publish_error_exit_code
from scopepub.services.publish import PublishService


def list_packages(
    root: Path | None = typer.Option(None, "--root", help=ROOT_HELP, show_default=False),
    from_scope: str | None = typer.Option(None, "--from-scope", show_default=False),
    to_scope: str | None = typer.Option(None, "--to-scope", show_default=False),
) -> None:
    """List workspace packages and the names they would be published under."""
    ctx = build_context(root=root, from_scope=from_scope, to_scope=to_scope)
    service = PublishService(workspace=ctx.workspace, config=ctx.config, console=ctx.console)

    result = service.plan()
    if isinstance(result, Err):
        print_publish_error(result.error, ctx.console)
        exit_with_code(publish_error_exit_code(result.error))

    plans = result.value
    if not plans:
        ctx.console.warning(f"No packages found in {service.packages_dir}")
        return

    broken = 0
    for plan in plans:
        if plan.manifest is None:
            broken += 1
            message = plan.error.message if plan.error else "unreadable manifest"
            ctx.console.error(f"{plan.directory.name}: {message}")
            continue
        if plan.manifest.private:
            ctx.console.print(f"{plan.manifest.label}  (private, skipped)", Style.DIM)
            continue
        ctx.console.print(f"{plan.manifest.label}  ->  {plan.publish_name}@{plan.manifest.version}")

    if broken:
        exit_with_code(int(ErrorCode.FAILURE))
