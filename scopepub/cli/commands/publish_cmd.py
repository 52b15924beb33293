"""Publish command - publish every workspace package under the target scope."""

from __future__ import annotations

from pathlib import Path

import typer

from scopepub.cli.commands._helpers import ROOT_HELP, exit_with_code
from scopepub.cli.context import build_context
from scopepub.core.config import RunConfig
from scopepub.core.errors import ErrorCode
from scopepub.core.result import Err, Ok
from scopepub.output.console import ConsoleProtocol, Style
from scopepub.output.errors import print_publish_error, publish_error_exit_code
from scopepub.services.manifest import is_valid_version, normalize_version
from scopepub.services.publish import PublishReport, PublishService

_INDENT = "      "


def resolve_version(args: list[str] | None) -> str | None:
    """Every positional argument is a version candidate; the last one wins."""
    if not args:
        return None
    return args[-1]


def print_summary(report: PublishReport, console: ConsoleProtocol) -> None:
    console.newline()
    console.header("Summary")
    if report.dry_run:
        console.warning("DRY RUN: nothing was actually published")

    if report.published:
        console.success(f"Published ({len(report.published)}):")
        for p in report.published:
            console.print(f"{_INDENT}{p.label}")

    if report.skipped:
        console.warning(f"Skipped ({len(report.skipped)}):")
        for s in report.skipped:
            console.print(f"{_INDENT}{s.label}")

    if report.failed:
        console.error(f"Failed ({len(report.failed)}):")
        for f in report.failed:
            console.print(f"{_INDENT}{f.label}")
            if f.reason:
                console.print(f"{_INDENT}  {f.reason}", Style.DIM)

    if report.total == 0:
        console.warning("No packages with a manifest were found")

    if report.ok:
        console.newline()
        console.success("Done!")


def publish(
    args: list[str] | None = typer.Argument(
        None,
        metavar="[VERSION]",
        help="Version override for every package (last one wins)",
        show_default=False,
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview what would be published"),
    root: Path | None = typer.Option(None, "--root", help=ROOT_HELP, show_default=False),
    from_scope: str | None = typer.Option(
        None, "--from-scope", help="Scope to rename (default from scopepub.toml)", show_default=False
    ),
    to_scope: str | None = typer.Option(
        None, "--to-scope", help="Scope to publish under", show_default=False
    ),
    allow_dirty: bool = typer.Option(
        False,
        "--allow-dirty",
        help="Run even if tracked files under the packages directory are modified",
    ),
) -> None:
    """Publish all packages under the target scope."""
    ctx = build_context(root=root, from_scope=from_scope, to_scope=to_scope)

    version = resolve_version(args)
    if version is not None:
        if not is_valid_version(version):
            ctx.console.error(f"invalid version: {version!r} (expected semver, e.g. 1.2.3)")
            exit_with_code(int(ErrorCode.FAILURE))
        version = normalize_version(version)

    scope = ctx.config.scope
    ctx.console.info(f"Publishing {scope.source}/* as {scope.target}/*")

    service = PublishService(workspace=ctx.workspace, config=ctx.config, console=ctx.console)
    result = service.run(RunConfig(version=version, dry_run=dry_run, allow_dirty=allow_dirty))

    match result:
        case Err(error):
            print_publish_error(error, ctx.console)
            exit_with_code(publish_error_exit_code(error))
        case Ok(report):
            print_summary(report, ctx.console)
            if report.restore_error is not None:
                print_publish_error(report.restore_error, ctx.console)
            if not report.ok:
                exit_with_code(int(report.exit_code))
