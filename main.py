#!/usr/bin/env python3
"""
TFC Backup
Export Terraform Cloud workspaces, variables and variable sets, and back them up with restic.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError

from tfc_backup.config import Settings
from tfc_backup.core import All, FailureReporter, Single, run_backup_sync, run_export_sync, run_init_sync
from tfc_backup.core.workspaces import ResolveMode

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(debug: bool = False, quiet: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if debug else logging.WARNING if quiet else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from external libraries
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    # Suppress Apprise debug logs to prevent token leakage
    logging.getLogger("apprise").setLevel(logging.WARNING)


def load_settings() -> Settings:
    """Load and validate settings."""
    try:
        return Settings()
    except ValidationError as e:
        click.echo("Configuration Error:", err=True)
        for error in e.errors():
            field = " -> ".join(str(x) for x in error["loc"])
            click.echo(f"  {field}: {error['msg']}", err=True)
        click.echo("\nPlease check your .env file or environment variables.", err=True)
        sys.exit(1)


def usage_error(ctx: click.Context, settings: Settings, message: str) -> NoReturn:
    """Report a malformed invocation and exit with status 2."""
    asyncio.run(FailureReporter.from_settings(settings).report(message))
    click.echo(ctx.get_usage(), err=True)
    ctx.exit(2)


def resolve_mode(ctx: click.Context, settings: Settings, workspace: str | None, all_workspaces: bool) -> ResolveMode:
    if workspace and all_workspaces:
        usage_error(ctx, settings, "Options --workspace and --all are mutually exclusive.")
    if not workspace and not all_workspaces:
        usage_error(ctx, settings, "One of --workspace or --all is required.")
    return Single(workspace) if workspace else All()


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--org", "-o", "org", help="Terraform Cloud organization (defaults to $ORGANIZATION)")
@click.option("--workspace", "-w", help="Export a single workspace by name")
@click.option("--all", "-a", "all_workspaces", is_flag=True, help="Export every workspace in the organization")
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress output")
@click.option(
    "--dest",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory receiving the exported files",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def dump(
    ctx: click.Context,
    org: str | None,
    workspace: str | None,
    all_workspaces: bool,
    quiet: bool,
    dest: Path,
    debug: bool,
) -> None:
    """Dump Terraform Cloud workspace, variable and variable set data as JSON files."""
    debug = debug or bool((ctx.obj or {}).get("debug"))
    setup_logging(debug, quiet)
    settings = load_settings()

    organization = org or settings.organization
    if not organization:
        usage_error(ctx, settings, "Option --org is required.")
    mode = resolve_mode(ctx, settings, workspace, all_workspaces)

    summary = run_export_sync(settings, organization, mode, dest)

    if not quiet and summary.fatal_error is None:
        click.echo(
            f"Exported {summary.workspaces} workspace(s) and {summary.variable_sets} variable set(s): "
            f"{len(summary.artifacts)} file(s) in {summary.duration:.1f}s",
        )
        if summary.errors:
            click.echo(f"{len(summary.errors)} export error(s); the export is incomplete.")
    ctx.exit(summary.exit_code)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """TFC Backup - export Terraform Cloud and back it up with restic."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(dump)


@cli.command()
@click.option("--org", "-o", "org", help="Terraform Cloud organization (defaults to $ORGANIZATION)")
@click.pass_context
def backup(ctx: click.Context, org: str | None) -> None:
    """Export every workspace into SOURCE_PATH and snapshot it with restic."""
    setup_logging(ctx.obj.get("debug", False))
    settings = load_settings()

    organization = org or settings.organization
    if not organization:
        usage_error(ctx, settings, "Option --org is required.")

    if run_backup_sync(settings, organization):
        click.echo("Backup completed successfully!")
    else:
        click.echo("Backup failed! Check logs for details.", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialize the restic repository (only do this once)."""
    setup_logging(ctx.obj.get("debug", False))
    settings = load_settings()

    if run_init_sync(settings):
        click.echo("Repository initialized.")
    else:
        click.echo("Repository initialization failed! Check logs for details.", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
