"""
CLI for git-meta.

Provides the ``store``, ``apply`` and ``status`` commands.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gitmeta.cli.ui import (
    render_apply_summary,
    render_error,
    render_status,
    render_store_summary,
    render_usage,
)
from gitmeta.core.config import GitMetaConfig, LoggingConfig
from gitmeta.core.errors import GitMetaError
from gitmeta.services import ServicesContainer, create_services

# Initialize Rich Consoles
console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="git-meta",
    help="Store and restore file metadata (times, mode, owner) for files tracked in git",
    add_completion=False,
)


@dataclass
class CLIOptions:
    """Options shared by every command."""

    config_path: Optional[Path] = None
    store_path: Optional[Path] = None
    verbose: bool = False


def setup_logging(logging_config: LoggingConfig, verbose: bool = False) -> None:
    """
    Configure the root logger from a ``logging`` config section.

    Log records go to stderr through Rich. ``verbose`` forces DEBUG.
    Calling it again replaces the handler installed by the previous call.
    """
    level_name = "DEBUG" if verbose else logging_config.level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter(logging_config.format))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def get_services(ctx: typer.Context) -> ServicesContainer:
    """Build services for the current checkout from the global options."""
    options: CLIOptions = ctx.obj or CLIOptions()
    # Defaults until the config file is loaded, so loading is logged too
    setup_logging(GitMetaConfig().apply_env_overrides().logging, options.verbose)

    # Paths given on the command line are relative to the cwd, not the repository root
    container = create_services(
        config_path=options.config_path.resolve() if options.config_path else None,
        store_path=options.store_path.resolve() if options.store_path else None,
    )
    setup_logging(container.config.logging, options.verbose)
    return container


def _report_error(error: Exception, ctx: typer.Context) -> None:
    options: CLIOptions = ctx.obj or CLIOptions()
    if options.verbose:
        err_console.print_exception()
    render_error(str(error), err_console)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (default: git-meta.config.yml at the repository root)"
    ),
    store_path: Optional[Path] = typer.Option(
        None, "--store", "-s", help="Snapshot file (default: git-meta.store.yml at the repository root)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Store and restore file metadata for files tracked in git."""
    ctx.obj = CLIOptions(config_path=config_path, store_path=store_path, verbose=verbose)

    if ctx.invoked_subcommand is None:
        render_usage(err_console)
        raise typer.Exit(0)


@app.command()
def store(ctx: typer.Context):
    """Capture metadata of tracked files into the snapshot file."""
    try:
        services = get_services(ctx)
        result = services.meta_store.store()
    except (GitMetaError, OSError) as e:
        _report_error(e, ctx)
        raise typer.Exit(1)

    render_store_summary(result, console)


@app.command()
def apply(ctx: typer.Context):
    """Restore metadata recorded in the snapshot file."""
    try:
        services = get_services(ctx)
        result = services.meta_store.apply()
    except (GitMetaError, OSError) as e:
        _report_error(e, ctx)
        raise typer.Exit(1)

    render_apply_summary(result, console)


@app.command()
def status(ctx: typer.Context):
    """Show what the snapshot file records."""
    try:
        services = get_services(ctx)
        snapshot_status = services.meta_store.status()
    except (GitMetaError, OSError) as e:
        _report_error(e, ctx)
        raise typer.Exit(1)

    render_status(snapshot_status, console)


if __name__ == "__main__":
    app()
