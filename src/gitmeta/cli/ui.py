"""
UI components module for the git-meta CLI.

Provides styled terminal output using the Rich library for usage text,
operation summaries and error rendering.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gitmeta.services.models import ApplyResult, SnapshotStatus, StoreResult

PROG_NAME = "git-meta"

USAGE_TEXT = f"""Usage:
  {PROG_NAME} store
  {PROG_NAME} apply
  {PROG_NAME} status"""

# Number of paths listed before truncating
MAX_LISTED_PATHS = 5


def render_usage(console: Console) -> None:
    """Print the short usage text."""
    console.print(Text(USAGE_TEXT))


def render_store_summary(result: StoreResult, console: Console) -> None:
    """
    Render the outcome of a store run as a green panel.

    Args:
        result: StoreResult returned by MetaStore.store
        console: Rich Console instance for output.
    """
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Snapshot:", escape(str(result.snapshot_path)))
    summary.add_row("Tracked Files:", str(result.tracked_files))
    summary.add_row("Refreshed:", str(len(result.refreshed_files)))
    summary.add_row("Kept:", str(result.kept_files))
    summary.add_row("Excluded:", str(result.excluded_files))
    if result.pruned_files:
        summary.add_row("Pruned:", f"[yellow]{len(result.pruned_files)}[/yellow]")
    summary.add_row("Entries:", str(result.total_entries))

    console.print(
        Panel(
            summary,
            title="[bold green]Metadata Stored[/bold green]",
            border_style="green",
            expand=False,
        )
    )
    _render_paths("Pruned entries", result.pruned_files, console)


def render_apply_summary(result: ApplyResult, console: Console) -> None:
    """
    Render the outcome of an apply run as a green panel.

    Args:
        result: ApplyResult returned by MetaStore.apply
        console: Rich Console instance for output.
    """
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Snapshot:", escape(str(result.snapshot_path)))
    summary.add_row("Files:", str(result.applied_files))
    summary.add_row("Fields:", str(result.applied_fields))
    if result.skipped_fields:
        summary.add_row("Skipped Fields:", f"[yellow]{result.skipped_fields}[/yellow]")

    console.print(
        Panel(
            summary,
            title="[bold green]Metadata Applied[/bold green]",
            border_style="green",
            expand=False,
        )
    )


def render_status(status: SnapshotStatus, console: Console) -> None:
    """
    Render the snapshot status as a table of stored fields.

    Args:
        status: SnapshotStatus returned by MetaStore.status
        console: Rich Console instance for output.
    """
    if not status.snapshot_exists:
        render_warning(f"No snapshot file at {status.snapshot_path}", console)

    table = Table(
        title="Snapshot",
        title_style="bold cyan",
        border_style="blue",
        show_header=True,
        header_style="bold white",
    )
    table.add_column("Field", style="green", no_wrap=True)
    table.add_column("Entries", justify="right")

    for field_name, count in status.field_counts.items():
        table.add_row(field_name, str(count))

    console.print(table)
    console.print(f"[bold]Entries:[/bold] {status.total_entries}")
    console.print(f"[bold]Tracked files without entry:[/bold] {status.unrecorded_files}")
    _render_paths("Entries no longer tracked", status.untracked_entries, console)


def _render_paths(title: str, paths: list[str], console: Console) -> None:
    if not paths:
        return
    console.print(f"\n[bold yellow]{title}:[/bold yellow]")
    for path in paths[:MAX_LISTED_PATHS]:
        console.print(f"  - {escape(path)}")
    if len(paths) > MAX_LISTED_PATHS:
        console.print(f"  ... and {len(paths) - MAX_LISTED_PATHS} more")


def render_error(message: str, console: Console) -> None:
    """
    Render an error message in red.

    Args:
        message: Error message to display.
        console: Rich Console instance for output.
    """
    error_text = Text()
    error_text.append("Error: ", style="bold red")
    error_text.append(message, style="red")
    console.print(error_text)


def render_warning(message: str, console: Console) -> None:
    """
    Render a warning message in yellow.

    Args:
        message: Warning message to display.
        console: Rich Console instance for output.
    """
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
