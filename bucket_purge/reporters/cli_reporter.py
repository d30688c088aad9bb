"""
CLI Reporter Module
===================

Provides terminal output for purge results using the Rich library.

Classes
-------
CLIReporter
    Main reporter class for terminal output.

Example
-------
>>> from bucket_purge.reporters import CLIReporter
>>>
>>> reporter = CLIReporter()
>>> reporter.report(purge_result)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bucket_purge.cleaners.bucket_cleaner import DeleteResult, DeleteStatus, PurgeResult
from bucket_purge.core.exceptions import BatchObjectError

# Module logger
logger = logging.getLogger(__name__)

# Maximum error rows printed before truncating
MAX_ERROR_ROWS = 50


class CLIReporter:
    """
    Reporter for displaying purge results in the terminal.

    Parameters
    ----------
    console : Console, optional
        Rich Console instance. If not provided, creates a new one.
    verbose : bool, default=False
        Print one line per object as results arrive.
    """

    STATUS_ICONS = {
        DeleteStatus.SUCCESS: "[green]✓[/green]",
        DeleteStatus.FAILED: "[red]✗[/red]",
        DeleteStatus.SKIPPED: "[yellow]○[/yellow]",
        DeleteStatus.DRY_RUN: "[blue]~[/blue]",
    }

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose
        logger.debug("Initialized CLIReporter")

    def print_mode_banner(self, dry_run: bool, bucket: str) -> None:
        """Print the dry-run or live-mode banner."""
        if dry_run:
            self.console.print(
                Panel(
                    f"[yellow bold]DRY-RUN MODE[/yellow bold]\n"
                    f"Objects in {bucket} will be listed, not deleted.",
                    border_style="yellow",
                )
            )
        else:
            self.console.print(
                Panel(
                    f"[red bold]DELETING[/red bold]\n"
                    f"Objects in {bucket} will be permanently deleted.",
                    border_style="red",
                )
            )

    def progress(self, result: DeleteResult) -> None:
        """Per-object progress callback."""
        if not self.verbose:
            return
        icon = self.STATUS_ICONS.get(result.status, "?")
        name = result.key if result.key is not None else result.bucket
        if result.version_id:
            name = f"{name} ({result.version_id})"
        line = f"  {icon} {escape(name)}"
        if result.error_message:
            line += f" - {escape(result.error_message)}"
        self.console.print(line, markup=True, highlight=False)

    def report(self, result: PurgeResult) -> None:
        """Print the summary table and any errors of a purge."""
        table = Table(title=f"Purge summary: {result.bucket}", show_header=False)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        if result.dry_run:
            table.add_row("Would delete", f"[blue]{result.dry_run}[/blue]")
        else:
            table.add_row("Deleted", f"[green]{result.deleted}[/green]")
            table.add_row("Failed", f"[red]{result.failed}[/red]")
        table.add_row("Total", str(result.total))
        if result.end_time:
            elapsed = (result.end_time - result.start_time).total_seconds()
            table.add_row("Elapsed", f"{elapsed:.1f}s")

        self.console.print()
        self.console.print(table)

        if result.errors:
            self.print_errors(result.errors)
        elif not result.dry_run:
            self.console.print("\n[green]All objects deleted.[/green]")

    def print_errors(self, errors: List[BatchObjectError]) -> None:
        """Print a table of per-object failures."""
        table = Table(title=f"[red]{len(errors)} failures[/red]")
        table.add_column("Kind", style="yellow")
        table.add_column("Key", style="cyan")
        table.add_column("Error", style="white", max_width=60)

        for err in errors[:MAX_ERROR_ROWS]:
            table.add_row(
                err.kind.value,
                escape(err.key) if err.key is not None else "-",
                escape(str(err.orig_error)),
            )

        self.console.print()
        self.console.print(table)
        if len(errors) > MAX_ERROR_ROWS:
            self.console.print(
                f"[dim]... {len(errors) - MAX_ERROR_ROWS} more not shown[/dim]"
            )

    def print_bucket_result(self, result: DeleteResult) -> None:
        """Print the outcome of deleting the bucket itself."""
        if result.status == DeleteStatus.SUCCESS:
            self.console.print(f"\n[green bold]Bucket {result.bucket} deleted.[/green bold]")
        elif result.status == DeleteStatus.DRY_RUN:
            self.console.print(f"\n[blue]Would delete bucket {result.bucket}.[/blue]")
        else:
            self.console.print(
                f"\n[red bold]Bucket {result.bucket} not deleted:[/red bold] "
                f"{escape(result.error_message or '')}"
            )
