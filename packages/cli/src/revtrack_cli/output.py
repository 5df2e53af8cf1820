"""Console output shared by the revtrack commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape

from revtrack_core.events import FileDropped, FilesInvalidated, PersistenceDegraded

if TYPE_CHECKING:
    from revtrack_core.events import LedgerEvent
    from revtrack_core.ledger import ReviewLedger
    from revtrack_core.session import ReviewController, SessionResult

console = Console()

_LEVEL_STYLE = {"info": "green", "warning": "yellow", "error": "red"}


def print_result(result: SessionResult) -> None:
    """Print a SessionResult; error-level results abort the command."""
    if result.level == "error":
        raise click.ClickException(result.message)
    style = _LEVEL_STYLE.get(result.level, "white")
    console.print(f"[{style}]{escape(result.message)}[/{style}]")


def require_ledger(ctx: click.Context) -> ReviewLedger:
    """Resume the persisted review for this repository or abort."""
    controller: ReviewController = ctx.obj["controller"]
    result = controller.resume()
    if not result.ok:
        if result.level == "error":
            raise click.ClickException(result.message)
        raise click.UsageError(f"{result.message}. Start one with `revtrack start` or `revtrack local`.")
    return controller.ledger


def report_events(events: list[LedgerEvent]) -> None:
    for event in events:
        if isinstance(event, FilesInvalidated):
            console.print(
                f"[yellow]Code Review: {len(event.paths)} file(s) changed since review, marked unreviewed[/yellow]"
            )
            for path in event.paths:
                console.print(f"  {escape(path)}")
        elif isinstance(event, FileDropped):
            console.print(f"[dim]{escape(event.path)} no longer has changes, removed from review[/dim]")
            if event.next_unreviewed:
                console.print(f"Next unreviewed: [bold]{escape(event.next_unreviewed)}[/bold]")
        elif isinstance(event, PersistenceDegraded):
            console.print(f"[yellow]Warning: {escape(event.reason)}[/yellow]")
