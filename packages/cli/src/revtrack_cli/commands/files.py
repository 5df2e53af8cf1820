"""mark / unmark / toggle / saved commands — change a file's review state."""

from __future__ import annotations

import click
from rich.markup import escape

from revtrack_cli.output import console, report_events, require_ledger


def _resolve(ctx, ledger, path: str) -> str:
    repo_path = ctx.obj["controller"].vcs.repo_path(path)
    if repo_path not in {e.path for e in ledger.list_sorted()}:
        raise click.BadParameter(f"{repo_path} is not part of the current review.", param_hint="PATH")
    return repo_path


def _print_counts(ledger) -> None:
    reviewed, total = ledger.counts()
    console.print(f"[dim]{reviewed}/{total} reviewed[/dim]")


@click.command("mark")
@click.argument("path")
@click.option("--next", "show_next", is_flag=True, help="Also print the next unreviewed file.")
@click.pass_context
def mark_cmd(ctx, path: str, show_next: bool):
    """Mark PATH as reviewed."""
    ledger = require_ledger(ctx)
    repo_path = _resolve(ctx, ledger, path)

    if show_next:
        next_path = ledger.mark_and_next(repo_path)
        console.print(f"[green]Reviewed[/green] {escape(repo_path)}")
        if next_path:
            console.print(f"Next unreviewed: [bold]{escape(next_path)}[/bold]")
        else:
            _, total = ledger.counts()
            console.print(f"[green]All {total} files reviewed![/green]")
    elif ledger.mark_reviewed(repo_path):
        console.print(f"[green]Reviewed[/green] {escape(repo_path)}")
    else:
        console.print(f"[dim]{escape(repo_path)} was already reviewed[/dim]")

    report_events(ledger.drain_events())
    _print_counts(ledger)


@click.command("unmark")
@click.argument("path")
@click.pass_context
def unmark_cmd(ctx, path: str):
    """Mark PATH as not reviewed."""
    ledger = require_ledger(ctx)
    repo_path = _resolve(ctx, ledger, path)

    if ledger.mark_unreviewed(repo_path):
        console.print(f"[yellow]Unreviewed[/yellow] {escape(repo_path)}")
    else:
        console.print(f"[dim]{escape(repo_path)} was not reviewed[/dim]")

    report_events(ledger.drain_events())
    _print_counts(ledger)


@click.command("toggle")
@click.argument("path")
@click.pass_context
def toggle_cmd(ctx, path: str):
    """Flip the reviewed state of PATH."""
    ledger = require_ledger(ctx)
    repo_path = _resolve(ctx, ledger, path)

    ledger.toggle(repo_path)
    reviewed = next(e.reviewed for e in ledger.list_sorted() if e.path == repo_path)
    label = "[green]Reviewed[/green]" if reviewed else "[yellow]Unreviewed[/yellow]"
    console.print(f"{label} {escape(repo_path)}")

    report_events(ledger.drain_events())
    _print_counts(ledger)


@click.command("saved")
@click.argument("path")
@click.pass_context
def saved_cmd(ctx, path: str):
    """Editor hook: PATH was just written.

    Clears the review mark of a file that still has changes, and drops a
    file whose changes against the reference are gone. Paths outside the
    review are reported and otherwise ignored.
    """
    ledger = require_ledger(ctx)
    repo_path = ctx.obj["controller"].vcs.repo_path(path)

    if ledger.file_saved(repo_path):
        report_events(ledger.drain_events())
        _print_counts(ledger)
    elif repo_path not in {e.path for e in ledger.list_sorted()}:
        # Resuming already re-read the change set, so a reverted file is gone.
        console.print(f"[dim]{escape(repo_path)} has no changes against {escape(ledger.reference.label)}[/dim]")
        next_path = ledger.first_unreviewed()
        if next_path:
            console.print(f"Next unreviewed: [bold]{escape(next_path)}[/bold]")
