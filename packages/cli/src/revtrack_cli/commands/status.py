"""status / list commands — read-only views of the current review."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from revtrack_cli.output import console, require_ledger

# Colour per git status letter.
_STATUS_STYLE = {
    "M": "yellow",  # modified
    "A": "green",  # added
    "D": "red",  # deleted
    "R": "yellow",  # renamed
    "C": "green",  # copied
    "T": "yellow",  # type changed
    "U": "bold red",  # unmerged
    "?": "green",  # untracked
}


@click.command("status")
@click.pass_context
def status_cmd(ctx):
    """Show how many changed files are reviewed."""
    status = require_ledger(ctx).status()
    console.print(
        f"Reviewing against [cyan]{escape(status.reference.label)}[/cyan]: "
        f"[bold]{status.reviewed}/{status.total}[/bold] files reviewed"
    )


@click.command("list")
@click.option("--unreviewed", "only_unreviewed", is_flag=True, help="Only show files still to review.")
@click.pass_context
def list_cmd(ctx, only_unreviewed: bool):
    """List changed files, unreviewed first."""
    ledger = require_ledger(ctx)
    config = ctx.obj["config"]
    icons = config["icons"]
    status_icons = config["status_icons"]

    reviewed, total = ledger.counts()
    table = Table(title=f"Code Review [{reviewed}/{total}]", show_header=True, header_style="bold cyan")
    table.add_column("", width=1)
    table.add_column("St", width=2)
    table.add_column("File")

    for entry in ledger.list_sorted():
        if only_unreviewed and entry.reviewed:
            continue
        letter = entry.kind.value
        style = _STATUS_STYLE.get(letter, "white")
        check = f"[green]{escape(icons['reviewed'])}[/green]" if entry.reviewed else escape(icons["unreviewed"])
        table.add_row(
            check,
            f"[{style}]{escape(status_icons.get(letter, letter))}[/{style}]",
            escape(entry.path),
            style="dim" if entry.reviewed else None,
        )

    console.print(table)
