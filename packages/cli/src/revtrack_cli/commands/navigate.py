"""next / prev commands — find the next unreviewed file."""

from __future__ import annotations

import click

from revtrack_cli.output import console, require_ledger


def _print_target(target: str | None) -> None:
    if target is None:
        console.print("[green]No unreviewed files[/green]")
        return
    # Plain output so editors can consume the path directly.
    click.echo(target)


@click.command("next")
@click.argument("path", required=False)
@click.pass_context
def next_cmd(ctx, path: str | None):
    """Print the next unreviewed file after PATH, wrapping around.

    Without PATH, prints the first unreviewed file.
    """
    ledger = require_ledger(ctx)
    from_path = ctx.obj["controller"].vcs.repo_path(path) if path else None
    _print_target(ledger.next_unreviewed(from_path))


@click.command("prev")
@click.argument("path", required=False)
@click.pass_context
def prev_cmd(ctx, path: str | None):
    """Print the previous unreviewed file before PATH, wrapping around."""
    ledger = require_ledger(ctx)
    from_path = ctx.obj["controller"].vcs.repo_path(path) if path else None
    _print_target(ledger.previous_unreviewed(from_path))
