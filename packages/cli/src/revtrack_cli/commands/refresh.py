"""refresh command — re-read the change set from git."""

from __future__ import annotations

import click

from revtrack_cli.output import console, report_events, require_ledger


@click.command("refresh")
@click.pass_context
def refresh_cmd(ctx):
    """Refresh the file list and invalidate reviews whose diff changed.

    Files whose changes were reverted drop out of the review; files edited
    since they were reviewed are marked unreviewed and listed.
    """
    ledger = require_ledger(ctx)
    ledger.refresh()

    report_events(ledger.drain_events())
    reviewed, total = ledger.counts()
    console.print(f"Code Review refreshed: [bold]{reviewed}/{total}[/bold] reviewed")
