"""start / local commands — open or switch the review session."""

from __future__ import annotations

import click
import yaml

from revtrack_cli.output import print_result, report_events


def _complete_branch(ctx, param, incomplete: str):
    from revtrack_core.config import load_config
    from revtrack_core.vcs.git import GitSource

    # Completion skips the group callback, so ctx.obj holds no config yet.
    config_path = ctx.find_root().params.get("config_path") or ".revtrack.yml"
    try:
        config = load_config(config_path)
    except (ValueError, yaml.YAMLError):
        return []
    return [b for b in GitSource(git=config["git_executable"]).branches() if b.startswith(incomplete)]


def _confirm(prompt: str) -> bool:
    return click.confirm(prompt, default=False)


def _finish(controller, result) -> None:
    print_result(result)
    if controller.ledger is not None:
        report_events(controller.ledger.drain_events())


@click.command("start")
@click.argument("branch", required=False, shell_complete=_complete_branch)
@click.option("--force", "-f", is_flag=True, help="Switch without asking, discarding review progress.")
@click.pass_context
def start_cmd(ctx, branch: str | None, force: bool):
    """Start a review of the changes against BRANCH.

    BRANCH defaults to `default_branch` from the config file (origin/HEAD).
    Both committed and uncommitted changes are included. Files you reviewed
    earlier against the same branch stay reviewed unless their diff changed.
    """
    controller = ctx.obj["controller"]
    # Load the review in progress so that switching away from it is confirmed.
    controller.resume()
    _finish(controller, controller.start(branch, force=force, confirm=_confirm))


@click.command("local")
@click.option("--force", "-f", is_flag=True, help="Switch without asking, discarding review progress.")
@click.pass_context
def local_cmd(ctx, force: bool):
    """Review uncommitted changes against HEAD."""
    controller = ctx.obj["controller"]
    controller.resume()
    _finish(controller, controller.start_local(force=force, confirm=_confirm))
