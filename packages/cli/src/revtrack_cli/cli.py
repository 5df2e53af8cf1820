"""CLI entry point for revtrack.

Commands:
  start    — start or switch the review against a branch
  local    — review uncommitted changes against HEAD
  status   — reviewed / total counts for the current review
  list     — changed files, unreviewed first
  mark / unmark / toggle — change the reviewed state of a file
  next / prev — navigate to the next or previous unreviewed file
  refresh  — re-read the change set and invalidate stale reviews
  saved    — editor hook: a file was written
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
import yaml

from revtrack_cli.commands.files import mark_cmd, saved_cmd, toggle_cmd, unmark_cmd
from revtrack_cli.commands.navigate import next_cmd, prev_cmd
from revtrack_cli.commands.refresh import refresh_cmd
from revtrack_cli.commands.start import local_cmd, start_cmd
from revtrack_cli.commands.status import list_cmd, status_cmd


def _build_store(config: dict):
    """Instantiate the configured store, or None for the default.

    Store selection:
      store: json (default) → JsonFileStore in the git directory, opened by
                               the controller once the git dir is known
      store: noop           → NoOpStore (in-memory only)
    """
    if config.get("store") == "noop":
        from revtrack_store.noop import NoOpStore

        return NoOpStore()
    return None


def _build_controller(config: dict):
    from revtrack_core.session import ReviewController
    from revtrack_core.vcs.git import GitSource

    return ReviewController(
        GitSource(git=config["git_executable"]),
        store=_build_store(config),
        default_branch=config["default_branch"],
        state_filename=config["state_file"],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("revtrack"),
    prog_name="revtrack",
)
@click.option(
    "--config",
    "config_path",
    default=".revtrack.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVTRACK_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Track which files of a git changeset you have reviewed."""
    from revtrack_core.config import load_config

    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.UsageError(f"Invalid configuration in {config_path}: {e}")

    controller = _build_controller(config)
    ctx.obj["config"] = config
    ctx.obj["controller"] = controller
    ctx.call_on_close(controller.close)


main.add_command(start_cmd)
main.add_command(local_cmd)
main.add_command(status_cmd)
main.add_command(list_cmd)
main.add_command(mark_cmd)
main.add_command(unmark_cmd)
main.add_command(toggle_cmd)
main.add_command(saved_cmd)
main.add_command(next_cmd)
main.add_command(prev_cmd)
main.add_command(refresh_cmd)
