"""CLI entry point for cibot.

Commands:
  cppcheck — run the cppcheck plugin on a pull-request commit and report the status
  deps     — show whether the commands the plugins shell out to are installed
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from cibot_cli.commands.cppcheck import cppcheck_cmd
from cibot_cli.commands.deps import deps_cmd

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # PyGithub and urllib3 are chatty at DEBUG.
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("cibot"),
    prog_name="cibot",
)
@click.option(
    "--config",
    "config_path",
    default=".cibot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CIBOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every per-file decision.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Pull-request checks for the CI bot."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(cppcheck_cmd)
main.add_command(deps_cmd)
