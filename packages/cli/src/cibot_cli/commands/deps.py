"""deps command — show whether the plugins' external commands are installed."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from cibot_core.plugins.cppcheck import ChangeSetLintPlugin

console = Console()

_PLUGINS = (ChangeSetLintPlugin,)


@click.command("deps")
def deps_cmd():
    """Check that every command the plugins shell out to is on PATH."""
    table = Table(title="Plugin dependencies", show_header=True, header_style="bold cyan")
    table.add_column("Plugin", style="bold")
    table.add_column("Command")
    table.add_column("Location")

    missing = 0
    for plugin_cls in _PLUGINS:
        for cmd, location in plugin_cls.command_locations().items():
            table.add_row(plugin_cls.name, cmd, location or "[red]missing[/red]")
        missing += len(plugin_cls.missing_commands())

    console.print(table)
    if missing:
        raise click.ClickException(f"{missing} required command(s) missing.")
