"""Abstract plugin interface.

Every check the bot runs against a pull request is a plugin: it receives the
changeset, the run context and a reporter, and reports exactly one status.
The orchestrator depends on BasePlugin — not on a concrete check — and calls
check_dependencies() before run() so a misconfigured CI server fails loudly
instead of reporting a misleading verdict.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cibot_core.config import PluginContext
    from cibot_core.gh.reporter import BaseReporter
    from cibot_core.models import Changeset, RunVerdict


class DependencyMissingError(RuntimeError):
    """A command the plugin shells out to is not installed."""

    def __init__(self, plugin: str, missing: list[str]):
        self.plugin = plugin
        self.missing = missing
        super().__init__(f"{plugin} requires missing command(s): {', '.join(missing)}")


class BasePlugin(ABC):
    name: str = ""
    required_commands: tuple[str, ...] = ()

    @classmethod
    def command_locations(cls) -> dict[str, str | None]:
        """Map each required command to its path on PATH, or None when absent."""
        return {cmd: shutil.which(cmd) for cmd in cls.required_commands}

    @classmethod
    def missing_commands(cls) -> list[str]:
        return [cmd for cmd, location in cls.command_locations().items() if location is None]

    def check_dependencies(self) -> None:
        missing = self.missing_commands()
        if missing:
            raise DependencyMissingError(self.name, missing)

    def status_context(self, context: PluginContext) -> str:
        return f"{context.bot_name}/{self.name}"

    @abstractmethod
    def run(self, changeset: Changeset, context: PluginContext, reporter: BaseReporter) -> RunVerdict:
        """Check the changeset and report the verdict through the reporter."""
