"""Base analyzer implementing the Template Method pattern.

All analyzers share the same per-file procedure:
    run() → _build_command() → _execute()   ← only this differs per tool
          → _write_artifact() → _read_artifact()

Subclasses implement two things only:
  - version: report the installed tool version
  - _execute: run the tool once and return its diagnostic stream

The artifact round trip lives here so every tool leaves its diagnostics in
the report directory where the failure message tells the submitter to look.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class BaseAnalyzer(ABC):
    EXECUTABLE: str = ""
    RESULT_FILE: str = "result.txt"

    def __init__(self, report_dir: str = "../report", repo_dir: str = "."):
        self.repo_dir = repo_dir
        self.report_dir = Path(repo_dir) / report_dir

    @property
    def result_path(self) -> Path:
        return self.report_dir / self.RESULT_FILE

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def run(self, path: str, flags: list[str]) -> str:
        """Analyse one file and return its diagnostic text.

        The tool's exit status is deliberately not part of the result — only
        the diagnostics it printed. A stream that cannot be stored or read
        back counts as empty.
        """
        cmd = self._build_command(path, flags)
        logger.debug("Running: %s", " ".join(cmd))
        diagnostics = self._execute(cmd)
        try:
            self._write_artifact(diagnostics)
            return self._read_artifact()
        except OSError as e:
            logger.warning("Could not store diagnostics in %s: %s", self.result_path, e)
            return ""

    # ------------------------------------------------------------------ #
    # Abstract — implement in each tool                                    #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def version(self) -> str:
        """Return the installed tool version, e.g. ``"2.13.0"``."""

    @abstractmethod
    def _execute(self, cmd: list[str]) -> str:
        """Run the tool once and return the stream that carries its findings."""

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _build_command(self, path: str, flags: list[str]) -> list[str]:
        return [self.EXECUTABLE, *flags, path]

    def _capture(self, cmd: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(cmd, cwd=self.repo_dir, capture_output=True, text=True, errors="replace")

    def _write_artifact(self, diagnostics: str) -> None:
        self.report_dir.mkdir(parents=True, exist_ok=True)
        self.result_path.write_text(diagnostics, encoding="utf-8")

    def _read_artifact(self) -> str:
        return self.result_path.read_text(encoding="utf-8", errors="replace")
