from __future__ import annotations

import logging
import re

from cibot_core.analyzers.base import BaseAnalyzer
from cibot_core.models import CheckLevel

logger = logging.getLogger(__name__)

# --std=posix was removed in cppcheck 2.0.5 in favour of --library=posix.
MODERN_FLAG = "--library=posix"
LEGACY_FLAG = "--std=posix"
DEFAULT_THRESHOLD = "2.0.5"

_LEADING_DIGITS_RE = re.compile(r"^\d+")


def version_key(version: str) -> int:
    """Pack ``major.minor.patch.build`` into one comparable integer.

    Each component after the first is padded to three digits, so
    ``"2.0.5"`` becomes ``2000005000``. Missing components count as 0, and
    so does a component without leading digits.
    """
    parts = (version or "").strip().split(".")
    numbers = []
    for part in (parts + ["0", "0", "0", "0"])[:4]:
        match = _LEADING_DIGITS_RE.match(part)
        numbers.append(int(match.group()) if match else 0)
    return int("%d%03d%03d%03d" % tuple(numbers))


def compat_flag(version: str, threshold: str = DEFAULT_THRESHOLD) -> str:
    if version_key(version) >= version_key(threshold):
        return MODERN_FLAG
    return LEGACY_FLAG


def analyzer_flags(check_level, default_flag: str) -> list[str]:
    """Translate a check level into cppcheck arguments.

    Unknown levels are a configuration mistake, not a reason to fail the
    check: they are reported and treated as level 0.
    """
    if check_level == CheckLevel.BASELINE:
        logger.debug("cppcheck: check level is %s.", check_level)
        return [default_flag]
    if check_level == CheckLevel.STRICT:
        logger.debug("cppcheck: check level is %s.", check_level)
        return ["--enable=warning,performance", default_flag]
    logger.warning(
        "cppcheck: invalid check level %r; declare 0 or 1. Running with level 0.",
        check_level,
    )
    return [default_flag]


class CppcheckAnalyzer(BaseAnalyzer):
    EXECUTABLE = "cppcheck"
    RESULT_FILE = "cppcheck_result.txt"

    def version(self) -> str:
        # "Cppcheck 2.13.0" → "2.13.0"
        result = self._capture([self.EXECUTABLE, "--version"])
        tokens = result.stdout.split()
        if len(tokens) < 2:
            logger.warning("Could not parse cppcheck version from %r", result.stdout.strip())
            return "0"
        return tokens[1]

    def _execute(self, cmd: list[str]) -> str:
        # Findings go to stderr; stdout only carries "Checking ..." progress.
        return self._capture(cmd).stderr
