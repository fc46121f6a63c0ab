from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

# `file` describes C sources as e.g. "C source, ASCII text".
TEXT_MARKER = "ASCII text"


class FileTypeProbe:
    """Asks the `file` command whether a path holds plain text."""

    def __init__(self, repo_dir: str = "."):
        self.repo_dir = repo_dir

    def is_text(self, path: str) -> bool:
        result = subprocess.run(["file", "--brief", path], cwd=self.repo_dir, capture_output=True, text=True)
        description = result.stdout.strip()
        logger.debug("file %s: %s", path, description)
        return TEXT_MARKER in description
