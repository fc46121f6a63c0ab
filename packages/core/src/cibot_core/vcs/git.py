from __future__ import annotations

import logging
import subprocess

from cibot_core.models import ChangedFile, ChangeKind, Changeset

logger = logging.getLogger(__name__)

# Added, Modified, Renamed, Copied — deletions have nothing left to analyse.
_DIFF_FILTER = "AMRC"


class GitError(RuntimeError):
    """git could not describe the requested commit."""


def parse_name_status(output: str) -> list[ChangedFile]:
    """Parse ``git show --name-status`` output into changed files.

    Each line is ``STATUS<TAB>PATH`` or, for renames and copies,
    ``R100<TAB>OLD<TAB>NEW`` — the destination path is the one that exists
    in the commit, so that is what we keep.
    """
    files = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) < 2:
            logger.debug("Ignoring unparsable diff line: %r", line)
            continue
        try:
            kind = ChangeKind(parts[0][:1])
        except ValueError:
            logger.debug("Ignoring change of kind %r: %s", parts[0], parts[-1])
            continue
        files.append(ChangedFile(path=parts[-1], kind=kind))
    return files


class GitDiff:
    """Lists the files a commit added, modified, renamed or copied."""

    def __init__(self, repo_dir: str = "."):
        self.repo_dir = repo_dir

    def list_changed(self, commit: str) -> Changeset:
        cmd = [
            "git",
            "show",
            "--pretty=format:",
            "--name-status",
            f"--diff-filter={_DIFF_FILTER}",
            commit,
        ]
        result = subprocess.run(cmd, cwd=self.repo_dir, capture_output=True, text=True)
        if result.returncode != 0:
            raise GitError(f"git show {commit} failed: {result.stderr.strip()}")

        files = parse_name_status(result.stdout)
        logger.debug("Commit %s changes %d file(s).", commit, len(files))
        return Changeset(commit=commit, files=tuple(files))
