"""Data models shared by the cppcheck plugin, its collaborators and the CLI.

Everything here is created and consumed within one plugin invocation —
nothing is persisted between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class ChangeKind(str, Enum):
    """git diff-filter letters a changeset may contain. Deleted files never enter one."""

    ADDED = "A"
    MODIFIED = "M"
    RENAMED = "R"
    COPIED = "C"


@dataclass(frozen=True)
class ChangedFile:
    path: str
    kind: ChangeKind


@dataclass(frozen=True)
class Changeset:
    """Files touched by one reviewed commit, in the order git reported them."""

    commit: str
    files: tuple[ChangedFile, ...] = ()

    def __iter__(self):
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


class CheckLevel(IntEnum):
    BASELINE = 0  # compatibility flag only
    STRICT = 1  # baseline + warning and performance checks


@dataclass(frozen=True)
class AnalysisConfig:
    # Kept as a plain int: out-of-range values must reach the plugin so it can
    # warn and fall back to BASELINE instead of failing at load time.
    check_level: int = CheckLevel.BASELINE
    version_threshold: str = "2.0.5"


@dataclass(frozen=True)
class FileVerdict:
    path: str
    bug_count: int

    @property
    def passed(self) -> bool:
        return self.bug_count == 0


class RunVerdict(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


@dataclass
class ScanResult:
    """Outcome of scanning one changeset.

    ``files`` holds a verdict for every analysed file, in scan order. When the
    scan stopped on a finding, ``failed_file`` is that file's path.
    """

    verdict: RunVerdict = RunVerdict.SKIPPED
    files: list[FileVerdict] = field(default_factory=list)
    failed_file: str | None = None


@dataclass(frozen=True)
class Report:
    state: str  # "success" | "failure"
    context: str
    message: str
    target_url: str
    callback_url: str


@dataclass(frozen=True)
class Comment:
    body: str
    thread_url: str
