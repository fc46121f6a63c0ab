"""Check dangerous coding constructs in changed C/C++ sources with cppcheck."""

from __future__ import annotations

import logging
import os

from rich.console import Console

from cibot_core.analyzers.cppcheck import analyzer_flags, compat_flag
from cibot_core.models import AnalysisConfig, Comment, FileVerdict, Report, RunVerdict, ScanResult
from cibot_core.plugins.base import BasePlugin

console = Console()
logger = logging.getLogger(__name__)

EXCLUDED_PREFIXES = ("obsolete/", "external/")
SOURCE_EXTENSIONS = (".c", ".cpp")

SUCCESS_MESSAGE = "Successfully source code(s) is written without dangerous coding constructs."
SKIPPED_MESSAGE = "Skipped. Your PR does not include c/c++ code(s)."
FAILURE_MESSAGE = "Oooops. cppcheck is failed. Please, read {result_file} for more details."
FAILURE_COMMENT = (
    ":octocat: **cibot**: {user_id}, **{path}** includes bug(s). "
    "Please fix incorrect coding constructs in your commit before entering a review process."
)


def is_excluded(path: str) -> bool:
    return path.startswith(EXCLUDED_PREFIXES)


def is_source_file(path: str) -> bool:
    return os.path.splitext(path)[1] in SOURCE_EXTENSIONS


def count_lines(diagnostics: str | None) -> int:
    # Same count as `wc -l`: newline characters, nothing else.
    return diagnostics.count("\n") if diagnostics else 0


class ChangeSetLintPlugin(BasePlugin):
    name = "pr-prebuild-cppcheck"
    required_commands = ("cppcheck", "file", "git")

    def __init__(self, analyzer, probe):
        self.analyzer = analyzer
        self.probe = probe

    def scan(self, changeset, config: AnalysisConfig) -> ScanResult:
        """Analyse eligible files in changeset order, stopping at the first finding.

        Eligible means: outside obsolete/ and external/, plain text, and a
        .c or .cpp file. When nothing is eligible the verdict stays SKIPPED.
        """
        version = self.analyzer.version()
        default_flag = compat_flag(version, config.version_threshold)
        console.print(f"[dim]cppcheck {version} ({default_flag})[/dim]")

        result = ScanResult()
        for changed in changeset:
            path = changed.path
            if is_excluded(path):
                logger.debug("Skipping excluded path: %s", path)
                continue
            if not self.probe.is_text(path):
                logger.debug("Skipping non-text file: %s", path)
                continue
            if not is_source_file(path):
                logger.debug("cppcheck does not examine %s.", path)
                continue

            flags = analyzer_flags(config.check_level, default_flag)
            console.print(f"  Analysing: {path}")
            verdict = FileVerdict(path=path, bug_count=count_lines(self.analyzer.run(path, flags)))
            result.files.append(verdict)

            if not verdict.passed:
                logger.info("cppcheck failed: %s has %d bug(s).", path, verdict.bug_count)
                result.verdict = RunVerdict.FAILURE
                result.failed_file = path
                break

            logger.debug("cppcheck passed: %s has 0 bug(s).", path)
            result.verdict = RunVerdict.SUCCESS

        return result

    def build_report(self, result: ScanResult, context) -> tuple[Report, Comment | None]:
        """Map a scan result to the status to post and, on failure, the comment."""
        status_context = self.status_context(context)
        result_file = getattr(self.analyzer, "RESULT_FILE", "the analyzer output")

        if result.verdict == RunVerdict.SUCCESS:
            state, message = "success", SUCCESS_MESSAGE
        elif result.verdict == RunVerdict.SKIPPED:
            state, message = "success", SKIPPED_MESSAGE
        elif result.verdict == RunVerdict.FAILURE:
            state, message = "failure", FAILURE_MESSAGE.format(result_file=result_file)
        else:
            raise ValueError(f"Unknown verdict: {result.verdict!r}")

        report = Report(
            state=state,
            context=status_context,
            message=message,
            target_url=context.details_url,
            callback_url=context.status_url,
        )
        if result.verdict != RunVerdict.FAILURE:
            return report, None

        comment = Comment(
            body=FAILURE_COMMENT.format(user_id=context.user_id, path=result.failed_file),
            thread_url=context.comment_url,
        )
        return report, comment

    def run_scan(self, changeset, context, reporter) -> ScanResult:
        """Scan the changeset, post the status (and comment) and return the full result."""
        config = AnalysisConfig(check_level=context.check_level)
        result = self.scan(changeset, config)

        report, comment = self.build_report(result, context)
        reporter.report(report.state, report.context, report.message, report.target_url, report.callback_url)
        if comment is not None:
            reporter.comment(comment.body, comment.thread_url)
        return result

    def run(self, changeset, context, reporter) -> RunVerdict:
        return self.run_scan(changeset, context, reporter).verdict
