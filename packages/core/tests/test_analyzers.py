"""Tests for static analyzer wrappers.

Shared behaviour (the diagnostics artifact round trip) lives in BaseAnalyzer
and is tested once via a lightweight stub. CppcheckAnalyzer tests cover only
what is cppcheck-specific: version parsing, flag selection and which stream
carries the findings.
"""

import logging
import subprocess

import pytest

from cibot_core.analyzers.base import BaseAnalyzer
from cibot_core.analyzers.cppcheck import (
    LEGACY_FLAG,
    MODERN_FLAG,
    CppcheckAnalyzer,
    analyzer_flags,
    compat_flag,
    version_key,
)


class _StubAnalyzer(BaseAnalyzer):
    EXECUTABLE = "stub"
    RESULT_FILE = "stub_result.txt"

    def __init__(self, diagnostics, **kwargs):
        super().__init__(**kwargs)
        self.diagnostics = diagnostics
        self.commands = []

    def version(self):
        return "1.0"

    def _execute(self, cmd):
        self.commands.append(cmd)
        return self.diagnostics


# ---------------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------------


class TestVersionKey:
    def test_pads_components(self):
        assert version_key("2.0.5") == 2000005000
        assert version_key("1.90") == 1090000000
        assert version_key("2.13.0.1") == 2013000001

    def test_missing_or_garbage_components_are_zero(self):
        assert version_key("") == 0
        assert version_key("2.x") == 2000000000
        assert version_key("2.14dev") == 2014000000

    def test_extra_components_ignored(self):
        assert version_key("1.2.3.4.5") == version_key("1.2.3.4")


class TestCompatFlag:
    @pytest.mark.parametrize("version", ["2.0.5", "2.0.5.0", "2.0.5.1", "2.1", "2.13.0", "10.0"])
    def test_modern_flag_from_threshold(self, version):
        assert compat_flag(version) == MODERN_FLAG

    @pytest.mark.parametrize("version", ["2.0.4", "2.0.4.999", "2.0", "1.90", "1.86.0", "0"])
    def test_legacy_flag_below_threshold(self, version):
        assert compat_flag(version) == LEGACY_FLAG

    def test_custom_threshold(self):
        assert compat_flag("2.0.5", threshold="2.1") == LEGACY_FLAG


class TestAnalyzerFlags:
    def test_level_zero_is_compat_flag_only(self):
        assert analyzer_flags(0, MODERN_FLAG) == [MODERN_FLAG]

    def test_level_one_enables_warning_and_performance(self):
        assert analyzer_flags(1, LEGACY_FLAG) == ["--enable=warning,performance", LEGACY_FLAG]

    @pytest.mark.parametrize("level", [-1, 2, 7, "strict", None])
    def test_invalid_level_falls_back_to_level_zero(self, level, caplog):
        with caplog.at_level(logging.WARNING):
            assert analyzer_flags(level, MODERN_FLAG) == analyzer_flags(0, MODERN_FLAG)
        assert "invalid check level" in caplog.text


# ---------------------------------------------------------------------------
# Shared behaviour — tested once through the stub
# ---------------------------------------------------------------------------


class TestBaseAnalyzerRun:
    def test_builds_command_from_flags_and_path(self, tmp_path):
        analyzer = _StubAnalyzer("", report_dir="report", repo_dir=str(tmp_path))
        analyzer.run("src/a.c", ["--one", "--two"])
        assert analyzer.commands == [["stub", "--one", "--two", "src/a.c"]]

    def test_writes_artifact_and_returns_its_content(self, tmp_path):
        diagnostics = "[src/a.c:3]: (error) Null pointer dereference\n"
        analyzer = _StubAnalyzer(diagnostics, report_dir="report", repo_dir=str(tmp_path))

        assert analyzer.run("src/a.c", []) == diagnostics
        assert (tmp_path / "report" / "stub_result.txt").read_text() == diagnostics

    def test_artifact_overwritten_per_file(self, tmp_path):
        analyzer = _StubAnalyzer("first\n", report_dir="report", repo_dir=str(tmp_path))
        analyzer.run("a.c", [])
        analyzer.diagnostics = ""
        assert analyzer.run("b.c", []) == ""
        assert analyzer.result_path.read_text() == ""

    def test_unwritable_artifact_counts_as_empty(self, tmp_path, mocker):
        analyzer = _StubAnalyzer("finding\n", report_dir="report", repo_dir=str(tmp_path))
        mocker.patch.object(analyzer, "_write_artifact", side_effect=PermissionError("read-only"))
        assert analyzer.run("a.c", []) == ""


# ---------------------------------------------------------------------------
# CppcheckAnalyzer
# ---------------------------------------------------------------------------


def _completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


class TestCppcheckAnalyzer:
    def test_version_parsed_from_second_token(self, mocker):
        mocker.patch("cibot_core.analyzers.base.subprocess.run", return_value=_completed(stdout="Cppcheck 2.13.0\n"))
        assert CppcheckAnalyzer().version() == "2.13.0"

    def test_unparsable_version_is_zero(self, mocker):
        mocker.patch("cibot_core.analyzers.base.subprocess.run", return_value=_completed(stdout=""))
        assert CppcheckAnalyzer().version() == "0"

    def test_run_returns_stderr_and_ignores_exit_code(self, mocker, tmp_path):
        run = mocker.patch(
            "cibot_core.analyzers.base.subprocess.run",
            return_value=_completed(
                stdout="Checking src/a.c ...\n",
                stderr="[src/a.c:1]: (error) a\n[src/a.c:2]: (error) b\n",
                returncode=1,
            ),
        )
        analyzer = CppcheckAnalyzer(report_dir="report", repo_dir=str(tmp_path))

        diagnostics = analyzer.run("src/a.c", [MODERN_FLAG])

        assert diagnostics.splitlines() == ["[src/a.c:1]: (error) a", "[src/a.c:2]: (error) b"]
        assert run.call_args.args[0] == ["cppcheck", MODERN_FLAG, "src/a.c"]
        assert run.call_args.kwargs["cwd"] == str(tmp_path)
        assert (tmp_path / "report" / "cppcheck_result.txt").exists()

    def test_clean_file_has_empty_diagnostics(self, mocker, tmp_path):
        mocker.patch(
            "cibot_core.analyzers.base.subprocess.run",
            return_value=_completed(stdout="Checking src/a.c ...\n", stderr=""),
        )
        assert CppcheckAnalyzer(report_dir="report", repo_dir=str(tmp_path)).run("src/a.c", []) == ""
