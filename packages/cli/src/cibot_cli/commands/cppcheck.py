"""cppcheck command — run the pr-prebuild-cppcheck plugin on one commit."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from cibot_core.analyzers.cppcheck import CppcheckAnalyzer
from cibot_core.gh.reporter import ConsoleReporter, GithubReporter, parse_comment_url, parse_status_url
from cibot_core.models import RunVerdict, ScanResult
from cibot_core.plugins.base import DependencyMissingError
from cibot_core.plugins.cppcheck import ChangeSetLintPlugin
from cibot_core.utils.filetype import FileTypeProbe
from cibot_core.vcs.git import GitDiff, GitError

console = Console()

_verdict_style = {
    RunVerdict.SUCCESS: "green",
    RunVerdict.SKIPPED: "yellow",
    RunVerdict.FAILURE: "red",
}


def _print_result(result: ScanResult) -> None:
    if result.files:
        table = Table(title="cppcheck", show_header=True, header_style="bold cyan")
        table.add_column("File")
        table.add_column("Bugs", justify="right", width=6)
        table.add_column("Result", width=8)
        for f in result.files:
            status = "[green]passed[/green]" if f.passed else "[red]failed[/red]"
            table.add_row(f.path, str(f.bug_count), status)
        console.print(table)

    style = _verdict_style[result.verdict]
    console.print(f"[bold {style}]{result.verdict.value.upper()}[/bold {style}]")


@click.command("cppcheck")
@click.option("--commit", required=True, help="SHA of the pull-request commit to check.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number (for the failure comment).")
@click.option("--dir-commit", default=None, help="CI artifact directory of the commit. Defaults to the SHA.")
@click.option("--user", "user_id", default="", help="GitHub login of the PR submitter.")
@click.option(
    "--repo-dir",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Checked-out repository to analyse.",
)
@click.option("--check-level", type=int, default=None, help="0: baseline, 1: + warning,performance. Overrides config.")
@click.option("--dry-run", is_flag=True, help="Print the status and comment instead of posting them to GitHub.")
@click.pass_context
def cppcheck_cmd(
    ctx,
    commit: str,
    pr_number: int,
    dir_commit: str | None,
    user_id: str,
    repo_dir: str,
    check_level: int | None,
    dry_run: bool,
):
    """Check changed C/C++ sources for dangerous coding constructs.

    Runs cppcheck on every added, modified, renamed or copied *.c / *.cpp
    file of the commit, stops at the first file with findings and posts a
    commit status (plus a PR comment on failure).

    \b
    Environment variables:
      TOKEN / GITHUB_TOKEN   GitHub token of the bot account (or use gh CLI)
      GITHUB_WEBHOOK_API     https://api.github.com/repos/<owner>/<name>
      BOT_NAME, CISERVER, PRJ_REPO_UPSTREAM, pr_cppcheck_check_level
    """
    from cibot_core.config import build_context, load_config
    from cibot_cli.auth import resolve_github_token

    config_path = ctx.obj.get("config_path", ".cibot.yml") if ctx.obj else ".cibot.yml"
    config = load_config(config_path, cli_overrides={"cppcheck_check_level": check_level})

    token = resolve_github_token()
    if not dry_run:
        if not token:
            raise click.UsageError("No GitHub token found. Set TOKEN or GITHUB_TOKEN, or run `gh auth login` first.")
        if not config.get("webhook_api"):
            raise click.UsageError("GITHUB_WEBHOOK_API is not set (e.g. https://api.github.com/repos/owner/name).")

    context = build_context(
        config,
        token=token or "",
        commit=commit,
        pr=pr_number,
        dir_commit=dir_commit,
        user_id=user_id,
    )
    if not dry_run:
        # Both callback URLs must parse before anything is analysed.
        try:
            parse_status_url(context.status_url)
            parse_comment_url(context.comment_url)
        except ValueError as e:
            raise click.UsageError(f"{e}. Check GITHUB_WEBHOOK_API and the URL templates.")

    plugin = ChangeSetLintPlugin(
        analyzer=CppcheckAnalyzer(report_dir=config["report_dir"], repo_dir=repo_dir),
        probe=FileTypeProbe(repo_dir=repo_dir),
    )
    try:
        plugin.check_dependencies()
    except DependencyMissingError as e:
        raise click.ClickException(str(e))

    try:
        changeset = GitDiff(repo_dir=repo_dir).list_changed(commit)
    except GitError as e:
        raise click.ClickException(str(e))

    reporter = ConsoleReporter() if dry_run else GithubReporter(token)

    console.print(f"[bold]{plugin.status_context(context)}[/bold]: {len(changeset)} changed file(s) in {commit[:7]}")
    result = plugin.run_scan(changeset, context, reporter)
    _print_result(result)

    if result.verdict == RunVerdict.FAILURE:
        ctx.exit(1)
