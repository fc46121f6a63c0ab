"""Report plugin results back to GitHub.

The CI server hands plugins ready-made callback URLs rather than repository
objects, so GithubReporter recovers the repository, commit and issue from
those URLs and posts through PyGithub. Callbacks are fire-and-forget: a
rejected or undeliverable status or comment is logged and the plugin
carries on.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from github import Auth, Github, GithubException
from requests.exceptions import RequestException
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)

_STATUS_URL_RE = re.compile(r"^(?P<base>.+)/repos/(?P<repo>[^/]+/[^/]+)/statuses/(?P<sha>[0-9A-Za-z]+)/?$")
_COMMENT_URL_RE = re.compile(r"^(?P<base>.+)/repos/(?P<repo>[^/]+/[^/]+)/issues/(?P<number>\d+)/comments/?$")


def parse_status_url(url: str) -> tuple[str, str, str]:
    """Split ``<base>/repos/<owner>/<name>/statuses/<sha>`` into its parts."""
    match = _STATUS_URL_RE.match(url or "")
    if not match:
        raise ValueError(f"Not a commit status URL: {url!r}")
    return match.group("base"), match.group("repo"), match.group("sha")


def parse_comment_url(url: str) -> tuple[str, str, int]:
    """Split ``<base>/repos/<owner>/<name>/issues/<n>/comments`` into its parts."""
    match = _COMMENT_URL_RE.match(url or "")
    if not match:
        raise ValueError(f"Not an issue comments URL: {url!r}")
    return match.group("base"), match.group("repo"), int(match.group("number"))


class BaseReporter(ABC):
    @abstractmethod
    def report(self, state: str, context: str, message: str, target_url: str, callback_url: str) -> None:
        """Publish a commit status."""

    @abstractmethod
    def comment(self, body: str, thread_url: str) -> None:
        """Publish a comment on the pull request thread."""


class GithubReporter(BaseReporter):
    def __init__(self, token: str):
        self.token = token
        self._clients: dict[str, Github] = {}

    def _get_repo(self, base_url: str, repo_name: str):
        if base_url not in self._clients:
            self._clients[base_url] = Github(auth=Auth.Token(self.token), base_url=base_url)
        return self._clients[base_url].get_repo(repo_name)

    def report(self, state: str, context: str, message: str, target_url: str, callback_url: str) -> None:
        base_url, repo_name, sha = parse_status_url(callback_url)
        try:
            commit = self._get_repo(base_url, repo_name).get_commit(sha)
            commit.create_status(state=state, target_url=target_url, description=message, context=context)
        except (GithubException, RequestException) as e:
            logger.error("Could not post %s status for %s@%s: %s", state, repo_name, sha[:7], e)
            return
        logger.info("Posted %s status to %s@%s (%s).", state, repo_name, sha[:7], context)

    def comment(self, body: str, thread_url: str) -> None:
        base_url, repo_name, number = parse_comment_url(thread_url)
        try:
            self._get_repo(base_url, repo_name).get_issue(number).create_comment(body)
        except (GithubException, RequestException) as e:
            logger.error("Could not comment on %s#%d: %s", repo_name, number, e)
            return
        logger.info("Posted comment on %s#%d.", repo_name, number)


class ConsoleReporter(BaseReporter):
    """Prints what would be posted to GitHub — used for dry runs."""

    _state_color = {"success": "green", "failure": "red"}

    def report(self, state: str, context: str, message: str, target_url: str, callback_url: str) -> None:
        color = self._state_color.get(state, "white")
        console.print(f"\n[bold]Status (not posted)[/bold]  [{color}]{state}[/{color}]  [cyan]{context}[/cyan]")
        console.print(f"  {message}")
        console.print(f"  [dim]details: {target_url}[/dim]")
        console.print(f"  [dim]callback: {callback_url}[/dim]")

    def comment(self, body: str, thread_url: str) -> None:
        console.print("\n[bold]Comment (not posted)[/bold]")
        console.print(f"  {body}")
        console.print(f"  [dim]thread: {thread_url}[/dim]")
