import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "bot_name": "cibot",
    "ci_server": "",  # CISERVER, e.g. "http://ci.example.com/"
    "repo_upstream": "",  # PRJ_REPO_UPSTREAM, e.g. "nnstreamer"
    "webhook_api": None,  # GITHUB_WEBHOOK_API, e.g. "https://api.github.com/repos/org/repo"
    "cppcheck_check_level": 0,
    "report_dir": "../report",
    "status_url": "{webhook_api}/statuses/{commit}",
    "comment_url": "{webhook_api}/issues/{pr}/comments",
    "details_url": "{ci_server}{repo_upstream}/ci/{dir_commit}/",
}

# Environment variables exported by the CI server, mapped to config keys.
_ENV_KEYS = {
    "BOT_NAME": "bot_name",
    "CISERVER": "ci_server",
    "PRJ_REPO_UPSTREAM": "repo_upstream",
    "GITHUB_WEBHOOK_API": "webhook_api",
    "pr_cppcheck_check_level": "cppcheck_check_level",
}


@dataclass(frozen=True)
class PluginContext:
    """Everything a plugin needs to know about the run it is part of.

    Built once by the CLI from the merged config; plugins never read
    environment variables themselves.
    """

    bot_name: str
    token: str
    status_url: str
    comment_url: str
    details_url: str
    check_level: int = 0
    user_id: str = ""
    report_dir: str = "../report"


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        # Left as-is; the plugin warns about it and falls back to level 0.
        return value


def load_config(config_path: str = ".cibot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .cibot.yml in the current directory
      3. CI server environment variables (BOT_NAME, CISERVER, ...)
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for env_name, key in _ENV_KEYS.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["cppcheck_check_level"] = _as_int(config["cppcheck_check_level"])
    if config["webhook_api"]:
        config["webhook_api"] = str(config["webhook_api"]).rstrip("/")

    return config


def build_context(
    config: dict,
    token: str,
    commit: str,
    pr: Optional[int] = None,
    dir_commit: Optional[str] = None,
    user_id: str = "",
) -> PluginContext:
    """Render the URL templates for one commit and freeze the result."""
    values = {
        "webhook_api": config.get("webhook_api") or "",
        "ci_server": config.get("ci_server") or "",
        "repo_upstream": config.get("repo_upstream") or "",
        "commit": commit,
        "pr": pr if pr is not None else "",
        "dir_commit": dir_commit or commit,
    }
    return PluginContext(
        bot_name=config["bot_name"],
        token=token,
        status_url=config["status_url"].format(**values),
        comment_url=config["comment_url"].format(**values),
        details_url=config["details_url"].format(**values),
        check_level=config["cppcheck_check_level"],
        user_id=user_id,
        report_dir=config["report_dir"],
    )
