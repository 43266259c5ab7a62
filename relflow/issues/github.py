"""GitHub issues REST client."""

from __future__ import annotations

import os
from collections.abc import Mapping
from urllib.parse import quote, urlencode

from relflow.core.config import GitHubConfig
from relflow.core.result import Err, Ok, Result
from relflow.core.state import GitHubIssue
from relflow.core.structured import as_obj_list, as_str_dict, get_int, get_str

from .http import HttpClient
from .tracker import TrackerError, tracker_error_from_http

__all__ = ["GitHubClient", "github_from_env"]

API_URL = "https://api.github.com"
TOKEN_ENV = "GITHUB_TOKEN"


class GitHubClient:
    def __init__(self, config: GitHubConfig, *, token: str, http: HttpClient) -> None:
        self.config = config
        self._http = http
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }

    def issues_url(self, labels: tuple[str, ...] | None) -> str:
        params = {"state": "open", "per_page": "100"}
        if labels:
            params["labels"] = ",".join(labels)
        owner = quote(self.config.owner)
        repo = quote(self.config.repo)
        return f"{API_URL}/repos/{owner}/{repo}/issues?{urlencode(params)}"

    def search(self, labels: tuple[str, ...] | None) -> Result[list[GitHubIssue], TrackerError]:
        url = self.issues_url(labels)
        result = self._http.request_json("GET", url, headers=self._headers)
        if isinstance(result, Err):
            return Err(tracker_error_from_http("GitHub", result.error))

        issues: list[GitHubIssue] = []
        for item in as_obj_list(result.value) or []:
            raw = as_str_dict(item)
            # The issues endpoint also returns pull requests.
            if raw is None or "pull_request" in raw:
                continue
            number = get_int(raw, "number")
            if number is None:
                continue
            issues.append(GitHubIssue(number=number, title=get_str(raw, "title") or ""))
        return Ok(issues)


def github_from_env(
    config: GitHubConfig | None,
    *,
    http: HttpClient,
    env: Mapping[str, str] | None = None,
) -> Result[GitHubClient, TrackerError]:
    if config is None:
        return Err(
            TrackerError(
                kind="not_configured",
                message="GitHub is not configured",
                hint="add a [github] table with owner and repo to relflow.toml",
            )
        )

    environ = os.environ if env is None else env
    token = environ.get(TOKEN_ENV, "").strip()
    if not token:
        return Err(
            TrackerError(
                kind="not_configured",
                message="GitHub token is missing",
                hint=f"set {TOKEN_ENV}",
            )
        )
    return Ok(GitHubClient(config, token=token, http=http))
