"""Jira Cloud REST client.

Only the two calls workflows need: list issues in a status, and move an
issue to another status through one of its available transitions.
"""

from __future__ import annotations

import base64
import os
from collections.abc import Mapping
from urllib.parse import quote, urlencode

from relflow.core.config import JiraConfig
from relflow.core.result import Err, Ok, Result
from relflow.core.state import JiraIssue
from relflow.core.structured import as_obj_list, as_str_dict, get_list, get_str, get_table

from .http import HttpClient
from .tracker import TrackerError, tracker_error_from_http

__all__ = ["JiraClient", "jira_from_env"]

_MAX_RESULTS = 50

EMAIL_ENV = "JIRA_EMAIL"
TOKEN_ENV = "JIRA_TOKEN"


class JiraClient:
    def __init__(self, config: JiraConfig, *, email: str, token: str, http: HttpClient) -> None:
        self.config = config
        self._http = http
        creds = base64.b64encode(f"{email}:{token}".encode()).decode("ascii")
        self._headers = {"Authorization": f"Basic {creds}"}

    @property
    def _api(self) -> str:
        return f"{self.config.url.rstrip('/')}/rest/api/2"

    def search(self, status: str) -> Result[list[JiraIssue], TrackerError]:
        jql = f"status = {_jql_string(status)}"
        if self.config.project:
            jql = f"project = {_jql_string(self.config.project)} AND {jql}"
        query = urlencode({"jql": jql, "fields": "summary", "maxResults": _MAX_RESULTS})
        url = f"{self._api}/search?{query}"

        result = self._http.request_json("GET", url, headers=self._headers)
        if isinstance(result, Err):
            return Err(tracker_error_from_http("Jira", result.error))

        data = as_str_dict(result.value) or {}
        issues: list[JiraIssue] = []
        for item in get_list(data, "issues") or []:
            raw = as_str_dict(item)
            if raw is None:
                continue
            key = get_str(raw, "key")
            fields = get_table(raw, "fields") or {}
            if key is None:
                continue
            issues.append(JiraIssue(key=key, summary=get_str(fields, "summary") or ""))
        return Ok(issues)

    def transition(self, issue: JiraIssue, status: str) -> Result[None, TrackerError]:
        url = f"{self._api}/issue/{quote(issue.key)}/transitions"

        listed = self._http.request_json("GET", url, headers=self._headers)
        if isinstance(listed, Err):
            return Err(tracker_error_from_http("Jira", listed.error))

        data = as_str_dict(listed.value) or {}
        transition_id = _find_transition(as_obj_list(data.get("transitions")) or [], status)
        if transition_id is None:
            return Err(
                TrackerError(
                    kind="invalid_status",
                    message=f"{issue.key} cannot be moved to status {status!r}",
                    hint="check the workflow of the issue in Jira",
                )
            )

        body = {"transition": {"id": transition_id}}
        posted = self._http.request_json("POST", url, headers=self._headers, body=body)
        if isinstance(posted, Err):
            return Err(tracker_error_from_http("Jira", posted.error))
        return Ok(None)


def _jql_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _find_transition(transitions: list[object], status: str) -> str | None:
    wanted = status.casefold()
    for item in transitions:
        raw = as_str_dict(item)
        if raw is None:
            continue
        target = get_table(raw, "to") or {}
        names = (get_str(target, "name"), get_str(raw, "name"))
        if any(n is not None and n.casefold() == wanted for n in names):
            return get_str(raw, "id")
    return None


def jira_from_env(
    config: JiraConfig | None,
    *,
    http: HttpClient,
    env: Mapping[str, str] | None = None,
) -> Result[JiraClient, TrackerError]:
    """Build a client from the ``[jira]`` table and credentials in the environment."""
    if config is None:
        return Err(
            TrackerError(
                kind="not_configured",
                message="Jira is not configured",
                hint="add a [jira] table with url to relflow.toml",
            )
        )

    environ = os.environ if env is None else env
    email = environ.get(EMAIL_ENV, "").strip()
    token = environ.get(TOKEN_ENV, "").strip()
    if not email or not token:
        return Err(
            TrackerError(
                kind="not_configured",
                message="Jira credentials are missing",
                hint=f"set {EMAIL_ENV} and {TOKEN_ENV}",
            )
        )
    return Ok(JiraClient(config, email=email, token=token, http=http))
