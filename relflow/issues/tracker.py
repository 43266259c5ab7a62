"""Tracker contracts shared by the Jira and GitHub clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from relflow.core.errors import WorkflowError
from relflow.core.result import Result
from relflow.core.state import GitHubIssue, JiraIssue

from .http import HttpError

__all__ = ["GitHubTracker", "JiraTracker", "TrackerError", "tracker_error_from_http"]


@dataclass(frozen=True, slots=True)
class TrackerError:
    kind: Literal["not_configured", "network", "auth", "invalid_status"]
    message: str
    hint: str | None = None

    def to_workflow_error(self) -> WorkflowError:
        return WorkflowError(kind=self.kind, message=self.message, hint=self.hint)


class JiraTracker(Protocol):
    def search(self, status: str) -> Result[list[JiraIssue], TrackerError]: ...

    def transition(self, issue: JiraIssue, status: str) -> Result[None, TrackerError]: ...


class GitHubTracker(Protocol):
    def search(self, labels: tuple[str, ...] | None) -> Result[list[GitHubIssue], TrackerError]: ...


def tracker_error_from_http(service: str, error: HttpError) -> TrackerError:
    if error.is_auth:
        return TrackerError(
            kind="auth",
            message=f"{service} rejected the credentials ({error})",
            hint="check the token environment variables",
        )
    return TrackerError(kind="network", message=f"could not reach {service}: {error}")
