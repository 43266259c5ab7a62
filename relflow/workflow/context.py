"""Collaborators available to step handlers."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relflow.core.result import Result
from relflow.core.state import Issue
from relflow.git.repository import Repository
from relflow.issues.tracker import GitHubTracker, JiraTracker, TrackerError
from relflow.output.console import ConsoleProtocol
from relflow.platform.process import ProcessError, run_shell
from relflow.release.manifest import ChangelogStore, VersionStore

__all__ = ["Picker", "ShellRunner", "StepContext"]


class Picker(Protocol):
    """Interactive choice. None means the user declined."""

    def select_issue(self, issues: Sequence[Issue]) -> Issue | None: ...

    def select_branch(self, branches: Sequence[str]) -> str | None: ...


ShellRunner = Callable[[str, Path], Result[None, ProcessError]]


@dataclass(frozen=True, slots=True)
class StepContext:
    """Everything a handler may touch besides the workflow state.

    Trackers are factories so a missing ``[jira]``/``[github]`` table only
    fails the steps that actually need it.
    """

    root: Path
    repo: Repository
    picker: Picker
    jira: Callable[[], Result[JiraTracker, TrackerError]]
    github: Callable[[], Result[GitHubTracker, TrackerError]]
    versions: VersionStore
    changelog: ChangelogStore
    console: ConsoleProtocol
    shell: ShellRunner = run_shell
