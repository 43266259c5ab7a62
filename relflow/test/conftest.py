"""Shared in-memory collaborators for workflow tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok, Result
from relflow.core.state import GitHubIssue, Issue, JiraIssue
from relflow.git.repository import GitError
from relflow.issues.tracker import TrackerError
from relflow.output.console import MockConsole
from relflow.platform.process import ProcessError
from relflow.release.manifest import ChangelogStore, VersionStore
from relflow.workflow.context import StepContext


@dataclass
class FakeJira:
    issues: list[JiraIssue] = field(default_factory=list)
    transition_error: TrackerError | None = None
    searches: list[str] = field(default_factory=list)
    transitions: list[tuple[str, str]] = field(default_factory=list)

    def search(self, status: str) -> Result[list[JiraIssue], TrackerError]:
        self.searches.append(status)
        return Ok(list(self.issues))

    def transition(self, issue: JiraIssue, status: str) -> Result[None, TrackerError]:
        self.transitions.append((issue.key, status))
        if self.transition_error is not None:
            return Err(self.transition_error)
        return Ok(None)


@dataclass
class FakeGitHub:
    issues: list[GitHubIssue] = field(default_factory=list)
    searches: list[tuple[str, ...] | None] = field(default_factory=list)

    def search(self, labels: tuple[str, ...] | None) -> Result[list[GitHubIssue], TrackerError]:
        self.searches.append(labels)
        return Ok(list(self.issues))


@dataclass
class FakePicker:
    """Picks the first candidate unless told to decline."""

    decline: bool = False
    branch: str | None = None
    offered_issues: list[Sequence[Issue]] = field(default_factory=list)
    offered_branches: list[Sequence[str]] = field(default_factory=list)

    def select_issue(self, issues: Sequence[Issue]) -> Issue | None:
        self.offered_issues.append(issues)
        if self.decline or not issues:
            return None
        return issues[0]

    def select_branch(self, branches: Sequence[str]) -> str | None:
        self.offered_branches.append(branches)
        if self.decline:
            return None
        return self.branch if self.branch is not None else branches[0]


@dataclass
class FakeRepo:
    branch: str | None = "main"
    branches: list[str] = field(default_factory=lambda: ["main"])
    clean: bool = True
    tag: str | None = "v1.2.3"
    messages: list[str] = field(default_factory=list)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def current_branch(self) -> Result[str, GitError]:
        if self.branch is None:
            return Err(GitError(command="rev-parse", message="HEAD is detached, not on a branch"))
        return Ok(self.branch)

    def is_clean(self) -> Result[bool, GitError]:
        return Ok(self.clean)

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def local_branches(self) -> Result[list[str], GitError]:
        return Ok(list(self.branches))

    def checkout(self, name: str) -> Result[None, GitError]:
        self.calls.append(("checkout", name))
        self.branch = name
        return Ok(None)

    def create_branch(self, name: str, base: str) -> Result[None, GitError]:
        self.calls.append(("create_branch", name, base))
        self.branches.append(name)
        self.branch = name
        return Ok(None)

    def rebase(self, onto: str) -> Result[None, GitError]:
        self.calls.append(("rebase", onto))
        return Ok(None)

    def latest_tag(self) -> Result[str, GitError]:
        if self.tag is None:
            return Err(GitError(command="describe", message="No names found"))
        return Ok(self.tag)

    def commit_messages_since(self, tag: str) -> Result[list[str], GitError]:
        return Ok(list(self.messages))


@dataclass
class FakeShell:
    returncode: int = 0
    commands: list[str] = field(default_factory=list)

    def __call__(self, command: str, cwd: Path) -> Result[None, ProcessError]:
        self.commands.append(command)
        if self.returncode != 0:
            return Err(
                ProcessError(command=(command,), returncode=self.returncode, stdout="", stderr="")
            )
        return Ok(None)


@dataclass
class Collaborators:
    root: Path
    jira: FakeJira
    github: FakeGitHub
    picker: FakePicker
    repo: FakeRepo
    shell: FakeShell
    console: MockConsole
    jira_error: TrackerError | None = None
    github_error: TrackerError | None = None
    jira_calls: int = 0

    def context(self) -> StepContext:
        def jira() -> Result[FakeJira, TrackerError]:
            self.jira_calls += 1
            if self.jira_error is not None:
                return Err(self.jira_error)
            return Ok(self.jira)

        def github() -> Result[FakeGitHub, TrackerError]:
            if self.github_error is not None:
                return Err(self.github_error)
            return Ok(self.github)

        return StepContext(
            root=self.root,
            repo=self.repo,  # type: ignore[arg-type]
            picker=self.picker,
            jira=jira,
            github=github,
            versions=VersionStore(self.root),
            changelog=ChangelogStore(self.root / "CHANGELOG.md"),
            console=self.console,
            shell=self.shell,
        )


@pytest.fixture
def collab(tmp_path: Path) -> Collaborators:
    return Collaborators(
        root=tmp_path,
        jira=FakeJira(issues=[JiraIssue(key="PROJ-7", summary="Add login page")]),
        github=FakeGitHub(issues=[GitHubIssue(number=42, title="Fix crash on start")]),
        picker=FakePicker(),
        repo=FakeRepo(),
        shell=FakeShell(),
        console=MockConsole(),
    )


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[..., Path]:
    """Write a minimal pyproject.toml (and optionally a changelog) into tmp_path."""

    def _write(version: str = "1.2.3", changelog: str | None = None) -> Path:
        (tmp_path / "pyproject.toml").write_text(
            f'[project]\nname = "demo"\nversion = "{version}"\n', encoding="utf-8"
        )
        if changelog is not None:
            (tmp_path / "CHANGELOG.md").write_text(changelog, encoding="utf-8")
        return tmp_path

    return _write
