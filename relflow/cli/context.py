from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relflow.core.config import Config
from relflow.git.repository import Repository
from relflow.issues.github import github_from_env
from relflow.issues.http import HttpClient, RealHttpClient
from relflow.issues.jira import jira_from_env
from relflow.output.console import ConsoleProtocol, RichConsole
from relflow.release.manifest import ChangelogStore, VersionStore
from relflow.workflow.context import StepContext

from .picker import TerminalPicker


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol


def build_step_context(
    *,
    root: Path,
    config: Config,
    console: ConsoleProtocol | None = None,
    http: HttpClient | None = None,
) -> StepContext:
    """Wire the real collaborators for running workflows in ``root``."""
    client = http or RealHttpClient()
    out = console or RichConsole()
    return StepContext(
        root=root,
        repo=Repository(root),
        picker=TerminalPicker(console=out),
        jira=lambda: jira_from_env(config.jira, http=client),
        github=lambda: github_from_env(config.github, http=client),
        versions=VersionStore(root, config.package.versioned_files),
        changelog=ChangelogStore(root / config.package.changelog),
        console=out,
    )
