"""Typed loading of ``relflow.toml``.

Example::

    [package]
    versioned_files = ["pyproject.toml"]
    changelog = "CHANGELOG.md"

    [jira]
    url = "https://example.atlassian.net"
    project = "PROJ"

    [github]
    owner = "acme"
    repo = "widgets"

    [[workflows]]
    name = "Start some work"

    [[workflows.steps]]
    type = "SelectJiraIssue"
    status = "Backlog"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from relflow.workflow.steps import Step, Workflow, parse_step

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "GitHubConfig",
    "JiraConfig",
    "PackageConfig",
    "load_config",
]

CONFIG_FILENAME = "relflow.toml"
DEFAULT_CHANGELOG = "CHANGELOG.md"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def pretty(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class PackageConfig:
    """Where the project keeps its version and changelog.

    ``versioned_files`` of None means auto-detect known manifests.
    """

    versioned_files: tuple[str, ...] | None = None
    changelog: str = DEFAULT_CHANGELOG


@dataclass(frozen=True, slots=True)
class JiraConfig:
    url: str
    project: str | None = None


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    owner: str
    repo: str


@dataclass(frozen=True, slots=True)
class Config:
    package: PackageConfig = field(default_factory=PackageConfig)
    jira: JiraConfig | None = None
    github: GitHubConfig | None = None
    workflows: tuple[Workflow, ...] = ()

    def workflow(self, name: str) -> Workflow | None:
        for wf in self.workflows:
            if wf.name == name:
                return wf
        return None

    @property
    def workflow_names(self) -> list[str]:
        return [wf.name for wf in self.workflows]


def _parse_package(data: Mapping[str, object]) -> Result[PackageConfig, str]:
    package = get_table(data, "package")
    if package is None:
        return Ok(PackageConfig())

    files: tuple[str, ...] | None = None
    if "versioned_files" in package:
        listed = get_str_list(package, "versioned_files")
        if not listed:
            return Err("[package] versioned_files must be a non-empty list of paths")
        files = tuple(listed)

    return Ok(
        PackageConfig(
            versioned_files=files,
            changelog=get_str(package, "changelog") or DEFAULT_CHANGELOG,
        )
    )


def _parse_jira(data: Mapping[str, object]) -> Result[JiraConfig | None, str]:
    jira = get_table(data, "jira")
    if jira is None:
        return Ok(None)
    url = get_str(jira, "url")
    if url is None:
        return Err("[jira] requires 'url'")
    return Ok(JiraConfig(url=url, project=get_str(jira, "project")))


def _parse_github(data: Mapping[str, object]) -> Result[GitHubConfig | None, str]:
    github = get_table(data, "github")
    if github is None:
        return Ok(None)
    owner = get_str(github, "owner")
    repo = get_str(github, "repo")
    if owner is None or repo is None:
        return Err("[github] requires 'owner' and 'repo'")
    return Ok(GitHubConfig(owner=owner, repo=repo))


def _parse_workflows(data: Mapping[str, object]) -> Result[tuple[Workflow, ...], str]:
    workflows: list[Workflow] = []
    seen: set[str] = set()

    for i, item in enumerate(get_list(data, "workflows") or []):
        table = as_str_dict(item)
        if table is None:
            return Err(f"workflows[{i}] must be a table")
        name = get_str(table, "name")
        if name is None:
            return Err(f"workflows[{i}] is missing 'name'")
        if name in seen:
            return Err(f"duplicate workflow name: {name!r}")
        seen.add(name)

        steps: list[Step] = []
        for j, raw_step in enumerate(get_list(table, "steps") or []):
            step_table = as_str_dict(raw_step)
            if step_table is None:
                return Err(f"workflow {name!r} step {j + 1} must be a table")
            parsed = parse_step(step_table)
            if isinstance(parsed, Err):
                return Err(f"workflow {name!r} step {j + 1}: {parsed.error}")
            steps.append(parsed.value)

        workflows.append(Workflow(name=name, steps=tuple(steps)))

    return Ok(tuple(workflows))


def config_from_dict(data: Mapping[str, object]) -> Result[Config, str]:
    package = _parse_package(data)
    if isinstance(package, Err):
        return package
    jira = _parse_jira(data)
    if isinstance(jira, Err):
        return jira
    github = _parse_github(data)
    if isinstance(github, Err):
        return github
    workflows = _parse_workflows(data)
    if isinstance(workflows, Err):
        return workflows

    return Ok(
        Config(
            package=package.value,
            jira=jira.value,
            github=github.value,
            workflows=workflows.value,
        )
    )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate ``relflow.toml``.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    config = config_from_dict(result.value)
    if isinstance(config, Err):
        return Err(ConfigError(config.error, path=path))
    return Ok(config.value)
