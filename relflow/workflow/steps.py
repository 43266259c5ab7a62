"""Workflow step declarations.

``Step`` is a closed union. Each variant only carries the configuration its
handler needs and is immutable once parsed from ``relflow.toml``. The
``name`` of a step is its ``type`` in the config file.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from relflow.core.result import Err, Ok, Result
from relflow.core.structured import get_str, get_str_list, get_table
from relflow.release.semver import RULE_KINDS, Rule, is_valid_pre_label

__all__ = [
    "BumpVersion",
    "Command",
    "RebaseBranch",
    "SelectGitHubIssue",
    "SelectIssueFromBranch",
    "SelectJiraIssue",
    "Step",
    "SwitchBranches",
    "TransitionJiraIssue",
    "UpdateProjectFromCommits",
    "Variable",
    "Workflow",
    "parse_step",
]


class Variable(StrEnum):
    """Values a ``Command`` step can substitute into its template."""

    VERSION = "Version"
    ISSUE_KEY = "IssueKey"


@dataclass(frozen=True, slots=True)
class SelectJiraIssue:
    name: ClassVar[str] = "SelectJiraIssue"
    status: str


@dataclass(frozen=True, slots=True)
class SelectGitHubIssue:
    name: ClassVar[str] = "SelectGitHubIssue"
    labels: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class TransitionJiraIssue:
    name: ClassVar[str] = "TransitionJiraIssue"
    status: str


@dataclass(frozen=True, slots=True)
class SelectIssueFromBranch:
    name: ClassVar[str] = "SelectIssueFromBranch"


@dataclass(frozen=True, slots=True)
class SwitchBranches:
    name: ClassVar[str] = "SwitchBranches"


@dataclass(frozen=True, slots=True)
class RebaseBranch:
    name: ClassVar[str] = "RebaseBranch"
    to: str


@dataclass(frozen=True, slots=True)
class BumpVersion:
    name: ClassVar[str] = "BumpVersion"
    rule: Rule


@dataclass(frozen=True, slots=True)
class Command:
    name: ClassVar[str] = "Command"
    command: str
    # Mapping of template key -> variable; kept as a tuple so the step stays hashable.
    variables: tuple[tuple[str, Variable], ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class UpdateProjectFromCommits:
    name: ClassVar[str] = "UpdateProjectFromCommits"
    rule: Rule | None = None


Step = (
    SelectJiraIssue
    | SelectGitHubIssue
    | TransitionJiraIssue
    | SelectIssueFromBranch
    | SwitchBranches
    | RebaseBranch
    | BumpVersion
    | Command
    | UpdateProjectFromCommits
)

STEP_TYPES: tuple[str, ...] = (
    "SelectJiraIssue",
    "SelectGitHubIssue",
    "TransitionJiraIssue",
    "SelectIssueFromBranch",
    "SwitchBranches",
    "RebaseBranch",
    "BumpVersion",
    "Command",
    "UpdateProjectFromCommits",
)


@dataclass(frozen=True, slots=True)
class Workflow:
    name: str
    steps: tuple[Step, ...]


def parse_step(table: Mapping[str, object]) -> Result[Step, str]:
    """Parse one ``[[workflows.steps]]`` table. Errors are plain messages."""
    kind = get_str(table, "type")
    if kind is None:
        return Err("step is missing 'type'")

    match kind:
        case "SelectJiraIssue":
            return _required(table, kind, "status").map(lambda s: SelectJiraIssue(status=s))
        case "TransitionJiraIssue":
            return _required(table, kind, "status").map(lambda s: TransitionJiraIssue(status=s))
        case "SelectGitHubIssue":
            return _parse_github_selection(table)
        case "SelectIssueFromBranch":
            return Ok(SelectIssueFromBranch())
        case "SwitchBranches":
            return Ok(SwitchBranches())
        case "RebaseBranch":
            return _required(table, kind, "to").map(lambda to: RebaseBranch(to=to))
        case "BumpVersion":
            rule = _parse_rule(table)
            if isinstance(rule, Err):
                return rule
            if rule.value is None:
                return Err("BumpVersion requires 'rule'")
            return Ok(BumpVersion(rule=rule.value))
        case "Command":
            return _parse_command(table)
        case "UpdateProjectFromCommits":
            return _parse_rule(table).map(lambda r: UpdateProjectFromCommits(rule=r))
        case _:
            return Err(f"unknown step type {kind!r} (expected one of: {', '.join(STEP_TYPES)})")


def _required(table: Mapping[str, object], kind: str, key: str) -> Result[str, str]:
    value = get_str(table, key)
    if value is None:
        return Err(f"{kind} requires '{key}'")
    return Ok(value)


def _parse_github_selection(table: Mapping[str, object]) -> Result[Step, str]:
    if "labels" not in table:
        return Ok(SelectGitHubIssue())
    labels = get_str_list(table, "labels")
    if labels is None:
        return Err("SelectGitHubIssue 'labels' must be a list of strings")
    return Ok(SelectGitHubIssue(labels=tuple(labels)))


def _parse_rule(table: Mapping[str, object]) -> Result[Rule | None, str]:
    """Read ``rule`` (and ``value`` for Pre). Absent rule gives None."""
    if "rule" not in table:
        return Ok(None)
    kind = get_str(table, "rule")
    if kind is None:
        return Err("'rule' must be a string")
    for known in RULE_KINDS:
        if known.lower() == kind.lower():
            break
    else:
        return Err(f"unknown rule {kind!r} (expected one of: {', '.join(RULE_KINDS)})")

    if known == "Pre":
        label = get_str(table, "value")
        if label is None:
            return Err("rule 'Pre' requires a 'value' with the prerelease label")
        if not is_valid_pre_label(label):
            return Err(
                f"invalid prerelease label {label!r} "
                "(use letters, digits and '-', separated by '.')"
            )
        return Ok(Rule("Pre", label))
    return Ok(Rule(known))


def _parse_command(table: Mapping[str, object]) -> Result[Step, str]:
    command = table.get("command")
    if not isinstance(command, str) or not command.strip():
        return Err("Command requires 'command'")

    if "variables" not in table:
        return Ok(Command(command=command))
    raw = get_table(table, "variables")
    if raw is None:
        return Err("Command 'variables' must be a table")

    variables: list[tuple[str, Variable]] = []
    for key, value in raw.items():
        if not isinstance(value, str):
            return Err(f"Command variable {key!r} must name a variable")
        try:
            variables.append((key, Variable(value)))
        except ValueError:
            names = ", ".join(v.value for v in Variable)
            return Err(f"unknown variable {value!r} for {key!r} (expected one of: {names})")
    return Ok(Command(command=command, variables=tuple(variables)))
