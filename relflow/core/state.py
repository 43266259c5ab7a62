"""Workflow state threaded from one step to the next.

State values are immutable. A step never edits the state it receives; it
returns a new one (or the same object when nothing changed).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import WorkflowError
from .result import Err, Ok, Result

__all__ = [
    "GitHubIssue",
    "Issue",
    "IssueSelected",
    "JiraIssue",
    "NoIssueSelected",
    "State",
    "branch_name_for",
    "parse_branch_name",
    "slugify",
]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_JIRA_BRANCH = re.compile(r"^(?P<key>[A-Z][A-Z0-9_]*-\d+)(?:-(?P<slug>[a-z0-9][a-z0-9-]*))?$")
_GITHUB_BRANCH = re.compile(r"^(?P<number>\d+)(?:-(?P<slug>[a-z0-9][a-z0-9-]*))?$")


@dataclass(frozen=True, slots=True)
class JiraIssue:
    key: str
    summary: str

    @property
    def title(self) -> str:
        return self.summary

    @property
    def branch_name(self) -> str:
        return branch_name_for(self)


@dataclass(frozen=True, slots=True)
class GitHubIssue:
    number: int
    title: str

    @property
    def key(self) -> str:
        return str(self.number)

    @property
    def branch_name(self) -> str:
        return branch_name_for(self)


Issue = JiraIssue | GitHubIssue


@dataclass(frozen=True, slots=True)
class NoIssueSelected:
    pass


@dataclass(frozen=True, slots=True)
class IssueSelected:
    issue: Issue


State = NoIssueSelected | IssueSelected


def slugify(title: str) -> str:
    """Lowercase ``title`` and collapse everything non-alphanumeric to ``-``."""
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def branch_name_for(issue: Issue) -> str:
    slug = slugify(issue.title)
    return f"{issue.key}-{slug}" if slug else issue.key


def parse_branch_name(name: str) -> Result[Issue, WorkflowError]:
    """Recover the issue a branch was created for by ``branch_name_for``.

    The key is recovered exactly. The title comes back as the slug words,
    since slugging is lossy.
    """
    m = _JIRA_BRANCH.match(name)
    if m is not None:
        return Ok(JiraIssue(key=m.group("key"), summary=_unslug(m.group("slug") or "")))

    m = _GITHUB_BRANCH.match(name)
    if m is not None:
        number = int(m.group("number"))
        return Ok(GitHubIssue(number=number, title=_unslug(m.group("slug") or "")))

    return Err(
        WorkflowError(
            kind="parse",
            message=f"branch name does not identify an issue: {name}",
            hint="expected <JIRA-KEY>-<title> or <number>-<title>",
        )
    )


def _unslug(slug: str) -> str:
    return " ".join(part for part in slug.split("-") if part)
