"""Conventional commit parsing and classification.

Grammar of the header (first line of the message)::

    type ["(" scope ")"] ["!"] ": " description

A body line starting with ``BREAKING CHANGE:`` or ``BREAKING-CHANGE:``
also marks the commit as breaking. Nothing here touches git; callers pass
raw message strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .semver import Rule

__all__ = [
    "CommitKind",
    "CommitRecord",
    "ConventionalCommit",
    "classify",
    "classify_all",
    "derive_rule",
    "parse_commit",
]

_HEADER = re.compile(
    r"^(?P<type>[A-Za-z][A-Za-z0-9_-]*)"
    r"(?:\((?P<scope>[^()\r\n]*)\))?"
    r"(?P<bang>!)?"
    r": (?P<description>\S.*)$"
)
_BREAKING_FOOTER = re.compile(r"^BREAKING[ -]CHANGE: ", re.MULTILINE)


class CommitKind(StrEnum):
    BREAKING = "breaking"
    FEATURE = "feature"
    FIX = "fix"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ConventionalCommit:
    type: str
    scope: str | None
    breaking: bool
    description: str


@dataclass(frozen=True, slots=True)
class CommitRecord:
    kind: CommitKind
    message: str


def parse_commit(message: str) -> ConventionalCommit | None:
    """Parse a full commit message. None if the header is not conventional."""
    lines = message.strip().splitlines()
    if not lines:
        return None

    m = _HEADER.match(lines[0].strip())
    if m is None:
        return None

    body = "\n".join(lines[1:])
    scope = (m.group("scope") or "").strip() or None
    return ConventionalCommit(
        type=m.group("type").lower(),
        scope=scope,
        breaking=m.group("bang") is not None or _BREAKING_FOOTER.search(body) is not None,
        description=m.group("description").strip(),
    )


def classify(message: str) -> CommitRecord:
    commit = parse_commit(message)
    if commit is None:
        return CommitRecord(kind=CommitKind.OTHER, message=message.strip())

    if commit.breaking:
        kind = CommitKind.BREAKING
    elif commit.type == "feat":
        kind = CommitKind.FEATURE
    elif commit.type == "fix":
        kind = CommitKind.FIX
    else:
        kind = CommitKind.OTHER
    return CommitRecord(kind=kind, message=commit.description)


def classify_all(messages: Iterable[str]) -> list[CommitRecord]:
    return [classify(m) for m in messages]


def derive_rule(records: Iterable[CommitRecord]) -> Rule:
    """Pick the bump implied by the commits.

    With nothing notable the result is still Patch: every release run
    produces a new version.
    """
    kinds = {r.kind for r in records}
    if CommitKind.BREAKING in kinds:
        return Rule("Major")
    if CommitKind.FEATURE in kinds:
        return Rule("Minor")
    return Rule("Patch")
