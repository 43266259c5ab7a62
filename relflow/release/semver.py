from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Literal

from relflow.core.errors import WorkflowError
from relflow.core.result import Err, Ok, Result

__all__ = ["Rule", "Version", "is_valid_pre_label", "parse_version"]

_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

_PRE_LABEL = re.compile(r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*")

RuleKind = Literal["Major", "Minor", "Patch", "Pre", "Release"]
RULE_KINDS: tuple[RuleKind, ...] = ("Major", "Minor", "Patch", "Pre", "Release")


@dataclass(frozen=True, slots=True)
class Rule:
    """How to bump a version. ``label`` is only used by ``Pre``."""

    kind: RuleKind
    label: str | None = None

    def __str__(self) -> str:
        if self.kind == "Pre":
            return f"Pre({self.label})"
        return self.kind


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int
    pre: str | None = None

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        return f"{core}-{self.pre}" if self.pre else core

    def bump(self, rule: Rule) -> Result[Version, WorkflowError]:
        match rule.kind:
            case "Major":
                return Ok(Version(self.major + 1, 0, 0))
            case "Minor":
                return Ok(Version(self.major, self.minor + 1, 0))
            case "Patch":
                return Ok(Version(self.major, self.minor, self.patch + 1))
            case "Release":
                return Ok(replace(self, pre=None))
            case "Pre":
                return self._bump_pre(rule.label)

    def _bump_pre(self, label: str | None) -> Result[Version, WorkflowError]:
        if not label:
            return Err(WorkflowError(kind="config", message="Pre rule requires a label"))
        if not is_valid_pre_label(label):
            return Err(WorkflowError(kind="config", message=f"invalid prerelease label: {label!r}"))

        prefix = f"{label}."
        if self.pre is None or not self.pre.startswith(prefix):
            return Ok(replace(self, pre=f"{label}.0"))

        counter = self.pre[len(prefix) :]
        if not counter.isdigit():
            return Err(
                WorkflowError(
                    kind="parse",
                    message=f"cannot increment prerelease {self.pre!r} of {self}",
                    hint=f"expected {label}.<number>",
                )
            )
        return Ok(replace(self, pre=f"{label}.{int(counter) + 1}"))


def parse_version(text: str) -> Result[Version, WorkflowError]:
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return Err(
            WorkflowError(
                kind="parse",
                message=f"malformed version: {text!r}",
                hint="expected MAJOR.MINOR.PATCH[-PRERELEASE]",
            )
        )
    return Ok(Version(int(m.group(1)), int(m.group(2)), int(m.group(3)), m.group(4)))


def is_valid_pre_label(label: str) -> bool:
    """True if ``label`` is dot-separated alphanumerics and hyphens."""
    return _PRE_LABEL.fullmatch(label) is not None
