"""Error taxonomy and CLI exit codes.

Workflow failures are plain values: handlers return ``Err(WorkflowError)``
and the step dispatcher wraps it into ``StepFailed`` so the user sees which
step broke as well as the underlying cause.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

__all__ = [
    "ErrorCode",
    "ErrorKind",
    "StepFailed",
    "WorkflowError",
    "error_code_for",
]


class ErrorCode(IntEnum):
    """Process exit codes. Values are part of the CLI contract."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    NETWORK_ERROR = 3
    VCS_ERROR = 4
    COMMAND_ERROR = 5
    IO_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK


ErrorKind = Literal[
    # state mismatch, e.g. an issue is already selected
    "precondition",
    # the user declined to pick anything
    "cancelled",
    # a tracker query came back empty
    "no_candidates",
    "not_configured",
    "network",
    "auth",
    "invalid_status",
    "git",
    "shell",
    # malformed version, branch name or changelog
    "parse",
    "io",
    "config",
]


@dataclass(frozen=True, slots=True)
class WorkflowError:
    kind: ErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


@dataclass(frozen=True, slots=True)
class StepFailed:
    """A handler error tagged with the step that produced it."""

    step: str
    cause: WorkflowError

    @property
    def context(self) -> str:
        return f"During {self.step}"

    def chain(self) -> list[str]:
        """Outermost context first, root cause last."""
        return [self.context, self.cause.pretty()]

    def __str__(self) -> str:
        return ": ".join(self.chain())


def error_code_for(kind: ErrorKind) -> ErrorCode:
    match kind:
        case "precondition" | "cancelled" | "no_candidates" | "parse":
            return ErrorCode.USER_ERROR
        case "config" | "not_configured":
            return ErrorCode.CONFIG_ERROR
        case "network" | "auth" | "invalid_status":
            return ErrorCode.NETWORK_ERROR
        case "git":
            return ErrorCode.VCS_ERROR
        case "shell":
            return ErrorCode.COMMAND_ERROR
        case "io":
            return ErrorCode.IO_ERROR
