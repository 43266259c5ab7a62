"""Step dispatch and the workflow fold.

``run_workflow`` is a left fold over the steps: the state returned by step
*n* is the input of step *n+1*, and the first failure stops the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from relflow.core.errors import StepFailed, WorkflowError
from relflow.core.result import Err, Ok, Result
from relflow.core.state import NoIssueSelected, State

from . import handlers
from .context import StepContext
from .steps import (
    BumpVersion,
    Command,
    RebaseBranch,
    SelectGitHubIssue,
    SelectIssueFromBranch,
    SelectJiraIssue,
    Step,
    SwitchBranches,
    TransitionJiraIssue,
    UpdateProjectFromCommits,
    Workflow,
)

__all__ = ["WorkflowAborted", "run_step", "run_workflow"]


@dataclass(frozen=True, slots=True)
class WorkflowAborted:
    """A workflow stopped at ``index`` (0-based).

    ``state`` is the state that was fed into the failing step, i.e. the
    result of every step before it.
    """

    workflow: str
    index: int
    state: State
    failure: StepFailed

    def chain(self) -> list[str]:
        header = f"Workflow {self.workflow!r} failed at step {self.index + 1}"
        return [header, *self.failure.chain()]


def _dispatch(step: Step, state: State, ctx: StepContext) -> Result[State, WorkflowError]:
    match step:
        case SelectJiraIssue(status=status):
            return handlers.select_jira_issue(status, state, ctx)
        case SelectGitHubIssue(labels=labels):
            return handlers.select_github_issue(labels, state, ctx)
        case TransitionJiraIssue(status=status):
            return handlers.transition_jira_issue(status, state, ctx)
        case SelectIssueFromBranch():
            return handlers.select_issue_from_branch(state, ctx)
        case SwitchBranches():
            return handlers.switch_branches(state, ctx)
        case RebaseBranch(to=to):
            return handlers.rebase_branch(to, state, ctx)
        case BumpVersion(rule=rule):
            return handlers.bump_version(rule, state, ctx)
        case Command(command=command, variables=variables):
            return handlers.run_command(command, variables, state, ctx)
        case UpdateProjectFromCommits(rule=rule):
            return handlers.update_project(rule, state, ctx)
        case _:
            assert_never(step)


def run_step(step: Step, state: State, ctx: StepContext) -> Result[State, StepFailed]:
    """Run one step, tagging any failure with the step's name."""
    return _dispatch(step, state, ctx).map_err(lambda e: StepFailed(step=step.name, cause=e))


def run_workflow(
    workflow: Workflow,
    ctx: StepContext,
    state: State | None = None,
) -> Result[State, WorkflowAborted]:
    current: State = NoIssueSelected() if state is None else state
    total = len(workflow.steps)

    for index, step in enumerate(workflow.steps):
        ctx.console.header(f"[{index + 1}/{total}] {step.name}")
        outcome = run_step(step, current, ctx)
        if isinstance(outcome, Err):
            return Err(
                WorkflowAborted(
                    workflow=workflow.name,
                    index=index,
                    state=current,
                    failure=outcome.error,
                )
            )
        current = outcome.value

    return Ok(current)
