"""Step handlers.

Each handler takes the incoming state and returns the next state or a
``WorkflowError``. Preconditions on the state are checked before any
collaborator is contacted.
"""

from __future__ import annotations

from collections.abc import Sequence

from relflow.core.errors import WorkflowError
from relflow.core.result import Err, Ok, Result
from relflow.core.state import (
    GitHubIssue,
    Issue,
    IssueSelected,
    NoIssueSelected,
    State,
    parse_branch_name,
)
from relflow.git.repository import GitError
from relflow.release.commits import CommitKind
from relflow.release.project import update_project_from_commits
from relflow.release.semver import Rule

from .context import StepContext
from .steps import Variable

__all__ = [
    "bump_version",
    "rebase_branch",
    "run_command",
    "select_github_issue",
    "select_issue_from_branch",
    "select_jira_issue",
    "substitute",
    "switch_branches",
    "transition_jira_issue",
    "update_project",
]


def _git_error(e: GitError) -> WorkflowError:
    return WorkflowError(kind="git", message=e.message)


def _require_no_issue(state: State) -> Result[None, WorkflowError]:
    if isinstance(state, IssueSelected):
        return Err(
            WorkflowError(
                kind="precondition",
                message=f"issue {state.issue.key} is already selected",
                hint="select an issue only once per workflow",
            )
        )
    return Ok(None)


def _require_issue(state: State) -> Result[Issue, WorkflowError]:
    match state:
        case IssueSelected(issue=issue):
            return Ok(issue)
        case NoIssueSelected():
            return Err(
                WorkflowError(
                    kind="precondition",
                    message="no issue is selected",
                    hint="run a Select* step earlier in the workflow",
                )
            )


def _pick(
    candidates: Sequence[Issue],
    ctx: StepContext,
    what: str,
) -> Result[Issue, WorkflowError]:
    if not candidates:
        return Err(WorkflowError(kind="no_candidates", message=f"no {what} found"))
    chosen = ctx.picker.select_issue(candidates)
    if chosen is None:
        return Err(WorkflowError(kind="cancelled", message="no issue was selected"))
    ctx.console.success(f"selected {chosen.key}: {chosen.title}")
    return Ok(chosen)


def select_jira_issue(status: str, state: State, ctx: StepContext) -> Result[State, WorkflowError]:
    ok = _require_no_issue(state)
    if isinstance(ok, Err):
        return ok

    tracker = ctx.jira()
    if isinstance(tracker, Err):
        return Err(tracker.error.to_workflow_error())

    found = tracker.value.search(status)
    if isinstance(found, Err):
        return Err(found.error.to_workflow_error())

    picked = _pick(found.value, ctx, f"Jira issues with status {status!r}")
    if isinstance(picked, Err):
        return picked
    return Ok(IssueSelected(issue=picked.value))


def select_github_issue(
    labels: tuple[str, ...] | None,
    state: State,
    ctx: StepContext,
) -> Result[State, WorkflowError]:
    ok = _require_no_issue(state)
    if isinstance(ok, Err):
        return ok

    tracker = ctx.github()
    if isinstance(tracker, Err):
        return Err(tracker.error.to_workflow_error())

    found = tracker.value.search(labels)
    if isinstance(found, Err):
        return Err(found.error.to_workflow_error())

    what = f"open GitHub issues labelled {', '.join(labels)}" if labels else "open GitHub issues"
    picked = _pick(found.value, ctx, what)
    if isinstance(picked, Err):
        return picked
    return Ok(IssueSelected(issue=picked.value))


def transition_jira_issue(
    status: str,
    state: State,
    ctx: StepContext,
) -> Result[State, WorkflowError]:
    issue = _require_issue(state)
    if isinstance(issue, Err):
        return issue
    if isinstance(issue.value, GitHubIssue):
        return Err(
            WorkflowError(
                kind="precondition",
                message=f"issue #{issue.value.number} is a GitHub issue, not a Jira issue",
            )
        )

    tracker = ctx.jira()
    if isinstance(tracker, Err):
        return Err(tracker.error.to_workflow_error())

    moved = tracker.value.transition(issue.value, status)
    if isinstance(moved, Err):
        return Err(moved.error.to_workflow_error())

    ctx.console.success(f"moved {issue.value.key} to {status}")
    return Ok(state)


def select_issue_from_branch(state: State, ctx: StepContext) -> Result[State, WorkflowError]:
    branch = ctx.repo.current_branch()
    if isinstance(branch, Err):
        return Err(_git_error(branch.error))

    issue = parse_branch_name(branch.value)
    if isinstance(issue, Err):
        return issue

    ctx.console.info(f"working on {issue.value.key} from branch {branch.value}")
    return Ok(IssueSelected(issue=issue.value))


def switch_branches(state: State, ctx: StepContext) -> Result[State, WorkflowError]:
    issue = _require_issue(state)
    if isinstance(issue, Err):
        return issue

    name = issue.value.branch_name
    if ctx.repo.branch_exists(name):
        checked_out = ctx.repo.checkout(name)
        if isinstance(checked_out, Err):
            return Err(_git_error(checked_out.error))
        ctx.console.success(f"switched to existing branch {name}")
        return Ok(state)

    branches = ctx.repo.local_branches()
    if isinstance(branches, Err):
        return Err(_git_error(branches.error))
    if not branches.value:
        return Err(
            WorkflowError(
                kind="git",
                message="no local branch to create the issue branch from",
                hint="make an initial commit first",
            )
        )

    base = ctx.picker.select_branch(branches.value)
    if base is None:
        return Err(WorkflowError(kind="cancelled", message="no base branch was selected"))

    created = ctx.repo.create_branch(name, base)
    if isinstance(created, Err):
        return Err(_git_error(created.error))
    ctx.console.success(f"created branch {name} from {base}")
    return Ok(state)


def rebase_branch(to: str, state: State, ctx: StepContext) -> Result[State, WorkflowError]:
    current = ctx.repo.current_branch()
    if isinstance(current, Err):
        return Err(_git_error(current.error))

    clean = ctx.repo.is_clean()
    if isinstance(clean, Err):
        return Err(_git_error(clean.error))
    if not clean.value:
        return Err(
            WorkflowError(
                kind="git",
                message="working tree has uncommitted changes",
                hint="commit or stash them before rebasing",
            )
        )

    if not ctx.repo.branch_exists(to):
        return Err(WorkflowError(kind="git", message=f"local branch {to!r} not found"))

    rebased = ctx.repo.rebase(to)
    if isinstance(rebased, Err):
        return Err(_git_error(rebased.error))

    ctx.console.success(f"rebased {current.value} onto {to}")
    return Ok(state)


def bump_version(rule: Rule, state: State, ctx: StepContext) -> Result[State, WorkflowError]:
    current = ctx.versions.read()
    if isinstance(current, Err):
        return current

    bumped = current.value.bump(rule)
    if isinstance(bumped, Err):
        return bumped

    written = ctx.versions.write(bumped.value)
    if isinstance(written, Err):
        return written

    ctx.console.success(f"bumped version {current.value} -> {bumped.value} ({rule})")
    return Ok(state)


def substitute(template: str, values: Sequence[tuple[str, str]]) -> str:
    """Replace every literal occurrence of each key with its value.

    Keys that do not occur leave the template unchanged.
    """
    command = template
    for key, value in values:
        command = command.replace(key, value)
    return command


def _resolve(variable: Variable, state: State, ctx: StepContext) -> Result[str, WorkflowError]:
    match variable:
        case Variable.VERSION:
            return ctx.versions.read().map(str)
        case Variable.ISSUE_KEY:
            return _require_issue(state).map(lambda issue: issue.key)


def run_command(
    command: str,
    variables: Sequence[tuple[str, Variable]],
    state: State,
    ctx: StepContext,
) -> Result[State, WorkflowError]:
    values: list[tuple[str, str]] = []
    for key, variable in variables:
        resolved = _resolve(variable, state, ctx)
        if isinstance(resolved, Err):
            return resolved
        values.append((key, resolved.value))

    line = substitute(command, values)
    ctx.console.info(f"running: {line}")
    ran = ctx.shell(line, ctx.root)
    if isinstance(ran, Err):
        e = ran.error
        detail = e.stderr.strip() or f"exit status {e.returncode}"
        return Err(WorkflowError(kind="shell", message=f"command failed: {line} ({detail})"))
    return Ok(state)


def update_project(
    rule: Rule | None,
    state: State,
    ctx: StepContext,
) -> Result[State, WorkflowError]:
    if not ctx.changelog.exists():
        return Err(
            WorkflowError(
                kind="io",
                message=f"changelog not found: {ctx.changelog.path}",
                hint="create it with at least one '## <version>' section",
            )
        )

    updated = update_project_from_commits(
        repo=ctx.repo,
        versions=ctx.versions,
        changelog=ctx.changelog,
        rule=rule,
    )
    if isinstance(updated, Err):
        return updated

    u = updated.value
    notable = sum(1 for r in u.records if r.kind is not CommitKind.OTHER)
    ctx.console.success(
        f"released {u.version} ({u.rule}) with {notable} changelog "
        f"entr{'y' if notable == 1 else 'ies'}"
    )
    return Ok(state)
