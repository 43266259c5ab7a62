"""Workflow steps and their execution.

The package root only exposes step declarations so configuration loading
can import it without pulling in handlers and collaborators. Import
``relflow.workflow.engine`` to run workflows.
"""

from relflow.workflow.steps import (
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
    Variable,
    Workflow,
    parse_step,
)

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
