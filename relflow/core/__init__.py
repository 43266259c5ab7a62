"""Core domain types: results, errors, workflow state."""

from .errors import ErrorCode, StepFailed, WorkflowError, error_code_for
from .result import Err, Ok, Result, is_err, is_ok
from .state import GitHubIssue, Issue, IssueSelected, JiraIssue, NoIssueSelected, State

__all__ = [
    # errors
    "ErrorCode",
    "StepFailed",
    "WorkflowError",
    "error_code_for",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # state
    "GitHubIssue",
    "Issue",
    "IssueSelected",
    "JiraIssue",
    "NoIssueSelected",
    "State",
]
