"""Issue tracker clients."""

from .github import GitHubClient, github_from_env
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .jira import JiraClient, jira_from_env
from .tracker import GitHubTracker, JiraTracker, TrackerError

__all__ = [
    "GitHubClient",
    "GitHubTracker",
    "HttpClient",
    "HttpError",
    "JiraClient",
    "JiraTracker",
    "MockHttpClient",
    "RealHttpClient",
    "TrackerError",
    "github_from_env",
    "jira_from_env",
]
