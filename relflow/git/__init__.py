"""Git operations used by workflow steps.

Usage:
    from relflow.git import Repository

    repo = Repository(Path("."))
    match repo.current_branch():
        case Ok(branch):
            print(branch)
        case Err(e):
            print(e.message)
"""

from relflow.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
