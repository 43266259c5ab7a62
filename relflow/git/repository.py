"""Git repository abstraction.

Thin wrapper over the git CLI. Every operation that can fail returns a
Result so step handlers can attach context instead of catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.process import ProcessError
from relflow.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
# Commits are separated by ASCII record separators in `git log` output.
_RECORD_SEP = "\x1e"

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A local git working tree.

    Attributes:
        path: Path to the working tree root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return (self.path / ".git").exists()

    def current_branch(self) -> Result[str, GitError]:
        """Name of the checked out branch. Detached HEAD is an error."""
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse", e, "could not determine current branch"))
            case Ok(stdout):
                branch = stdout.strip()
                if branch == "HEAD":
                    return Err(
                        GitError(command="rev-parse", message="HEAD is detached, not on a branch")
                    )
                return Ok(branch)

    def is_clean(self) -> Result[bool, GitError]:
        """True if there are no staged, unstaged or untracked changes."""
        result = self._run(["status", "--porcelain"])
        match result:
            case Err(e):
                return Err(self._error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(stdout.strip() == "")

    def branch_exists(self, name: str) -> bool:
        result = self._run(["rev-parse", "--verify", "--quiet", f"refs/heads/{name}"])
        return isinstance(result, Ok)

    def local_branches(self) -> Result[list[str], GitError]:
        result = self._run(["for-each-ref", "--format=%(refname:short)", "refs/heads/"])
        match result:
            case Err(e):
                return Err(self._error("for-each-ref", e, "could not list branches"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def checkout(self, name: str) -> Result[None, GitError]:
        result = self._run(["checkout", name])
        if isinstance(result, Err):
            return Err(self._error("checkout", result.error, f"could not check out {name}"))
        return Ok(None)

    def create_branch(self, name: str, base: str) -> Result[None, GitError]:
        """Create ``name`` from ``base`` and check it out."""
        result = self._run(["checkout", "-b", name, base])
        if isinstance(result, Err):
            return Err(self._error("checkout -b", result.error, f"could not create {name}"))
        return Ok(None)

    def rebase(self, onto: str) -> Result[None, GitError]:
        result = self._run(["rebase", onto])
        if isinstance(result, Err):
            return Err(self._error("rebase", result.error, f"rebase onto {onto} failed"))
        return Ok(None)

    def latest_tag(self) -> Result[str, GitError]:
        """Most recent tag reachable from HEAD."""
        result = self._run(["describe", "--tags", "--abbrev=0"])
        match result:
            case Err(e):
                return Err(self._error("describe", e, "no tag found to compare commits against"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def commit_messages_since(self, tag: str) -> Result[list[str], GitError]:
        """Full messages of commits in ``tag..HEAD``, newest first."""
        result = self._run(["log", f"--format={_RECORD_SEP}%B", f"{tag}..HEAD"])
        match result:
            case Err(e):
                return Err(self._error("log", e, f"could not read commits since {tag}"))
            case Ok(stdout):
                records = (r.strip() for r in stdout.split(_RECORD_SEP))
                return Ok([r for r in records if r])

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS
        )

    @staticmethod
    def _error(command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )
