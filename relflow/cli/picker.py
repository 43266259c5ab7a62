"""Terminal implementation of the workflow ``Picker``."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from relflow.core.state import GitHubIssue, Issue, JiraIssue
from relflow.output.console import ConsoleProtocol

from .selector import SelectorOption, SelectorResult, is_interactive_terminal, select_one

__all__ = ["TerminalPicker"]

SelectFn = Callable[..., SelectorResult[object]]


class TerminalPicker:
    """Prompts with the arrow-key selector.

    Cancelling returns None. Without a terminal nothing is prompted and the
    choice is reported as declined, so the step fails with its own context.
    """

    def __init__(
        self,
        select: SelectFn = select_one,
        *,
        interactive: Callable[[], bool] = is_interactive_terminal,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._select = select
        self._interactive = interactive
        self._console = console

    def _can_prompt(self, what: str) -> bool:
        if self._interactive():
            return True
        if self._console is not None:
            self._console.warning(f"cannot prompt for {what}: not an interactive terminal")
        return False

    def select_issue(self, issues: Sequence[Issue]) -> Issue | None:
        if not self._can_prompt("an issue"):
            return None
        options = [SelectorOption(value=i, label=i.key, detail=i.title) for i in issues]
        result = self._select(title="Select an issue", options=options)
        if result.action != "select" or not isinstance(result.value, JiraIssue | GitHubIssue):
            return None
        return result.value

    def select_branch(self, branches: Sequence[str]) -> str | None:
        if not self._can_prompt("a base branch"):
            return None
        options = [SelectorOption(value=b, label=b) for b in branches]
        result = self._select(title="Select a base branch for the new branch", options=options)
        if result.action != "select" or not isinstance(result.value, str):
            return None
        return result.value
