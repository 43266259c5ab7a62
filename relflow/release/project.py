"""Release a project from the conventional commits since the last tag.

Order of effects: manifests are bumped first, then the changelog is
written. A failure in between leaves the bumped version in place.
"""

from __future__ import annotations

from dataclasses import dataclass

from relflow.core.errors import WorkflowError
from relflow.core.result import Err, Ok, Result
from relflow.git.repository import Repository

from .changelog import detect_newline, render_section, splice_section
from .commits import CommitRecord, classify_all, derive_rule
from .manifest import ChangelogStore, VersionStore
from .semver import Rule, Version

__all__ = ["ProjectUpdate", "plan_update", "update_project_from_commits"]


@dataclass(frozen=True, slots=True)
class ProjectUpdate:
    previous: Version
    version: Version
    rule: Rule
    records: tuple[CommitRecord, ...]
    changelog: str


def plan_update(
    *,
    messages: list[str],
    current: Version,
    changelog: str,
    rule: Rule | None = None,
) -> Result[ProjectUpdate, WorkflowError]:
    """Compute the new version and changelog text without touching disk.

    ``messages`` are oldest first; that is the order entries are listed in.
    """
    records = tuple(classify_all(messages))
    chosen = rule if rule is not None else derive_rule(records)

    bumped = current.bump(chosen)
    if isinstance(bumped, Err):
        return bumped

    section = render_section(bumped.value, records, newline=detect_newline(changelog))
    spliced = splice_section(changelog, section)
    if isinstance(spliced, Err):
        return spliced

    return Ok(
        ProjectUpdate(
            previous=current,
            version=bumped.value,
            rule=chosen,
            records=records,
            changelog=spliced.value,
        )
    )


def update_project_from_commits(
    *,
    repo: Repository,
    versions: VersionStore,
    changelog: ChangelogStore,
    rule: Rule | None = None,
) -> Result[ProjectUpdate, WorkflowError]:
    tag = repo.latest_tag()
    if isinstance(tag, Err):
        return Err(WorkflowError(kind="git", message=tag.error.message, hint="create a tag first"))

    messages = repo.commit_messages_since(tag.value)
    if isinstance(messages, Err):
        return Err(WorkflowError(kind="git", message=messages.error.message))

    current = versions.read()
    if isinstance(current, Err):
        return current

    text = changelog.read()
    if isinstance(text, Err):
        return text

    # git log lists newest first
    planned = plan_update(
        messages=list(reversed(messages.value)),
        current=current.value,
        changelog=text.value,
        rule=rule,
    )
    if isinstance(planned, Err):
        return planned

    written = versions.write(planned.value.version)
    if isinstance(written, Err):
        return written

    written = changelog.write(planned.value.changelog)
    if isinstance(written, Err):
        return written

    return planned
