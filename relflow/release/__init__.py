"""Versioning and changelog engine.

- semver: version parsing and bump rules
- manifest: version/changelog file stores
- commits: conventional commit classification and rule derivation
- changelog: section rendering and splicing
- project: the commits-to-release orchestration
"""

from __future__ import annotations

from relflow.release.changelog import render_section, splice_section
from relflow.release.commits import (
    CommitKind,
    CommitRecord,
    ConventionalCommit,
    classify,
    classify_all,
    derive_rule,
    parse_commit,
)
from relflow.release.manifest import ChangelogStore, VersionStore
from relflow.release.project import ProjectUpdate, plan_update, update_project_from_commits
from relflow.release.semver import Rule, Version, parse_version

__all__ = [
    "ChangelogStore",
    "CommitKind",
    "CommitRecord",
    "ConventionalCommit",
    "ProjectUpdate",
    "Rule",
    "Version",
    "VersionStore",
    "classify",
    "classify_all",
    "derive_rule",
    "parse_commit",
    "parse_version",
    "plan_update",
    "render_section",
    "splice_section",
    "update_project_from_commits",
]
