"""Tests for conventional commit classification."""

from __future__ import annotations

import pytest

from relflow.release.commits import (
    CommitKind,
    CommitRecord,
    ConventionalCommit,
    classify,
    classify_all,
    derive_rule,
    parse_commit,
)
from relflow.release.semver import Rule


class TestParseCommit:
    def test_type_scope_description(self) -> None:
        assert parse_commit("feat(cli): add --config flag") == ConventionalCommit(
            type="feat", scope="cli", breaking=False, description="add --config flag"
        )

    def test_bang_marks_breaking(self) -> None:
        commit = parse_commit("refactor!: drop python 3.11")
        assert commit is not None
        assert commit.breaking is True
        assert commit.scope is None

    @pytest.mark.parametrize("footer", ["BREAKING CHANGE: config moved", "BREAKING-CHANGE: x"])
    def test_footer_marks_breaking(self, footer: str) -> None:
        commit = parse_commit(f"fix: rename option\n\nSome context.\n\n{footer}")
        assert commit is not None
        assert commit.breaking is True

    def test_footer_in_header_does_not_count(self) -> None:
        assert parse_commit("BREAKING CHANGE: not a type") is None

    def test_type_is_lowercased(self) -> None:
        commit = parse_commit("Feat: shout")
        assert commit is not None
        assert commit.type == "feat"

    @pytest.mark.parametrize(
        "message",
        ["Merge branch 'main'", "feat add thing", "feat:missing space", "", "fix: "],
    )
    def test_not_conventional(self, message: str) -> None:
        assert parse_commit(message) is None


class TestClassify:
    @pytest.mark.parametrize(
        ("message", "record"),
        [
            ("feat: login page", CommitRecord(CommitKind.FEATURE, "login page")),
            ("fix(api): handle 500", CommitRecord(CommitKind.FIX, "handle 500")),
            ("feat!: new config format", CommitRecord(CommitKind.BREAKING, "new config format")),
            ("chore!: drop py2", CommitRecord(CommitKind.BREAKING, "drop py2")),
            ("chore: tidy", CommitRecord(CommitKind.OTHER, "tidy")),
            ("  Update README  ", CommitRecord(CommitKind.OTHER, "Update README")),
        ],
    )
    def test_classify(self, message: str, record: CommitRecord) -> None:
        assert classify(message) == record

    def test_classify_all_keeps_order(self) -> None:
        kinds = [r.kind for r in classify_all(["fix: a", "feat: b", "docs: c"])]
        assert kinds == [CommitKind.FIX, CommitKind.FEATURE, CommitKind.OTHER]


class TestDeriveRule:
    def test_breaking_wins(self) -> None:
        records = classify_all(["fix: a", "feat: b", "feat!: c"])
        assert derive_rule(records) == Rule("Major")

    def test_feature_gives_minor(self) -> None:
        assert derive_rule(classify_all(["fix: a", "feat: b"])) == Rule("Minor")

    def test_fixes_give_patch(self) -> None:
        assert derive_rule(classify_all(["fix: a", "chore: b"])) == Rule("Patch")

    def test_nothing_notable_still_patches(self) -> None:
        assert derive_rule([]) == Rule("Patch")
