"""Tests for relflow.release.semver."""

from __future__ import annotations

import pytest

from relflow.core.result import Err, Ok
from relflow.release.semver import Rule, Version, parse_version


def _bump(text: str, rule: Rule) -> str:
    return str(parse_version(text).unwrap().bump(rule).unwrap())


class TestParseVersion:
    @pytest.mark.parametrize("text", ["0.0.0", "1.2.3", "10.20.30", "1.0.0-rc.1", "2.0.0-alpha"])
    def test_round_trip(self, text: str) -> None:
        assert str(parse_version(text).unwrap()) == text

    def test_fields(self) -> None:
        assert parse_version("1.2.3-rc.4") == Ok(Version(1, 2, 3, "rc.4"))

    @pytest.mark.parametrize("text", ["1.2", "v1.2.3", "01.2.3", "1.2.3-", "", "a.b.c"])
    def test_malformed(self, text: str) -> None:
        result = parse_version(text)
        assert isinstance(result, Err)
        assert result.error.kind == "parse"


class TestBump:
    @pytest.mark.parametrize(
        ("version", "rule", "expected"),
        [
            ("1.2.3", Rule("Major"), "2.0.0"),
            ("1.2.3", Rule("Minor"), "1.3.0"),
            ("1.2.3", Rule("Patch"), "1.2.4"),
            ("1.2.3-rc.1", Rule("Patch"), "1.2.4"),
            ("1.2.3-rc.1", Rule("Release"), "1.2.3"),
            ("1.2.3", Rule("Release"), "1.2.3"),
            ("1.2.3", Rule("Pre", "rc"), "1.2.3-rc.0"),
            ("1.2.3-rc.0", Rule("Pre", "rc"), "1.2.3-rc.1"),
            ("1.2.3-rc.9", Rule("Pre", "rc"), "1.2.3-rc.10"),
            ("1.2.3-beta.2", Rule("Pre", "rc"), "1.2.3-rc.0"),
        ],
    )
    def test_rules(self, version: str, rule: Rule, expected: str) -> None:
        assert _bump(version, rule) == expected

    def test_pre_without_label(self) -> None:
        result = Version(1, 0, 0).bump(Rule("Pre"))
        assert isinstance(result, Err)
        assert result.error.kind == "config"

    def test_pre_with_invalid_label(self) -> None:
        result = Version(1, 2, 3).bump(Rule("Pre", "rc_1"))
        assert isinstance(result, Err)
        assert result.error.kind == "config"

    def test_pre_with_non_numeric_counter(self) -> None:
        result = Version(1, 0, 0, "rc.x").bump(Rule("Pre", "rc"))
        assert isinstance(result, Err)
        assert result.error.kind == "parse"


class TestRule:
    def test_str(self) -> None:
        assert str(Rule("Minor")) == "Minor"
        assert str(Rule("Pre", "rc")) == "Pre(rc)"
