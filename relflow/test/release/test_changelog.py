"""Tests for changelog rendering and splicing."""

from __future__ import annotations

from relflow.core.result import Err, Ok
from relflow.release.changelog import detect_newline, render_section, splice_section
from relflow.release.commits import classify_all
from relflow.release.semver import Version

EXISTING = """# Changelog

All notable changes to this project are documented here.

## 1.2.3

### Fixes

- old fix
"""


class TestRenderSection:
    def test_groups_in_fixed_order(self) -> None:
        records = classify_all(["fix: crash", "feat: login", "chore: tidy", "feat!: new api"])
        assert render_section(Version(2, 0, 0), records) == (
            "## 2.0.0\n"
            "\n"
            "### Breaking Changes\n"
            "\n"
            "- new api\n"
            "\n"
            "### Features\n"
            "\n"
            "- login\n"
            "\n"
            "### Fixes\n"
            "\n"
            "- crash\n"
            "\n"
        )

    def test_empty_groups_are_omitted(self) -> None:
        records = classify_all(["fix: one", "fix: two"])
        section = render_section(Version(1, 2, 4), records)
        assert "### Features" not in section
        assert "### Breaking Changes" not in section
        assert "- one\n- two\n" in section

    def test_no_notable_commits_renders_header_only(self) -> None:
        records = classify_all(["chore: deps", "Merge branch 'x'"])
        assert render_section(Version(1, 2, 4), records) == "## 1.2.4\n\n"

    def test_crlf(self) -> None:
        section = render_section(Version(1, 0, 0), classify_all(["fix: a"]), newline="\r\n")
        assert section == "## 1.0.0\r\n\r\n### Fixes\r\n\r\n- a\r\n\r\n"


class TestSpliceSection:
    def test_inserts_above_first_version(self) -> None:
        section = render_section(Version(1, 3, 0), classify_all(["feat: login", "fix: crash"]))
        result = splice_section(EXISTING, section)
        assert isinstance(result, Ok)

        at = EXISTING.index("## 1.2.3")
        assert result.value.startswith(EXISTING[:at] + "## 1.3.0\n")
        assert result.value.endswith(EXISTING[at:])
        assert result.value == EXISTING[:at] + section + EXISTING[at:]

    def test_level_three_headers_are_not_anchors(self) -> None:
        text = "# Changelog\n\n### Notes\n\n## 0.1.0\n"
        spliced = splice_section(text, "## 0.2.0\n\n").unwrap()
        assert spliced == "# Changelog\n\n### Notes\n\n## 0.2.0\n\n## 0.1.0\n"

    def test_no_version_header(self) -> None:
        result = splice_section("# Changelog\n\nNothing yet.\n", "## 0.1.0\n\n")
        assert isinstance(result, Err)
        assert result.error.kind == "parse"


class TestDetectNewline:
    def test_detect(self) -> None:
        assert detect_newline("a\r\nb") == "\r\n"
        assert detect_newline("a\nb") == "\n"
        assert detect_newline("") == "\n"
