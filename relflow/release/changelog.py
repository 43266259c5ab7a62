"""Changelog section rendering and splicing.

The changelog is markdown with one ``## <version>`` header per release.
A new section is inserted directly above the first existing version
header. Everything else in the file is left exactly as it was.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from relflow.core.errors import WorkflowError
from relflow.core.result import Err, Ok, Result

from .commits import CommitKind, CommitRecord
from .semver import Version

__all__ = ["SECTION_TITLES", "detect_newline", "render_section", "splice_section"]

SECTION_TITLES: tuple[tuple[CommitKind, str], ...] = (
    (CommitKind.BREAKING, "Breaking Changes"),
    (CommitKind.FEATURE, "Features"),
    (CommitKind.FIX, "Fixes"),
)

_VERSION_HEADER = re.compile(r"^## ", re.MULTILINE)


def render_section(
    version: Version,
    records: Iterable[CommitRecord],
    *,
    newline: str = "\n",
) -> str:
    """Render the ``## <version>`` block, ending with a blank line."""
    entries = list(records)
    lines = [f"## {version}", ""]
    for kind, title in SECTION_TITLES:
        items = [r.message for r in entries if r.kind is kind]
        if not items:
            continue
        lines.append(f"### {title}")
        lines.append("")
        lines.extend(f"- {item}" for item in items)
        lines.append("")
    return newline.join(lines) + newline


def splice_section(changelog: str, section: str) -> Result[str, WorkflowError]:
    """Insert ``section`` right before the first level-2 header."""
    m = _VERSION_HEADER.search(changelog)
    if m is None:
        return Err(
            WorkflowError(
                kind="parse",
                message="changelog has no '## ' version header to insert above",
                hint="add a section for the current version, e.g. '## 0.1.0'",
            )
        )
    at = m.start()
    return Ok(changelog[:at] + section + changelog[at:])


def detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"
