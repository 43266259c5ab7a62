"""Project manifest version store.

Versions are located and replaced with targeted regular expressions rather
than re-serialising the whole file, so formatting, comments and key order
survive a bump untouched. JSON is parsed only to confirm which match is
the top-level key.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from relflow.core.errors import WorkflowError
from relflow.core.result import Err, Ok, Result

from .semver import Version, parse_version

__all__ = ["KNOWN_MANIFESTS", "ChangelogStore", "VersionStore", "find_version_span"]

KNOWN_MANIFESTS: tuple[str, ...] = ("pyproject.toml", "Cargo.toml", "package.json")

_TOML_VERSION = re.compile(r"""^version\s*=\s*["']([^"'\n]*)["']""", re.MULTILINE)
_JSON_STRING = re.compile(r'"(?:[^"\\\n]|\\.)*"')
_JSON_VALUE = re.compile(r'\s*:\s*"([^"\\\n]*)"')

# Tables that may hold the project version, in lookup order.
_TOML_TABLES: dict[str, tuple[str, ...]] = {
    "pyproject.toml": ("project", "tool.poetry"),
    "Cargo.toml": ("package",),
}


def _toml_table_body(content: str, table: str) -> tuple[int, int] | None:
    header = re.compile(rf"^\[{re.escape(table)}\][ \t]*(?:#.*)?\r?$", re.MULTILINE)
    m = header.search(content)
    if m is None:
        return None
    start = m.end()
    next_table = re.compile(r"^\[", re.MULTILINE).search(content, start)
    end = next_table.start() if next_table else len(content)
    return (start, end)


def _json_version_span(content: str) -> tuple[int, int] | None:
    """Span of the top-level ``"version"`` value. Nested objects are skipped."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None
    expected = data.get("version") if isinstance(data, dict) else None
    if not isinstance(expected, str):
        return None

    depth = 0
    i = 0
    while i < len(content):
        ch = content[i]
        if ch == '"':
            s = _JSON_STRING.match(content, i)
            if s is None:
                return None
            if depth == 1 and s.group() == '"version"':
                value = _JSON_VALUE.match(content, s.end())
                if value is not None and value.group(1) == expected:
                    return value.span(1)
            i = s.end()
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
        i += 1
    return None


def find_version_span(filename: str, content: str) -> tuple[int, int] | None:
    """Character span of the version literal (without quotes) in a manifest."""
    if filename.endswith(".json"):
        return _json_version_span(content)

    for table in _TOML_TABLES.get(filename, ("package", "project")):
        body = _toml_table_body(content, table)
        if body is None:
            continue
        m = _TOML_VERSION.search(content, body[0], body[1])
        if m is not None:
            return m.span(1)
    return None


@dataclass(frozen=True, slots=True)
class VersionStore:
    """Reads and writes the project version across one or more manifests.

    Attributes:
        root: Project root.
        files: Manifests to use, relative to root. None means every entry of
            ``KNOWN_MANIFESTS`` that exists.
    """

    root: Path
    files: tuple[str, ...] | None = None

    def paths(self) -> Result[list[Path], WorkflowError]:
        if self.files is not None:
            if not self.files:
                return Err(
                    WorkflowError(
                        kind="config",
                        message="no versioned file configured",
                        hint="list at least one manifest in versioned_files",
                    )
                )
            paths = [self.root / f for f in self.files]
            missing = [str(p) for p in paths if not p.is_file()]
            if missing:
                return Err(
                    WorkflowError(
                        kind="io",
                        message=f"versioned file not found: {', '.join(missing)}",
                    )
                )
            return Ok(paths)

        found = [self.root / name for name in KNOWN_MANIFESTS if (self.root / name).is_file()]
        if not found:
            return Err(
                WorkflowError(
                    kind="config",
                    message="no versioned file found",
                    hint=f"expected one of {', '.join(KNOWN_MANIFESTS)}",
                )
            )
        return Ok(found)

    def read(self) -> Result[Version, WorkflowError]:
        paths = self.paths()
        if isinstance(paths, Err):
            return paths

        current: tuple[Path, Version] | None = None
        for path in paths.value:
            located = _read_version_text(path)
            if isinstance(located, Err):
                return located
            version = parse_version(located.value)
            if isinstance(version, Err):
                return Err(
                    WorkflowError(
                        kind="parse",
                        message=f"{path.name}: {version.error.message}",
                        hint=version.error.hint,
                    )
                )
            if current is not None and current[1] != version.value:
                return Err(
                    WorkflowError(
                        kind="parse",
                        message=(
                            f"conflicting versions: {current[0].name} has {current[1]}, "
                            f"{path.name} has {version.value}"
                        ),
                    )
                )
            current = (path, version.value)

        if current is None:
            return Err(WorkflowError(kind="config", message="no versioned file configured"))
        return Ok(current[1])

    def write(self, version: Version) -> Result[None, WorkflowError]:
        paths = self.paths()
        if isinstance(paths, Err):
            return paths

        for path in paths.value:
            try:
                content = _read_exact(path)
            except OSError as e:
                return Err(WorkflowError(kind="io", message=f"failed to read {path}: {e}"))
            span = find_version_span(path.name, content)
            if span is None:
                return Err(WorkflowError(kind="parse", message=f"no version field in {path}"))
            updated = content[: span[0]] + str(version) + content[span[1] :]
            try:
                _write_exact(path, updated)
            except OSError as e:
                return Err(WorkflowError(kind="io", message=f"failed to write {path}: {e}"))
        return Ok(None)


def _read_version_text(path: Path) -> Result[str, WorkflowError]:
    try:
        content = _read_exact(path)
    except OSError as e:
        return Err(WorkflowError(kind="io", message=f"failed to read {path}: {e}"))
    span = find_version_span(path.name, content)
    if span is None:
        return Err(WorkflowError(kind="parse", message=f"no version field in {path}"))
    return Ok(content[span[0] : span[1]])


@dataclass(frozen=True, slots=True)
class ChangelogStore:
    path: Path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Result[str, WorkflowError]:
        try:
            return Ok(_read_exact(self.path))
        except FileNotFoundError:
            return Err(
                WorkflowError(
                    kind="io",
                    message=f"changelog not found: {self.path}",
                    hint="create it with at least one '## <version>' section",
                )
            )
        except OSError as e:
            return Err(WorkflowError(kind="io", message=f"failed to read {self.path}: {e}"))

    def write(self, content: str) -> Result[None, WorkflowError]:
        try:
            _write_exact(self.path, content)
        except OSError as e:
            return Err(WorkflowError(kind="io", message=f"failed to write {self.path}: {e}"))
        return Ok(None)


def _read_exact(path: Path) -> str:
    # newline="" keeps CRLF files byte-identical on rewrite
    with path.open(encoding="utf-8", newline="") as f:
        return f.read()


def _write_exact(path: Path, content: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(content)
