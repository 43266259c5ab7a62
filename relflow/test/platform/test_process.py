"""Tests for relflow.platform.process."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

from relflow.core.result import Err, Ok
from relflow.platform.process import ProcessError, run, run_shell


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_nonzero_exit(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('bad'); sys.exit(3)"
        result = run([sys.executable, "-c", code], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"

    def test_missing_executable(self, tmp_path: Path) -> None:
        result = run(["relflow-definitely-not-a-command"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    @patch("subprocess.run")
    def test_timeout(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git"], timeout=1.0)
        result = run(["git", "status"], cwd=tmp_path, timeout=1.0)
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr


class TestRunShell:
    @patch("subprocess.run")
    def test_runs_through_shell(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(args="git tag v1", returncode=0)
        assert run_shell("git tag v1", tmp_path) == Ok(None)
        _, kwargs = mock_run.call_args
        assert kwargs["shell"] is True
        assert kwargs["cwd"] == str(tmp_path)

    @patch("subprocess.run")
    def test_nonzero_exit_is_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(args="false", returncode=1)
        result = run_shell("false", tmp_path)
        assert isinstance(result, Err)
        assert result.error == ProcessError(command=("false",), returncode=1, stdout="", stderr="")

    def test_real_shell_exit_code(self, tmp_path: Path) -> None:
        result = run_shell("exit 4", tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 4


class TestProcessError:
    def test_str_truncates_long_commands(self) -> None:
        err = ProcessError(
            command=("git", "-C", "/repo", "status"), returncode=2, stdout="", stderr=""
        )
        assert str(err) == "git -C /repo ... failed (exit 2)"
