"""Tests for gf.platform.process module."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gf.core.result import Err, Ok
from gf.platform.process import ProcessError, run


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("mvn", "clean", "install", "-B"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "mvn clean install ... failed (exit 1)"

    def test_details_falls_back_to_stdout(self) -> None:
        error = ProcessError(("mvn",), 1, "[ERROR] BUILD FAILURE\n", "  ")
        assert error.details == "[ERROR] BUILD FAILURE"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run function."""

    @patch("subprocess.run")
    def test_success_returns_stdout(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0, "abc123\n", "")

        result = run(["git", "rev-parse", "HEAD"], cwd=tmp_path)

        assert result == Ok("abc123\n")
        kwargs = mock_run.call_args.kwargs
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    @patch("subprocess.run")
    def test_failure_returns_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 42, "", "boom")

        result = run(["git", "status"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert result.error.command == ("git", "status")
        assert result.error.details == "boom"

    @patch("subprocess.run")
    def test_command_not_found(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'mvn'")

        result = run(["mvn", "test"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "mvn" in result.error.stderr
