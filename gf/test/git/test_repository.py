"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from gf.core.result import Err, Ok
from gf.git.repository import GitError, MergeMode, Repository
from gf.output.console import MockConsole


def make_completed_process(
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=[],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


def _argv(mock_run: MagicMock, call: int = -1) -> list[str]:
    return list(mock_run.call_args_list[call].args[0])


class TestRepositoryQueries:
    """Tests for read-only git operations."""

    @patch("subprocess.run")
    def test_find_refs(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="release/1.2.0\n\nrelease/1.3.0\n")

        result = Repository(tmp_path).find_refs("release/")

        assert result == Ok(["release/1.2.0", "release/1.3.0"])
        assert _argv(mock_run) == [
            "git",
            "for-each-ref",
            "--format=%(refname:short)",
            "refs/heads/release/*",
        ]

    @patch("subprocess.run")
    def test_find_remote_refs_sorted_and_limited(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="upstream/hotfix/1.2.1\n")

        repo = Repository(tmp_path, origin="upstream")
        result = repo.find_refs("hotfix/", remote=True, sort=["-committerdate"], limit=1)

        assert result == Ok(["upstream/hotfix/1.2.1"])
        assert _argv(mock_run) == [
            "git",
            "for-each-ref",
            "--format=%(refname:short)",
            "--sort=-committerdate",
            "--count=1",
            "refs/remotes/upstream/hotfix/*",
        ]

    @patch("subprocess.run")
    def test_ref_exists(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)
        assert Repository(tmp_path).ref_exists("refs/heads/develop") is False
        assert _argv(mock_run) == ["git", "show-ref", "--verify", "--quiet", "refs/heads/develop"]

    @patch("subprocess.run")
    def test_clean_tree(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        assert Repository(tmp_path).is_dirty() == Ok(False)
        assert mock_run.call_count == 2

    @patch("subprocess.run")
    def test_dirty_tree(self, mock_run: MagicMock, tmp_path: Path) -> None:
        """Exit code 1 from git diff means there are changes."""
        mock_run.return_value = make_completed_process(returncode=1)
        assert Repository(tmp_path).is_dirty() == Ok(True)
        assert mock_run.call_count == 1

    @patch("subprocess.run")
    def test_dirty_check_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=128, stderr="fatal: bad HEAD")
        result = Repository(tmp_path).is_dirty()
        assert isinstance(result, Err)
        assert result.error.returncode == 128
        assert result.error.message == "fatal: bad HEAD"

    @patch("subprocess.run")
    def test_rev_list_counts(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="2\t5\n")

        result = Repository(tmp_path).rev_list_left_right_count("develop", "origin/develop")

        assert result == Ok((2, 5))
        assert _argv(mock_run)[-1] == "develop...origin/develop"

    @patch("subprocess.run")
    def test_rev_list_unexpected_output(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="garbage\n")
        result = Repository(tmp_path).rev_list_left_right_count("a", "b")
        assert isinstance(result, Err)
        assert "unexpected rev-list output" in result.error.message

    @patch("subprocess.run")
    def test_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="feature/login\n")
        assert Repository(tmp_path).current_branch() == Ok("feature/login")

    @patch("subprocess.run")
    def test_list_tags_newest_first(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="v1.2.0\nv1.1.0\n")

        result = Repository(tmp_path).list_tags("v*")

        assert result == Ok(["v1.2.0", "v1.1.0"])
        argv = _argv(mock_run)
        assert "--sort=-v:refname" in argv
        assert argv[-1] == "refs/tags/v*"

    @patch("subprocess.run")
    def test_check_ref_format(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        assert Repository(tmp_path).check_ref_format("feature/login") is True
        assert _argv(mock_run) == [
            "git",
            "check-ref-format",
            "--allow-onelevel",
            "feature/login",
        ]


class TestRepositoryMutations:
    """Tests for git operations that change the repository."""

    @patch("subprocess.run")
    def test_merge_modes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        repo = Repository(tmp_path)

        repo.merge("release/1.2.0", MergeMode.NO_FF, "Merge release")
        assert _argv(mock_run) == ["git", "merge", "--no-ff", "-m", "Merge release", "release/1.2.0"]

        repo.merge("release/1.2.0", MergeMode.FF_ONLY)
        assert _argv(mock_run) == ["git", "merge", "--ff-only", "release/1.2.0"]

        repo.merge("feature/login", MergeMode.SQUASH, "ignored")
        assert _argv(mock_run) == ["git", "merge", "--squash", "feature/login"]

        repo.merge("1.2.1", MergeMode.MERGE)
        assert _argv(mock_run) == ["git", "merge", "1.2.1"]

    @patch("subprocess.run")
    def test_rebase(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        Repository(tmp_path).merge("release/1.2.0", MergeMode.REBASE, "ignored")
        assert _argv(mock_run) == ["git", "rebase", "release/1.2.0"]

    @patch("subprocess.run")
    def test_signed_tag_and_commit(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        repo = Repository(tmp_path)

        repo.tag("1.2.0", "Tag release", signed=True)
        assert _argv(mock_run) == ["git", "tag", "-a", "-s", "1.2.0", "-m", "Tag release"]

        repo.commit("Update versions", signed=True)
        assert _argv(mock_run) == ["git", "commit", "-a", "-S", "-m", "Update versions"]

    @patch("subprocess.run")
    def test_push(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        Repository(tmp_path).push("master", follow_tags=True, push_options=["ci.skip"])

        assert _argv(mock_run) == [
            "git",
            "push",
            "--quiet",
            "-u",
            "--follow-tags",
            "-o",
            "ci.skip",
            "origin",
            "master",
        ]

    @patch("subprocess.run")
    def test_branch_delete(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        repo = Repository(tmp_path)

        repo.branch_delete("feature/login")
        assert _argv(mock_run) == ["git", "branch", "-d", "feature/login"]
        repo.branch_delete("feature/login", force=True)
        assert _argv(mock_run) == ["git", "branch", "-D", "feature/login"]

    @patch("subprocess.run")
    def test_failure_becomes_git_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=1, stderr="error: pathspec 'nope' did not match\n"
        )

        result = Repository(tmp_path).checkout("nope")

        assert result == Err(
            GitError(
                command="git checkout nope",
                message="error: pathspec 'nope' did not match",
                returncode=1,
            )
        )

    @patch("subprocess.run")
    def test_commands_are_echoed(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()
        console = MockConsole()

        Repository(tmp_path, git="/usr/bin/git", console=console).fetch()

        assert console.commands == ["/usr/bin/git fetch --quiet origin"]
