"""Tests for gf.flow.conflicts module."""

from __future__ import annotations

from gf.core.result import Err, Ok
from gf.flow.conflicts import merge_avoiding_version_conflicts
from gf.flow.errors import version_error
from gf.flow.version import VersionInfo
from gf.test.flow.fakes import FakeRepository, batch, make_context


def _merge(repo: FakeRepository, **kwargs: object):
    return merge_avoiding_version_conflicts(
        make_context(repo),
        batch(),
        source="hotfix/1.2.1",
        target="develop",
        source_version="1.2.1",
        avoid_message="avoid",
        restore_message="restore",
        **kwargs,  # type: ignore[arg-type]
    )


class TestMergeAvoidingVersionConflicts:
    def test_commits_bracket_the_merge(self) -> None:
        repo = FakeRepository({"develop": "1.3.0-SNAPSHOT", "hotfix/1.2.1": "1.2.1"})
        result = _merge(repo, merge_message="Merge hotfix")
        assert isinstance(result, Ok)
        assert str(result.value) == "1.3.0-SNAPSHOT"
        assert repo.log["develop"] == ["avoid", "Merge hotfix", "restore"]
        assert repo.branches["develop"] == "1.3.0-SNAPSHOT"
        assert repo.current == "develop"

    def test_same_version_needs_no_commits(self) -> None:
        repo = FakeRepository({"develop": "1.2.1", "hotfix/1.2.1": "1.2.1"})
        result = _merge(repo)
        assert isinstance(result, Ok)
        assert repo.log["develop"] == ["Merge hotfix/1.2.1"]

    def test_next_version(self) -> None:
        repo = FakeRepository({"develop": "1.2.1-SNAPSHOT", "hotfix/1.2.1": "1.2.1"})

        def next_version(pre: VersionInfo):
            assert str(pre) == "1.2.1-SNAPSHOT"
            return Ok("1.2.2-SNAPSHOT")

        result = _merge(repo, next_version=next_version)
        assert isinstance(result, Ok)
        assert repo.branches["develop"] == "1.2.2-SNAPSHOT"
        assert repo.log["develop"][-1] == "restore"

    def test_next_version_error_stops(self) -> None:
        repo = FakeRepository({"develop": "1.3.0-SNAPSHOT", "hotfix/1.2.1": "1.2.1"})
        result = _merge(repo, next_version=lambda _: Err(version_error("blank")))
        assert isinstance(result, Err)
        assert result.error.message == "blank"
