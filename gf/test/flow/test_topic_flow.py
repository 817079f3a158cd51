"""Tests for gf.flow.topic module."""

from __future__ import annotations

from gf.core.result import Err, Ok
from gf.flow.model import TopicFinishConfig, TopicKind, TopicStartConfig
from gf.flow.topic import topic_finish, topic_start
from gf.git.repository import MergeMode
from gf.test.flow.fakes import (
    FakeBuild,
    FakeRepository,
    ScriptedPrompter,
    batch,
    console_of,
    make_context,
)


class TestTopicStart:
    """Starting feature and bugfix branches."""

    def test_feature_carries_name_in_version(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        config = TopicStartConfig(name="login", common=batch())

        assert topic_start(make_context(repo), config) == Ok(None)
        assert repo.branches["feature/login"] == "1.2.0-login-SNAPSHOT"
        assert repo.log["feature/login"] == ["Update versions for feature branch"]
        assert repo.config == {"branch.feature/login.gitflow-base": "develop"}
        assert repo.branches["develop"] == "1.2.0-SNAPSHOT"

    def test_skip_feature_version(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        config = TopicStartConfig(name="login", skip_topic_version=True, common=batch())

        assert topic_start(make_context(repo), config) == Ok(None)
        assert repo.branches["feature/login"] == "1.2.0-SNAPSHOT"
        assert repo.log["feature/login"] == []

    def test_bugfix_version(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        config = TopicStartConfig(kind=TopicKind.BUGFIX, name="npe", common=batch())

        assert topic_start(make_context(repo), config) == Ok(None)
        assert repo.branches["bugfix/npe"] == "1.2.0-npe-SNAPSHOT"
        assert repo.log["bugfix/npe"] == ["Update versions for bugfix branch"]

    def test_interactive_name(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        prompter = ScriptedPrompter("login")
        config = TopicStartConfig(common=batch(interactive=True))
        ctx = make_context(repo, prompter=prompter)

        assert topic_start(ctx, config) == Ok(None)
        assert "feature/login" in repo.branches
        assert prompter.questions == ["What is a name of feature branch? feature/"]

    def test_name_pattern(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        config = TopicStartConfig(name="login", name_pattern=r"[A-Z]+-\d+", common=batch())
        ctx = make_context(repo)

        result = topic_start(ctx, config)
        assert isinstance(result, Err)
        assert result.error.kind == "configuration"
        assert console_of(ctx).find("doesn't match")

    def test_invalid_name(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        config = TopicStartConfig(name="bad..name", common=batch())

        result = topic_start(make_context(repo), config)
        assert isinstance(result, Err)
        assert result.error.kind == "configuration"

    def test_missing_name_in_batch_mode(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        result = topic_start(make_context(repo), TopicStartConfig(common=batch()))
        assert isinstance(result, Err)
        assert result.error.kind == "configuration"

    def test_existing_branch(self) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT", "feature/login": "1.2.0"})
        config = TopicStartConfig(name="login", common=batch())

        result = topic_start(make_context(repo), config)
        assert isinstance(result, Err)
        assert result.error.reason == "branch_exists"


class TestTopicFinish:
    """Merging feature and bugfix branches back into development."""

    def _repo(self) -> FakeRepository:
        return FakeRepository(
            {"develop": "1.2.0-SNAPSHOT", "feature/login": "1.2.0-login-SNAPSHOT"},
            current="feature/login",
        )

    def test_finish(self) -> None:
        repo = self._repo()
        build = FakeBuild(repo)
        config = TopicFinishConfig(name="login", common=batch(skip_test=False))

        assert topic_finish(make_context(repo, build), config) == Ok(None)
        assert build.tested == 1
        assert repo.branches["develop"] == "1.2.0-SNAPSHOT"
        assert repo.log["develop"] == ["Merge feature/login"]
        assert repo.log["feature/login"] == ["Update versions for development branch"]
        assert "feature/login" not in repo.branches
        assert repo.deleted == [("feature/login", False)]
        assert repo.pushed == ["develop"]

    def test_branch_from_current_in_batch_mode(self) -> None:
        repo = self._repo()
        repo.branches["feature/other"] = "1.2.0-other-SNAPSHOT"

        assert topic_finish(make_context(repo), TopicFinishConfig(common=batch())) == Ok(None)
        assert "feature/login" not in repo.branches
        assert "feature/other" in repo.branches

    def test_squash(self) -> None:
        repo = self._repo()
        config = TopicFinishConfig(name="feature/login", squash=True, common=batch())

        assert topic_finish(make_context(repo), config) == Ok(None)
        assert repo.merges == [("develop", "feature/login", MergeMode.SQUASH)]
        assert repo.log["develop"] == ["Squashed branch feature/login"]
        assert repo.deleted == [("feature/login", True)]

    def test_keep_branch_restores_feature_version(self) -> None:
        repo = self._repo()
        config = TopicFinishConfig(name="login", keep_branch=True, common=batch())

        assert topic_finish(make_context(repo), config) == Ok(None)
        assert repo.branches["feature/login"] == "1.2.0-login-SNAPSHOT"
        assert repo.log["feature/login"] == [
            "Update versions for development branch",
            "Update feature branch back to feature version",
        ]
        assert repo.pushed == ["feature/login", "develop"]
        assert repo.current == "develop"

    def test_skip_feature_version(self) -> None:
        repo = FakeRepository(
            {"develop": "1.2.0-SNAPSHOT", "feature/login": "1.2.0-SNAPSHOT"},
            current="feature/login",
        )
        config = TopicFinishConfig(name="login", skip_topic_version=True, common=batch())

        assert topic_finish(make_context(repo), config) == Ok(None)
        assert repo.log["develop"] == ["Merge feature/login"]

    def test_remote_branch_is_deleted(self) -> None:
        repo = self._repo()
        repo.remote["feature/login"] = "1.2.0-login-SNAPSHOT"
        config = TopicFinishConfig(name="login", common=batch())

        assert topic_finish(make_context(repo), config) == Ok(None)
        assert "feature/login" not in repo.remote

    def test_missing_branch(self) -> None:
        repo = self._repo()
        config = TopicFinishConfig(name="nope", common=batch())
        result = topic_finish(make_context(repo), config)
        assert isinstance(result, Err)
        assert result.error.reason == "missing_branch"

    def test_bugfix(self) -> None:
        repo = FakeRepository(
            {"develop": "1.2.0-SNAPSHOT", "bugfix/npe": "1.2.0-SNAPSHOT"}, current="bugfix/npe"
        )
        config = TopicFinishConfig(kind=TopicKind.BUGFIX, common=batch())

        assert topic_finish(make_context(repo), config) == Ok(None)
        assert "bugfix/npe" not in repo.branches
        assert repo.log["develop"] == ["Merge bugfix/npe"]
