from __future__ import annotations

import os
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

import gf.cli.commands._helpers as helpers
from gf import __version__
from gf.cli.app import app
from gf.cli.context import BATCH_MODE_ENV, REPO_ENV, VERBOSE_ENV, CLIContext, build_context
from gf.core.config import GitFlowSettings
from gf.core.result import Ok, Result
from gf.flow.engine import WorkflowEngine
from gf.flow.errors import FlowError
from gf.flow.model import (
    FlowConfig,
    HotfixStartConfig,
    ReleaseFinishConfig,
    TopicStartConfig,
)
from gf.git.repository import MergeMode
from gf.output.console import MockConsole
from gf.test.flow.fakes import FakeBuild, FakeRepository, ScriptedPrompter

runner = CliRunner()


class RecordingEngine:
    def __init__(self) -> None:
        self.configs: list[FlowConfig] = []

    def run(self, config: FlowConfig) -> Result[None, FlowError]:
        self.configs.append(config)
        return Ok(None)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # the root callback writes these; setenv first so they are restored
    for name in (REPO_ENV, BATCH_MODE_ENV, VERBOSE_ENV):
        monkeypatch.setenv(name, "")


@pytest.fixture
def console(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> MockConsole:
    console = MockConsole()
    ctx = CLIContext(
        repo_root=tmp_path,
        settings=GitFlowSettings(),
        console=console,
        batch_mode=True,
    )
    monkeypatch.setattr(helpers, "build_context", lambda: ctx)
    return console


def _use_engine(monkeypatch: pytest.MonkeyPatch, engine: object) -> None:
    monkeypatch.setattr(helpers, "make_engine", lambda ctx, common: engine)


def _fake_engine(
    monkeypatch: pytest.MonkeyPatch,
    repo: FakeRepository,
    build: FakeBuild | None = None,
) -> None:
    def make(ctx: CLIContext, common: object) -> WorkflowEngine:
        return WorkflowEngine(
            repo=repo,
            build=build or FakeBuild(repo),
            prompter=ScriptedPrompter(),
            console=ctx.console,
            settings=ctx.settings,
        )

    monkeypatch.setattr(helpers, "make_engine", make)


class TestRootOptions:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_repo_must_be_a_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--repo", str(tmp_path / "missing"), "feature-start"])
        assert result.exit_code == 1

    def test_batch_mode_sets_env(self, monkeypatch: pytest.MonkeyPatch, console: MockConsole) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        result = runner.invoke(app, ["-B", "feature-start", "--name", "login"])

        assert result.exit_code == 0
        assert os.environ[BATCH_MODE_ENV] == "1"


class TestOptionMapping:
    """Command line flags become flow configs."""

    def test_feature_start_defaults(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        result = runner.invoke(app, ["feature-start", "--name", "login"])

        assert result.exit_code == 0
        (config,) = engine.configs
        assert isinstance(config, TopicStartConfig)
        assert config.name == "login"
        assert config.skip_topic_version is False
        assert config.common.push_remote is False
        assert config.common.interactive is False

    def test_bugfix_start_skips_version_by_default(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        runner.invoke(app, ["bugfix-start", "--name", "npe"])
        runner.invoke(app, ["bugfix-start", "--name", "npe", "--bugfix-version"])

        assert [c.skip_topic_version for c in engine.configs] == [True, False]  # type: ignore[union-attr]

    def test_release_finish_flags(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        result = runner.invoke(
            app,
            [
                "release-finish",
                "--rebase",
                "--skip-tag",
                "--no-push",
                "--pre-goal",
                "clean verify",
                "--pre-goal",
                "site",
                "--push-option",
                "ci.skip",
                "--sign",
                "--digit",
                "1",
            ],
        )

        assert result.exit_code == 0
        (config,) = engine.configs
        assert isinstance(config, ReleaseFinishConfig)
        assert config.merge_mode is MergeMode.REBASE
        assert config.skip_tag is True
        assert config.version_digit_to_increment == 1
        assert config.common.push_remote is False
        assert config.common.pre_goals == ("clean verify", "site")
        assert config.common.push_options == ("ci.skip",)
        assert config.common.gpg_sign_commit is True
        assert config.common.gpg_sign_tag is True

    def test_hotfix_start(self, monkeypatch: pytest.MonkeyPatch, console: MockConsole) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        runner.invoke(app, ["hotfix-start", "--from-branch", "support/1.1", "--use-snapshot"])

        (config,) = engine.configs
        assert isinstance(config, HotfixStartConfig)
        assert config.from_branch == "support/1.1"
        assert config.use_snapshot_in_hotfix is True
        assert config.common.push_remote is False

    @pytest.mark.parametrize(
        ("flags", "mode"),
        [
            ([], MergeMode.NO_FF),
            (["--merge"], MergeMode.MERGE),
            (["--ff-only"], MergeMode.FF_ONLY),
            (["--rebase"], MergeMode.REBASE),
        ],
    )
    def test_release_merge_mode(
        self,
        monkeypatch: pytest.MonkeyPatch,
        console: MockConsole,
        flags: list[str],
        mode: MergeMode,
    ) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        runner.invoke(app, ["release-finish", *flags])
        runner.invoke(app, ["release", *flags])

        assert [c.merge_mode for c in engine.configs] == [mode, mode]  # type: ignore[union-attr]

    def test_conflicting_merge_modes(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        result = runner.invoke(app, ["release-finish", "--rebase", "--ff-only"])

        assert result.exit_code == 1
        assert engine.configs == []
        assert console.find("error: Conflicting merge options: --rebase, --ff-only")


class TestExitCodes:
    """Flow error kinds map to process exit codes."""

    def test_success(self, monkeypatch: pytest.MonkeyPatch, console: MockConsole) -> None:
        repo = FakeRepository({"develop": "1.2.0-SNAPSHOT"})
        _fake_engine(monkeypatch, repo)

        result = runner.invoke(app, ["feature-start", "--name", "login"])

        assert result.exit_code == 0
        assert repo.branches["feature/login"] == "1.2.0-login-SNAPSHOT"
        assert repo.pushes == []

    def test_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        _fake_engine(monkeypatch, FakeRepository({"develop": "1.2.0-SNAPSHOT"}))

        result = runner.invoke(app, ["feature-start", "--name", "login", "--arg-line", "-X; rm"])

        assert result.exit_code == 1
        assert console.has_error()

    def test_unbalanced_quote_in_arg_line(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        engine = RecordingEngine()
        _use_engine(monkeypatch, engine)

        result = runner.invoke(
            app, ["feature-start", "--name", "login", "--arg-line", "-Dmsg='unterminated"]
        )

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert engine.configs == []
        assert console.find("error: Invalid --arg-line")

    def test_precondition_error(
        self, monkeypatch: pytest.MonkeyPatch, console: MockConsole
    ) -> None:
        _fake_engine(monkeypatch, FakeRepository({"develop": "1.2.0-SNAPSHOT", "master": "1.1.0"}))

        result = runner.invoke(app, ["release-finish"])

        assert result.exit_code == 2
        assert console.find("hint: Start a release first.")

    def test_tool_error(self, monkeypatch: pytest.MonkeyPatch, console: MockConsole) -> None:
        repo = FakeRepository(
            {"develop": "1.2.0-SNAPSHOT", "feature/login": "1.2.0-login-SNAPSHOT"},
            current="feature/login",
        )
        _fake_engine(monkeypatch, repo, FakeBuild(repo, fail_tests=True))

        result = runner.invoke(app, ["feature-finish", "--name", "login"])

        assert result.exit_code == 3
        assert "feature/login" in repo.branches

    def test_version_error(self, monkeypatch: pytest.MonkeyPatch, console: MockConsole) -> None:
        _fake_engine(monkeypatch, FakeRepository({"develop": "1.2.0-SNAPSHOT"}))

        result = runner.invoke(app, ["release-start", "--release-version", "final"])

        assert result.exit_code == 4


class TestBuildContext:
    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv(REPO_ENV, str(tmp_path))
        monkeypatch.setenv(BATCH_MODE_ENV, "1")

        ctx = build_context()

        assert ctx.repo_root == tmp_path
        assert ctx.batch_mode is True
        assert ctx.verbose is False
        assert ctx.settings == GitFlowSettings()

    def test_invalid_settings(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / "gitflow.toml").write_text("[branches\n", encoding="utf-8")
        monkeypatch.setenv(REPO_ENV, str(tmp_path))

        with pytest.raises(typer.Exit) as excinfo:
            build_context()
        assert excinfo.value.exit_code == 1
