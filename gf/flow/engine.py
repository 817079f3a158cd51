"""Workflow dispatch.

Usage:
    engine = WorkflowEngine(repo=repo, build=maven, prompter=prompter,
                            console=console, settings=settings)
    match engine.run(ReleaseStartConfig(release_version="1.2.0")):
        case Ok(_):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from gf.build.maven import BuildToolGateway
from gf.core.config import GitFlowSettings
from gf.core.result import Err, Result
from gf.git.repository import RepositoryGateway
from gf.output.console import ConsoleProtocol

from .contracts import FlowContext, Prompter
from .errors import FlowError, configuration_error
from .hotfix import hotfix_finish, hotfix_start
from .model import (
    FlowConfig,
    HotfixFinishConfig,
    HotfixStartConfig,
    ReleaseConfig,
    ReleaseFinishConfig,
    ReleaseStartConfig,
    SupportStartConfig,
    TopicFinishConfig,
    TopicStartConfig,
    VersionUpdateConfig,
)
from .release import release, release_finish, release_start
from .support import support_start
from .topic import topic_finish, topic_start
from .version import resolve_policy
from .version_update import version_update

__all__ = ["WorkflowEngine"]


class WorkflowEngine:
    """Runs one flow against the given gateways."""

    def __init__(
        self,
        *,
        repo: RepositoryGateway,
        build: BuildToolGateway,
        prompter: Prompter,
        console: ConsoleProtocol,
        settings: GitFlowSettings | None = None,
    ) -> None:
        self._repo = repo
        self._build = build
        self._prompter = prompter
        self._console = console
        self._settings = settings or GitFlowSettings()

    def context(self) -> Result[FlowContext, FlowError]:
        policy = resolve_policy(self._settings.version_policy)
        if isinstance(policy, Err):
            return policy
        return policy.map(
            lambda p: FlowContext(
                repo=self._repo,
                build=self._build,
                prompter=self._prompter,
                console=self._console,
                settings=self._settings,
                policy=p,
            )
        )

    def run(self, config: FlowConfig) -> Result[None, FlowError]:
        ctx = self.context()
        if isinstance(ctx, Err):
            return ctx

        match config:
            case TopicStartConfig():
                return topic_start(ctx.value, config)
            case TopicFinishConfig():
                return topic_finish(ctx.value, config)
            case ReleaseStartConfig():
                return release_start(ctx.value, config)
            case ReleaseFinishConfig():
                return release_finish(ctx.value, config)
            case ReleaseConfig():
                return release(ctx.value, config)
            case HotfixStartConfig():
                return hotfix_start(ctx.value, config)
            case HotfixFinishConfig():
                return hotfix_finish(ctx.value, config)
            case SupportStartConfig():
                return support_start(ctx.value, config)
            case VersionUpdateConfig():
                return version_update(ctx.value, config)
            case _:
                return Err(configuration_error(f"Unknown flow: {type(config).__name__}"))
