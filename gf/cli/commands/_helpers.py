"""Shared helpers for CLI commands."""

from __future__ import annotations

import shlex
from dataclasses import replace
from typing import NoReturn

import typer

from gf.build.maven import Maven
from gf.cli.context import CLIContext, build_context
from gf.cli.prompter import ConsolePrompter
from gf.core.result import Err, Ok
from gf.flow.engine import WorkflowEngine
from gf.flow.errors import FlowError
from gf.flow.model import CommonOptions, FlowConfig
from gf.flow.steps import validate_options
from gf.git.repository import Repository
from gf.output.errors import flow_error_exit_code, print_flow_error

# Options shared by every flow command.
FETCH = typer.Option(True, "--fetch/--no-fetch", help="Fetch and compare with the remote first")
PUSH = typer.Option(True, "--push/--no-push", help="Push the result to the remote")
INSTALL = typer.Option(False, "--install", help="Install the project at the end")
SKIP_TEST = typer.Option(False, "--skip-test", help="Do not run the tests")
SIGN = typer.Option(False, "--sign", help="GPG-sign commits and tags")
ALLOW_SNAPSHOTS = typer.Option(False, "--allow-snapshots", help="Accept SNAPSHOT dependencies")
ARG_LINE = typer.Option(None, "--arg-line", help="Extra arguments for every mvn call")
PRE_GOALS = typer.Option([], "--pre-goal", help="Goals to run before merging (repeatable)")
POST_GOALS = typer.Option([], "--post-goal", help="Goals to run after merging (repeatable)")
PUSH_OPTIONS = typer.Option([], "--push-option", help="git push -o value (repeatable)")
VERSION_PROPERTY = typer.Option(
    None, "--version-property", help="Property to set to the new version as well"
)
FORCE_UPDATE = typer.Option(
    False, "--versions-force-update", help="Update every module carrying the old version"
)
DIGIT = typer.Option(
    None, "--digit", help="Index of the version digit to increment (0 = major)"
)


def common_options(
    *,
    fetch_remote: bool,
    push_remote: bool,
    install_project: bool,
    skip_test: bool,
    sign: bool,
    allow_snapshots: bool,
    arg_line: str | None,
    pre_goals: list[str],
    post_goals: list[str],
    push_options: list[str],
    version_property: str | None,
    versions_force_update: bool,
) -> CommonOptions:
    return CommonOptions(
        fetch_remote=fetch_remote,
        push_remote=push_remote,
        install_project=install_project,
        skip_test=skip_test,
        gpg_sign_commit=sign,
        gpg_sign_tag=sign,
        allow_snapshots=allow_snapshots,
        arg_line=arg_line,
        pre_goals=tuple(pre_goals),
        post_goals=tuple(post_goals),
        push_options=tuple(push_options),
        version_property=version_property,
        versions_force_update=versions_force_update,
    )


def make_engine(ctx: CLIContext, common: CommonOptions) -> WorkflowEngine:
    """Engine wired to git and mvn in the repository root."""
    tools = ctx.settings.tools
    args = shlex.split(common.arg_line) if common.arg_line else []
    return WorkflowEngine(
        repo=Repository(
            ctx.repo_root,
            git=tools.git,
            origin=ctx.settings.branches.origin,
            console=ctx.console,
        ),
        build=Maven(
            ctx.repo_root,
            mvn=tools.mvn,
            args=args,
            batch_mode=ctx.batch_mode,
            console=ctx.console,
        ),
        prompter=ConsolePrompter(),
        console=ctx.console,
        settings=ctx.settings,
    )


def run_flow(config: FlowConfig) -> None:
    """Run a flow and exit with its error code on failure.

    Batch mode turns off prompting.
    """
    ctx = build_context()
    common = replace(config.common, interactive=not ctx.batch_mode)
    config = replace(config, common=common)

    # mvn arguments are tokenized when the engine is built
    result = validate_options(common)
    if isinstance(result, Ok):
        result = make_engine(ctx, common).run(config)
    if isinstance(result, Err):
        print_flow_error(result.error, ctx.console)
        exit_with_code(flow_error_exit_code(result.error))


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)



def exit_with_flow_error(error: FlowError) -> NoReturn:
    """Report an error found before any flow runs."""
    print_flow_error(error, build_context().console)
    exit_with_code(flow_error_exit_code(error))
