"""feature-start, feature-finish, bugfix-start and bugfix-finish commands."""

from __future__ import annotations

import typer

from gf.cli.commands._helpers import (
    ALLOW_SNAPSHOTS,
    ARG_LINE,
    FETCH,
    FORCE_UPDATE,
    INSTALL,
    POST_GOALS,
    PRE_GOALS,
    PUSH_OPTIONS,
    SIGN,
    SKIP_TEST,
    VERSION_PROPERTY,
    common_options,
    run_flow,
)
from gf.flow.model import TopicFinishConfig, TopicKind, TopicStartConfig

# Topic branches are local until asked otherwise.
_PUSH_START = typer.Option(False, "--push/--no-push", help="Push the new branch")


def feature_start(
    name: str | None = typer.Option(None, "--name", help="Feature name (without prefix)"),
    name_pattern: str | None = typer.Option(
        None, "--name-pattern", help="Regular expression feature names must match"
    ),
    skip_feature_version: bool = typer.Option(
        False, "--skip-feature-version", help="Keep the development version"
    ),
    fetch_remote: bool = FETCH,
    push_remote: bool = _PUSH_START,
    install_project: bool = INSTALL,
    sign: bool = SIGN,
    arg_line: str | None = ARG_LINE,
    push_options: list[str] = PUSH_OPTIONS,
    version_property: str | None = VERSION_PROPERTY,
    versions_force_update: bool = FORCE_UPDATE,
) -> None:
    """Start a feature branch from development."""
    run_flow(
        TopicStartConfig(
            kind=TopicKind.FEATURE,
            name=name,
            name_pattern=name_pattern,
            skip_topic_version=skip_feature_version,
            common=common_options(
                fetch_remote=fetch_remote,
                push_remote=push_remote,
                install_project=install_project,
                skip_test=True,
                sign=sign,
                allow_snapshots=True,
                arg_line=arg_line,
                pre_goals=[],
                post_goals=[],
                push_options=push_options,
                version_property=version_property,
                versions_force_update=versions_force_update,
            ),
        )
    )


def bugfix_start(
    name: str | None = typer.Option(None, "--name", help="Bugfix name (without prefix)"),
    name_pattern: str | None = typer.Option(
        None, "--name-pattern", help="Regular expression bugfix names must match"
    ),
    bugfix_version: bool = typer.Option(
        False, "--bugfix-version", help="Put the bugfix name into the project version"
    ),
    fetch_remote: bool = FETCH,
    push_remote: bool = _PUSH_START,
    install_project: bool = INSTALL,
    sign: bool = SIGN,
    arg_line: str | None = ARG_LINE,
    push_options: list[str] = PUSH_OPTIONS,
) -> None:
    """Start a bugfix branch from development."""
    run_flow(
        TopicStartConfig(
            kind=TopicKind.BUGFIX,
            name=name,
            name_pattern=name_pattern,
            skip_topic_version=not bugfix_version,
            common=common_options(
                fetch_remote=fetch_remote,
                push_remote=push_remote,
                install_project=install_project,
                skip_test=True,
                sign=sign,
                allow_snapshots=True,
                arg_line=arg_line,
                pre_goals=[],
                post_goals=[],
                push_options=push_options,
                version_property=None,
                versions_force_update=False,
            ),
        )
    )


def _finish(
    kind: TopicKind,
    *,
    name: str | None,
    keep_branch: bool,
    squash: bool,
    skip_topic_version: bool,
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
) -> None:
    run_flow(
        TopicFinishConfig(
            kind=kind,
            name=name,
            keep_branch=keep_branch,
            squash=squash,
            skip_topic_version=skip_topic_version,
            common=common_options(
                fetch_remote=fetch_remote,
                push_remote=push_remote,
                install_project=install_project,
                skip_test=skip_test,
                sign=sign,
                allow_snapshots=allow_snapshots,
                arg_line=arg_line,
                pre_goals=pre_goals,
                post_goals=post_goals,
                push_options=push_options,
                version_property=None,
                versions_force_update=False,
            ),
        )
    )


def feature_finish(
    name: str | None = typer.Option(None, "--name", help="Feature to finish (default: prompt)"),
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the feature branch"),
    squash: bool = typer.Option(False, "--squash", help="Squash the feature into one commit"),
    skip_feature_version: bool = typer.Option(
        False, "--skip-feature-version", help="Leave the project version untouched"
    ),
    fetch_remote: bool = FETCH,
    push_remote: bool = typer.Option(True, "--push/--no-push", help="Push development"),
    install_project: bool = INSTALL,
    skip_test: bool = SKIP_TEST,
    sign: bool = SIGN,
    allow_snapshots: bool = ALLOW_SNAPSHOTS,
    arg_line: str | None = ARG_LINE,
    pre_goals: list[str] = PRE_GOALS,
    post_goals: list[str] = POST_GOALS,
    push_options: list[str] = PUSH_OPTIONS,
) -> None:
    """Merge a feature branch into development."""
    _finish(
        TopicKind.FEATURE,
        name=name,
        keep_branch=keep_branch,
        squash=squash,
        skip_topic_version=skip_feature_version,
        fetch_remote=fetch_remote,
        push_remote=push_remote,
        install_project=install_project,
        skip_test=skip_test,
        sign=sign,
        allow_snapshots=allow_snapshots,
        arg_line=arg_line,
        pre_goals=pre_goals,
        post_goals=post_goals,
        push_options=push_options,
    )


def bugfix_finish(
    name: str | None = typer.Option(None, "--name", help="Bugfix to finish (default: prompt)"),
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the bugfix branch"),
    squash: bool = typer.Option(False, "--squash", help="Squash the bugfix into one commit"),
    fetch_remote: bool = FETCH,
    push_remote: bool = typer.Option(True, "--push/--no-push", help="Push development"),
    install_project: bool = INSTALL,
    skip_test: bool = SKIP_TEST,
    sign: bool = SIGN,
    allow_snapshots: bool = ALLOW_SNAPSHOTS,
    arg_line: str | None = ARG_LINE,
    pre_goals: list[str] = PRE_GOALS,
    post_goals: list[str] = POST_GOALS,
    push_options: list[str] = PUSH_OPTIONS,
) -> None:
    """Merge a bugfix branch into development."""
    _finish(
        TopicKind.BUGFIX,
        name=name,
        keep_branch=keep_branch,
        squash=squash,
        skip_topic_version=False,
        fetch_remote=fetch_remote,
        push_remote=push_remote,
        install_project=install_project,
        skip_test=skip_test,
        sign=sign,
        allow_snapshots=allow_snapshots,
        arg_line=arg_line,
        pre_goals=pre_goals,
        post_goals=post_goals,
        push_options=push_options,
    )
