"""hotfix-start and hotfix-finish commands."""

from __future__ import annotations

import typer

from gf.cli.commands._helpers import (
    ALLOW_SNAPSHOTS,
    ARG_LINE,
    DIGIT,
    FETCH,
    FORCE_UPDATE,
    INSTALL,
    POST_GOALS,
    PRE_GOALS,
    PUSH,
    PUSH_OPTIONS,
    SIGN,
    SKIP_TEST,
    VERSION_PROPERTY,
    common_options,
    run_flow,
)
from gf.flow.model import HotfixFinishConfig, HotfixStartConfig


def hotfix_start(
    from_branch: str | None = typer.Option(
        None, "--from-branch", help="Production or a support branch (default: prompt)"
    ),
    hotfix_version: str | None = typer.Option(
        None, "--hotfix-version", help="Hotfix version (default: prompt or next patch)"
    ),
    digit: int | None = DIGIT,
    use_snapshot: bool = typer.Option(
        False, "--use-snapshot", help="Keep -SNAPSHOT on the hotfix branch"
    ),
    fetch_remote: bool = FETCH,
    push_remote: bool = typer.Option(False, "--push/--no-push", help="Push the new branch"),
    install_project: bool = INSTALL,
    sign: bool = SIGN,
    arg_line: str | None = ARG_LINE,
    push_options: list[str] = PUSH_OPTIONS,
    version_property: str | None = VERSION_PROPERTY,
    versions_force_update: bool = FORCE_UPDATE,
) -> None:
    """Branch a hotfix off production or a support branch."""
    run_flow(
        HotfixStartConfig(
            from_branch=from_branch,
            hotfix_version=hotfix_version,
            version_digit_to_increment=digit,
            use_snapshot_in_hotfix=use_snapshot,
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


def hotfix_finish(
    hotfix_version: str | None = typer.Option(
        None, "--hotfix-version", help="Finish the hotfix branch of this version"
    ),
    hotfix_branch: str | None = typer.Option(
        None, "--hotfix-branch", help="Full name of the hotfix branch to finish"
    ),
    skip_tag: bool = typer.Option(False, "--skip-tag", help="Do not tag the hotfix"),
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the hotfix branch"),
    skip_merge_prod: bool = typer.Option(
        False, "--skip-merge-prod", help="Do not merge into production"
    ),
    skip_merge_dev: bool = typer.Option(
        False, "--skip-merge-dev", help="Do not merge into development"
    ),
    no_back_merge: bool = typer.Option(
        False, "--no-back-merge", help="Merge the hotfix branch, not the tag, into development"
    ),
    use_snapshot: bool = typer.Option(
        False, "--use-snapshot", help="The hotfix branch still carries -SNAPSHOT"
    ),
    fetch_remote: bool = FETCH,
    push_remote: bool = PUSH,
    install_project: bool = INSTALL,
    skip_test: bool = SKIP_TEST,
    sign: bool = SIGN,
    allow_snapshots: bool = ALLOW_SNAPSHOTS,
    arg_line: str | None = ARG_LINE,
    pre_goals: list[str] = PRE_GOALS,
    post_goals: list[str] = POST_GOALS,
    push_options: list[str] = PUSH_OPTIONS,
    version_property: str | None = VERSION_PROPERTY,
    versions_force_update: bool = FORCE_UPDATE,
) -> None:
    """Merge a hotfix into its base branch and bring it forward."""
    run_flow(
        HotfixFinishConfig(
            hotfix_version=hotfix_version,
            hotfix_branch=hotfix_branch,
            skip_tag=skip_tag,
            keep_branch=keep_branch,
            skip_merge_prod_branch=skip_merge_prod,
            skip_merge_dev_branch=skip_merge_dev,
            no_back_merge_hotfix=no_back_merge,
            use_snapshot_in_hotfix=use_snapshot,
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
                version_property=version_property,
                versions_force_update=versions_force_update,
            ),
        )
    )
