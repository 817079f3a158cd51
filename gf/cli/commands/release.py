"""release, release-start and release-finish commands."""

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
    exit_with_flow_error,
    run_flow,
)
from gf.flow.errors import configuration_error
from gf.flow.model import ReleaseConfig, ReleaseFinishConfig, ReleaseStartConfig
from gf.git.repository import MergeMode

_RELEASE_VERSION = typer.Option(
    None, "--release-version", help="Version to release (default: prompt or current)"
)
_DEVELOPMENT_VERSION = typer.Option(
    None, "--development-version", help="Next development version"
)
_DIGITS_ONLY = typer.Option(
    False, "--digits-only", help="Drop qualifiers from the next development version"
)
_SKIP_TAG = typer.Option(False, "--skip-tag", help="Do not tag the release")
_REBASE = typer.Option(False, "--rebase", help="Rebase the release onto production")
_FF_ONLY = typer.Option(False, "--ff-only", help="Fast-forward production only")
_MERGE = typer.Option(
    False, "--merge", help="Plain merge into production, fast-forwarding when possible"
)


def _merge_mode(rebase: bool, ff_only: bool, merge: bool) -> MergeMode:
    chosen = [
        mode
        for mode, flag in (
            (MergeMode.REBASE, rebase),
            (MergeMode.FF_ONLY, ff_only),
            (MergeMode.MERGE, merge),
        )
        if flag
    ]
    if len(chosen) > 1:
        exit_with_flow_error(
            configuration_error(
                "Conflicting merge options: " + ", ".join(f"--{m.value}" for m in chosen),
                hint="Pick one of --rebase, --ff-only and --merge.",
            )
        )
    return chosen[0] if chosen else MergeMode.NO_FF


def release_start(
    release_version: str | None = _RELEASE_VERSION,
    same_branch_name: bool = typer.Option(
        False, "--same-branch-name", help="Name the branch release/ without a version"
    ),
    from_commit: str | None = typer.Option(
        None, "--from-commit", help="Commit to branch from instead of development"
    ),
    use_snapshot: bool = typer.Option(
        False, "--use-snapshot", help="Keep -SNAPSHOT on the release branch"
    ),
    commit_dev_version: bool = typer.Option(
        False,
        "--commit-development-version",
        help="Move development to the next version right away",
    ),
    development_version: str | None = _DEVELOPMENT_VERSION,
    digits_only: bool = _DIGITS_ONLY,
    digit: int | None = DIGIT,
    fetch_remote: bool = FETCH,
    push_remote: bool = PUSH,
    install_project: bool = INSTALL,
    sign: bool = SIGN,
    arg_line: str | None = ARG_LINE,
    push_options: list[str] = PUSH_OPTIONS,
    version_property: str | None = VERSION_PROPERTY,
    versions_force_update: bool = FORCE_UPDATE,
) -> None:
    """Branch a release off development."""
    run_flow(
        ReleaseStartConfig(
            release_version=release_version,
            same_branch_name=same_branch_name,
            from_commit=from_commit,
            use_snapshot_in_release=use_snapshot,
            commit_development_version_at_start=commit_dev_version,
            development_version=development_version,
            digits_only_dev_version=digits_only,
            version_digit_to_increment=digit,
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


def release_finish(
    skip_tag: bool = _SKIP_TAG,
    keep_branch: bool = typer.Option(False, "--keep-branch", help="Keep the release branch"),
    rebase: bool = _REBASE,
    ff_only: bool = _FF_ONLY,
    merge: bool = _MERGE,
    skip_merge_prod: bool = typer.Option(
        False, "--skip-merge-prod", help="Do not merge into production"
    ),
    skip_merge_dev: bool = typer.Option(
        False, "--skip-merge-dev", help="Do not merge back into development"
    ),
    no_back_merge: bool = typer.Option(
        False, "--no-back-merge", help="Merge the release branch, not the tag, into development"
    ),
    use_snapshot: bool = typer.Option(
        False, "--use-snapshot", help="The release branch still carries -SNAPSHOT"
    ),
    commit_dev_version: bool = typer.Option(
        False,
        "--commit-development-version",
        help="Development was moved to the next version at start",
    ),
    development_version: str | None = _DEVELOPMENT_VERSION,
    digits_only: bool = _DIGITS_ONLY,
    digit: int | None = DIGIT,
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
    """Merge the release branch into production and back into development."""
    run_flow(
        ReleaseFinishConfig(
            skip_tag=skip_tag,
            keep_branch=keep_branch,
            merge_mode=_merge_mode(rebase, ff_only, merge),
            skip_merge_prod_branch=skip_merge_prod,
            skip_merge_dev_branch=skip_merge_dev,
            no_back_merge=no_back_merge,
            use_snapshot_in_release=use_snapshot,
            commit_development_version_at_start=commit_dev_version,
            development_version=development_version,
            digits_only_dev_version=digits_only,
            version_digit_to_increment=digit,
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


def release(
    release_version: str | None = _RELEASE_VERSION,
    skip_tag: bool = _SKIP_TAG,
    rebase: bool = _REBASE,
    ff_only: bool = _FF_ONLY,
    merge: bool = _MERGE,
    development_version: str | None = _DEVELOPMENT_VERSION,
    digits_only: bool = _DIGITS_ONLY,
    digit: int | None = DIGIT,
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
    """Release development in one step, without a release branch."""
    run_flow(
        ReleaseConfig(
            release_version=release_version,
            skip_tag=skip_tag,
            merge_mode=_merge_mode(rebase, ff_only, merge),
            development_version=development_version,
            digits_only_dev_version=digits_only,
            version_digit_to_increment=digit,
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
