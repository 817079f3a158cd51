from __future__ import annotations

import typer

from gf.cli.commands._helpers import (
    ARG_LINE,
    DIGIT,
    FETCH,
    FORCE_UPDATE,
    INSTALL,
    PUSH,
    PUSH_OPTIONS,
    SIGN,
    VERSION_PROPERTY,
    common_options,
    run_flow,
)
from gf.flow.model import VersionUpdateConfig


def version_update(
    update_version: str | None = typer.Option(
        None, "--update-version", help="New version (default: prompt or next patch)"
    ),
    from_branch: str | None = typer.Option(
        None, "--from-branch", help="Release or support branch to update"
    ),
    skip_tag: bool = typer.Option(False, "--skip-tag", help="Do not tag the new version"),
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
    """Change the version of a release or support branch."""
    run_flow(
        VersionUpdateConfig(
            update_version=update_version,
            from_branch=from_branch,
            skip_tag=skip_tag,
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
