from __future__ import annotations

import typer

from gf.cli.commands._helpers import (
    ARG_LINE,
    FETCH,
    INSTALL,
    PUSH,
    PUSH_OPTIONS,
    SIGN,
    common_options,
    run_flow,
)
from gf.flow.model import SupportStartConfig


def support_start(
    tag_name: str | None = typer.Option(
        None, "--tag", help="Tag to branch from (default: prompt or latest)"
    ),
    branch_name: str | None = typer.Option(
        None, "--name", help="Support branch name without prefix (default: the tag)"
    ),
    fetch_remote: bool = FETCH,
    push_remote: bool = PUSH,
    install_project: bool = INSTALL,
    sign: bool = SIGN,
    arg_line: str | None = ARG_LINE,
    push_options: list[str] = PUSH_OPTIONS,
) -> None:
    """Start a support branch from a release tag."""
    run_flow(
        SupportStartConfig(
            tag_name=tag_name,
            branch_name=branch_name,
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
