from __future__ import annotations

import os
from pathlib import Path

import typer

from gf import __version__
from gf.cli.commands.hotfix import hotfix_finish, hotfix_start
from gf.cli.commands.release import release, release_finish, release_start
from gf.cli.commands.support import support_start
from gf.cli.commands.topic import bugfix_finish, bugfix_start, feature_finish, feature_start
from gf.cli.commands.version_update import version_update
from gf.cli.context import BATCH_MODE_ENV, REPO_ENV, VERBOSE_ENV
from gf.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("feature-start")(feature_start)
app.command("feature-finish")(feature_finish)
app.command("bugfix-start")(bugfix_start)
app.command("bugfix-finish")(bugfix_finish)
app.command("release")(release)
app.command("release-start")(release_start)
app.command("release-finish")(release_finish)
app.command("hotfix-start")(hotfix_start)
app.command("hotfix-finish")(hotfix_finish)
app.command("support-start")(support_start)
app.command("version-update")(version_update)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository root (default: current directory)",
    ),
    batch_mode: bool = typer.Option(
        False, "--batch-mode", "-B", help="Never prompt; use defaults instead."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo git and mvn commands."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

        os.environ[REPO_ENV] = str(root)

    if batch_mode:
        os.environ[BATCH_MODE_ENV] = "1"
    if verbose:
        os.environ[VERBOSE_ENV] = "1"


def main() -> None:
    app()
