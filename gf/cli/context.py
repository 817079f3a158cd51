from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from gf.core.config import GitFlowSettings, load_settings_or_default
from gf.core.errors import ErrorCode
from gf.core.result import Err
from gf.output.console import ConsoleProtocol, RichConsole

REPO_ENV = "GF_REPO"
BATCH_MODE_ENV = "GF_BATCH_MODE"
VERBOSE_ENV = "GF_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    settings: GitFlowSettings
    console: ConsoleProtocol
    batch_mode: bool = False
    verbose: bool = False


def _flag(name: str) -> bool:
    return os.environ.get(name, "") == "1"


def build_context() -> CLIContext:
    repo_root = Path(os.environ.get(REPO_ENV) or Path.cwd())
    verbose = _flag(VERBOSE_ENV)
    console = RichConsole(verbose=verbose)

    settings_result = load_settings_or_default(repo_root)
    if isinstance(settings_result, Err):
        console.error(settings_result.error.message)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(
        repo_root=repo_root,
        settings=settings_result.value,
        console=console,
        batch_mode=_flag(BATCH_MODE_ENV),
        verbose=verbose,
    )
