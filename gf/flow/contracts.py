"""Collaborators a workflow run is given.

A ``FlowContext`` is built once per run and threaded through every step:
the repository and build tool gateways, the prompter, the console, the
settings and the resolved version policy.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from gf.build.maven import BuildToolGateway
from gf.core.config import GitFlowSettings
from gf.git.repository import RepositoryGateway
from gf.output.console import ConsoleProtocol

from .version import VersionPolicy

__all__ = [
    "BuildToolGateway",
    "FlowContext",
    "Prompter",
    "RepositoryGateway",
]


class Prompter(Protocol):
    """Interactive input."""

    def choose_one(
        self,
        message: str,
        choices: Sequence[str],
        default: str | None = None,
    ) -> str:
        """Pick one of ``choices`` by typing it."""
        ...

    def prompt_validated(
        self,
        message: str,
        validate: Callable[[str], bool],
        default: str | None = None,
    ) -> str:
        """Ask until ``validate`` accepts the answer."""
        ...

    def choose_from_list(self, message: str, choices: Sequence[str]) -> str:
        """Pick one of ``choices`` by its number."""
        ...


@dataclass(frozen=True, slots=True)
class FlowContext:
    repo: RepositoryGateway
    build: BuildToolGateway
    prompter: Prompter
    console: ConsoleProtocol
    settings: GitFlowSettings
    policy: VersionPolicy | None = None
