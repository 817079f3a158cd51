"""Interactive prompts on the terminal."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import typer

__all__ = ["ConsolePrompter"]


class ConsolePrompter:
    """``Prompter`` reading answers with ``typer.prompt``.

    Every method asks again until the answer is acceptable.
    """

    def choose_one(
        self,
        message: str,
        choices: Sequence[str],
        default: str | None = None,
    ) -> str:
        options = "/".join(choices)
        while True:
            answer = str(typer.prompt(f"{message} ({options})", default=default)).strip()
            if answer in choices:
                return answer
            typer.echo(f"Please answer one of: {options}")

    def prompt_validated(
        self,
        message: str,
        validate: Callable[[str], bool],
        default: str | None = None,
    ) -> str:
        while True:
            answer = str(typer.prompt(message, default=default)).strip()
            if validate(answer):
                return answer
            typer.echo(f"Invalid value: {answer!r}")

    def choose_from_list(self, message: str, choices: Sequence[str]) -> str:
        typer.echo(message)
        for i, choice in enumerate(choices, start=1):
            typer.echo(f"  {i}. {choice}")
        while True:
            answer = str(typer.prompt("Choose a number", default="1")).strip()
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            typer.echo(f"Please enter a number between 1 and {len(choices)}")
