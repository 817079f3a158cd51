"""Workflow error values.

Every flow step returns ``Result[T, FlowError]``. The ``kind`` decides the
process exit code; ``reason`` narrows precondition failures for callers that
need to tell them apart (tests, scripted use).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

__all__ = [
    "FlowError",
    "FlowErrorKind",
    "configuration_error",
    "precondition_error",
    "tool_error",
    "version_error",
]

FlowErrorKind = Literal[
    "configuration",
    "precondition",
    "external_tool",
    "version_computation",
]


@dataclass(frozen=True, slots=True)
class FlowError:
    """A failed workflow run.

    Attributes:
        kind: Error category.
        message: One line description shown to the operator.
        hint: Optional follow-up suggestion.
        reason: Machine readable detail, e.g. ``"remote_ahead"``.
    """

    kind: FlowErrorKind
    message: str
    hint: str | None = None
    reason: str | None = None


class _ToolFailure(Protocol):
    @property
    def command(self) -> str: ...

    @property
    def message(self) -> str: ...


def configuration_error(message: str, *, hint: str | None = None) -> FlowError:
    return FlowError(kind="configuration", message=message, hint=hint)


def precondition_error(
    message: str,
    *,
    reason: str | None = None,
    hint: str | None = None,
) -> FlowError:
    return FlowError(kind="precondition", message=message, hint=hint, reason=reason)


def version_error(message: str, *, hint: str | None = None) -> FlowError:
    return FlowError(kind="version_computation", message=message, hint=hint)


def tool_error(failure: _ToolFailure) -> FlowError:
    """Convert a ``GitError`` or ``BuildError`` into a flow error.

    The tool's own output is surfaced verbatim.
    """
    message = failure.message or f"{failure.command} failed"
    return FlowError(
        kind="external_tool",
        message=message,
        hint=f"command: {failure.command}",
    )
