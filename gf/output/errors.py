"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gf.core.errors import ErrorCode
from gf.output.console import Style

if TYPE_CHECKING:
    from gf.flow.errors import FlowError
    from gf.output.console import ConsoleProtocol

__all__ = ["flow_error_exit_code", "print_flow_error"]


def print_flow_error(error: FlowError, console: ConsoleProtocol) -> None:
    """Print one error line and an optional hint."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def flow_error_exit_code(error: FlowError) -> int:
    """Get exit code for a flow error."""
    match error.kind:
        case "configuration":
            return int(ErrorCode.CONFIG_ERROR)
        case "precondition":
            return int(ErrorCode.PRECONDITION_ERROR)
        case "external_tool":
            return int(ErrorCode.TOOL_ERROR)
        case "version_computation":
            return int(ErrorCode.VERSION_ERROR)
