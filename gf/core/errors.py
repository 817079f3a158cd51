"""Error codes for CLI exit status.

Each workflow failure kind maps to one process exit code. The values are
part of the command line contract and should remain stable:
- 0: Success
- 1: Configuration error (invalid flags, bad branch name pattern)
- 2: Precondition error (dirty tree, remote ahead, missing/ambiguous branch)
- 3: External tool error (git or mvn exited non-zero)
- 4: Version computation error (unparsable or blank version)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    CONFIG_ERROR = 1
    PRECONDITION_ERROR = 2
    TOOL_ERROR = 3
    VERSION_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
