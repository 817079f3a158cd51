"""Core types: results, exit codes and settings."""

from .config import (
    BranchConfig,
    CommitMessages,
    ConfigError,
    GitFlowSettings,
    ToolsConfig,
    load_settings,
    load_settings_or_default,
    render_message,
)
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "BranchConfig",
    "CommitMessages",
    "ConfigError",
    "GitFlowSettings",
    "ToolsConfig",
    "load_settings",
    "load_settings_or_default",
    "render_message",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
