"""Git-flow workflows: version arithmetic, remote checks and per-flow steps."""

from .contracts import FlowContext, Prompter
from .engine import WorkflowEngine
from .errors import FlowError
from .model import (
    CommonOptions,
    FlowConfig,
    HotfixFinishConfig,
    HotfixStartConfig,
    ReleaseConfig,
    ReleaseFinishConfig,
    ReleaseStartConfig,
    SupportStartConfig,
    TopicFinishConfig,
    TopicKind,
    TopicStartConfig,
    VersionUpdateConfig,
)
from .version import VersionInfo, VersionPolicy, is_valid_version, register_policy

__all__ = [
    "CommonOptions",
    "FlowConfig",
    "FlowContext",
    "FlowError",
    "HotfixFinishConfig",
    "HotfixStartConfig",
    "Prompter",
    "ReleaseConfig",
    "ReleaseFinishConfig",
    "ReleaseStartConfig",
    "SupportStartConfig",
    "TopicFinishConfig",
    "TopicKind",
    "TopicStartConfig",
    "VersionInfo",
    "VersionPolicy",
    "VersionUpdateConfig",
    "WorkflowEngine",
    "is_valid_version",
    "register_policy",
]
