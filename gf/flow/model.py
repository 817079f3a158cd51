"""Per-run workflow configuration.

One frozen dataclass per flow; ``FlowConfig`` is their union and is what
``WorkflowEngine.run`` dispatches on. Options shared by every flow live in
``CommonOptions``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from gf.git.repository import MergeMode

__all__ = [
    "CommonOptions",
    "FlowConfig",
    "HotfixFinishConfig",
    "HotfixStartConfig",
    "ReleaseConfig",
    "ReleaseFinishConfig",
    "ReleaseStartConfig",
    "RemoteSyncResult",
    "SupportStartConfig",
    "SyncDecision",
    "TopicFinishConfig",
    "TopicKind",
    "TopicStartConfig",
    "VersionUpdateConfig",
]


class TopicKind(Enum):
    """Short-lived branches started from and finished into development."""

    FEATURE = "feature"
    BUGFIX = "bugfix"


class SyncDecision(Enum):
    CREATE_LOCAL = "create_local"
    PROCEED = "proceed"


@dataclass(frozen=True, slots=True)
class RemoteSyncResult:
    """Local branch state relative to its remote counterpart."""

    branch: str
    local_exists: bool
    remote_exists: bool
    ahead: int = 0
    behind: int = 0

    @property
    def decision(self) -> SyncDecision:
        if not self.local_exists and self.remote_exists:
            return SyncDecision.CREATE_LOCAL
        return SyncDecision.PROCEED


@dataclass(frozen=True, slots=True)
class CommonOptions:
    """Options every flow understands.

    Attributes:
        fetch_remote: Fetch and compare branches with the remote first.
        push_remote: Push results to the remote at the end.
        install_project: Run ``install`` on the resulting branch.
        skip_test: Do not run the tests before merging.
        gpg_sign_commit: Sign commits.
        gpg_sign_tag: Sign tags.
        interactive: Prompt for missing values instead of using defaults.
        allow_snapshots: Accept snapshot dependencies when finishing.
        arg_line: Extra arguments for every build tool invocation.
        pre_goals: Goals run before merging.
        post_goals: Goals run after merging.
        push_options: ``git push -o`` values.
        version_property: Property to set alongside the project version.
        versions_force_update: Update every module carrying the old version.
    """

    fetch_remote: bool = True
    push_remote: bool = True
    install_project: bool = False
    skip_test: bool = False
    gpg_sign_commit: bool = False
    gpg_sign_tag: bool = False
    interactive: bool = True
    allow_snapshots: bool = False
    arg_line: str | None = None
    pre_goals: tuple[str, ...] = ()
    post_goals: tuple[str, ...] = ()
    push_options: tuple[str, ...] = ()
    version_property: str | None = None
    versions_force_update: bool = False


def _common() -> CommonOptions:
    return CommonOptions()


@dataclass(frozen=True, slots=True)
class TopicStartConfig:
    kind: TopicKind = TopicKind.FEATURE
    name: str | None = None
    name_pattern: str | None = None
    skip_topic_version: bool = False
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class TopicFinishConfig:
    kind: TopicKind = TopicKind.FEATURE
    name: str | None = None
    keep_branch: bool = False
    squash: bool = False
    skip_topic_version: bool = False
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class ReleaseStartConfig:
    release_version: str | None = None
    same_branch_name: bool = False
    from_commit: str | None = None
    use_snapshot_in_release: bool = False
    commit_development_version_at_start: bool = False
    development_version: str | None = None
    digits_only_dev_version: bool = False
    version_digit_to_increment: int | None = None
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class ReleaseFinishConfig:
    skip_tag: bool = False
    keep_branch: bool = False
    merge_mode: MergeMode = MergeMode.NO_FF
    skip_merge_prod_branch: bool = False
    skip_merge_dev_branch: bool = False
    no_back_merge: bool = False
    use_snapshot_in_release: bool = False
    commit_development_version_at_start: bool = False
    development_version: str | None = None
    digits_only_dev_version: bool = False
    version_digit_to_increment: int | None = None
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release straight from development without a release branch."""

    release_version: str | None = None
    skip_tag: bool = False
    merge_mode: MergeMode = MergeMode.NO_FF
    development_version: str | None = None
    digits_only_dev_version: bool = False
    version_digit_to_increment: int | None = None
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class HotfixStartConfig:
    from_branch: str | None = None
    hotfix_version: str | None = None
    version_digit_to_increment: int | None = None
    use_snapshot_in_hotfix: bool = False
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class HotfixFinishConfig:
    hotfix_version: str | None = None
    hotfix_branch: str | None = None
    skip_tag: bool = False
    keep_branch: bool = False
    skip_merge_prod_branch: bool = False
    skip_merge_dev_branch: bool = False
    no_back_merge_hotfix: bool = False
    use_snapshot_in_hotfix: bool = False
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class SupportStartConfig:
    tag_name: str | None = None
    branch_name: str | None = None
    common: CommonOptions = field(default_factory=_common)


@dataclass(frozen=True, slots=True)
class VersionUpdateConfig:
    update_version: str | None = None
    from_branch: str | None = None
    skip_tag: bool = False
    version_digit_to_increment: int | None = None
    common: CommonOptions = field(default_factory=_common)


FlowConfig: TypeAlias = (
    TopicStartConfig
    | TopicFinishConfig
    | ReleaseStartConfig
    | ReleaseFinishConfig
    | ReleaseConfig
    | HotfixStartConfig
    | HotfixFinishConfig
    | SupportStartConfig
    | VersionUpdateConfig
)
