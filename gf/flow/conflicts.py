"""Merging branches whose only difference is the project version.

Release and hotfix branches carry a different version than the branch they
are merged back into. Merged as is, the version lines of every pom.xml
conflict. Instead the target is first moved to the source version, the
source is merged, and the target then gets the version it should carry
after the merge.
"""

from __future__ import annotations

from collections.abc import Callable

from gf.core.result import Err, Ok, Result
from gf.git.repository import MergeMode

from . import steps
from .contracts import FlowContext
from .errors import FlowError
from .model import CommonOptions
from .version import VersionInfo

__all__ = ["merge_avoiding_version_conflicts"]

NextVersion = Callable[[VersionInfo], Result[str, FlowError]]


def merge_avoiding_version_conflicts(
    ctx: FlowContext,
    options: CommonOptions,
    *,
    source: str,
    target: str,
    source_version: str,
    avoid_message: str,
    restore_message: str,
    merge_message: str | None = None,
    next_version: NextVersion | None = None,
) -> Result[VersionInfo, FlowError]:
    """Merge ``source`` into ``target`` without version conflicts.

    Args:
        source: Branch or tag to merge.
        target: Branch receiving the merge; checked out on return.
        source_version: Project version on ``source``.
        avoid_message: Commit message aligning ``target`` with ``source_version``.
        restore_message: Commit message for the post-merge version.
        merge_message: Merge commit message, git's default if empty.
        next_version: Computes the post-merge version from the pre-merge
            one. Defaults to restoring the pre-merge version.

    Returns:
        The version ``target`` had before the merge.
    """
    ok = steps.checkout(ctx, target)
    if isinstance(ok, Err):
        return ok

    before = steps.current_version(ctx)
    if isinstance(before, Err):
        return before
    pre_merge = before.value

    if str(pre_merge) != source_version:
        ok = steps.set_version(ctx, options, source_version)
        if isinstance(ok, Err):
            return ok
        ok = steps.commit(ctx, options, avoid_message)
        if isinstance(ok, Err):
            return ok

    ok = steps.merge(ctx, source, MergeMode.NO_FF, merge_message)
    if isinstance(ok, Err):
        return ok

    if next_version is None:
        desired: Result[str, FlowError] = Ok(str(pre_merge))
    else:
        desired = next_version(pre_merge)
    if isinstance(desired, Err):
        return desired

    restored = steps.update_version(ctx, options, desired.value, restore_message)
    if isinstance(restored, Err):
        return restored

    return Ok(pre_merge)
