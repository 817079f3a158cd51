"""Remote synchronization checks.

Before a long-lived branch is changed it is compared with its remote
counterpart: a local branch that is behind the remote must be updated by the
operator first, a branch that only exists remotely is created locally.
"""

from __future__ import annotations

from gf.core.result import Err, Ok, Result

from .contracts import FlowContext
from .errors import FlowError, precondition_error, tool_error
from .model import RemoteSyncResult, SyncDecision

__all__ = ["compare", "fetch", "sync_branch"]


def fetch(ctx: FlowContext) -> None:
    """Fetch the remote once for a series of comparisons.

    A failed fetch is reported as a warning; comparisons then use the remote
    refs already present.
    """
    fetched = ctx.repo.fetch()
    if isinstance(fetched, Err):
        ctx.console.warning(f"could not fetch {ctx.repo.origin}: {fetched.error.message}")


def compare(ctx: FlowContext, branch: str) -> Result[RemoteSyncResult, FlowError]:
    """Compare ``branch`` with ``<origin>/<branch>`` as last fetched."""
    repo = ctx.repo
    origin = repo.origin

    remote_branch = f"{origin}/{branch}"
    local_exists = repo.ref_exists(f"refs/heads/{branch}")
    remote_exists = repo.ref_exists(f"refs/remotes/{remote_branch}")

    if not (local_exists and remote_exists):
        return Ok(
            RemoteSyncResult(
                branch=branch,
                local_exists=local_exists,
                remote_exists=remote_exists,
            )
        )

    counts = repo.rev_list_left_right_count(branch, remote_branch)
    if isinstance(counts, Err):
        return Err(tool_error(counts.error))
    ahead, behind = counts.value

    if behind != 0:
        return Err(
            precondition_error(
                f"Remote branch {remote_branch} is ahead of the local branch {branch}",
                reason="remote_ahead",
                hint=f"Update {branch} (git pull) and run again.",
            )
        )
    if ahead != 0:
        ctx.console.warning(f"Local branch {branch} is ahead of {remote_branch}")

    return Ok(
        RemoteSyncResult(
            branch=branch,
            local_exists=True,
            remote_exists=True,
            ahead=ahead,
            behind=behind,
        )
    )


def sync_branch(ctx: FlowContext, branch: str) -> Result[RemoteSyncResult, FlowError]:
    """``compare`` and create the local branch from the remote one if missing."""
    result = compare(ctx, branch)
    if isinstance(result, Err):
        return result

    if result.value.decision is SyncDecision.CREATE_LOCAL:
        ctx.console.info(f"Creating local branch {branch} from {ctx.repo.origin}/{branch}")
        created = ctx.repo.checkout_new(branch, f"{ctx.repo.origin}/{branch}")
        if isinstance(created, Err):
            return Err(tool_error(created.error))

    return result
