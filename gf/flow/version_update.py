"""Re-version a release or support branch in place.

No branch is created or merged: the project version of the chosen branch is
changed (when it differs), committed and tagged.
"""

from __future__ import annotations

from gf.core.result import Err, Ok, Result

from . import steps
from .contracts import FlowContext
from .errors import FlowError, precondition_error
from .model import VersionUpdateConfig

__all__ = ["version_update"]


def _target_branch(ctx: FlowContext, config: VersionUpdateConfig) -> Result[str, FlowError]:
    branches = ctx.settings.branches
    prefixes = (branches.release_prefix, branches.support_prefix)

    if config.from_branch:
        branch = config.from_branch
        if not branch.startswith(prefixes):
            return Err(
                precondition_error(
                    f"{branch} is neither a release nor a support branch",
                    reason="invalid_branch",
                )
            )
        if not ctx.repo.ref_exists(f"refs/heads/{branch}"):
            return Err(precondition_error(f"Branch {branch} doesn't exist", reason="missing_branch"))
        return Ok(branch)

    candidates: list[str] = []
    for prefix in prefixes:
        found = steps.find_branches(ctx, prefix)
        if isinstance(found, Err):
            return found
        candidates.extend(found.value)

    if not candidates:
        return Err(
            precondition_error(
                "There are no release or support branches",
                reason="missing_branch",
            )
        )
    if len(candidates) == 1:
        return Ok(candidates[0])
    if config.common.interactive:
        return Ok(ctx.prompter.choose_from_list("Choose the branch to update:", candidates))
    return Err(
        precondition_error(
            f"More than one branch to update: {', '.join(candidates)}",
            reason="ambiguous_branch",
            hint="Name the branch with --from-branch.",
        )
    )


def version_update(ctx: FlowContext, config: VersionUpdateConfig) -> Result[None, FlowError]:
    opts = config.common

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok

    chosen = _target_branch(ctx, config)
    if isinstance(chosen, Err):
        return chosen
    branch = chosen.value

    ok = steps.sync(ctx, opts, branch)
    if isinstance(ok, Err):
        return ok
    ok = steps.checkout(ctx, branch)
    if isinstance(ok, Err):
        return ok

    current = steps.current_version(ctx)
    if isinstance(current, Err):
        return current

    if config.update_version:
        version = steps.validate_version(config.update_version)
    else:
        default = current.value.hotfix_version(False, config.version_digit_to_increment)
        version = steps.ask_version(ctx, opts, f"What is the new version? [{default}]", default)
    if isinstance(version, Err):
        return version
    new_version = version.value

    ctx.console.header(f"Updating {branch} to {new_version}")
    updated = steps.update_version(
        ctx, opts, new_version, steps.message(ctx, "version_update", version=new_version)
    )
    if isinstance(updated, Err):
        return updated
    if not updated.value:
        ctx.console.info(f"{branch} is already at {new_version}")

    if not config.skip_tag:
        ok = steps.tag(
            ctx,
            opts,
            steps.tag_name(ctx, new_version),
            steps.message(ctx, "tag_version_update", version=new_version),
        )
        if isinstance(ok, Err):
            return ok

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.push(ctx, opts, branch, follow_tags=not config.skip_tag)
    if isinstance(ok, Err):
        return ok

    ctx.console.success(f"{branch} updated to {new_version}")
    return Ok(None)
