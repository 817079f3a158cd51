"""Support branches.

A support branch maintains an old release line. It starts from a release
tag and is never finished; hotfixes are started from and finished into it.
"""

from __future__ import annotations

from gf.core.result import Err, Ok, Result

from . import steps
from .contracts import FlowContext
from .errors import FlowError, precondition_error
from .model import SupportStartConfig

__all__ = ["support_start"]


def _choose_tag(ctx: FlowContext, config: SupportStartConfig) -> Result[str, FlowError]:
    """Tag to branch from: asked for, given, or the latest one."""
    prefix = ctx.settings.branches.version_tag_prefix
    listed = steps.git(ctx.repo.list_tags(f"{prefix}*"))
    if isinstance(listed, Err):
        return listed
    tags = listed.value

    if not tags:
        return Err(
            precondition_error(
                "There are no tags",
                reason="missing_tag",
                hint="Finish a release first; support branches start from release tags.",
            )
        )

    if config.common.interactive:
        return Ok(ctx.prompter.choose_from_list("Choose tag to start support branch:", tags))
    if config.tag_name:
        if config.tag_name not in tags:
            return Err(
                precondition_error(f"Tag {config.tag_name} doesn't exist", reason="missing_tag")
            )
        return Ok(config.tag_name)
    return Ok(tags[0])


def support_start(ctx: FlowContext, config: SupportStartConfig) -> Result[None, FlowError]:
    opts = config.common
    support_prefix = ctx.settings.branches.support_prefix

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.sync(ctx, opts, ctx.settings.branches.production)
    if isinstance(ok, Err):
        return ok

    chosen = _choose_tag(ctx, config)
    if isinstance(chosen, Err):
        return chosen
    tag = chosen.value

    name = config.branch_name or tag
    branch = support_prefix + name
    if not ctx.repo.check_ref_format(branch):
        return Err(
            precondition_error(f"Invalid support branch name: {branch}", reason="invalid_name")
        )
    if ctx.repo.ref_exists(f"refs/heads/{branch}"):
        return Err(
            precondition_error(
                f"Support branch with that name already exists: {branch}",
                reason="branch_exists",
            )
        )

    ctx.console.header(f"Starting support branch {branch} from {tag}")
    ok = steps.git(ctx.repo.checkout_new(branch, tag))
    if isinstance(ok, Err):
        return ok

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.push(ctx, opts, branch)
    if isinstance(ok, Err):
        return ok

    ctx.console.success(f"Support branch {branch} started")
    return Ok(None)
