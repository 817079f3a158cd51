"""Feature and bugfix branches.

Both are started from the development branch and merged back into it. A
feature branch carries its name in the project version
(``1.2.0-login-SNAPSHOT``) so artifacts built from it do not clash with
development builds; the name is removed again when the branch is finished.
"""

from __future__ import annotations

import re

from gf.core.result import Err, Ok, Result
from gf.git.repository import MergeMode

from . import steps
from .contracts import FlowContext
from .errors import FlowError, configuration_error, precondition_error
from .model import TopicFinishConfig, TopicKind, TopicStartConfig

__all__ = ["topic_finish", "topic_start"]


def _prefix(ctx: FlowContext, kind: TopicKind) -> str:
    branches = ctx.settings.branches
    return branches.feature_prefix if kind is TopicKind.FEATURE else branches.bugfix_prefix


def _name_key(kind: TopicKind) -> str:
    return "featureName" if kind is TopicKind.FEATURE else "bugfixName"


def _valid_name(ctx: FlowContext, prefix: str, name: str, pattern: str | None) -> bool:
    if not name.strip() or not ctx.repo.check_ref_format(prefix + name):
        ctx.console.warning("The name of the branch is not valid.")
        return False
    if pattern and re.fullmatch(pattern, name) is None:
        ctx.console.warning(f"The name of the branch doesn't match '{pattern}'.")
        return False
    return True


def _start_name(ctx: FlowContext, config: TopicStartConfig, prefix: str) -> Result[str, FlowError]:
    what = config.kind.value
    if config.common.interactive and config.name is None:
        name = ctx.prompter.prompt_validated(
            f"What is a name of {what} branch? {prefix}",
            lambda answer: _valid_name(ctx, prefix, answer, config.name_pattern),
        )
    elif config.name is not None and _valid_name(ctx, prefix, config.name, config.name_pattern):
        name = config.name
    else:
        return Err(
            configuration_error(
                f"The {what} branch name is blank or not valid",
                hint=f"Pass a valid --name for the {what} branch.",
            )
        )
    return Ok(re.sub(r"\s+", "", name))


def topic_start(ctx: FlowContext, config: TopicStartConfig) -> Result[None, FlowError]:
    opts = config.common
    development = ctx.settings.branches.development
    prefix = _prefix(ctx, config.kind)
    what = config.kind.value

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.sync(ctx, opts, development)
    if isinstance(ok, Err):
        return ok

    named = _start_name(ctx, config, prefix)
    if isinstance(named, Err):
        return named
    name = named.value
    branch = prefix + name

    if ctx.repo.ref_exists(f"refs/heads/{branch}"):
        return Err(
            precondition_error(
                f"{what.capitalize()} branch with that name already exists: {branch}",
                reason="branch_exists",
            )
        )

    ctx.console.header(f"Starting {what} {branch}")
    ok = steps.git(ctx.repo.checkout_new(branch, development))
    if isinstance(ok, Err):
        return ok

    if not config.skip_topic_version:
        version = steps.current_version(ctx)
        if isinstance(version, Err):
            return version
        topic_version = version.value.feature_version(name)
        valid = steps.validate_version(topic_version)
        if isinstance(valid, Err):
            return valid
        updated = steps.update_version(
            ctx,
            opts,
            topic_version,
            steps.message(ctx, f"{what}_start", **{_name_key(config.kind): name}),
        )
        if isinstance(updated, Err):
            return updated

    ok = steps.git(ctx.repo.set_config(f"branch.{branch}.gitflow-base", development))
    if isinstance(ok, Err):
        return ok

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.push(ctx, opts, branch)
    if isinstance(ok, Err):
        return ok

    ctx.console.success(f"{what.capitalize()} branch {branch} started")
    return Ok(None)


def _finish_branch(ctx: FlowContext, config: TopicFinishConfig, prefix: str) -> Result[str, FlowError]:
    what = config.kind.value
    if config.name is not None:
        branch = config.name if config.name.startswith(prefix) else prefix + config.name
        if not ctx.repo.ref_exists(f"refs/heads/{branch}"):
            return Err(
                precondition_error(
                    f"{what.capitalize()} branch {branch} doesn't exist",
                    reason="missing_branch",
                )
            )
        return Ok(branch)

    current = ctx.repo.current_branch()
    default = current.value if isinstance(current, Ok) else None
    return steps.choose_branch(ctx, config.common, prefix, what, default=default)


def topic_finish(ctx: FlowContext, config: TopicFinishConfig) -> Result[None, FlowError]:
    opts = config.common
    development = ctx.settings.branches.development
    prefix = _prefix(ctx, config.kind)
    what = config.kind.value

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok

    chosen = _finish_branch(ctx, config, prefix)
    if isinstance(chosen, Err):
        return chosen
    branch = chosen.value
    name = branch.removeprefix(prefix)

    ok = steps.sync(ctx, opts, branch, development)
    if isinstance(ok, Err):
        return ok

    ctx.console.header(f"Finishing {what} {branch}")
    ok = steps.checkout(ctx, branch)
    if isinstance(ok, Err):
        return ok
    ok = steps.check_snapshot_dependencies(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.run_tests(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.run_goals(ctx, opts.pre_goals)
    if isinstance(ok, Err):
        return ok

    version = steps.current_version(ctx)
    if isinstance(version, Err):
        return version
    topic_version = str(version.value)
    name_props = {_name_key(config.kind): name}

    stripped = False
    marker = f"-{name}"
    if not config.skip_topic_version and marker in topic_version:
        updated = steps.update_version(
            ctx,
            opts,
            topic_version.replace(marker, "", 1),
            steps.message(ctx, f"{what}_finish", **name_props),
        )
        if isinstance(updated, Err):
            return updated
        stripped = updated.value

    ok = steps.checkout(ctx, development)
    if isinstance(ok, Err):
        return ok

    if config.squash:
        ok = steps.merge(ctx, branch, MergeMode.SQUASH)
        if isinstance(ok, Err):
            return ok
        ok = steps.commit(ctx, opts, steps.message(ctx, f"{what}_squash", branch=branch, **name_props))
    else:
        ok = steps.merge(
            ctx,
            branch,
            MergeMode.NO_FF,
            steps.message(ctx, f"{what}_finish_dev_merge", branch=branch, **name_props),
        )
    if isinstance(ok, Err):
        return ok

    ok = steps.run_goals(ctx, opts.post_goals)
    if isinstance(ok, Err):
        return ok
    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok

    if config.keep_branch:
        if stripped:
            ok = steps.checkout(ctx, branch)
            if isinstance(ok, Err):
                return ok
            restored = steps.update_version(
                ctx,
                opts,
                topic_version,
                steps.message(ctx, f"update_{what}_back", **name_props),
            )
            if isinstance(restored, Err):
                return restored
            ok = steps.checkout(ctx, development)
            if isinstance(ok, Err):
                return ok
        ok = steps.push(ctx, opts, branch)
        if isinstance(ok, Err):
            return ok

    ok = steps.push(ctx, opts, development)
    if isinstance(ok, Err):
        return ok

    if not config.keep_branch:
        if opts.push_remote and ctx.repo.ref_exists(f"refs/remotes/{ctx.repo.origin}/{branch}"):
            ok = steps.git(ctx.repo.push_delete(branch))
            if isinstance(ok, Err):
                return ok
        ok = steps.git(ctx.repo.branch_delete(branch, force=config.squash))
        if isinstance(ok, Err):
            return ok

    ctx.console.success(f"{what.capitalize()} branch {branch} finished")
    return Ok(None)
