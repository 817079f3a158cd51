"""Release branches.

``release_start`` branches off development and sets the release version,
``release_finish`` merges the release into production, tags it and brings
development to the next snapshot. ``release`` does all of this in one go,
straight from development, without a release branch.
"""

from __future__ import annotations

from gf.core.result import Err, Ok, Result
from gf.git.repository import MergeMode

from . import steps
from .conflicts import merge_avoiding_version_conflicts
from .contracts import FlowContext
from .errors import FlowError, precondition_error, version_error
from .model import ReleaseConfig, ReleaseFinishConfig, ReleaseStartConfig
from .version import SNAPSHOT_SUFFIX, VersionInfo, is_valid_version

__all__ = [
    "next_development_version",
    "release",
    "release_finish",
    "release_start",
]


def next_development_version(
    ctx: FlowContext,
    release_version: str,
    *,
    development_version: str | None,
    digits_only: bool,
    digit: int | None,
) -> Result[str, FlowError]:
    """Snapshot version development moves to after ``release_version``.

    An explicit ``development_version`` wins; otherwise the release version
    (reduced to its digits when ``digits_only``) is incremented at ``digit``,
    or by the configured version policy.
    """
    if development_version:
        return steps.validate_version(development_version)

    parsed = VersionInfo.parse(release_version, ctx.policy)
    if isinstance(parsed, Err):
        return parsed
    info = parsed.value.digits_version_info() if digits_only else parsed.value

    nxt = info.next_snapshot_version(digit)
    if not nxt.strip():
        return Err(version_error(f"Next development version of {release_version} is blank"))
    return Ok(nxt)


def _ensure_no_release_branch(ctx: FlowContext, include_remote: bool) -> Result[None, FlowError]:
    prefix = ctx.settings.branches.release_prefix
    found = steps.find_branches(ctx, prefix, include_remote=include_remote)
    if isinstance(found, Err):
        return found
    if found.value:
        return Err(
            precondition_error(
                f"Release branch already exists: {', '.join(found.value)}",
                reason="branch_exists",
                hint="Finish the current release first.",
            )
        )
    return Ok(None)


def _release_version(
    ctx: FlowContext,
    explicit: str | None,
    interactive: bool,
    current: VersionInfo,
) -> Result[str, FlowError]:
    if explicit:
        return steps.validate_version(explicit)
    default = current.release_version_string()
    if not interactive:
        return steps.validate_version(default)
    return Ok(
        ctx.prompter.prompt_validated(
            f"What is release version? [{default}]",
            is_valid_version,
            default,
        )
    )


def release_start(ctx: FlowContext, config: ReleaseStartConfig) -> Result[None, FlowError]:
    opts = config.common
    branches = ctx.settings.branches
    development = branches.development

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = _ensure_no_release_branch(ctx, opts.fetch_remote)
    if isinstance(ok, Err):
        return ok
    ok = steps.sync(ctx, opts, development)
    if isinstance(ok, Err):
        return ok

    start_point = config.from_commit or development
    ok = steps.checkout(ctx, start_point)
    if isinstance(ok, Err):
        return ok

    current = steps.current_version(ctx)
    if isinstance(current, Err):
        return current

    chosen = _release_version(ctx, config.release_version, opts.interactive, current.value)
    if isinstance(chosen, Err):
        return chosen
    release_version = chosen.value

    project_version = release_version
    if config.use_snapshot_in_release and not project_version.upper().endswith(SNAPSHOT_SUFFIX):
        project_version += SNAPSHOT_SUFFIX

    branch = branches.release_prefix
    if not config.same_branch_name:
        branch += release_version

    ctx.console.header(f"Starting release {release_version} on {branch}")
    ok = steps.git(ctx.repo.checkout_new(branch, start_point))
    if isinstance(ok, Err):
        return ok

    updated = steps.update_version(
        ctx,
        opts,
        project_version,
        steps.message(ctx, "release_start", version=release_version),
    )
    if isinstance(updated, Err):
        return updated

    commit_development = config.commit_development_version_at_start
    if commit_development and branches.same_prod_dev_name:
        ctx.console.warning(
            "The production and development branches are the same; "
            "not committing the next development version at start."
        )
        commit_development = False

    if commit_development:
        ok = steps.checkout(ctx, development)
        if isinstance(ok, Err):
            return ok
        nxt = next_development_version(
            ctx,
            release_version,
            development_version=config.development_version,
            digits_only=config.digits_only_dev_version,
            digit=config.version_digit_to_increment,
        )
        if isinstance(nxt, Err):
            return nxt
        updated = steps.update_version(
            ctx,
            opts,
            nxt.value,
            steps.message(ctx, "release_version_update", version=nxt.value),
        )
        if isinstance(updated, Err):
            return updated
        ok = steps.checkout(ctx, branch)
        if isinstance(ok, Err):
            return ok

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok

    if commit_development:
        ok = steps.push(ctx, opts, development)
        if isinstance(ok, Err):
            return ok
    ok = steps.push(ctx, opts, branch)
    if isinstance(ok, Err):
        return ok

    ctx.console.success(f"Release branch {branch} started")
    return Ok(None)


def release_finish(ctx: FlowContext, config: ReleaseFinishConfig) -> Result[None, FlowError]:
    opts = config.common
    branches = ctx.settings.branches
    development = branches.development
    production = branches.production

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok

    found = steps.single_branch(ctx, opts, branches.release_prefix, "release")
    if isinstance(found, Err):
        return found
    if found.value is None:
        return Err(
            precondition_error(
                "There is no release branch",
                reason="missing_branch",
                hint="Start a release first.",
            )
        )
    branch = found.value

    ok = steps.sync(ctx, opts, branch, development, production)
    if isinstance(ok, Err):
        return ok

    ctx.console.header(f"Finishing release {branch}")
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

    current = steps.current_version(ctx)
    if isinstance(current, Err):
        return current
    release_version = str(current.value)

    if config.use_snapshot_in_release and current.value.is_snapshot:
        release_version = current.value.release_version_string()
        updated = steps.update_version(
            ctx,
            opts,
            release_version,
            steps.message(ctx, "release_start", version=release_version),
        )
        if isinstance(updated, Err):
            return updated

    if not config.skip_merge_prod_branch:
        ok = steps.checkout(ctx, production)
        if isinstance(ok, Err):
            return ok
        ok = steps.merge(
            ctx,
            branch,
            config.merge_mode,
            steps.message(ctx, "release_finish_merge", version=release_version, branch=branch),
        )
        if isinstance(ok, Err):
            return ok

    tag = steps.tag_name(ctx, release_version)
    if not config.skip_tag:
        ok = steps.tag(ctx, opts, tag, steps.message(ctx, "tag_release", version=release_version))
        if isinstance(ok, Err):
            return ok

    ok = steps.run_goals(ctx, opts.post_goals)
    if isinstance(ok, Err):
        return ok

    def next_version(_: VersionInfo) -> Result[str, FlowError]:
        return next_development_version(
            ctx,
            release_version,
            development_version=config.development_version,
            digits_only=config.digits_only_dev_version,
            digit=config.version_digit_to_increment,
        )

    if branches.same_prod_dev_name:
        nxt = next_version(current.value)
        if isinstance(nxt, Err):
            return nxt
        ok = steps.checkout(ctx, development)
        if isinstance(ok, Err):
            return ok
        updated = steps.update_version(
            ctx, opts, nxt.value, steps.message(ctx, "release_finish", version=nxt.value)
        )
        if isinstance(updated, Err):
            return updated
    elif not config.skip_merge_dev_branch:
        if config.no_back_merge or config.skip_merge_prod_branch:
            source = branch
        elif not config.skip_tag:
            source = tag
        else:
            source = production
        merge_text = steps.message(
            ctx, "release_finish_dev_merge", version=release_version, branch=branch
        )

        if config.commit_development_version_at_start:
            merged = merge_avoiding_version_conflicts(
                ctx,
                opts,
                source=source,
                target=development,
                source_version=release_version,
                avoid_message=steps.message(ctx, "update_dev_to_avoid_conflicts"),
                restore_message=steps.message(ctx, "update_dev_back_pre_merge_state"),
                merge_message=merge_text,
            )
            if isinstance(merged, Err):
                return merged
        else:
            ok = steps.checkout(ctx, development)
            if isinstance(ok, Err):
                return ok
            ok = steps.merge(ctx, source, MergeMode.NO_FF, merge_text)
            if isinstance(ok, Err):
                return ok
            nxt = next_version(current.value)
            if isinstance(nxt, Err):
                return nxt
            updated = steps.update_version(
                ctx, opts, nxt.value, steps.message(ctx, "release_finish", version=nxt.value)
            )
            if isinstance(updated, Err):
                return updated

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok

    if not config.skip_merge_prod_branch:
        ok = steps.push(ctx, opts, production, follow_tags=not config.skip_tag)
        if isinstance(ok, Err):
            return ok
    if not branches.same_prod_dev_name and not config.skip_merge_dev_branch:
        ok = steps.push(ctx, opts, development)
        if isinstance(ok, Err):
            return ok

    if config.keep_branch:
        ok = steps.push(ctx, opts, branch, follow_tags=config.skip_merge_prod_branch)
        if isinstance(ok, Err):
            return ok
    else:
        if opts.push_remote and ctx.repo.ref_exists(f"refs/remotes/{ctx.repo.origin}/{branch}"):
            ok = steps.git(ctx.repo.push_delete(branch))
            if isinstance(ok, Err):
                return ok
        ok = steps.checkout(ctx, development)
        if isinstance(ok, Err):
            return ok
        force = (
            config.merge_mode is MergeMode.REBASE
            or config.skip_merge_prod_branch
            or config.skip_merge_dev_branch
        )
        ok = steps.git(ctx.repo.branch_delete(branch, force=force))
        if isinstance(ok, Err):
            return ok

    ctx.console.success(f"Release {release_version} finished")
    return Ok(None)


def release(ctx: FlowContext, config: ReleaseConfig) -> Result[None, FlowError]:
    opts = config.common
    branches = ctx.settings.branches
    development = branches.development
    production = branches.production

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = _ensure_no_release_branch(ctx, opts.fetch_remote)
    if isinstance(ok, Err):
        return ok
    ok = steps.sync(ctx, opts, development, production)
    if isinstance(ok, Err):
        return ok

    ok = steps.checkout(ctx, development)
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

    current = steps.current_version(ctx)
    if isinstance(current, Err):
        return current
    chosen = _release_version(ctx, config.release_version, opts.interactive, current.value)
    if isinstance(chosen, Err):
        return chosen
    release_version = chosen.value

    ctx.console.header(f"Releasing {release_version}")
    updated = steps.update_version(
        ctx, opts, release_version, steps.message(ctx, "release_start", version=release_version)
    )
    if isinstance(updated, Err):
        return updated

    if not branches.same_prod_dev_name:
        ok = steps.checkout(ctx, production)
        if isinstance(ok, Err):
            return ok
        ok = steps.merge(
            ctx,
            development,
            config.merge_mode,
            steps.message(ctx, "release_finish_merge", version=release_version, branch=development),
        )
        if isinstance(ok, Err):
            return ok

    if not config.skip_tag:
        ok = steps.tag(
            ctx,
            opts,
            steps.tag_name(ctx, release_version),
            steps.message(ctx, "tag_release", version=release_version),
        )
        if isinstance(ok, Err):
            return ok

    ok = steps.run_goals(ctx, opts.post_goals)
    if isinstance(ok, Err):
        return ok

    if not branches.same_prod_dev_name:
        ok = steps.checkout(ctx, development)
        if isinstance(ok, Err):
            return ok

    nxt = next_development_version(
        ctx,
        release_version,
        development_version=config.development_version,
        digits_only=config.digits_only_dev_version,
        digit=config.version_digit_to_increment,
    )
    if isinstance(nxt, Err):
        return nxt
    updated = steps.update_version(
        ctx, opts, nxt.value, steps.message(ctx, "release_finish", version=nxt.value)
    )
    if isinstance(updated, Err):
        return updated

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok

    if not branches.same_prod_dev_name:
        ok = steps.push(ctx, opts, production, follow_tags=not config.skip_tag)
        if isinstance(ok, Err):
            return ok
    ok = steps.push(ctx, opts, development, follow_tags=branches.same_prod_dev_name)
    if isinstance(ok, Err):
        return ok

    ctx.console.success(f"Released {release_version}")
    return Ok(None)
