"""Hotfix branches.

A hotfix starts from production, or from a support branch, and is finished
back into it. Hotfixes of production are also brought to the open release
branch if there is one, otherwise to development. Both merges go through
``merge_avoiding_version_conflicts`` since those branches carry other
versions than the hotfix.

Branch names are ``<hotfix prefix><version>`` for production and
``<hotfix prefix><support name>/<version>`` for a support branch.
"""

from __future__ import annotations

from gf.core.result import Err, Ok, Result
from gf.git.repository import MergeMode

from . import steps
from .conflicts import merge_avoiding_version_conflicts
from .contracts import FlowContext
from .errors import FlowError, precondition_error
from .model import HotfixFinishConfig, HotfixStartConfig
from .version import SNAPSHOT_SUFFIX, VersionInfo, is_valid_version

__all__ = ["hotfix_finish", "hotfix_start", "support_name_of"]


def support_name_of(ctx: FlowContext, hotfix_branch: str) -> str | None:
    """Support branch name encoded in a hotfix branch name, if any."""
    rest = hotfix_branch.removeprefix(ctx.settings.branches.hotfix_prefix)
    if "/" not in rest:
        return None
    return rest.rsplit("/", 1)[0]


def _base_branch(ctx: FlowContext, config: HotfixStartConfig) -> Result[str, FlowError]:
    branches = ctx.settings.branches
    production = branches.production

    if config.from_branch:
        base = config.from_branch
        is_support = base.startswith(branches.support_prefix)
        if base != production and not is_support:
            return Err(
                precondition_error(
                    f"Hotfixes start from {production} or a support branch, not {base}",
                    reason="invalid_base",
                )
            )
        if is_support and not ctx.repo.ref_exists(f"refs/heads/{base}"):
            return Err(
                precondition_error(f"Support branch {base} doesn't exist", reason="missing_branch")
            )
        return Ok(base)

    supports = steps.find_branches(ctx, branches.support_prefix)
    if isinstance(supports, Err):
        return supports
    if not supports.value or not config.common.interactive:
        return Ok(production)
    return Ok(
        ctx.prompter.choose_from_list(
            "Choose a branch to start the hotfix from:",
            [production, *supports.value],
        )
    )


def hotfix_start(ctx: FlowContext, config: HotfixStartConfig) -> Result[None, FlowError]:
    opts = config.common
    branches = ctx.settings.branches

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok

    chosen_base = _base_branch(ctx, config)
    if isinstance(chosen_base, Err):
        return chosen_base
    base = chosen_base.value

    ok = steps.sync(ctx, opts, base)
    if isinstance(ok, Err):
        return ok
    ok = steps.checkout(ctx, base)
    if isinstance(ok, Err):
        return ok

    current = steps.current_version(ctx)
    if isinstance(current, Err):
        return current
    default = current.value.hotfix_version(
        config.use_snapshot_in_hotfix, config.version_digit_to_increment
    )

    if config.hotfix_version:
        chosen = steps.validate_version(config.hotfix_version)
    elif opts.interactive:
        chosen = Ok(
            ctx.prompter.prompt_validated(
                f"What is the hotfix version? [{default}]", is_valid_version, default
            )
        )
    else:
        chosen = steps.validate_version(default)
    if isinstance(chosen, Err):
        return chosen
    version = chosen.value

    project_version = version
    if config.use_snapshot_in_hotfix and not version.upper().endswith(SNAPSHOT_SUFFIX):
        project_version = version + SNAPSHOT_SUFFIX
    branch_version = version.removesuffix(SNAPSHOT_SUFFIX).replace("/", "_")

    branch = branches.hotfix_prefix
    if base != branches.production:
        branch += base.removeprefix(branches.support_prefix) + "/"
    branch += branch_version

    if ctx.repo.ref_exists(f"refs/heads/{branch}"):
        return Err(
            precondition_error(
                f"Hotfix branch with that name already exists: {branch}",
                reason="branch_exists",
            )
        )

    ctx.console.header(f"Starting hotfix {branch} from {base}")
    ok = steps.git(ctx.repo.checkout_new(branch, base))
    if isinstance(ok, Err):
        return ok

    updated = steps.update_version(
        ctx, opts, project_version, steps.message(ctx, "hotfix_start", version=version)
    )
    if isinstance(updated, Err):
        return updated

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok
    ok = steps.push(ctx, opts, branch)
    if isinstance(ok, Err):
        return ok

    ctx.console.success(f"Hotfix branch {branch} started")
    return Ok(None)


def _finish_branch(ctx: FlowContext, config: HotfixFinishConfig) -> Result[str, FlowError]:
    prefix = ctx.settings.branches.hotfix_prefix

    if config.hotfix_branch:
        branch = config.hotfix_branch
        if not ctx.repo.ref_exists(f"refs/heads/{branch}"):
            return Err(
                precondition_error(f"Hotfix branch {branch} doesn't exist", reason="missing_branch")
            )
        return Ok(branch)

    if config.hotfix_version:
        found = steps.find_branches(ctx, prefix)
        if isinstance(found, Err):
            return found
        version = config.hotfix_version
        matches = [
            b for b in found.value if b == prefix + version or b.endswith(f"/{version}")
        ]
        if not matches:
            return Err(
                precondition_error(
                    f"No hotfix branch for version {version}",
                    reason="missing_branch",
                )
            )
        if len(matches) > 1:
            return Err(
                precondition_error(
                    f"More than one hotfix branch for version {version}: {', '.join(matches)}",
                    reason="ambiguous_branch",
                    hint="Pass the full branch name instead.",
                )
            )
        return Ok(matches[0])

    return steps.choose_branch(ctx, config.common, prefix, "hotfix")


def hotfix_finish(ctx: FlowContext, config: HotfixFinishConfig) -> Result[None, FlowError]:
    opts = config.common
    branches = ctx.settings.branches
    development = branches.development

    ok = steps.prepare(ctx, opts)
    if isinstance(ok, Err):
        return ok

    chosen = _finish_branch(ctx, config)
    if isinstance(chosen, Err):
        return chosen
    branch = chosen.value

    support_name = support_name_of(ctx, branch)
    support = branches.support_prefix + support_name if support_name is not None else None
    target = support or branches.production

    if support is not None:
        ok = steps.sync(ctx, opts, branch, target)
    else:
        ok = steps.sync(ctx, opts, branch, target, development)
    if isinstance(ok, Err):
        return ok

    ctx.console.header(f"Finishing hotfix {branch}")
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
    hotfix_version = str(current.value)

    if config.use_snapshot_in_hotfix and current.value.is_snapshot:
        hotfix_version = current.value.release_version_string()
        updated = steps.update_version(
            ctx, opts, hotfix_version, steps.message(ctx, "hotfix_start", version=hotfix_version)
        )
        if isinstance(updated, Err):
            return updated

    if not config.skip_merge_prod_branch:
        ok = steps.checkout(ctx, target)
        if isinstance(ok, Err):
            return ok
        template = "hotfix_finish_support_merge" if support else "hotfix_finish_merge"
        ok = steps.merge(
            ctx,
            branch,
            MergeMode.NO_FF,
            steps.message(ctx, template, version=hotfix_version, branch=branch),
        )
        if isinstance(ok, Err):
            return ok

    tag = steps.tag_name(ctx, hotfix_version)
    if not config.skip_tag:
        ok = steps.tag(ctx, opts, tag, steps.message(ctx, "tag_hotfix", version=hotfix_version))
        if isinstance(ok, Err):
            return ok

    ok = steps.run_goals(ctx, opts.post_goals)
    if isinstance(ok, Err):
        return ok

    back_merged: str | None = None
    if support is None:
        release = steps.single_branch(ctx, opts, branches.release_prefix, "release")
        if isinstance(release, Err):
            return release

        if release.value is not None:
            back_merged = release.value
            merged = merge_avoiding_version_conflicts(
                ctx,
                opts,
                source=branch,
                target=release.value,
                source_version=hotfix_version,
                avoid_message=steps.message(ctx, "update_release_to_avoid_conflicts"),
                restore_message=steps.message(ctx, "update_release_back_pre_merge_state"),
                merge_message=steps.message(
                    ctx, "hotfix_finish_release_merge", version=hotfix_version, branch=branch
                ),
            )
            if isinstance(merged, Err):
                return merged
        elif not config.skip_merge_dev_branch and not branches.same_prod_dev_name:
            back_merged = development
            ok = _merge_into_development(ctx, config, branch, tag, hotfix_version)
            if isinstance(ok, Err):
                return ok

    ok = steps.install(ctx, opts)
    if isinstance(ok, Err):
        return ok

    if not config.skip_merge_prod_branch:
        ok = steps.push(ctx, opts, target, follow_tags=not config.skip_tag)
        if isinstance(ok, Err):
            return ok
    if back_merged is not None:
        ok = steps.push(ctx, opts, back_merged)
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
        ok = steps.checkout(ctx, back_merged or target)
        if isinstance(ok, Err):
            return ok
        ok = steps.git(ctx.repo.branch_delete(branch, force=config.skip_merge_prod_branch))
        if isinstance(ok, Err):
            return ok

    ctx.console.success(f"Hotfix {hotfix_version} finished")
    return Ok(None)


def _merge_into_development(
    ctx: FlowContext,
    config: HotfixFinishConfig,
    branch: str,
    tag: str,
    hotfix_version: str,
) -> Result[None, FlowError]:
    """Bring the hotfix to development, keeping the greater of both versions."""
    opts = config.common
    development = ctx.settings.branches.development

    if config.skip_merge_prod_branch or config.no_back_merge_hotfix:
        source = branch
    elif not config.skip_tag:
        source = tag
    else:
        source = ctx.settings.branches.production

    ok = steps.checkout(ctx, development)
    if isinstance(ok, Err):
        return ok
    dev_version = steps.current_version(ctx)
    if isinstance(dev_version, Err):
        return dev_version
    hotfix_info = VersionInfo.parse(hotfix_version, ctx.policy)
    if isinstance(hotfix_info, Err):
        return hotfix_info

    if dev_version.value.compare_to(hotfix_info.value) >= 0:
        next_version = str(dev_version.value)
        restore_message = steps.message(ctx, "update_dev_back_pre_merge_state")
    else:
        next_version = hotfix_info.value.next_snapshot_version()
        restore_message = steps.message(ctx, "hotfix_finish", version=next_version)

    merged = merge_avoiding_version_conflicts(
        ctx,
        opts,
        source=source,
        target=development,
        source_version=hotfix_version,
        avoid_message=steps.message(ctx, "hotfix_version_update", version=hotfix_version),
        restore_message=restore_message,
        merge_message=steps.message(
            ctx, "hotfix_finish_dev_merge", version=hotfix_version, branch=branch
        ),
        next_version=lambda _: steps.validate_version(next_version),
    )
    if isinstance(merged, Err):
        return merged
    return Ok(None)
