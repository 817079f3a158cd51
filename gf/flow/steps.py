"""Steps shared by the workflows.

Each step returns ``Result[..., FlowError]`` so a flow reads as a sequence of
calls, returning at the first ``Err``. Gateway errors are converted with
``tool_error`` here and nowhere else.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Sequence
from typing import TypeVar

from gf.build.maven import BuildError
from gf.core.config import CommitMessages, render_message
from gf.core.result import Err, Ok, Result
from gf.git.repository import GitError, MergeMode

from .contracts import FlowContext
from .errors import FlowError, configuration_error, precondition_error, tool_error, version_error
from .model import CommonOptions
from .remote import fetch, sync_branch
from .version import VersionInfo, is_valid_version

__all__ = [
    "ask_version",
    "check_clean",
    "check_snapshot_dependencies",
    "checkout",
    "choose_branch",
    "commit",
    "current_version",
    "find_branches",
    "git",
    "install",
    "is_valid_arg_line",
    "merge",
    "message",
    "prepare",
    "push",
    "run_goals",
    "run_tests",
    "set_version",
    "single_branch",
    "sync",
    "tag",
    "tag_name",
    "tool",
    "update_version",
    "validate_options",
    "validate_version",
]

T = TypeVar("T")

_ARG_DENY = re.compile(r"[&|;]")


def git(result: Result[T, GitError]) -> Result[T, FlowError]:
    return result.map_err(tool_error)


def tool(result: Result[T, BuildError]) -> Result[T, FlowError]:
    return result.map_err(tool_error)


# =============================================================================
# Validation
# =============================================================================


def is_valid_arg_line(arg_line: str | None) -> bool:
    """Reject free-form build arguments that chain shell commands.

    Only ``&``, ``|`` and ``;`` are refused; this is not a general shell
    quoting check.
    """
    return not arg_line or _ARG_DENY.search(arg_line) is None


def validate_options(options: CommonOptions) -> Result[None, FlowError]:
    for value in (options.arg_line, *options.pre_goals, *options.post_goals):
        if not is_valid_arg_line(value):
            return Err(
                configuration_error(
                    f"Illegal characters in build arguments: {value!r}",
                    hint="'&', '|' and ';' are not allowed.",
                )
            )
    if options.arg_line:
        try:
            shlex.split(options.arg_line)
        except ValueError as e:
            return Err(configuration_error(f"Invalid --arg-line {options.arg_line!r}: {e}"))
    return Ok(None)


def validate_version(version: str) -> Result[str, FlowError]:
    if not is_valid_version(version):
        return Err(
            version_error(
                f"Invalid version: {version!r}",
                hint="expected e.g. 1.2.0, 1.2.0-SNAPSHOT or 1.2-RC1",
            )
        )
    return Ok(version)


def check_clean(ctx: FlowContext) -> Result[None, FlowError]:
    dirty = git(ctx.repo.is_dirty())
    if isinstance(dirty, Err):
        return dirty
    if dirty.value:
        return Err(
            precondition_error(
                "You have some uncommitted files",
                reason="dirty_tree",
                hint="Commit or discard local changes in order to proceed.",
            )
        )
    return Ok(None)


def check_snapshot_dependencies(ctx: FlowContext, options: CommonOptions) -> Result[None, FlowError]:
    if options.allow_snapshots:
        return Ok(None)
    found = tool(ctx.build.snapshot_dependencies())
    if isinstance(found, Err):
        return found
    if found.value:
        return Err(
            precondition_error(
                f"There is some SNAPSHOT dependencies in the project: {', '.join(found.value)}",
                reason="snapshot_dependencies",
                hint="Release those dependencies first or pass --allow-snapshots.",
            )
        )
    return Ok(None)


def prepare(ctx: FlowContext, options: CommonOptions) -> Result[None, FlowError]:
    """Option validation and clean working tree check, run before any flow."""
    ok = validate_options(options)
    if isinstance(ok, Err):
        return ok
    return check_clean(ctx)


def sync(ctx: FlowContext, options: CommonOptions, *branches: str) -> Result[None, FlowError]:
    """One fetch, then a remote check of each distinct branch."""
    if not options.fetch_remote:
        return Ok(None)
    fetch(ctx)
    seen: set[str] = set()
    for branch in branches:
        if branch in seen:
            continue
        seen.add(branch)
        result = sync_branch(ctx, branch)
        if isinstance(result, Err):
            return result
    return Ok(None)


# =============================================================================
# Branch selection
# =============================================================================


def find_branches(
    ctx: FlowContext,
    prefix: str,
    *,
    include_remote: bool = False,
) -> Result[list[str], FlowError]:
    """Local branches under ``prefix``, plus remote-only ones if asked."""
    local = git(ctx.repo.find_refs(prefix))
    if isinstance(local, Err):
        return local
    names = list(local.value)

    if include_remote:
        remote = git(ctx.repo.find_refs(prefix, remote=True))
        if isinstance(remote, Err):
            return remote
        strip = f"{ctx.repo.origin}/"
        for ref in remote.value:
            name = ref.removeprefix(strip)
            if name not in names:
                names.append(name)

    return Ok(names)


def single_branch(
    ctx: FlowContext,
    options: CommonOptions,
    prefix: str,
    what: str,
) -> Result[str | None, FlowError]:
    """The one branch under ``prefix``, None if there is none.

    More than one candidate is an error.
    """
    found = find_branches(ctx, prefix, include_remote=options.fetch_remote)
    if isinstance(found, Err):
        return found
    branches = found.value
    if len(branches) > 1:
        return Err(
            precondition_error(
                f"More than one {what} branch exists: {', '.join(branches)}",
                reason="ambiguous_branch",
                hint=f"Finish or delete the extra {what} branches first.",
            )
        )
    return Ok(branches[0] if branches else None)


def choose_branch(
    ctx: FlowContext,
    options: CommonOptions,
    prefix: str,
    what: str,
    *,
    default: str | None = None,
) -> Result[str, FlowError]:
    """Pick a branch under ``prefix``.

    A single candidate is used as is. With several, the operator is asked in
    interactive mode; in batch mode ``default`` is used if it is one of them.
    """
    found = find_branches(ctx, prefix)
    if isinstance(found, Err):
        return found
    branches = found.value

    if not branches:
        return Err(
            precondition_error(
                f"There are no {what} branches",
                reason="missing_branch",
            )
        )
    if len(branches) == 1:
        return Ok(branches[0])
    if options.interactive:
        return Ok(ctx.prompter.choose_from_list(f"{what.capitalize()} branches:", branches))
    if default is not None and default in branches:
        return Ok(default)
    return Err(
        precondition_error(
            f"More than one {what} branch exists: {', '.join(branches)}",
            reason="ambiguous_branch",
            hint=f"Name the {what} branch explicitly.",
        )
    )


# =============================================================================
# Versions
# =============================================================================


def current_version(ctx: FlowContext) -> Result[VersionInfo, FlowError]:
    """Version of the checked-out project."""
    text = tool(ctx.build.project_version())
    if isinstance(text, Err):
        return text
    return VersionInfo.parse(text.value, ctx.policy)


def ask_version(
    ctx: FlowContext,
    options: CommonOptions,
    prompt: str,
    default: str,
) -> Result[str, FlowError]:
    """Ask for a version in interactive mode, else use ``default``."""
    if not default.strip():
        return Err(version_error("Computed version is blank"))
    if options.interactive:
        return Ok(ctx.prompter.prompt_validated(prompt, is_valid_version, default))
    return validate_version(default)


def set_version(ctx: FlowContext, options: CommonOptions, version: str) -> Result[None, FlowError]:
    ctx.console.info(f"Setting version to {version}")
    result = tool(ctx.build.set_version(version, all_modules=options.versions_force_update))
    if isinstance(result, Err):
        return result
    if options.version_property:
        return tool(ctx.build.set_property(options.version_property, version))
    return Ok(None)


def update_version(
    ctx: FlowContext,
    options: CommonOptions,
    version: str,
    commit_message: str,
) -> Result[bool, FlowError]:
    """Set the version and commit it, unless the project is already there.

    Returns whether a commit was made.
    """
    current = tool(ctx.build.project_version())
    if isinstance(current, Err):
        return current
    if current.value == version:
        return Ok(False)
    ok = set_version(ctx, options, version)
    if isinstance(ok, Err):
        return ok
    ok = commit(ctx, options, commit_message)
    if isinstance(ok, Err):
        return ok
    return Ok(True)


# =============================================================================
# Git and build operations
# =============================================================================


def message(ctx: FlowContext, template: str, **properties: str) -> str:
    """Render the commit message template named ``template``."""
    messages: CommitMessages = ctx.settings.messages
    return render_message(messages, getattr(messages, template), **properties)


def tag_name(ctx: FlowContext, version: str) -> str:
    return f"{ctx.settings.branches.version_tag_prefix}{version}"


def checkout(ctx: FlowContext, ref: str) -> Result[None, FlowError]:
    return git(ctx.repo.checkout(ref))


def commit(ctx: FlowContext, options: CommonOptions, text: str) -> Result[None, FlowError]:
    ctx.console.print(f"commit: {text}")
    return git(ctx.repo.commit(text, signed=options.gpg_sign_commit))


def merge(
    ctx: FlowContext,
    ref: str,
    mode: MergeMode = MergeMode.NO_FF,
    text: str | None = None,
) -> Result[None, FlowError]:
    ctx.console.info(f"Merging {ref} ({mode.value})")
    return git(ctx.repo.merge(ref, mode, text or None))


def tag(ctx: FlowContext, options: CommonOptions, name: str, text: str) -> Result[None, FlowError]:
    if ctx.repo.tag_exists(name):
        return Err(
            precondition_error(
                f"Tag already exists: {name}",
                reason="tag_exists",
                hint="Delete the tag or choose another version.",
            )
        )
    ctx.console.info(f"Tagging {name}")
    return git(ctx.repo.tag(name, text, signed=options.gpg_sign_tag))


def push(
    ctx: FlowContext,
    options: CommonOptions,
    ref: str,
    *,
    follow_tags: bool = False,
) -> Result[None, FlowError]:
    if not options.push_remote:
        return Ok(None)
    ctx.console.info(f"Pushing {ref} to {ctx.repo.origin}")
    return git(ctx.repo.push(ref, follow_tags=follow_tags, push_options=options.push_options))


def run_tests(ctx: FlowContext, options: CommonOptions) -> Result[None, FlowError]:
    if options.skip_test:
        return Ok(None)
    ctx.console.info("Running tests")
    return tool(ctx.build.test())


def run_goals(ctx: FlowContext, goals: Sequence[str]) -> Result[None, FlowError]:
    for goal in goals:
        ctx.console.info(f"Running {goal}")
        result = tool(ctx.build.run_goals(goal.split()))
        if isinstance(result, Err):
            return result
    return Ok(None)


def install(ctx: FlowContext, options: CommonOptions) -> Result[None, FlowError]:
    if not options.install_project:
        return Ok(None)
    ctx.console.info("Installing project")
    return tool(ctx.build.install())
