"""Git repository gateway.

``RepositoryGateway`` is the set of git operations the workflows rely on;
``Repository`` implements it on top of the git command line. All operations
return Result types.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.find_refs("release/"):
        case Ok(branches):
            print(branches)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from gf.core.result import Err, Ok, Result
from gf.platform.process import ProcessError
from gf.platform.process import run as run_process

if TYPE_CHECKING:
    from gf.output.console import ConsoleProtocol

__all__ = [
    "GitError",
    "MergeMode",
    "Repository",
    "RepositoryGateway",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Captured error output (standard output if stderr is empty)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class MergeMode(Enum):
    """How a branch is integrated into another."""

    NO_FF = "no-ff"
    FF_ONLY = "ff-only"
    MERGE = "merge"
    REBASE = "rebase"
    SQUASH = "squash"


class RepositoryGateway(Protocol):
    """Git operations used by the workflows."""

    @property
    def origin(self) -> str: ...

    def find_refs(
        self,
        prefix: str,
        pattern: str = "*",
        *,
        remote: bool = False,
        sort: Sequence[str] = (),
        limit: int | None = None,
    ) -> Result[list[str], GitError]:
        """Short names of branches (or remote branches) under ``prefix``."""
        ...

    def ref_exists(self, full_ref: str) -> bool: ...

    def is_dirty(self) -> Result[bool, GitError]: ...

    def rev_list_left_right_count(self, left: str, right: str) -> Result[tuple[int, int], GitError]:
        """Commits only in ``left`` and only in ``right``."""
        ...

    def current_branch(self) -> Result[str, GitError]: ...

    def checkout(self, ref: str) -> Result[None, GitError]: ...

    def checkout_new(self, branch: str, from_ref: str) -> Result[None, GitError]: ...

    def branch_delete(self, name: str, *, force: bool = False) -> Result[None, GitError]: ...

    def merge(
        self,
        ref: str,
        mode: MergeMode = MergeMode.NO_FF,
        message: str | None = None,
    ) -> Result[None, GitError]: ...

    def tag(self, name: str, message: str, *, signed: bool = False) -> Result[None, GitError]: ...

    def tag_exists(self, name: str) -> bool: ...

    def list_tags(self, pattern: str = "*") -> Result[list[str], GitError]:
        """Tags, newest version first."""
        ...

    def commit(
        self,
        message: str,
        *,
        all_tracked: bool = True,
        signed: bool = False,
    ) -> Result[None, GitError]: ...

    def push(
        self,
        ref: str,
        *,
        follow_tags: bool = False,
        push_options: Sequence[str] = (),
    ) -> Result[None, GitError]: ...

    def push_delete(self, ref: str) -> Result[None, GitError]: ...

    def fetch(self) -> Result[None, GitError]: ...

    def set_config(self, key: str, value: str) -> Result[None, GitError]: ...

    def check_ref_format(self, name: str) -> bool: ...


class Repository:
    """Git command line implementation of ``RepositoryGateway``.

    Attributes:
        path: Path to the working tree
        origin: Name of the remote used for fetch and push
    """

    def __init__(
        self,
        path: Path,
        *,
        git: str = "git",
        origin: str = "origin",
        console: ConsoleProtocol | None = None,
    ) -> None:
        self.path = path
        self._git = git
        self._origin = origin
        self._console = console

    @property
    def origin(self) -> str:
        return self._origin

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_refs(
        self,
        prefix: str,
        pattern: str = "*",
        *,
        remote: bool = False,
        sort: Sequence[str] = (),
        limit: int | None = None,
    ) -> Result[list[str], GitError]:
        namespace = f"refs/remotes/{self._origin}/" if remote else "refs/heads/"
        args = ["for-each-ref", "--format=%(refname:short)"]
        args += [f"--sort={key}" for key in sort]
        if limit is not None:
            args.append(f"--count={limit}")
        args.append(f"{namespace}{prefix}{pattern}")
        match self._call(args):
            case Err(e):
                return Err(e)
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def ref_exists(self, full_ref: str) -> bool:
        return isinstance(self._run(["show-ref", "--verify", "--quiet", full_ref]), Ok)

    def is_dirty(self) -> Result[bool, GitError]:
        """True if tracked files have unstaged or staged changes."""
        checks = [
            ["diff", "--no-ext-diff", "--ignore-submodules", "--quiet", "--exit-code"],
            ["diff-index", "--cached", "--quiet", "--ignore-submodules", "HEAD", "--"],
        ]
        for args in checks:
            match self._run(args):
                case Err(e) if e.returncode == 1:
                    return Ok(True)
                case Err(e):
                    return Err(self._error(args, e))
                case Ok(_):
                    pass
        return Ok(False)

    def rev_list_left_right_count(self, left: str, right: str) -> Result[tuple[int, int], GitError]:
        args = ["rev-list", "--left-right", "--count", f"{left}...{right}"]
        match self._call(args):
            case Err(e):
                return Err(e)
            case Ok(stdout):
                columns = stdout.split()
                if len(columns) != 2 or not all(c.isdigit() for c in columns):
                    return Err(
                        GitError(
                            command=" ".join(args),
                            message=f"unexpected rev-list output: {stdout.strip()!r}",
                        )
                    )
                return Ok((int(columns[0]), int(columns[1])))

    def current_branch(self) -> Result[str, GitError]:
        args = ["symbolic-ref", "-q", "--short", "HEAD"]
        match self._call(args):
            case Err(e):
                return Err(e)
            case Ok(stdout):
                return Ok(stdout.strip())

    def tag_exists(self, name: str) -> bool:
        return self.ref_exists(f"refs/tags/{name}")

    def list_tags(self, pattern: str = "*") -> Result[list[str], GitError]:
        args = [
            "for-each-ref",
            "--sort=-taggerdate",
            "--sort=-v:refname",
            "--format=%(refname:short)",
            f"refs/tags/{pattern}",
        ]
        match self._call(args):
            case Err(e):
                return Err(e)
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def check_ref_format(self, name: str) -> bool:
        return isinstance(self._run(["check-ref-format", "--allow-onelevel", name]), Ok)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def checkout(self, ref: str) -> Result[None, GitError]:
        return self._call(["checkout", ref]).map(_discard)

    def checkout_new(self, branch: str, from_ref: str) -> Result[None, GitError]:
        return self._call(["checkout", "-b", branch, from_ref]).map(_discard)

    def branch_delete(self, name: str, *, force: bool = False) -> Result[None, GitError]:
        return self._call(["branch", "-D" if force else "-d", name]).map(_discard)

    def merge(
        self,
        ref: str,
        mode: MergeMode = MergeMode.NO_FF,
        message: str | None = None,
    ) -> Result[None, GitError]:
        if mode is MergeMode.REBASE:
            return self._call(["rebase", ref]).map(_discard)

        args = ["merge"]
        match mode:
            case MergeMode.NO_FF:
                args.append("--no-ff")
            case MergeMode.FF_ONLY:
                args.append("--ff-only")
            case MergeMode.SQUASH:
                args.append("--squash")
            case _:
                pass
        if message and mode is not MergeMode.SQUASH:
            args += ["-m", message]
        args.append(ref)
        return self._call(args).map(_discard)

    def tag(self, name: str, message: str, *, signed: bool = False) -> Result[None, GitError]:
        args = ["tag", "-a"]
        if signed:
            args.append("-s")
        args += [name, "-m", message]
        return self._call(args).map(_discard)

    def commit(
        self,
        message: str,
        *,
        all_tracked: bool = True,
        signed: bool = False,
    ) -> Result[None, GitError]:
        args = ["commit"]
        if all_tracked:
            args.append("-a")
        if signed:
            args.append("-S")
        args += ["-m", message]
        return self._call(args).map(_discard)

    def push(
        self,
        ref: str,
        *,
        follow_tags: bool = False,
        push_options: Sequence[str] = (),
    ) -> Result[None, GitError]:
        args = ["push", "--quiet", "-u"]
        if follow_tags:
            args.append("--follow-tags")
        for option in push_options:
            args += ["-o", option]
        args += [self._origin, ref]
        return self._call(args).map(_discard)

    def push_delete(self, ref: str) -> Result[None, GitError]:
        return self._call(["push", "--delete", self._origin, ref]).map(_discard)

    def fetch(self) -> Result[None, GitError]:
        return self._call(["fetch", "--quiet", self._origin]).map(_discard)

    def set_config(self, key: str, value: str) -> Result[None, GitError]:
        return self._call(["config", key, value]).map(_discard)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        cmd = [self._git, *args]
        if self._console is not None:
            self._console.command(cmd)
        return run_process(cmd, cwd=self.path)

    def _call(self, args: list[str]) -> Result[str, GitError]:
        match self._run(args):
            case Err(e):
                return Err(self._error(args, e))
            case Ok(stdout):
                return Ok(stdout)

    def _error(self, args: list[str], e: ProcessError) -> GitError:
        return GitError(
            command=f"git {' '.join(args)}",
            message=e.details or f"git {args[0]} failed",
            returncode=e.returncode,
        )


def _discard(_: str) -> None:
    return None
