"""Version arithmetic.

Versions follow the Maven convention::

    <digits>[<sep><annotation>[<sep><annotation revision>]][<sep><build specifier>]

e.g. ``0.09-RC3-feature-SNAPSHOT`` has digits ``0.09``, annotation ``RC``,
annotation revision ``3`` and build specifier ``feature-SNAPSHOT``. Digit
groups are kept as strings so that zero padding survives increments
(``0.0009`` -> ``0.0010``).

Usage:
    match VersionInfo.parse("1.2.0-SNAPSHOT"):
        case Ok(info):
            info.release_version_string()        # "1.2.0"
            info.next_snapshot_version(1)        # "1.3.0-SNAPSHOT"
        case Err(error):
            print(error.message)

A ``VersionPolicy`` replaces the built-in arithmetic for release and
development versions. Policies are looked up by id with ``resolve_policy``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Protocol

from gf.core.result import Err, Ok, Result

from .errors import FlowError, configuration_error, version_error

__all__ = [
    "SNAPSHOT",
    "SemVerPolicy",
    "VersionInfo",
    "VersionPolicy",
    "is_valid_version",
    "register_policy",
    "resolve_policy",
]

SNAPSHOT = "SNAPSHOT"
SNAPSHOT_SUFFIX = "-" + SNAPSHOT

_ALTERNATE = re.compile(r"(SNAPSHOT|[a-zA-Z]+[_-]SNAPSHOT)", re.ASCII)
_STANDARD = re.compile(
    r"((?:\d+\.)*\d+)([-_])?([a-zA-Z]*)([-_])?(\d*)(?:([-_])?(.*?))?", re.ASCII
)
_TIMESTAMPED = re.compile(r"(.*)-(\d{8}\.\d{6})-(\d+)", re.ASCII)


class VersionPolicy(Protocol):
    """Strategy overriding the built-in release/development computation."""

    def release_version_of(self, version: str) -> str: ...

    def development_version_of(self, version: str) -> str: ...


def is_valid_version(version: str | None) -> bool:
    """True if ``version`` matches the standard or the qualifier-only pattern."""
    if version is None or not version.strip():
        return False
    return bool(_ALTERNATE.fullmatch(version) or _STANDARD.fullmatch(version))


def _increment(s: str) -> str:
    value = str(int(s) + 1)
    return value.rjust(len(s), "0")


def _is_numeric(s: str | None) -> bool:
    return s is not None and s.isascii() and s.isdigit()


def _empty_to_none(s: str | None) -> str | None:
    return s if s else None


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """A parsed version. Immutable; every computation returns a new value."""

    digits: tuple[str, ...] | None
    annotation: str | None = None
    annotation_separator: str | None = None
    annotation_revision: str | None = None
    annotation_revision_separator: str | None = None
    build_specifier: str | None = None
    build_separator: str | None = None
    policy: VersionPolicy | None = field(default=None, compare=False, repr=False)

    @classmethod
    def parse(
        cls,
        version: str | None,
        policy: VersionPolicy | None = None,
    ) -> Result[VersionInfo, FlowError]:
        if version is None or not version.strip():
            return Err(version_error("Version is blank"))

        if _ALTERNATE.fullmatch(version):
            return Ok(cls(digits=None, build_specifier=version, policy=policy))

        m = _STANDARD.fullmatch(version)
        if m is None:
            return Err(
                version_error(
                    f"Unable to parse the version string: {version!r}",
                    hint="expected e.g. 1.2.0, 1.2.0-SNAPSHOT or 1.2-RC1",
                )
            )

        digits = tuple(m.group(1).split("."))
        ann_sep, ann, rev_sep, rev, build_sep, build = m.groups()[1:]

        if ann == SNAPSHOT:
            return Ok(
                cls(
                    digits=digits,
                    build_separator=ann_sep,
                    build_specifier=ann,
                    policy=policy,
                )
            )

        if rev_sep and not rev:
            # a separator without revision digits starts the build specifier
            return Ok(
                cls(
                    digits=digits,
                    annotation=_empty_to_none(ann),
                    annotation_separator=ann_sep,
                    build_separator=rev_sep,
                    build_specifier=_empty_to_none(build),
                    policy=policy,
                )
            )

        return Ok(
            cls(
                digits=digits,
                annotation=_empty_to_none(ann),
                annotation_separator=ann_sep,
                annotation_revision=_empty_to_none(rev),
                annotation_revision_separator=rev_sep,
                build_separator=build_sep,
                build_specifier=_empty_to_none(build),
                policy=policy,
            )
        )

    def __str__(self) -> str:
        parts: list[str] = []
        if self.digits is not None:
            parts.append(".".join(self.digits))
        if self.annotation:
            parts.append((self.annotation_separator or "") + self.annotation)
        if self.annotation_revision:
            sep = (
                self.annotation_revision_separator
                if self.annotation
                else self.annotation_separator
            )
            parts.append((sep or "") + self.annotation_revision)
        if self.build_specifier:
            sep = self.build_separator if self.digits is not None else None
            parts.append((sep or "") + self.build_specifier)
        return "".join(parts)

    @property
    def digits_string(self) -> str:
        return ".".join(self.digits) if self.digits is not None else ""

    @property
    def is_snapshot(self) -> bool:
        text = str(self)
        return text.upper().endswith(SNAPSHOT) or bool(_TIMESTAMPED.fullmatch(text))

    def release_version_string(self) -> str:
        """Version without the snapshot marker."""
        text = str(self)
        if self.policy is not None:
            return self.policy.release_version_of(text)

        m = _TIMESTAMPED.fullmatch(text)
        if m:
            return m.group(1)
        if text[-len(SNAPSHOT_SUFFIX) :].upper() == SNAPSHOT_SUFFIX:
            return text[: -len(SNAPSHOT_SUFFIX)]
        if text == SNAPSHOT:
            return "1.0"
        return text

    def snapshot_version_string(self) -> str:
        text = str(self)
        if text == SNAPSHOT:
            return text
        base = self.release_version_string()
        return f"{base}-{SNAPSHOT}" if base else SNAPSHOT

    def default_next(self) -> VersionInfo | None:
        """Maven's default increment.

        Bumps the annotation revision when numeric, else the build specifier
        when numeric, else the last digit group. None for qualifier-only
        versions.
        """
        if self.digits is None:
            return None
        return self._bump(self.digits)

    def _bump(self, digits: tuple[str, ...]) -> VersionInfo:
        if _is_numeric(self.annotation_revision):
            return replace(
                self,
                annotation_revision=_increment(self.annotation_revision or ""),
            )
        if _is_numeric(self.build_specifier):
            return replace(self, build_specifier=_increment(self.build_specifier or ""))
        bumped = list(digits)
        bumped[-1] = _increment(bumped[-1])
        return replace(self, digits=tuple(bumped))

    def next_version(self, index: int | None, snapshot: bool) -> str:
        """Next version, incrementing digit group ``index``.

        Later digit groups are reset to zero. An index of None or outside the
        digit groups falls back to ``default_next``. Qualifier-only versions
        are returned as they are.
        """
        if self.policy is not None:
            return self.policy.development_version_of(str(self))

        if self.digits is None:
            return self.snapshot_version_string() if snapshot else self.release_version_string()

        if index is not None and 0 <= index < len(self.digits):
            digits = list(self.digits)
            digits[index] = _increment(digits[index])
            for i in range(index + 1, len(digits)):
                digits[i] = "0"
            suffix_source = (
                self.snapshot_version_string() if snapshot else self.release_version_string()
            )
            return ".".join(digits) + suffix_source[len(self.digits_string) :]

        nxt = self._bump(self.digits)
        return nxt.snapshot_version_string() if snapshot else nxt.release_version_string()

    def next_snapshot_version(self, index: int | None = None) -> str:
        return self.next_version(index, snapshot=True)

    def hotfix_version(self, preserve_snapshot: bool, index: int | None = None) -> str:
        return self.next_version(index, preserve_snapshot and self.is_snapshot)

    def feature_version(self, name: str | None) -> str:
        """Version carrying a feature (or bugfix) name before the snapshot marker."""
        if name is None:
            return str(self)
        suffix = SNAPSHOT_SUFFIX if self.is_snapshot else ""
        return f"{self.release_version_string()}-{name}{suffix}"

    def digits_version_info(self) -> VersionInfo:
        return VersionInfo(digits=self.digits, policy=self.policy)

    def compare_to(self, other: VersionInfo) -> int:
        """Compare digit groups numerically; missing groups count as zero.

        With equal digits a snapshot sorts before the release it leads to.
        """
        mine = [int(d) for d in self.digits or ()]
        theirs = [int(d) for d in other.digits or ()]
        width = max(len(mine), len(theirs))
        mine += [0] * (width - len(mine))
        theirs += [0] * (width - len(theirs))
        if mine != theirs:
            return 1 if mine > theirs else -1
        return int(other.is_snapshot) - int(self.is_snapshot)


# =============================================================================
# Policies
# =============================================================================


_SEMVER = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?", re.ASCII)


class SemVerPolicy:
    """major.minor.patch releases, next development bumps the minor."""

    def _parts(self, version: str) -> tuple[int, int, int] | None:
        m = _SEMVER.match(version)
        if m is None:
            return None
        major, minor, patch = (int(g) if g else 0 for g in m.groups())
        return major, minor, patch

    def release_version_of(self, version: str) -> str:
        parts = self._parts(version)
        if parts is None:
            if version.upper().endswith(SNAPSHOT_SUFFIX):
                return version[: -len(SNAPSHOT_SUFFIX)]
            return version
        return "{}.{}.{}".format(*parts)

    def development_version_of(self, version: str) -> str:
        parts = self._parts(version)
        if parts is None:
            return version
        major, minor, _ = parts
        return f"{major}.{minor + 1}.0{SNAPSHOT_SUFFIX}"


_POLICIES: dict[str, VersionPolicy] = {"semver": SemVerPolicy()}


def register_policy(policy_id: str, policy: VersionPolicy) -> None:
    """Make ``policy`` available under ``policy_id``."""
    _POLICIES[policy_id] = policy


def resolve_policy(policy_id: str | None) -> Result[VersionPolicy | None, FlowError]:
    """Look up a policy; None means built-in arithmetic."""
    if policy_id is None:
        return Ok(None)
    policy = _POLICIES.get(policy_id)
    if policy is None:
        known = ", ".join(sorted(_POLICIES))
        return Err(
            configuration_error(
                f"Unknown version policy: {policy_id}",
                hint=f"known policies: {known}",
            )
        )
    return Ok(policy)
