"""Typed configuration loading and access.

Settings live in an optional ``gitflow.toml`` at the repository root:

    [branches]
    production = "main"
    development = "develop"
    origin = "origin"

    [prefixes]
    feature = "feature/"
    version_tag = "v"

    [messages]
    prefix = "[gitflow] "
    release_start = "Update versions for release @{version}"

    [tools]
    git = "git"
    mvn = "./mvnw"

    [version]
    policy = "semver"

Every key is optional; missing keys fall back to the defaults below.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_raw_str, get_str, get_table

__all__ = [
    "BranchConfig",
    "CommitMessages",
    "ConfigError",
    "GitFlowSettings",
    "ToolsConfig",
    "SETTINGS_FILE_NAME",
    "load_settings",
    "load_settings_or_default",
    "render_message",
]

SETTINGS_FILE_NAME = "gitflow.toml"

_PLACEHOLDER = re.compile(r"@\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when settings cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BranchConfig:
    """Long-lived branch names, short-lived branch prefixes and the remote."""

    production: str = "master"
    development: str = "develop"
    feature_prefix: str = "feature/"
    bugfix_prefix: str = "bugfix/"
    release_prefix: str = "release/"
    hotfix_prefix: str = "hotfix/"
    support_prefix: str = "support/"
    version_tag_prefix: str = ""
    origin: str = "origin"

    @property
    def same_prod_dev_name(self) -> bool:
        return self.production == self.development


@dataclass(frozen=True, slots=True)
class CommitMessages:
    """Commit, merge and tag message templates.

    Templates may reference ``@{version}``, ``@{featureName}``,
    ``@{bugfixName}`` and ``@{branch}``. An empty merge message lets git
    write its default one.
    """

    prefix: str = ""

    feature_start: str = "Update versions for feature branch"
    feature_finish: str = "Update versions for development branch"
    feature_finish_dev_merge: str = ""
    feature_squash: str = "Squashed branch @{branch}"
    update_feature_back: str = "Update feature branch back to feature version"

    bugfix_start: str = "Update versions for bugfix branch"
    bugfix_finish: str = "Update versions for development branch"
    bugfix_finish_dev_merge: str = ""
    bugfix_squash: str = "Squashed branch @{branch}"
    update_bugfix_back: str = "Update bugfix branch back to bugfix version"

    hotfix_start: str = "Update versions for hotfix"
    hotfix_finish: str = "Update for next development version"
    hotfix_version_update: str = "Update to hotfix version"
    hotfix_finish_merge: str = ""
    hotfix_finish_dev_merge: str = ""
    hotfix_finish_release_merge: str = ""
    hotfix_finish_support_merge: str = ""

    release_start: str = "Update versions for release"
    release_finish: str = "Update for next development version"
    release_version_update: str = "Update for next development version"
    release_finish_merge: str = ""
    release_finish_dev_merge: str = ""

    version_update: str = "Update versions"

    tag_hotfix: str = "Tag hotfix"
    tag_release: str = "Tag release"
    tag_version_update: str = "Tag version update"

    update_dev_to_avoid_conflicts: str = (
        "Update development version to production version to avoid merge conflicts"
    )
    update_dev_back_pre_merge_state: str = "Update development version back to pre-merge state"
    update_release_to_avoid_conflicts: str = (
        "Update release version to hotfix version to avoid merge conflicts"
    )
    update_release_back_pre_merge_state: str = "Update release version back to pre-merge state"

    @classmethod
    def from_table(cls, table: Mapping[str, object]) -> CommitMessages:
        overrides: dict[str, str] = {}
        for f in fields(cls):
            value = get_raw_str(table, f.name)
            if value is not None:
                overrides[f.name] = value
        return replace(cls(), **overrides)


def render_message(messages: CommitMessages, template: str, **properties: str) -> str:
    """Render a template, substituting ``@{key}`` placeholders.

    Unknown placeholders are left in place. An empty template stays empty so
    merges can fall back to git's default message.
    """
    if not template:
        return ""

    def _sub(m: re.Match[str]) -> str:
        return properties.get(m.group(1), m.group(0))

    return messages.prefix + _PLACEHOLDER.sub(_sub, template)


@dataclass(frozen=True, slots=True)
class ToolsConfig:
    """Executables used for the repository and build tool gateways."""

    git: str = "git"
    mvn: str = "mvn"


@dataclass(frozen=True, slots=True)
class GitFlowSettings:
    """Main settings container."""

    branches: BranchConfig = field(default_factory=BranchConfig)
    messages: CommitMessages = field(default_factory=CommitMessages)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    version_policy: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> GitFlowSettings:
        """Create settings from a mapping (parsed TOML)."""
        branches: StrDict = get_table(data, "branches") or {}
        prefixes: StrDict = get_table(data, "prefixes") or {}
        messages: StrDict = get_table(data, "messages") or {}
        tools: StrDict = get_table(data, "tools") or {}
        version: StrDict = get_table(data, "version") or {}

        defaults = BranchConfig()

        def prefix(key: str, default: str) -> str:
            value = get_raw_str(prefixes, key)
            return default if value is None else value

        return cls(
            branches=BranchConfig(
                production=get_str(branches, "production") or defaults.production,
                development=get_str(branches, "development") or defaults.development,
                origin=get_str(branches, "origin") or defaults.origin,
                feature_prefix=prefix("feature", defaults.feature_prefix),
                bugfix_prefix=prefix("bugfix", defaults.bugfix_prefix),
                release_prefix=prefix("release", defaults.release_prefix),
                hotfix_prefix=prefix("hotfix", defaults.hotfix_prefix),
                support_prefix=prefix("support", defaults.support_prefix),
                version_tag_prefix=prefix("version_tag", defaults.version_tag_prefix),
            ),
            messages=CommitMessages.from_table(messages),
            tools=ToolsConfig(
                git=get_str(tools, "git") or "git",
                mvn=get_str(tools, "mvn") or "mvn",
            ),
            version_policy=get_str(version, "policy"),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Settings root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Settings file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading settings: {e}", path=path))


def load_settings(path: Path) -> Result[GitFlowSettings, ConfigError]:
    """Load and parse settings from a TOML file.

    Args:
        path: Path to gitflow.toml

    Returns:
        Ok(GitFlowSettings) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(GitFlowSettings.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid settings structure: {e}", path=path))


def load_settings_or_default(repo_root: Path) -> Result[GitFlowSettings, ConfigError]:
    """Load ``gitflow.toml`` from the repository root, or defaults when absent."""
    path = repo_root / SETTINGS_FILE_NAME
    if not path.exists():
        return Ok(GitFlowSettings())
    return load_settings(path)
