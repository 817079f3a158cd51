"""Git operations."""

from .repository import GitError, MergeMode, Repository, RepositoryGateway

__all__ = [
    "GitError",
    "MergeMode",
    "Repository",
    "RepositoryGateway",
]
