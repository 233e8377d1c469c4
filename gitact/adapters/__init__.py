"""Git hosting platform adapters."""

from gitact.adapters.base import GitPlatformAdapter
from gitact.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitHubAdapter"]
