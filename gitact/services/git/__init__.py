"""Git operations on local working copies: clone/pull, files, branches,
commits and push."""

from gitact.services.git._run import GitResult, run_git
from gitact.services.git.branches import checkout_branch, current_branch, list_branches
from gitact.services.git.checks import is_git_repository, require_repository
from gitact.services.git.commits import commit_and_push, push_branch
from gitact.services.git.files import (
    is_ignored,
    load_ignore_patterns,
    read_file,
    retrieve_files,
    write_files,
)
from gitact.services.git.repository import RepositoryStore

__all__ = [
    "GitResult",
    "RepositoryStore",
    "checkout_branch",
    "commit_and_push",
    "current_branch",
    "is_git_repository",
    "is_ignored",
    "list_branches",
    "load_ignore_patterns",
    "push_branch",
    "read_file",
    "require_repository",
    "retrieve_files",
    "run_git",
    "write_files",
]
