"""Preconditions shared by operations on a local working copy."""

import logging
from pathlib import Path

from gitact.errors import RepositoryNotInitializedError
from gitact.models import LocalRepoHandle
from gitact.services.git._run import run_git


def is_git_repository(path: Path, log: logging.Logger | None = None) -> bool:
    """True if path is the top level of a git work tree.

    A plain directory nested inside some other repository does not count.
    """
    path = Path(path)
    if not path.is_dir():
        return False
    result = run_git(["rev-parse", "--show-toplevel"], cwd=path, log=log)
    if not result.ok or not result.output:
        return False
    return Path(result.output).resolve() == path.resolve()


def require_repository(handle: LocalRepoHandle, operation: str, log: logging.Logger | None = None) -> None:
    """Raise RepositoryNotInitializedError unless the handle's clone exists."""
    if not is_git_repository(handle.path, log=log):
        raise RepositoryNotInitializedError(
            f"Repository {handle.ref.full_name} does not exist locally at {handle.path}; initialize it first",
            operation=operation,
            repo=handle.ref.full_name,
        )
