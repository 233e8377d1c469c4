"""Stage, commit with the bot identity, and push to origin."""

import logging

from gitact.errors import ActionError, NothingToCommitError, PushRejectedError
from gitact.models import CommitResult, LocalRepoHandle
from gitact.services.git._run import run_git
from gitact.services.git.checks import require_repository

LOG = logging.getLogger("gitact.services.git.commits")

DEFAULT_AUTHOR_NAME = "gitact"
DEFAULT_AUTHOR_EMAIL = "gitact@users.noreply.github.com"


def _fail(handle: LocalRepoHandle, operation: str, result) -> ActionError:
    return ActionError(
        f"{operation} failed: {result.describe()}",
        operation=operation,
        repo=handle.ref.full_name,
        cause=result.error,
    )


def push_branch(handle: LocalRepoHandle, branch: str | None = None, log: logging.Logger | None = None) -> None:
    """Push branch to origin, or the current branch to its upstream."""
    log = log or LOG
    args = ["push", "origin", branch] if branch else ["push"]
    result = run_git(args, cwd=handle.path, log=log)
    if not result.ok:
        raise PushRejectedError(
            f"Push to {branch or 'upstream'} rejected: {result.describe()}",
            operation="push",
            repo=handle.ref.full_name,
            cause=result.error,
        )
    log.info("Pushed %s to origin (%s)", branch or "current branch", handle.ref)


def commit_and_push(
    handle: LocalRepoHandle,
    message: str,
    branch: str | None = None,
    author_name: str = DEFAULT_AUTHOR_NAME,
    author_email: str = DEFAULT_AUTHOR_EMAIL,
    log: logging.Logger | None = None,
) -> CommitResult:
    """Stage every change, commit it and push.

    Raises NothingToCommitError when the staged diff is empty and
    PushRejectedError when the push fails; a rejected push leaves the local
    commit in place.

    Args:
        handle: Local working copy.
        message: Commit message.
        branch: Push to origin/<branch>; None pushes to the upstream.
        author_name: Git user.name for the commit.
        author_email: Git user.email for the commit.
        log: Optional logger.

    Returns:
        CommitResult with the full commit hash.
    """
    log = log or LOG
    require_repository(handle, operation="commit", log=log)

    staged = run_git(["add", "-A"], cwd=handle.path, log=log)
    if not staged.ok:
        raise _fail(handle, "stage", staged)

    # diff --cached --quiet: exit 0 = nothing staged, 1 = changes staged
    diff = run_git(["diff", "--cached", "--quiet"], cwd=handle.path, log=log)
    if diff.returncode == 0:
        raise NothingToCommitError(
            "Nothing to commit, working tree clean",
            operation="commit",
            repo=handle.ref.full_name,
        )
    if diff.returncode != 1:
        raise _fail(handle, "stage", diff)

    committed = run_git(
        [
            "-c",
            f"user.name={author_name}",
            "-c",
            f"user.email={author_email}",
            "-c",
            "commit.gpgsign=false",
            "commit",
            "-m",
            message,
        ],
        cwd=handle.path,
        log=log,
    )
    if not committed.ok:
        raise _fail(handle, "commit", committed)

    head = run_git(["rev-parse", "HEAD"], cwd=handle.path, log=log)
    if not head.ok or not head.output:
        raise _fail(handle, "commit", head)
    log.info("Committed %s in %s", head.output[:12], handle.ref)

    push_branch(handle, branch, log=log)
    return CommitResult(hash=head.output)
