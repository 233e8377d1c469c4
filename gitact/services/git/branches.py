"""Local branch operations: list, current, idempotent checkout/create."""

import logging

from gitact.errors import ActionError, BranchNotFoundError, LocalStateCorruptError
from gitact.models import LocalRepoHandle
from gitact.services.git._run import run_git
from gitact.services.git.checks import require_repository

LOG = logging.getLogger("gitact.services.git.branches")


def list_branches(
    handle: LocalRepoHandle,
    remote: bool = False,
    log: logging.Logger | None = None,
) -> list[str]:
    """Names of local branches, or of origin's branches (without "origin/")."""
    args = ["branch", "-r", "--format=%(refname:short)"] if remote else ["branch", "--format=%(refname:short)"]
    result = run_git(args, cwd=handle.path, log=log)
    if not result.ok:
        raise LocalStateCorruptError(
            f"Cannot list branches: {result.describe()}",
            operation="list_branches",
            repo=handle.ref.full_name,
            cause=result.error,
        )
    names = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    if remote:
        names = [n[len("origin/") :] for n in names if n.startswith("origin/") and n != "origin/HEAD"]
    return names


def current_branch(handle: LocalRepoHandle, log: logging.Logger | None = None) -> str | None:
    """Checked-out branch name, or None when detached or without commits."""
    result = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=handle.path, log=log)
    if not result.ok or result.output in ("", "HEAD"):
        return None
    return result.output


def checkout_branch(
    handle: LocalRepoHandle,
    branch_name: str | None,
    create: bool = False,
    log: logging.Logger | None = None,
) -> None:
    """Switch the working copy to branch_name.

    With create=True a missing branch is created from HEAD and an existing
    one is checked out with a warning, so re-running a cycle does not fail.
    With create=False a missing branch raises BranchNotFoundError. Branches
    present only on origin are checked out as tracking branches.
    Empty branch_name is a no-op.
    """
    if not branch_name or not branch_name.strip():
        return
    log = log or LOG
    require_repository(handle, operation="checkout", log=log)
    log.info("Checking out branch %s in %s", branch_name, handle.path)

    # A branch only on origin counts as existing; checkout then tracks it
    exists = branch_name in list_branches(handle, log=log) or branch_name in list_branches(
        handle, remote=True, log=log
    )
    if create:
        if exists:
            log.warning("Branch %s already exists in %s, checking it out instead", branch_name, handle.ref)
            args = ["checkout", branch_name]
        else:
            args = ["checkout", "-b", branch_name]
    else:
        if not exists:
            raise BranchNotFoundError(
                f"Branch {branch_name!r} does not exist",
                operation="checkout",
                repo=handle.ref.full_name,
            )
        args = ["checkout", branch_name]

    result = run_git(args, cwd=handle.path, log=log)
    if not result.ok:
        raise ActionError(
            f"Cannot check out branch {branch_name!r}: {result.describe()}",
            operation="checkout",
            repo=handle.ref.full_name,
            cause=result.error,
        )
