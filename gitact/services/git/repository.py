"""Local repository store: deterministic clone layout and clone-or-pull.

Clones live at <workdir>/<owner>/<name>. The store owns that tree; callers
must not run two cycles against the same RepoRef at once.
"""

import logging
from pathlib import Path

from gitact.errors import LocalStateCorruptError, RepoUnavailableError
from gitact.models import LocalRepoHandle, RepoRef
from gitact.services.git._run import run_git
from gitact.services.git.branches import current_branch
from gitact.services.git.checks import is_git_repository

LOG = logging.getLogger("gitact.services.git.repository")

DEFAULT_REMOTE_BASE = "https://github.com"


class RepositoryStore:
    """Clone-or-update lifecycle for local working copies."""

    def __init__(
        self,
        workdir: Path,
        remote_base: str = DEFAULT_REMOTE_BASE,
        timeout: float | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._workdir = Path(workdir)
        self._remote_base = remote_base.rstrip("/")
        self._timeout = timeout
        self._log = log or LOG

    @property
    def workdir(self) -> Path:
        return self._workdir

    def local_path(self, ref: RepoRef) -> Path:
        """<workdir>/<owner>/<name>."""
        return self._workdir / ref.owner / ref.name

    def clone_url(self, ref: RepoRef) -> str:
        """<remote_base>/<owner>/<name>.git."""
        return f"{self._remote_base}/{ref.owner}/{ref.name}.git"

    def handle(self, ref: RepoRef) -> LocalRepoHandle:
        """Handle for ref without touching the filesystem."""
        return LocalRepoHandle(ref=ref, path=self.local_path(ref))

    def exists(self, ref: RepoRef) -> bool:
        """True if a valid clone is present for ref."""
        return is_git_repository(self.local_path(ref), log=self._log)

    def ensure_owner_dir(self, ref: RepoRef) -> Path:
        """Create <workdir>/<owner> if needed (idempotent)."""
        owner_dir = self._workdir / ref.owner
        if owner_dir.is_dir():
            self._log.debug("Repos directory already exists: %s", owner_dir)
        try:
            owner_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LocalStateCorruptError(
                f"Cannot create {owner_dir}: {e}",
                operation="clone",
                repo=ref.full_name,
                cause=str(e),
            ) from e
        return owner_dir

    def ensure_local(self, ref: RepoRef, branch: str = "main") -> LocalRepoHandle:
        """Clone ref at branch, or bring an existing clone to origin/<branch>.

        Raises:
            RepoUnavailableError: remote unreachable or branch missing remotely.
            LocalStateCorruptError: path exists but is not a repository, or
                the working tree blocks switching to branch.
        """
        handle = self.handle(ref)
        if not handle.path.exists():
            self._clone(handle, branch)
        else:
            self._update(handle, branch)
        return handle

    def _git(self, args: list[str], cwd: Path):
        return run_git(args, cwd=cwd, log=self._log, timeout=self._timeout)

    def _clone(self, handle: LocalRepoHandle, branch: str) -> None:
        ref = handle.ref
        owner_dir = self.ensure_owner_dir(ref)
        url = self.clone_url(ref)
        self._log.info("Cloning %s @ %s into %s", url, branch, handle.path)
        result = self._git(["clone", "--branch", branch, url, str(handle.path)], cwd=owner_dir)
        if not result.ok:
            raise RepoUnavailableError(
                f"Cannot clone {ref.full_name} @ {branch}: {result.describe()}",
                operation="clone",
                repo=ref.full_name,
                cause=result.error,
            )

    def _update(self, handle: LocalRepoHandle, branch: str) -> None:
        ref = handle.ref
        if not is_git_repository(handle.path, log=self._log):
            raise LocalStateCorruptError(
                f"Local path {handle.path} exists but is not a git repository; fix or remove it manually",
                operation="pull",
                repo=ref.full_name,
            )

        if current_branch(handle, log=self._log) != branch:
            checkout = self._git(["checkout", branch], cwd=handle.path)
            if not checkout.ok:
                fetched = self._git(["fetch", "origin", branch], cwd=handle.path)
                if not fetched.ok:
                    raise RepoUnavailableError(
                        f"Cannot fetch {ref.full_name} @ {branch}: {fetched.describe()}",
                        operation="fetch",
                        repo=ref.full_name,
                        cause=fetched.error,
                    )
                checkout = self._git(["checkout", branch], cwd=handle.path)
                if not checkout.ok:
                    raise LocalStateCorruptError(
                        f"Cannot switch {handle.path} to {branch}: {checkout.describe()}",
                        operation="checkout",
                        repo=ref.full_name,
                        cause=checkout.error,
                    )

        self._log.info("Pulling %s @ %s in %s", ref.full_name, branch, handle.path)
        pulled = self._git(["pull", "--ff-only", "origin", branch], cwd=handle.path)
        if not pulled.ok:
            raise RepoUnavailableError(
                f"Cannot pull {ref.full_name} @ {branch}: {pulled.describe()}",
                operation="pull",
                repo=ref.full_name,
                cause=pulled.error,
            )
