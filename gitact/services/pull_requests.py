"""Open pull requests on the hosting service.

Does not look for an existing PR on the branch; duplicate prevention is the
cycle's job through the history reconciler.
"""

import logging

from gitact.adapters.base import GitPlatformAdapter
from gitact.models import PullRequestResult, RepoRef

LOG = logging.getLogger("gitact.services.pull_requests")

DEFAULT_BASE_BRANCH = "main"


def open_pull_request(
    adapter: GitPlatformAdapter,
    ref: RepoRef,
    branch: str,
    title: str,
    description: str | None = None,
    base: str | None = None,
    log: logging.Logger | None = None,
) -> PullRequestResult:
    """Open a PR from branch into base (default main); body defaults to title.

    Raises RemoteRejectedError when the API refuses the request.
    """
    log = log or LOG
    base = base or DEFAULT_BASE_BRANCH
    pr = adapter.create_pr(ref, title=title, body=description or title, head=branch, base=base)
    url = pr.html_url or f"https://github.com/{ref.full_name}/pull/{pr.number}"
    log.info("Opened pull request #%s %s -> %s on %s", pr.number, branch, base, ref)
    return PullRequestResult(url=url, number=pr.number)
