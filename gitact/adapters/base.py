"""Abstract base for Git hosting platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from gitact.models import PR, Comment, Issue, RepoRef


class GitPlatformAdapter(ABC):
    """Hosting API operations used by repository actions.

    Every method raises RemoteRejectedError on a non-2xx response or a
    transport failure.
    """

    @abstractmethod
    def create_issue(
        self,
        ref: RepoRef,
        title: str,
        body: str,
        labels: List[str] | None = None,
    ) -> Issue:
        """Open an issue."""
        ...

    @abstractmethod
    def update_issue(
        self,
        ref: RepoRef,
        issue_number: int,
        title: str | None = None,
        body: str | None = None,
        labels: List[str] | None = None,
        state: str | None = None,
    ) -> Issue:
        """Change title, body, labels or state of an issue; None leaves a field as is."""
        ...

    @abstractmethod
    def create_comment(self, ref: RepoRef, issue_number: int, body: str) -> Comment:
        """Post a comment on an issue or pull request."""
        ...

    @abstractmethod
    def create_pr(
        self,
        ref: RepoRef,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> PR:
        """Open a pull request from head into base."""
        ...
