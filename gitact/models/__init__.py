"""Data models: repository refs, intents' file payloads, results, history,
and hosting platform objects (Pydantic)."""

from gitact.models.comment import Comment
from gitact.models.files import FileDescriptor
from gitact.models.history import HistoryKind, HistoryRecord, RepositoryHistory
from gitact.models.issue import Issue
from gitact.models.pr import PR
from gitact.models.repo import LocalRepoHandle, RepoRef
from gitact.models.results import ActionOutcome, CommitResult, OutcomeStatus, PullRequestResult

__all__ = [
    "ActionOutcome",
    "Comment",
    "CommitResult",
    "FileDescriptor",
    "HistoryKind",
    "HistoryRecord",
    "Issue",
    "LocalRepoHandle",
    "OutcomeStatus",
    "PR",
    "PullRequestResult",
    "RepoRef",
    "RepositoryHistory",
]
