"""Previously created issues and pull requests, as read from memory."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class HistoryKind(str, Enum):
    """Kind of a history record; values match the memory metadata type."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class HistoryRecord(BaseModel):
    """Durable record of an issue or pull request created in an earlier cycle."""

    kind: HistoryKind
    title: str
    body: str = ""
    url: str | None = None
    number: int | None = None
    state: str | None = None

    @property
    def is_open(self) -> bool:
        """Records without a state are treated as open."""
        return (self.state or "open").lower() == "open"


def _same_title(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


class RepositoryHistory(BaseModel):
    """Issues and pull requests recorded for one repository."""

    issues: List[HistoryRecord] = Field(default_factory=list)
    pull_requests: List[HistoryRecord] = Field(default_factory=list)

    def find_issue(self, title: str) -> HistoryRecord | None:
        """Open issue with the same title (case-insensitive), if any."""
        for record in self.issues:
            if record.is_open and _same_title(record.title, title):
                return record
        return None

    def find_pull_request(self, title: str) -> HistoryRecord | None:
        """Open pull request with the same title (case-insensitive), if any."""
        for record in self.pull_requests:
            if record.is_open and _same_title(record.title, title):
                return record
        return None
