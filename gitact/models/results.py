"""Results handed back to the caller after an action."""

from enum import Enum

from pydantic import BaseModel, Field


class CommitResult(BaseModel):
    """Commit created and pushed; hash is the full 40-hex SHA."""

    hash: str = Field(..., min_length=1)


class PullRequestResult(BaseModel):
    """Pull request opened on the hosting service."""

    url: str
    number: int | None = None


class OutcomeStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"


class ActionOutcome(BaseModel):
    """What the executor did for one intent."""

    action: str
    status: OutcomeStatus = OutcomeStatus.DONE
    detail: str = ""
    url: str | None = None
    number: int | None = None
    commit: str | None = None
    title: str | None = None
    body: str | None = None
