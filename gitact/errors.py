"""Typed errors raised by repository actions.

Every error carries the operation, the repository (owner/name) and the
underlying cause, with its message already redacted.
"""

from enum import Enum
from typing import Any

from gitact.sanitize import redact_details, redact_message


class ActionError(Exception):
    """Base class for failures of a repository action."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        repo: str | None = None,
        cause: str | None = None,
    ) -> None:
        self.message = redact_message(message)
        self.operation = operation
        self.repo = repo
        self.cause = redact_message(cause) if cause else None
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Structured, redacted form for logs and cycle summaries."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "operation": self.operation,
            "repo": self.repo,
            "cause": self.cause,
        }


class ConfigurationError(ActionError):
    """Required setting (owner, repository, token) is missing."""


class IntentValidationError(ActionError):
    """Payload is not a well-formed intent; nothing was executed."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message, operation="validate")
        self.errors = redact_details(errors or [])

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class RepoUnavailableError(ActionError):
    """Remote is unreachable or the branch does not exist remotely."""


class LocalStateCorruptError(ActionError):
    """Local path exists but is not a valid repository. Not auto-healed."""


class RepositoryNotInitializedError(ActionError):
    """Operation needs a local clone that does not exist yet."""


class BranchNotFoundError(ActionError):
    """Explicit checkout of a branch that does not exist locally."""


class NothingToCommitError(ActionError):
    """Staging produced an empty diff."""


class PushRejectedError(ActionError):
    """Push failed (non-fast-forward, permissions, transport)."""


class MemoryStoreError(ActionError):
    """Memory log cannot be read or written; the file is left untouched."""


class ErrorCategory(str, Enum):
    """Classification of hosting API failures by HTTP status."""

    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK = "network"
    UNKNOWN = "unknown"


def category_for_status(status_code: int | None) -> ErrorCategory:
    """Map an HTTP status (or None for transport failures) to a category."""
    if status_code is None:
        return ErrorCategory.NETWORK
    if status_code == 401:
        return ErrorCategory.AUTHENTICATION
    if status_code == 403:
        return ErrorCategory.PERMISSION
    if status_code == 404:
        return ErrorCategory.NOT_FOUND
    if status_code in (400, 409, 422):
        return ErrorCategory.VALIDATION
    if status_code == 429:
        return ErrorCategory.RATE_LIMIT
    if status_code >= 500:
        return ErrorCategory.SERVER_ERROR
    return ErrorCategory.UNKNOWN


class RemoteRejectedError(ActionError):
    """Hosting API returned a non-2xx response or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        operation: str | None = None,
        repo: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        prefix = f"{status_code}: " if status_code is not None else ""
        super().__init__(f"{prefix}{message}", operation=operation, repo=repo, cause=message)
        self.status_code = status_code
        self.category = category_for_status(status_code)
        self.details = redact_details(details or {})

    @property
    def transient(self) -> bool:
        """True for remote faults worth retrying next cycle (5xx, network)."""
        return self.category in (ErrorCategory.SERVER_ERROR, ErrorCategory.NETWORK)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "status_code": self.status_code,
                "category": self.category.value,
                "transient": self.transient,
                "details": self.details,
            }
        )
        return data
