"""Intent schema: closed set of repository actions and payload validation.

validate_intent is the single boundary where generated, untrusted payloads
become typed intents. Downstream code may assume a well-formed Intent.
"""

import re
from enum import Enum
from typing import Annotated, Any, List, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from gitact.errors import ConfigurationError, IntentValidationError
from gitact.models import FileDescriptor, RepoRef


class ActionKind(str, Enum):
    """Every action the engine can execute."""

    CREATE_ISSUE = "CREATE_ISSUE"
    COMMENT_ISSUE = "COMMENT_ISSUE"
    COMMENT_PR = "COMMENT_PR"
    INITIALIZE_REPOSITORY = "INITIALIZE_REPOSITORY"
    CREATE_COMMIT = "CREATE_COMMIT"
    CREATE_MEMORIES_FROM_FILES = "CREATE_MEMORIES_FROM_FILES"
    CREATE_PULL_REQUEST = "CREATE_PULL_REQUEST"
    MODIFY_ISSUE = "MODIFY_ISSUE"
    ADD_COMMENT_TO_ISSUE = "ADD_COMMENT_TO_ISSUE"
    NOTHING = "NOTHING"


class _IntentBase(BaseModel):
    """Fields shared by every action; which ones matter depends on the kind."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str
    owner: str | None = None
    repo: str | None = None
    path: str | None = None
    branch: str | None = None
    description: str | None = None
    files: List[FileDescriptor] = Field(default_factory=list)
    message: str | None = None
    labels: List[str] | None = None
    issue: int | None = Field(default=None, gt=0)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value

    @property
    def kind(self) -> ActionKind:
        return ActionKind(getattr(self, "action"))

    def target(self, default: RepoRef | None = None) -> RepoRef:
        """Repository this intent acts on.

        owner/repo on the intent override the default; "repo" may also
        carry "owner/name". Raises ConfigurationError when neither source
        names a repository.
        """
        owner = (self.owner or "").strip()
        repo = (self.repo or "").strip()
        if repo and "/" in repo and not owner:
            try:
                return RepoRef.parse(repo)
            except ValueError as e:
                raise ConfigurationError(str(e), operation="resolve_repo") from e
        if owner or repo:
            owner = owner or (default.owner if default else "")
            repo = repo or (default.name if default else "")
        elif default is not None:
            return default
        if not owner or not repo:
            raise ConfigurationError("Repository owner and name are not set", operation="resolve_repo")
        try:
            return RepoRef(owner=owner, name=repo)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid repository {owner}/{repo}", operation="resolve_repo") from e


class _IssueTargetIntent(_IntentBase):
    issue: int = Field(..., gt=0)


class CreateIssueIntent(_IntentBase):
    action: Literal["CREATE_ISSUE"]


class CommentIssueIntent(_IssueTargetIntent):
    action: Literal["COMMENT_ISSUE"]


class CommentPRIntent(_IssueTargetIntent):
    action: Literal["COMMENT_PR"]


class InitializeRepositoryIntent(_IntentBase):
    action: Literal["INITIALIZE_REPOSITORY"]


class CreateCommitIntent(_IntentBase):
    action: Literal["CREATE_COMMIT"]


class CreateMemoriesFromFilesIntent(_IntentBase):
    action: Literal["CREATE_MEMORIES_FROM_FILES"]


class CreatePullRequestIntent(_IntentBase):
    action: Literal["CREATE_PULL_REQUEST"]
    branch: str = Field(..., min_length=1)


class ModifyIssueIntent(_IssueTargetIntent):
    action: Literal["MODIFY_ISSUE"]


class AddCommentToIssueIntent(_IssueTargetIntent):
    action: Literal["ADD_COMMENT_TO_ISSUE"]


class NothingIntent(_IntentBase):
    action: Literal["NOTHING"]


Intent = Annotated[
    Union[
        CreateIssueIntent,
        CommentIssueIntent,
        CommentPRIntent,
        InitializeRepositoryIntent,
        CreateCommitIntent,
        CreateMemoriesFromFilesIntent,
        CreatePullRequestIntent,
        ModifyIssueIntent,
        AddCommentToIssueIntent,
        NothingIntent,
    ],
    Field(discriminator="action"),
]

_INTENT_ADAPTER: TypeAdapter = TypeAdapter(Intent)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_kind(value: Any) -> Any:
    """CreateCommit, create_commit and CREATE_COMMIT all become CREATE_COMMIT."""
    if not isinstance(value, str):
        return value
    text = value.strip().replace("-", "_").replace(" ", "_")
    if "_" not in text:
        text = _CAMEL_BOUNDARY_RE.sub("_", text)
    return text.upper()


class IntentValidation:
    """Outcome of validate_intent: exactly one of intent or error is set."""

    def __init__(self, intent: Any = None, error: IntentValidationError | None = None) -> None:
        self.intent = intent
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_entries(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": ".".join(str(p) for p in err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


def validate_intent(payload: Any) -> IntentValidation:
    """Check an untyped payload against the closed set of actions.

    Never raises; returns IntentValidation with either the typed intent or
    an IntentValidationError describing every problem found.
    """
    if not isinstance(payload, Mapping):
        return IntentValidation(
            error=IntentValidationError(f"Intent payload must be a mapping, got {type(payload).__name__}")
        )
    data = dict(payload)
    if "action" not in data and "kind" in data:
        data["action"] = data.pop("kind")
    if "action" not in data:
        return IntentValidation(error=IntentValidationError("Intent payload has no action kind"))
    data["action"] = normalize_kind(data["action"])
    try:
        intent = _INTENT_ADAPTER.validate_python(data)
    except ValidationError as e:
        entries = _error_entries(e)
        summary = "; ".join(f"{x['loc'] or 'payload'}: {x['msg']}" for x in entries)
        return IntentValidation(error=IntentValidationError(f"Invalid intent: {summary}", errors=entries))
    return IntentValidation(intent=intent)


def parse_intent(payload: Any):
    """Like validate_intent but raises IntentValidationError on failure."""
    result = validate_intent(payload)
    if result.error is not None:
        raise result.error
    return result.intent
