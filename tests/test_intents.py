"""Tests for gitact.intents (closed action set, payload validation)."""

import pytest

from gitact.errors import ConfigurationError, IntentValidationError
from gitact.intents import (
    ActionKind,
    CommentIssueIntent,
    CreateCommitIntent,
    CreatePullRequestIntent,
    NothingIntent,
    normalize_kind,
    parse_intent,
    validate_intent,
)
from gitact.models import FileDescriptor, RepoRef

# Minimal valid payload per kind (title plus kind-specific required fields)
MINIMAL = {
    ActionKind.CREATE_ISSUE: {},
    ActionKind.COMMENT_ISSUE: {"issue": 3},
    ActionKind.COMMENT_PR: {"issue": 4},
    ActionKind.INITIALIZE_REPOSITORY: {},
    ActionKind.CREATE_COMMIT: {"files": [{"path": "a.txt", "content": "hello"}]},
    ActionKind.CREATE_MEMORIES_FROM_FILES: {},
    ActionKind.CREATE_PULL_REQUEST: {"branch": "feature-x"},
    ActionKind.MODIFY_ISSUE: {"issue": 5},
    ActionKind.ADD_COMMENT_TO_ISSUE: {"issue": 6},
    ActionKind.NOTHING: {},
}


class TestValidPayloads:
    """Well-formed payloads become typed intents of the matching kind."""

    @pytest.mark.parametrize("kind", list(ActionKind))
    def test_every_kind_validates(self, kind: ActionKind) -> None:
        """Each enumerated kind with its required fields is accepted."""
        payload = {"action": kind.value, "title": "Do it", **MINIMAL[kind]}
        result = validate_intent(payload)
        assert result.ok, result.error
        assert result.intent.kind == kind
        assert result.intent.title == "Do it"

    def test_create_commit_files_are_typed(self) -> None:
        """files entries become FileDescriptor objects."""
        result = validate_intent(
            {
                "action": "CREATE_COMMIT",
                "title": "add a",
                "branch": "main",
                "files": [{"path": "a.txt", "content": "hello"}],
            }
        )
        intent = result.intent
        assert isinstance(intent, CreateCommitIntent)
        assert intent.files == [FileDescriptor(path="a.txt", content="hello")]
        assert intent.branch == "main"

    def test_files_default_to_empty_list(self) -> None:
        """files may be omitted."""
        intent = validate_intent({"action": "CREATE_PULL_REQUEST", "title": "Add feature", "branch": "f"}).intent
        assert isinstance(intent, CreatePullRequestIntent)
        assert intent.files == []

    def test_kind_key_is_accepted_as_alias(self) -> None:
        """"kind" works in place of "action"."""
        intent = validate_intent({"kind": "NOTHING", "title": "idle"}).intent
        assert isinstance(intent, NothingIntent)

    def test_camel_case_kind_is_normalized(self) -> None:
        """CreatePullRequest and create_pull_request map to CREATE_PULL_REQUEST."""
        for name in ("CreatePullRequest", "create_pull_request", "create-pull-request"):
            intent = validate_intent({"kind": name, "title": "t", "branch": "b"}).intent
            assert intent.kind == ActionKind.CREATE_PULL_REQUEST

    def test_extra_keys_are_ignored(self) -> None:
        """Keys outside the schema do not cause rejection."""
        result = validate_intent({"action": "NOTHING", "title": "t", "reasoning": "nothing to do"})
        assert result.ok

    def test_issue_number_string_is_coerced(self) -> None:
        """Numeric strings for issue are accepted."""
        intent = validate_intent({"action": "COMMENT_ISSUE", "title": "t", "issue": "12"}).intent
        assert isinstance(intent, CommentIssueIntent)
        assert intent.issue == 12


class TestInvalidPayloads:
    """Malformed payloads are rejected with an IntentValidationError value."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"action": "CREATE_ISSUE"},
            {"action": "CREATE_ISSUE", "title": ""},
            {"action": "CREATE_ISSUE", "title": "   "},
            {"action": "CREATE_ISSUE", "title": 42},
        ],
    )
    def test_missing_or_bad_title(self, payload: dict) -> None:
        """title is mandatory, non-blank and a string."""
        result = validate_intent(payload)
        assert not result.ok
        assert result.intent is None
        assert isinstance(result.error, IntentValidationError)

    def test_unknown_kind(self) -> None:
        """Kinds outside the enumeration are rejected."""
        result = validate_intent({"action": "DELETE_REPOSITORY", "title": "t"})
        assert not result.ok

    def test_missing_kind(self) -> None:
        """A payload without action or kind is rejected."""
        result = validate_intent({"title": "t"})
        assert not result.ok
        assert "action" in result.error.message

    @pytest.mark.parametrize("files", ["a.txt", {"path": "a", "content": "b"}, 7, None])
    def test_non_list_files(self, files: object) -> None:
        """files must be a list."""
        result = validate_intent({"action": "CREATE_COMMIT", "title": "t", "files": files})
        assert not result.ok
        assert any("files" in e["loc"] for e in result.error.errors)

    def test_file_entry_without_content(self) -> None:
        """Each file needs path and content."""
        result = validate_intent({"action": "CREATE_COMMIT", "title": "t", "files": [{"path": "a.txt"}]})
        assert not result.ok

    @pytest.mark.parametrize("path", ["../outside.txt", "/etc/passwd", "a/../../b", ".git/config"])
    def test_file_path_must_stay_in_tree(self, path: str) -> None:
        """Absolute paths, escaping paths and .git are rejected."""
        result = validate_intent(
            {"action": "CREATE_COMMIT", "title": "t", "files": [{"path": path, "content": "x"}]}
        )
        assert not result.ok

    @pytest.mark.parametrize("kind", ["COMMENT_ISSUE", "COMMENT_PR", "MODIFY_ISSUE", "ADD_COMMENT_TO_ISSUE"])
    def test_issue_required_for_issue_actions(self, kind: str) -> None:
        """Actions on an existing issue need its number."""
        assert not validate_intent({"action": kind, "title": "t"}).ok
        assert not validate_intent({"action": kind, "title": "t", "issue": 0}).ok

    def test_pull_request_requires_branch(self) -> None:
        """CREATE_PULL_REQUEST needs a head branch."""
        assert not validate_intent({"action": "CREATE_PULL_REQUEST", "title": "t"}).ok
        assert not validate_intent({"action": "CREATE_PULL_REQUEST", "title": "t", "branch": ""}).ok

    def test_labels_must_be_strings(self) -> None:
        """labels is a list of strings."""
        assert not validate_intent({"action": "CREATE_ISSUE", "title": "t", "labels": "bug"}).ok

    @pytest.mark.parametrize("payload", [None, "CREATE_ISSUE", ["action"], 3])
    def test_non_mapping_payload(self, payload: object) -> None:
        """Anything that is not a mapping is rejected without raising."""
        result = validate_intent(payload)
        assert not result.ok
        assert "mapping" in result.error.message

    def test_parse_intent_raises(self) -> None:
        """parse_intent raises the validation error."""
        with pytest.raises(IntentValidationError):
            parse_intent({"action": "NOPE", "title": "t"})


class TestNormalizeKind:
    """normalize_kind maps spellings to enum values."""

    def test_spellings(self) -> None:
        assert normalize_kind("CreateCommit") == "CREATE_COMMIT"
        assert normalize_kind("create_commit") == "CREATE_COMMIT"
        assert normalize_kind("CREATE_COMMIT") == "CREATE_COMMIT"
        assert normalize_kind("Nothing") == "NOTHING"
        assert normalize_kind(5) == 5


class TestTarget:
    """Intent.target resolves the repository to act on."""

    def test_default_is_used(self) -> None:
        intent = parse_intent({"action": "NOTHING", "title": "t"})
        default = RepoRef(owner="o", name="r")
        assert intent.target(default) == default

    def test_intent_owner_and_repo_override(self) -> None:
        intent = parse_intent({"action": "NOTHING", "title": "t", "owner": "x", "repo": "y"})
        assert intent.target(RepoRef(owner="o", name="r")) == RepoRef(owner="x", name="y")

    def test_partial_override_keeps_default_owner(self) -> None:
        intent = parse_intent({"action": "NOTHING", "title": "t", "repo": "other"})
        assert intent.target(RepoRef(owner="o", name="r")) == RepoRef(owner="o", name="other")

    def test_repo_full_name(self) -> None:
        intent = parse_intent({"action": "NOTHING", "title": "t", "repo": "x/y"})
        assert intent.target(None) == RepoRef(owner="x", name="y")

    def test_no_repository_raises(self) -> None:
        intent = parse_intent({"action": "NOTHING", "title": "t"})
        with pytest.raises(ConfigurationError):
            intent.target(None)

    def test_invalid_repository_raises(self) -> None:
        intent = parse_intent({"action": "NOTHING", "title": "t", "owner": "bad owner", "repo": "r"})
        with pytest.raises(ConfigurationError):
            intent.target(None)
