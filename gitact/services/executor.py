"""Execute a validated intent: sequence git and hosting API steps per action.

Steps run strictly in order (clone/pull, branch, write, commit and push,
pull request) and each one settles before the next starts. Failures
propagate as ActionError subclasses.
"""

import logging
from typing import Callable, Dict

from gitact.adapters.base import GitPlatformAdapter
from gitact.errors import ConfigurationError
from gitact.intents import ActionKind
from gitact.models import ActionOutcome, LocalRepoHandle, OutcomeStatus, RepoRef
from gitact.services.git import (
    RepositoryStore,
    checkout_branch,
    commit_and_push,
    current_branch,
    push_branch,
    read_file,
    retrieve_files,
    write_files,
)
from gitact.services.git.commits import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME
from gitact.services.pull_requests import open_pull_request
from gitact.services.store import MemoryRecord, MemoryStore, room_id_for

LOG = logging.getLogger("gitact.services.executor")

# One handler per ActionKind; checked below so a new kind cannot go unhandled
_HANDLERS: Dict[ActionKind, str] = {
    ActionKind.CREATE_ISSUE: "_create_issue",
    ActionKind.COMMENT_ISSUE: "_comment",
    ActionKind.COMMENT_PR: "_comment",
    ActionKind.ADD_COMMENT_TO_ISSUE: "_comment",
    ActionKind.MODIFY_ISSUE: "_modify_issue",
    ActionKind.INITIALIZE_REPOSITORY: "_initialize_repository",
    ActionKind.CREATE_COMMIT: "_create_commit",
    ActionKind.CREATE_PULL_REQUEST: "_create_pull_request",
    ActionKind.CREATE_MEMORIES_FROM_FILES: "_create_memories_from_files",
    ActionKind.NOTHING: "_nothing",
}

_unhandled = set(ActionKind) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No executor handler for {sorted(k.value for k in _unhandled)}")


class ActionExecutor:
    """Runs intents against local clones, the hosting API and the memory store."""

    def __init__(
        self,
        repos: RepositoryStore,
        adapter: GitPlatformAdapter | None,
        store: MemoryStore,
        default_branch: str = "main",
        author_name: str = DEFAULT_AUTHOR_NAME,
        author_email: str = DEFAULT_AUTHOR_EMAIL,
        log: logging.Logger | None = None,
    ) -> None:
        self._repos = repos
        self._adapter = adapter
        self._store = store
        self._default_branch = default_branch
        self._author_name = author_name
        self._author_email = author_email
        self._log = log or LOG

    def execute(self, intent, ref: RepoRef | None = None) -> ActionOutcome:
        """Run one intent. ref is the configured repository; intent owner/repo win."""
        target = intent.target(ref)
        handler: Callable[..., ActionOutcome] = getattr(self, _HANDLERS[intent.kind])
        self._log.info("Executing %s on %s: %s", intent.kind.value, target, intent.title)
        return handler(intent, target)

    def _platform(self) -> GitPlatformAdapter:
        if self._adapter is None:
            raise ConfigurationError("Hosting API token is not configured", operation="platform")
        return self._adapter

    def _switch_branch(self, handle: LocalRepoHandle, branch: str | None) -> None:
        """Check out (creating if needed) branch unless it is already current."""
        if not branch or branch == current_branch(handle, log=self._log):
            return
        checkout_branch(handle, branch, create=True, log=self._log)

    def _nothing(self, intent, ref: RepoRef) -> ActionOutcome:
        return ActionOutcome(action=intent.kind.value, status=OutcomeStatus.SKIPPED, detail="No action requested")

    def _create_issue(self, intent, ref: RepoRef) -> ActionOutcome:
        issue = self._platform().create_issue(
            ref,
            title=intent.title,
            body=intent.description or intent.title,
            labels=intent.labels,
        )
        return ActionOutcome(
            action=intent.kind.value,
            detail=f"Created issue #{issue.number}",
            url=issue.html_url,
            number=issue.number,
            title=issue.title,
            body=issue.body,
        )

    def _comment(self, intent, ref: RepoRef) -> ActionOutcome:
        body = intent.message or intent.description or intent.title
        comment = self._platform().create_comment(ref, intent.issue, body)
        return ActionOutcome(
            action=intent.kind.value,
            detail=f"Commented on #{intent.issue}",
            url=comment.html_url,
            number=intent.issue,
        )

    def _modify_issue(self, intent, ref: RepoRef) -> ActionOutcome:
        issue = self._platform().update_issue(
            ref,
            intent.issue,
            title=intent.title,
            body=intent.description,
            labels=intent.labels,
        )
        return ActionOutcome(
            action=intent.kind.value,
            detail=f"Updated issue #{issue.number}",
            url=issue.html_url,
            number=issue.number,
            title=issue.title,
            body=issue.body,
        )

    def _initialize_repository(self, intent, ref: RepoRef) -> ActionOutcome:
        handle = self._repos.ensure_local(ref, intent.branch or self._default_branch)
        return ActionOutcome(action=intent.kind.value, detail=f"Repository ready at {handle.path}")

    def _create_commit(self, intent, ref: RepoRef) -> ActionOutcome:
        handle = self._repos.ensure_local(ref, self._default_branch)
        self._switch_branch(handle, intent.branch)
        write_files(handle, intent.files, log=self._log)
        commit = commit_and_push(
            handle,
            intent.message or intent.title,
            branch=intent.branch or None,
            author_name=self._author_name,
            author_email=self._author_email,
            log=self._log,
        )
        return ActionOutcome(
            action=intent.kind.value,
            detail=f"Committed {len(intent.files)} file(s)",
            commit=commit.hash,
        )

    def _create_pull_request(self, intent, ref: RepoRef) -> ActionOutcome:
        handle = self._repos.ensure_local(ref, self._default_branch)
        self._switch_branch(handle, intent.branch)
        commit_hash = None
        if intent.files:
            write_files(handle, intent.files, log=self._log)
            commit = commit_and_push(
                handle,
                intent.message or intent.title,
                branch=intent.branch,
                author_name=self._author_name,
                author_email=self._author_email,
                log=self._log,
            )
            commit_hash = commit.hash
        else:
            push_branch(handle, intent.branch, log=self._log)
        result = open_pull_request(
            self._platform(),
            ref,
            intent.branch,
            intent.title,
            description=intent.description,
            base=self._default_branch,
            log=self._log,
        )
        return ActionOutcome(
            action=intent.kind.value,
            detail=f"Opened pull request from {intent.branch}",
            url=result.url,
            number=result.number,
            commit=commit_hash,
            title=intent.title,
            body=intent.description or intent.title,
        )

    def _create_memories_from_files(self, intent, ref: RepoRef) -> ActionOutcome:
        handle = self._repos.ensure_local(ref, intent.branch or self._default_branch)
        room_id = room_id_for(ref)
        stored = 0
        for rel_path in retrieve_files(handle, intent.path, log=self._log):
            content = read_file(handle, rel_path)
            if "\x00" in content:
                self._log.debug("Skip binary file %s", rel_path)
                continue
            self._store.add_memory(
                MemoryRecord(room_id=room_id, text=content, metadata={"type": "file", "path": rel_path})
            )
            stored += 1
        return ActionOutcome(action=intent.kind.value, detail=f"Stored {stored} file memories")
