"""One decision cycle: validate a payload, consult history, execute, record.

The only place where ActionError is turned into a failed result, so a bad
intent or a remote failure never takes down the host process.
"""

import logging
from typing import Any, Dict

from gitact.errors import ActionError
from gitact.intents import ActionKind, validate_intent
from gitact.models import ActionOutcome, HistoryKind, OutcomeStatus, RepoRef, RepositoryHistory
from gitact.services.executor import ActionExecutor
from gitact.services.history import load_history
from gitact.services.store import MemoryRecord, MemoryStore, room_id_for

LOG = logging.getLogger("gitact.services.cycle")

_RECORDED_KINDS = {
    ActionKind.CREATE_ISSUE: HistoryKind.ISSUE,
    ActionKind.CREATE_PULL_REQUEST: HistoryKind.PULL_REQUEST,
}


class CycleResult:
    """Result of run_cycle: outcome on success, error on failure."""

    def __init__(
        self,
        ok: bool,
        intent: Any = None,
        outcome: ActionOutcome | None = None,
        error: ActionError | None = None,
    ) -> None:
        self.ok = ok
        self.intent = intent
        self.outcome = outcome
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ok": self.ok}
        if self.intent is not None:
            data["action"] = self.intent.kind.value
        if self.outcome is not None:
            data["outcome"] = self.outcome.model_dump(mode="json", exclude_none=True)
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


def find_duplicate(intent, history: RepositoryHistory):
    """Open issue/PR in history with the intent's title, for create actions."""
    if intent.kind == ActionKind.CREATE_ISSUE:
        return history.find_issue(intent.title)
    if intent.kind == ActionKind.CREATE_PULL_REQUEST:
        return history.find_pull_request(intent.title)
    return None


def record_outcome(store: MemoryStore, ref: RepoRef, kind: ActionKind, outcome: ActionOutcome) -> MemoryRecord | None:
    """Append created issues and pull requests to the repository's memory."""
    history_kind = _RECORDED_KINDS.get(kind)
    if history_kind is None or outcome.status != OutcomeStatus.DONE:
        return None
    record = MemoryRecord(
        room_id=room_id_for(ref),
        text=outcome.title or "",
        metadata={
            "type": history_kind.value,
            "body": outcome.body or "",
            "url": outcome.url,
            "number": outcome.number,
            "state": "open",
        },
    )
    store.add_memory(record)
    return record


def run_cycle(
    payload: Any,
    ref: RepoRef | None,
    executor: ActionExecutor,
    store: MemoryStore,
    skip_duplicates: bool = True,
    log: logging.Logger | None = None,
) -> CycleResult:
    """Validate and execute one intent payload for the repository.

    Invalid payloads never reach the executor. With skip_duplicates, a
    create action whose title matches an open recorded issue/PR is skipped.
    """
    log = log or LOG
    validation = validate_intent(payload)
    if not validation.ok:
        log.warning("Rejected intent: %s", validation.error.message)
        return CycleResult(ok=False, error=validation.error)

    intent = validation.intent
    try:
        target = intent.target(ref)
        if skip_duplicates:
            duplicate = find_duplicate(intent, load_history(store, target))
            if duplicate is not None:
                log.warning(
                    "Skipping %s on %s: %r already recorded as #%s",
                    intent.kind.value,
                    target,
                    intent.title,
                    duplicate.number,
                )
                outcome = ActionOutcome(
                    action=intent.kind.value,
                    status=OutcomeStatus.SKIPPED,
                    detail="Duplicate of a previously recorded item",
                    url=duplicate.url,
                    number=duplicate.number,
                )
                return CycleResult(ok=True, intent=intent, outcome=outcome)
        outcome = executor.execute(intent, target)
    except ActionError as e:
        log.error("%s failed: %s", intent.kind.value, e.message)
        return CycleResult(ok=False, intent=intent, error=e)

    try:
        record_outcome(store, target, intent.kind, outcome)
    except ActionError as e:
        # The action itself took effect; report both
        log.error("%s on %s done but not recorded: %s", intent.kind.value, target, e.message)
        return CycleResult(ok=False, intent=intent, outcome=outcome, error=e)
    log.info("%s on %s: %s", intent.kind.value, target, outcome.detail)
    return CycleResult(ok=True, intent=intent, outcome=outcome)
