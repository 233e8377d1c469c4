"""History reconciler: read view over the memory store for one repository.

Issue and pull request records feed the decision component before a new
intent is produced, and let the cycle runner spot duplicates. Advisory only:
nothing here locks or writes.
"""

import logging
from typing import Any, Dict, List

from gitact.errors import ConfigurationError
from gitact.models import HistoryKind, HistoryRecord, RepoRef, RepositoryHistory
from gitact.services.store import MemoryRecord, MemoryStore, room_id_for

LOG = logging.getLogger("gitact.services.history")


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _history_record(kind: HistoryKind, memory: MemoryRecord) -> HistoryRecord:
    meta = memory.metadata
    state = meta.get("state")
    return HistoryRecord(
        kind=kind,
        title=memory.text,
        body=str(meta.get("body") or ""),
        url=meta.get("url"),
        number=_as_int(meta.get("number")),
        state=str(state) if state is not None else None,
    )


def load_history(store: MemoryStore, ref: RepoRef) -> RepositoryHistory:
    """Issues and pull requests recorded under the repository's room id."""
    history = RepositoryHistory()
    for memory in store.get_memories(room_id_for(ref)):
        if memory.type == HistoryKind.ISSUE.value:
            history.issues.append(_history_record(HistoryKind.ISSUE, memory))
        elif memory.type == HistoryKind.PULL_REQUEST.value:
            history.pull_requests.append(_history_record(HistoryKind.PULL_REQUEST, memory))
    LOG.debug(
        "History for %s: %d issue(s), %d pull request(s)",
        ref,
        len(history.issues),
        len(history.pull_requests),
    )
    return history


def file_memories(store: MemoryStore, ref: RepoRef) -> List[str]:
    """File snapshots of the repository as "File: <path>\\nContent: <text>".

    Only the newest snapshot per path is returned. Newlines in content are
    escaped so each snapshot stays on two lines.
    """
    latest: Dict[str, str] = {}
    for memory in store.get_memories(room_id_for(ref)):
        path = memory.metadata.get("path")
        if path:
            latest[str(path)] = memory.text.replace("\n", "\\n")
    return [f"File: {path}\nContent: {content}" for path, content in latest.items()]


def _records(records: List[HistoryRecord]) -> List[Dict[str, Any]]:
    return [r.model_dump(mode="json", exclude={"kind"}) for r in records]


def build_cycle_context(store: MemoryStore, ref: RepoRef | None) -> Dict[str, Any]:
    """Repository state handed to the decision component at cycle start.

    Raises ConfigurationError when no repository is configured.
    """
    if ref is None:
        raise ConfigurationError("Repository owner and name are not set, skipping cycle", operation="context")
    history = load_history(store, ref)
    return {
        "owner": ref.owner,
        "repository": ref.name,
        "files": file_memories(store, ref),
        "previous_issues": _records(history.issues),
        "previous_prs": _records(history.pull_requests),
    }
