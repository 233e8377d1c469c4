"""Memory store backends keyed by a deterministic per-repository room id.

YamlMemoryStore keeps one file per room: {base_dir}/{room_id}.yaml holding a
list of records, append-only.
"""

import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from gitact.errors import MemoryStoreError
from gitact.models import RepoRef
from gitact.services.store.schemas import MemoryRecord

LOG = logging.getLogger("gitact.services.store.memory_store")


def room_id_for(ref: RepoRef) -> str:
    """Stable UUID for the repository's memory room (github-<owner>-<name>)."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"github-{ref.owner}-{ref.name}"))


class MemoryStore(ABC):
    """Keyed access to memory records."""

    @abstractmethod
    def get_memories(self, room_id: str) -> List[MemoryRecord]:
        """All records filed under room_id, oldest first."""
        ...

    @abstractmethod
    def add_memory(self, record: MemoryRecord) -> None:
        """Append a record to its room."""
        ...


class InMemoryMemoryStore(MemoryStore):
    """Process-local store; contents vanish with the process."""

    def __init__(self) -> None:
        self._rooms: Dict[str, List[MemoryRecord]] = {}

    def get_memories(self, room_id: str) -> List[MemoryRecord]:
        return list(self._rooms.get(room_id, []))

    def add_memory(self, record: MemoryRecord) -> None:
        self._rooms.setdefault(record.room_id, []).append(record)


class YamlMemoryStore(MemoryStore):
    """Records as YAML lists, one file per room.

    Writes go through a temporary file and os.replace. A file that cannot
    be parsed is never rewritten; add_memory raises MemoryStoreError.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    def _room_path(self, room_id: str) -> Path:
        return self._base_dir / f"{room_id}.yaml"

    def _load_raw(self, path: Path) -> List[Any]:
        """Entries of a room file as stored, invalid ones included."""
        if not path.is_file():
            return []
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise MemoryStoreError(
                f"Cannot read memory file {path}: {e}",
                operation="read_memories",
                cause=str(e),
            ) from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise MemoryStoreError(
                f"Memory file {path} does not hold a list of records",
                operation="read_memories",
            )
        return data

    def get_memories(self, room_id: str) -> List[MemoryRecord]:
        """Load records for room_id.

        A missing file yields an empty list; unreadable files and invalid
        entries are skipped with a warning.
        """
        path = self._room_path(room_id)
        try:
            data = self._load_raw(path)
        except MemoryStoreError as e:
            LOG.warning("Failed to load memories: %s", e.message)
            return []
        records: List[MemoryRecord] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                records.append(MemoryRecord.model_validate({"room_id": room_id, **item}))
            except ValidationError as e:
                LOG.warning("Skip invalid memory in %s: %s", path, e)
        return records

    def add_memory(self, record: MemoryRecord) -> None:
        path = self._room_path(record.room_id)
        payload = self._load_raw(path)
        payload.append(record.model_dump(mode="json"))
        raw = yaml.dump(
            payload,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=1000,
        )
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(raw, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise MemoryStoreError(
                f"Cannot write memory file {path}: {e}",
                operation="add_memory",
                cause=str(e),
            ) from e
        LOG.debug("Saved memory %s to %s", record.id, path)
