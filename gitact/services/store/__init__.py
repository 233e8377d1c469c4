"""Durable memory store: per-repository log of issues, PRs and file snapshots."""

from gitact.services.store.memory_store import (
    InMemoryMemoryStore,
    MemoryStore,
    YamlMemoryStore,
    room_id_for,
)
from gitact.services.store.schemas import MemoryRecord

__all__ = [
    "InMemoryMemoryStore",
    "MemoryRecord",
    "MemoryStore",
    "YamlMemoryStore",
    "room_id_for",
]
