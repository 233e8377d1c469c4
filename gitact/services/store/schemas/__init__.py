"""Schemas for memory store YAML files."""

from gitact.services.store.schemas.memory_record import MemoryRecord

__all__ = ["MemoryRecord"]
