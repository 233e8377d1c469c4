"""One entry of the durable memory log, as stored in {room_id}.yaml."""

import uuid
from datetime import UTC, datetime
from typing import Any, Dict

from pydantic import BaseModel, Field


def _now_ts() -> int:
    return int(datetime.now(UTC).timestamp())


class MemoryRecord(BaseModel):
    """Memory entry: free text plus typed metadata (issue, pull_request, file)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Record id")
    room_id: str = Field(..., description="Deterministic per-repository room id")
    text: str = Field(default="", description="Title for issues/PRs, content for files")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="type (issue, pull_request, file), path, body, url, number, state",
    )
    created_at: int = Field(default_factory=_now_ts, description="Unix timestamp when recorded")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @property
    def type(self) -> str | None:
        value = self.metadata.get("type")
        return str(value) if value is not None else None
