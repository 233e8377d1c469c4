"""Repository reference and local working-copy handle."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# GitHub owner/repo names: letters, digits, dash, underscore, dot
_NAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class RepoRef(BaseModel):
    """Remote repository identified by owner and name. Immutable."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, pattern=_NAME_PATTERN, description="Account or organization")
    name: str = Field(..., min_length=1, pattern=_NAME_PATTERN, description="Repository name")

    @field_validator("owner", "name")
    @classmethod
    def _not_dot_segment(cls, value: str) -> str:
        if value in (".", ".."):
            raise ValueError("must not be '.' or '..'")
        return value

    @property
    def full_name(self) -> str:
        """owner/name, as used in hosting API paths."""
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, full_name: str) -> "RepoRef":
        """Build from "owner/name". Raises ValueError when malformed."""
        parts = (full_name or "").strip().strip("/").split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Expected owner/name, got {full_name!r}")
        return cls(owner=parts[0], name=parts[1])

    def __str__(self) -> str:
        return self.full_name


class LocalRepoHandle(BaseModel):
    """On-disk working copy of a RepoRef: <workdir>/<owner>/<name>."""

    model_config = ConfigDict(frozen=True)

    ref: RepoRef
    path: Path
