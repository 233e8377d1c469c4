"""File payload written into a working tree."""

from pathlib import PurePosixPath, PureWindowsPath

from pydantic import BaseModel, field_validator


class FileDescriptor(BaseModel):
    """Relative path inside the working tree and its full text content."""

    path: str
    content: str

    @field_validator("path")
    @classmethod
    def _relative_inside_tree(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("path must not be empty")
        if PurePosixPath(value).is_absolute() or PureWindowsPath(value).is_absolute():
            raise ValueError("path must be relative to the repository root")
        parts = PurePosixPath(value.replace("\\", "/")).parts
        if ".." in parts:
            raise ValueError("path must not leave the repository root")
        if parts and parts[0] == ".git":
            raise ValueError("path must not point into .git")
        return value
