"""Comment on an issue or PR."""

from pydantic import BaseModel


class Comment(BaseModel):
    """Comment on an issue or PR."""

    id: int
    body: str
    author: str = ""
    html_url: str | None = None
