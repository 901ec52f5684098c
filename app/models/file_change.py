"""File change data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FileStatus(str, Enum):
    """Status of a file in a pull request, as reported by GitHub."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class RemoteFile(BaseModel):
    """A changed file exactly as listed by the hosting API."""

    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: Optional[str] = None


class FileContent(BaseModel):
    """File content at a ref, still in the API's transport encoding."""

    path: str
    encoding: str = "base64"
    content: str


class ChangedFile(BaseModel):
    """A reviewable file; ``content`` is None when only the patch is known."""

    filename: str
    status: FileStatus
    additions: int
    deletions: int
    changes: int
    patch: Optional[str] = None
    content: Optional[str] = None
    language: str = "Unknown"

    @property
    def has_content(self) -> bool:
        return self.content is not None
