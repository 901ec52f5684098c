"""Review result data models."""

from enum import Enum

from pydantic import BaseModel


class ReviewEvent(str, Enum):
    """Disposition attached to a submitted pull request review."""

    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"
    COMMENT = "COMMENT"


class ReviewResult(BaseModel):
    """Generated review text and the disposition parsed from it."""

    body: str
    event: ReviewEvent
