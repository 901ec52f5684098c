"""Data models for the GitHub PR Review Bot."""

from .api_response import HealthResponse
from .file_change import ChangedFile, FileContent, FileStatus, RemoteFile
from .pull_request import PullRequestRef, WebhookEvent
from .review import ReviewEvent, ReviewResult

__all__ = [
    # Webhook / PR models
    "WebhookEvent",
    "PullRequestRef",
    # File change models
    "FileStatus",
    "RemoteFile",
    "FileContent",
    "ChangedFile",
    # Review models
    "ReviewEvent",
    "ReviewResult",
    # API response models
    "HealthResponse",
]
