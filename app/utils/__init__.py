"""
Utility modules for the PR Review Bot.
"""

from app.utils.logging import (
    get_logger,
    setup_logging,
    log_pr_event,
    log_stage_transition,
    log_api_call,
    log_error_with_context,
)
from app.utils.metrics import (
    ReviewMetrics,
    track_api_call,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_pr_event",
    "log_stage_transition",
    "log_api_call",
    "log_error_with_context",
    "ReviewMetrics",
    "track_api_call",
]
