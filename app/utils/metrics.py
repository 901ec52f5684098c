"""
Metrics collection for review pipeline runs.

Tracks, per webhook delivery:
- Run start/end time and duration
- Number of files reviewed and files degraded to patch-only
- The parsed recommendation
- API call counts and latency per service

Metrics are emitted as structured log records; nothing is persisted.
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


class ReviewMetrics:
    """Collects metrics during a single review pipeline run."""

    def __init__(self, owner: str, repo: str, pr_number: int):
        self.owner = owner
        self.repo = repo
        self.pr_number = pr_number

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None

        # Review metrics
        self.files_reviewed: int = 0
        self.files_degraded: int = 0
        self.recommendation: Optional[str] = None

        # API metrics
        self.api_calls: Dict[str, int] = {}
        self.api_latencies: Dict[str, list[float]] = {}

        # Status
        self.status: str = "pending"
        self.error_message: Optional[str] = None

    def start(self) -> None:
        """Mark run start."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"

    def complete(self, status: str = "completed", error_message: Optional[str] = None) -> None:
        """
        Mark run completion and log the summary.

        Args:
            status: Final status ('completed', 'skipped', 'failed')
            error_message: Error message if failed
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status
        self.error_message = error_message

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.info(
            f"Review run {status} for PR #{self.pr_number}",
            extra=self.get_metrics_summary()
        )

    def record_files(self, reviewed: int, degraded: int) -> None:
        """
        Record collected file counts.

        Args:
            reviewed: Files included in the prompt
            degraded: Files among them without full content
        """
        self.files_reviewed = reviewed
        self.files_degraded = degraded

    def record_recommendation(self, recommendation: str) -> None:
        self.recommendation = recommendation

    def record_api_call(self, service: str, duration_ms: float) -> None:
        """
        Record API call and latency.

        Args:
            service: Service name (e.g., 'github', 'openai')
            duration_ms: Call duration in milliseconds
        """
        self.api_calls[service] = self.api_calls.get(service, 0) + 1
        self.api_latencies.setdefault(service, []).append(duration_ms)

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary: Dict[str, Any] = {
            "owner": self.owner,
            "repo": self.repo,
            "pr_number": self.pr_number,
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "files_reviewed": self.files_reviewed,
            "files_degraded": self.files_degraded,
            "recommendation": self.recommendation,
            "api_calls": dict(self.api_calls),
        }

        if self.api_latencies:
            latency_stats = {}
            for service, latencies in self.api_latencies.items():
                if latencies:
                    latency_stats[service] = {
                        "count": len(latencies),
                        "min_ms": round(min(latencies), 2),
                        "max_ms": round(max(latencies), 2),
                        "avg_ms": round(sum(latencies) / len(latencies), 2),
                    }
            summary["api_latencies"] = latency_stats

        if self.error_message:
            summary["error_message"] = self.error_message

        return summary


@asynccontextmanager
async def track_api_call(
    metrics: Optional[ReviewMetrics],
    service: str,
    logger_adapter,
    endpoint: str = "",
    method: str = "",
):
    """
    Context manager to track API call timing.

    Usage:
        async with track_api_call(metrics, "openai", logger, "chat.completions", "POST"):
            text = await generator.generate(prompt)

    Exceptions raised inside the block are logged and re-raised.
    """
    start_time = time.time()
    error = None

    try:
        yield
    except Exception as e:
        error = e
        raise
    finally:
        duration_ms = (time.time() - start_time) * 1000

        if metrics is not None:
            metrics.record_api_call(service, duration_ms)

        log_api_call(
            logger_adapter,
            service=service,
            endpoint=endpoint,
            method=method,
            duration_ms=duration_ms,
            error=str(error) if error else None
        )
