"""
Review Pipeline.

Runs one pull request through collect -> build prompt -> generate ->
parse -> submit. Each single-shot stage that fails aborts the run with a
ReviewPipelineError naming the stage; the caller decides how to report it.
"""

from typing import Optional

from app.models.pull_request import PullRequestRef
from app.models.review import ReviewResult
from app.services.diff_collector import DiffCollector
from app.services.prompt_builder import build_review_prompt
from app.services.recommendation import parse_recommendation
from app.services.review_generator import ReviewGenerator
from app.services.review_submitter import ReviewSubmitter
from app.utils.logging import get_logger, log_stage_transition
from app.utils.metrics import ReviewMetrics, track_api_call

logger = get_logger(__name__)


class ReviewPipelineError(Exception):
    """Base exception for a failed review run."""

    stage = "pipeline"

    def __init__(self, message: str):
        super().__init__(f"{self.stage} failed: {message}")


class UpstreamListingError(ReviewPipelineError):
    """Listing the PR files or fetching PR metadata failed."""

    stage = "collect"


class GenerationError(ReviewPipelineError):
    """The completion API call failed."""

    stage = "generate"


class SubmissionError(ReviewPipelineError):
    """Posting the review failed."""

    stage = "submit"


class ReviewPipeline:
    """Sequences the review components for a single pull request."""

    def __init__(
        self,
        collector: DiffCollector,
        generator: ReviewGenerator,
        submitter: ReviewSubmitter,
    ):
        self.collector = collector
        self.generator = generator
        self.submitter = submitter

    async def run(self, pr: PullRequestRef) -> Optional[ReviewResult]:
        """
        Review a pull request and submit the result.

        Args:
            pr: Pull request to review

        Returns:
            The submitted review, or None when there were no code files to review

        Raises:
            UpstreamListingError, GenerationError, SubmissionError; any other
            error is recorded as a failed run and re-raised unchanged
        """
        run_logger = logger.with_context(owner=pr.owner, repo=pr.repo, pr_number=pr.number)
        metrics = ReviewMetrics(pr.owner, pr.repo, pr.number)
        metrics.start()

        try:
            log_stage_transition(run_logger, pr.number, "collect", "started")
            try:
                async with track_api_call(metrics, "github", run_logger, "pulls.files", "GET"):
                    files = await self.collector.collect(pr.owner, pr.repo, pr.number)
            except Exception as e:
                raise UpstreamListingError(str(e)) from e

            degraded = sum(1 for f in files if not f.has_content)
            metrics.record_files(reviewed=len(files), degraded=degraded)
            log_stage_transition(run_logger, pr.number, "collect", "completed")

            if not files:
                run_logger.info("No code files to review")
                metrics.complete(status="skipped")
                return None

            prompt = build_review_prompt(files, pr.description, pr.title)

            log_stage_transition(run_logger, pr.number, "generate", "started")
            try:
                async with track_api_call(metrics, "openai", run_logger, "chat.completions", "POST"):
                    body = await self.generator.generate(prompt)
            except Exception as e:
                raise GenerationError(str(e)) from e
            log_stage_transition(run_logger, pr.number, "generate", "completed")

            result = ReviewResult(body=body, event=parse_recommendation(body))
            metrics.record_recommendation(result.event.value)

            log_stage_transition(run_logger, pr.number, "submit", "started")
            try:
                async with track_api_call(metrics, "github", run_logger, "pulls.reviews", "POST"):
                    await self.submitter.submit_review(pr.owner, pr.repo, pr.number, result.body, result.event)
            except Exception as e:
                raise SubmissionError(str(e)) from e
            log_stage_transition(run_logger, pr.number, "submit", "completed")

        except Exception as e:
            stage = getattr(e, "stage", ReviewPipelineError.stage)
            log_stage_transition(run_logger, pr.number, stage, "failed")
            metrics.complete(status="failed", error_message=str(e))
            raise

        metrics.complete(status="completed")
        return result

    async def report_failure(self, pr: PullRequestRef) -> bool:
        """Post the best-effort error comment on ``pr``."""
        return await self.submitter.post_error_comment(pr.owner, pr.repo, pr.number)
