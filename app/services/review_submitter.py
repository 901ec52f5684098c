"""
Review Submitter component.

Posts the generated review back to the pull request, and posts a
best-effort error comment when the pipeline fails.
"""

from app.models.review import ReviewEvent
from app.services.github_client import GitHubClient
from app.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_COMMENT = (
    "🤖 **AI Code Review Bot Error**\n\n"
    "Sorry, I encountered an error while reviewing this PR. "
    "Please check the logs or try again later."
)


class ReviewSubmitter:
    """Publishes reviews and error comments to GitHub pull requests."""

    def __init__(self, github_client: GitHubClient):
        self.github_client = github_client

    async def submit_review(
        self,
        owner: str,
        repo: str,
        number: int,
        body: str,
        event: ReviewEvent
    ) -> None:
        """
        Submit one review with ``event`` as its disposition.

        Raises:
            Exception: Whatever the GitHub call raised
        """
        await self.github_client.create_review(owner, repo, number, body=body, event=event.value)
        logger.info(f"Review submitted for PR #{number} with event: {event.value}")

    async def post_error_comment(self, owner: str, repo: str, number: int) -> bool:
        """
        Tell the PR author the review failed.

        Returns:
            True if the comment was posted. Failures are logged, never raised.
        """
        try:
            await self.github_client.create_issue_comment(owner, repo, number, ERROR_COMMENT)
            return True
        except Exception as e:
            logger.error(f"Error posting error comment on PR #{number}: {e}", exc_info=True)
            return False
