"""
Services for the GitHub PR Review Bot.
"""

from app.services.diff_collector import DiffCollector
from app.services.github_client import GitHubClient, GitHubClientError
from app.services.recommendation import parse_recommendation
from app.services.review_generator import ReviewGenerator, create_openai_client
from app.services.review_pipeline import (
    GenerationError,
    ReviewPipeline,
    ReviewPipelineError,
    SubmissionError,
    UpstreamListingError,
)
from app.services.review_submitter import ReviewSubmitter
from app.services.signature import verify_signature

__all__ = [
    "DiffCollector",
    "GitHubClient",
    "GitHubClientError",
    "parse_recommendation",
    "ReviewGenerator",
    "create_openai_client",
    "ReviewPipeline",
    "ReviewPipelineError",
    "UpstreamListingError",
    "GenerationError",
    "SubmissionError",
    "ReviewSubmitter",
    "verify_signature",
]
