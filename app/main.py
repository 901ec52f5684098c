"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from app.api import webhooks
from app.config import Settings, get_settings
from app.models.api_response import HealthResponse
from app.services.diff_collector import DiffCollector
from app.services.github_client import GitHubClient
from app.services.review_generator import ReviewGenerator, create_openai_client
from app.services.review_pipeline import ReviewPipeline
from app.services.review_submitter import ReviewSubmitter
from app.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)


def build_review_pipeline(settings: Settings, github_client: GitHubClient) -> ReviewPipeline:
    """Wire the review components from settings."""
    generator = ReviewGenerator(
        client=create_openai_client(settings),
        model=settings.azure_openai_deployment or settings.openai_model,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
    )
    return ReviewPipeline(
        collector=DiffCollector(github_client, max_changes=settings.max_file_changes),
        generator=generator,
        submitter=ReviewSubmitter(github_client),
    )


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[ReviewPipeline] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings (defaults to the environment)
        pipeline: Review pipeline (defaults to one wired from settings)
    """
    settings = settings or get_settings()

    github_client = None
    if pipeline is None:
        github_client = GitHubClient(settings.github_token)
        pipeline = build_review_pipeline(settings, github_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"AI Code Review Bot running on port {settings.port}")
        yield
        logger.info("Shutting down GitHub PR Review Bot")
        if github_client is not None:
            github_client.close()

    app = FastAPI(
        title="GitHub PR Review Bot",
        description="AI code review for GitHub pull requests",
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.review_pipeline = pipeline

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint for container orchestration."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            version=settings.app_version,
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "GitHub PR Review Bot API",
            "version": settings.app_version,
            "docs": "/docs"
        }

    app.include_router(webhooks.router)

    return app


settings = get_settings()

# Configure structured logging
setup_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
