"""Unit tests for the ReviewPipeline orchestration."""

from unittest.mock import ANY, AsyncMock, MagicMock, patch

import pytest

from app.models.file_change import ChangedFile, FileStatus
from app.models.pull_request import PullRequestRef
from app.models.review import ReviewEvent
from app.services.review_pipeline import (
    GenerationError,
    ReviewPipeline,
    ReviewPipelineError,
    SubmissionError,
    UpstreamListingError,
)


PR = PullRequestRef(
    owner="octo", repo="repo", number=7, title="Add feature", description="Adds it", head_sha="abc123"
)


def changed_file(filename="app.py", content="print(1)\n"):
    return ChangedFile(
        filename=filename,
        status=FileStatus.MODIFIED,
        additions=1,
        deletions=0,
        changes=1,
        patch="+print(1)",
        content=content,
        language="Python",
    )


@pytest.fixture
def collector():
    mock = MagicMock()
    mock.collect = AsyncMock(return_value=[changed_file()])
    return mock


@pytest.fixture
def generator():
    mock = MagicMock()
    mock.generate = AsyncMock(return_value="## 🏁 Recommendation\n**REQUEST_CHANGES**")
    return mock


@pytest.fixture
def submitter():
    mock = MagicMock()
    mock.submit_review = AsyncMock()
    mock.post_error_comment = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def pipeline(collector, generator, submitter):
    return ReviewPipeline(collector, generator, submitter)


@pytest.mark.asyncio
async def test_run_success(pipeline, collector, generator, submitter):
    result = await pipeline.run(PR)

    assert result.event == ReviewEvent.REQUEST_CHANGES
    assert result.body == "## 🏁 Recommendation\n**REQUEST_CHANGES**"
    collector.collect.assert_awaited_once_with("octo", "repo", 7)

    prompt = generator.generate.await_args.args[0]
    assert "**Pull Request Title:** Add feature" in prompt
    assert "### app.py (Python)" in prompt

    submitter.submit_review.assert_awaited_once_with(
        "octo", "repo", 7, result.body, ReviewEvent.REQUEST_CHANGES
    )


@pytest.mark.asyncio
async def test_run_without_files_skips_generation(pipeline, collector, generator, submitter):
    collector.collect.return_value = []

    assert await pipeline.run(PR) is None
    generator.generate.assert_not_awaited()
    submitter.submit_review.assert_not_awaited()


@pytest.mark.asyncio
async def test_listing_failure(pipeline, collector, generator):
    cause = RuntimeError("502 Bad Gateway")
    collector.collect.side_effect = cause

    with pytest.raises(UpstreamListingError) as exc_info:
        await pipeline.run(PR)

    assert exc_info.value.__cause__ is cause
    assert exc_info.value.stage == "collect"
    generator.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_generation_failure(pipeline, generator, submitter):
    generator.generate.side_effect = RuntimeError("timeout")

    with pytest.raises(GenerationError):
        await pipeline.run(PR)

    submitter.submit_review.assert_not_awaited()


@pytest.mark.asyncio
async def test_submission_failure(pipeline, submitter):
    submitter.submit_review.side_effect = RuntimeError("422")

    with pytest.raises(SubmissionError) as exc_info:
        await pipeline.run(PR)

    assert isinstance(exc_info.value, ReviewPipelineError)
    assert "submit failed" in str(exc_info.value)


@pytest.mark.asyncio
async def test_pipeline_does_not_post_error_comment_itself(pipeline, collector, submitter):
    collector.collect.side_effect = RuntimeError("boom")

    with pytest.raises(UpstreamListingError):
        await pipeline.run(PR)

    submitter.post_error_comment.assert_not_awaited()


@pytest.mark.asyncio
async def test_report_failure(pipeline, submitter):
    assert await pipeline.report_failure(PR) is True
    submitter.post_error_comment.assert_awaited_once_with("octo", "repo", 7)


@pytest.mark.asyncio
async def test_unexpected_error_is_recorded_as_failed(pipeline, generator):
    with patch("app.services.review_pipeline.build_review_prompt", side_effect=ValueError("bad template")), \
            patch("app.services.review_pipeline.log_stage_transition") as mock_stage, \
            patch("app.services.review_pipeline.ReviewMetrics") as mock_metrics:
        with pytest.raises(ValueError, match="bad template"):
            await pipeline.run(PR)

    mock_stage.assert_called_with(ANY, 7, "pipeline", "failed")
    mock_metrics.return_value.complete.assert_called_once_with(
        status="failed", error_message="bad template"
    )
    generator.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_stage_error_is_recorded_with_its_stage(pipeline, generator):
    generator.generate.side_effect = RuntimeError("timeout")

    with patch("app.services.review_pipeline.log_stage_transition") as mock_stage:
        with pytest.raises(GenerationError):
            await pipeline.run(PR)

    mock_stage.assert_called_with(ANY, 7, "generate", "failed")


@pytest.mark.parametrize(
    "error_cls, stage",
    [
        (ReviewPipelineError, "pipeline"),
        (UpstreamListingError, "collect"),
        (GenerationError, "generate"),
        (SubmissionError, "submit"),
    ],
)
def test_error_names_its_stage(error_cls, stage):
    error = error_cls("boom")

    assert error.stage == stage
    assert str(error) == f"{stage} failed: boom"
