"""
Webhook endpoint for GitHub pull request events.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from app.config import Settings
from app.models.pull_request import PullRequestRef, WebhookEvent
from app.services.review_pipeline import ReviewPipeline
from app.services.signature import verify_signature
from app.utils.logging import get_logger, log_error_with_context, log_pr_event

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

# Only these pull_request actions trigger a review
REVIEWED_ACTIONS = ("opened", "synchronize")


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_review_pipeline(request: Request) -> ReviewPipeline:
    return request.app.state.review_pipeline


def _text(body: str, status_code: int = 200) -> PlainTextResponse:
    return PlainTextResponse(body, status_code=status_code)


@router.post("/webhook", response_class=PlainTextResponse)
async def handle_github_webhook(
    request: Request,
    x_hub_signature_256: Optional[str] = Header(None, alias="X-Hub-Signature-256"),
    x_github_event: Optional[str] = Header(None, alias="X-GitHub-Event"),
    x_github_delivery: Optional[str] = Header(None, alias="X-GitHub-Delivery"),
    settings: Settings = Depends(get_settings_dependency),
    pipeline: ReviewPipeline = Depends(get_review_pipeline),
) -> PlainTextResponse:
    """
    Receive a GitHub webhook delivery and review the pull request.

    This endpoint:
    1. Verifies the HMAC signature over the raw body (401 on mismatch)
    2. Ignores everything but pull_request opened/synchronize (200)
    3. Skips draft pull requests (200)
    4. Runs the review pipeline synchronously (200, or 500 after posting
       an error comment on the PR)
    """
    # HMAC is computed over the raw bytes
    body = await request.body()

    if not verify_signature(settings.github_webhook_secret, body, x_hub_signature_256):
        logger.warning("Invalid webhook signature", extra={"delivery_id": x_github_delivery})
        return _text("Unauthorized", 401)

    try:
        payload: Dict[str, Any] = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("Webhook body is not valid JSON", extra={"delivery_id": x_github_delivery})
        return _text("Invalid payload", 400)

    if not isinstance(payload, dict):
        return _text("Invalid payload", 400)

    try:
        event = WebhookEvent(
            event_type=x_github_event or "",
            action=payload.get("action"),
            payload=payload,
            signature=x_hub_signature_256,
            delivery_id=x_github_delivery,
        )
    except ValidationError as e:
        logger.warning(f"Invalid webhook event: {e}", extra={"delivery_id": x_github_delivery})
        return _text("Invalid payload", 400)

    if event.event_type != "pull_request" or event.action not in REVIEWED_ACTIONS:
        logger.info(
            f"Ignoring event {event.event_type}/{event.action}",
            extra={"delivery_id": event.delivery_id}
        )
        return _text("Event not processed")

    try:
        pr = PullRequestRef.from_webhook_payload(event.payload)
    except (KeyError, TypeError, ValidationError) as e:
        logger.error(
            f"Invalid pull_request payload: {e}",
            extra={"delivery_id": event.delivery_id}
        )
        return _text("Invalid payload", 400)

    log_pr_event(logger, pr.owner, pr.repo, pr.number, event.action)

    if pr.draft:
        logger.info("Skipping draft PR", extra={"pr_number": pr.number})
        return _text("Draft PR skipped")

    try:
        result = await pipeline.run(pr)
    except Exception as e:
        log_error_with_context(
            logger,
            "Error processing webhook",
            e,
            owner=pr.owner,
            repo=pr.repo,
            pr_number=pr.number,
            delivery_id=event.delivery_id,
        )
        await pipeline.report_failure(pr)
        return _text("Internal server error", 500)

    if result is None:
        return _text("No code files to review")

    return _text("Review completed successfully")
