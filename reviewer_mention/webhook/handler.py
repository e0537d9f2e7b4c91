"""
Webhook Handler Module

This module defines the FastAPI endpoints for handling GitHub webhooks.

Design Decisions:
- Return 200 OK immediately after validation (GitHub timeout handling)
- Offload the reviewer mention run to background tasks
- Skip draft pull requests until they are ready for review
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, status
from pydantic import ValidationError

from reviewer_mention.logging_config import get_logger
from reviewer_mention.models import PRContext, PullRequestWebhookPayload
from reviewer_mention.webhook.processor import process_pr_mention
from reviewer_mention.webhook.security import (
    extract_delivery_id,
    validate_webhook_event,
    verify_webhook_signature,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])


@router.post("/github", status_code=status.HTTP_200_OK)
async def github_webhook(
    request: Request,
    background_tasks: BackgroundTasks
) -> Dict[str, Any]:
    """
    GitHub webhook endpoint.

    Validates the delivery, builds the pull request context and queues
    the reviewer mention run in the background.

    Raises:
        HTTPException: On validation or security failures
    """
    delivery_id = extract_delivery_id(request)

    logger.info(
        "Received GitHub webhook",
        delivery_id=delivery_id,
        remote_addr=request.client.host if request.client else "unknown"
    )

    raw_body = await request.body()

    await verify_webhook_signature(request, raw_body)

    event_type = request.headers.get("X-GitHub-Event")

    try:
        payload_dict = await request.json() if raw_body else {}
    except ValueError as e:
        logger.error("Failed to parse webhook payload", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload"
        )

    action = payload_dict.get("action")
    if not validate_webhook_event(event_type, action):
        return {
            "status": "ignored",
            "reason": f"Event type '{event_type}' with action '{action}' not processed",
            "delivery_id": delivery_id
        }

    try:
        payload = PullRequestWebhookPayload(**payload_dict)
    except ValidationError as e:
        logger.error("Invalid webhook payload", error=str(e), delivery_id=delivery_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid payload: {e}"
        )

    if payload.pull_request.draft:
        logger.info(
            "Skipping draft PR",
            pr_number=payload.number,
            repo=payload.repository.full_name
        )
        return {
            "status": "ignored",
            "reason": "Draft PR",
            "delivery_id": delivery_id
        }

    pr_context = PRContext(
        owner=payload.repository.owner.login,
        repo=payload.repository.name,
        pr_number=payload.number,
        base_ref=payload.pull_request.base.ref,
        head_sha=payload.pull_request.head.sha,
        author=payload.pull_request.user.login,
        installation_id=payload.installation.id if payload.installation else None,
        title=payload.pull_request.title
    )

    logger.info(
        "Queueing reviewer mention",
        repo=pr_context.full_repo_name,
        pr_number=pr_context.pr_number,
        action=action,
        author=pr_context.author,
        delivery_id=delivery_id
    )

    background_tasks.add_task(_process_mention_with_error_handling, pr_context, delivery_id)

    return {
        "status": "queued",
        "message": "Reviewer mention has been queued for processing",
        "delivery_id": delivery_id,
        "pr": {
            "owner": pr_context.owner,
            "repo": pr_context.repo,
            "number": pr_context.pr_number
        }
    }


async def _process_mention_with_error_handling(
    pr_context: PRContext,
    delivery_id: Optional[str]
) -> None:
    """
    Run the reviewer mention, logging instead of raising on failure.

    Background tasks have no caller to report to.
    """
    task_id = f"{pr_context.full_repo_name}#{pr_context.pr_number}"

    try:
        message = await process_pr_mention(pr_context)

        logger.info(
            "Background mention completed",
            task_id=task_id,
            delivery_id=delivery_id,
            published=message is not None
        )

    except Exception as e:
        logger.error(
            "Background mention processing failed",
            task_id=task_id,
            delivery_id=delivery_id,
            error=str(e),
            error_type=type(e).__name__
        )


@router.get("/health")
async def webhook_health() -> Dict[str, str]:
    """Health check endpoint for the webhook service."""
    return {"status": "healthy", "service": "webhook"}
