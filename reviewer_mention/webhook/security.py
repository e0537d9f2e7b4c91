"""
Webhook Security Module

This module verifies that webhook deliveries come from GitHub and
decides which events are worth processing.

Design Decisions:
- Use constant-time comparison to prevent timing attacks
- Verify signature before any payload processing
- Support both SHA-1 and SHA-256 signatures (SHA-256 preferred)
"""

import hashlib
import hmac
from typing import Optional

from fastapi import HTTPException, Request, status

from reviewer_mention.config import get_settings
from reviewer_mention.logging_config import get_logger
from reviewer_mention.models import PRAction

logger = get_logger(__name__)

VALID_EVENT_TYPES = {"pull_request"}
VALID_ACTIONS = {action.value for action in PRAction}


def compute_signature(secret: str, body: bytes, algorithm: str = "sha256") -> str:
    """Compute the hex HMAC digest GitHub sends for a body."""
    hash_func = hashlib.sha256 if algorithm == "sha256" else hashlib.sha1
    return hmac.new(secret.encode(), body, hash_func).hexdigest()


async def verify_webhook_signature(
    request: Request,
    raw_body: bytes
) -> bool:
    """
    Verify the GitHub webhook signature.

    Args:
        request: FastAPI request object
        raw_body: Raw request body bytes

    Returns:
        True if signature is valid

    Raises:
        HTTPException: If signature is missing or invalid
    """
    settings = get_settings()

    signature_header = request.headers.get("X-Hub-Signature-256")
    algorithm = "sha256"

    if not signature_header:
        signature_header = request.headers.get("X-Hub-Signature")
        algorithm = "sha1"

    if not signature_header:
        logger.warning(
            "Missing webhook signature header",
            remote_addr=request.client.host if request.client else "unknown"
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing webhook signature"
        )

    prefix, _, signature = signature_header.partition("=")
    if prefix != algorithm or not signature:
        logger.warning("Invalid signature format", signature_header=signature_header[:50])
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature format"
        )

    expected_signature = compute_signature(settings.github_webhook_secret, raw_body, algorithm)

    if not hmac.compare_digest(signature, expected_signature):
        logger.warning(
            "Webhook signature mismatch",
            remote_addr=request.client.host if request.client else "unknown",
            algorithm=algorithm
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature"
        )

    logger.debug("Webhook signature verified successfully", algorithm=algorithm)
    return True


def validate_webhook_event(
    event_type: Optional[str],
    action: Optional[str]
) -> bool:
    """
    Decide whether a webhook event should trigger a reviewer mention.

    Only pull_request events with an opened, reopened or
    ready_for_review action are processed.

    Raises:
        HTTPException: If the event type header is missing
    """
    if not event_type:
        logger.debug("Missing event type header")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing X-GitHub-Event header"
        )

    if event_type not in VALID_EVENT_TYPES:
        logger.debug("Ignoring non-PR event", event_type=event_type)
        return False

    if action not in VALID_ACTIONS:
        logger.debug("Ignoring PR action", action=action)
        return False

    return True


def extract_delivery_id(request: Request) -> Optional[str]:
    """Extract the webhook delivery ID from headers."""
    return request.headers.get("X-GitHub-Delivery")
