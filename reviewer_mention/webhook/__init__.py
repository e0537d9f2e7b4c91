"""
Webhook Package

This package contains webhook handling components:
- handler: FastAPI route handlers
- security: Webhook signature verification
- processor: Reviewer mention orchestration
"""

from reviewer_mention.webhook.handler import router

__all__ = ["router"]
