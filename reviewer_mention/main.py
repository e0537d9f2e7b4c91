"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Design Decisions:
- Use lifespan events for startup/shutdown
- Validate credentials and the file blacklist at startup
- Expose health and readiness endpoints
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from reviewer_mention import __version__
from reviewer_mention.config import get_settings
from reviewer_mention.logging_config import get_logger, setup_logging
from reviewer_mention.mention.errors import ConfigurationError
from reviewer_mention.mention.selector import compile_exclusions
from reviewer_mention.webhook import router as webhook_router

setup_logging()

logger = get_logger(__name__)


def validate_configuration() -> None:
    """
    Check the settings a mention run depends on.

    Raises:
        ValueError: If GitHub credentials are missing
        ConfigurationError: If the file blacklist has an invalid regex
    """
    settings = get_settings()
    settings.validate_credentials()
    compile_exclusions(settings.mention_file_blacklist)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting reviewer mention service", host=settings.host, port=settings.port)

    try:
        validate_configuration()
        logger.info("Configuration validated successfully")
    except (ValueError, ConfigurationError) as e:
        logger.error("Configuration validation failed", error=str(e))
        raise

    yield

    logger.info("Shutting down reviewer mention service")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Reviewer Mention",
        description="Mentions likely reviewers on GitHub pull requests based on commit history",
        version=__version__,
        lifespan=lifespan
    )

    app.include_router(webhook_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "Reviewer Mention",
            "version": __version__,
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        """Liveness check."""
        return {
            "status": "healthy",
            "service": "reviewer-mention",
            "version": __version__
        }

    @app.get("/ready")
    async def readiness_check():
        """Readiness check: the service can authenticate and its policy is valid."""
        try:
            validate_configuration()
            return {"status": "ready", "service": "reviewer-mention"}
        except (ValueError, ConfigurationError) as e:
            logger.error("Readiness check failed", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Not ready: {e}"
            )

    return app


app = create_app()
