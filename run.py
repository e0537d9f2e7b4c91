"""
Application Runner

Entry point for running the reviewer mention service.
Use: python run.py
"""

import uvicorn

from reviewer_mention.config import get_settings


def main():
    """Run the application with uvicorn."""
    settings = get_settings()

    uvicorn.run(
        "reviewer_mention.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=settings.log_requests
    )


if __name__ == "__main__":
    main()
