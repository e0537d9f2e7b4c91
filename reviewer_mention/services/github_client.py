"""
GitHub API Client Module

This module provides the client for the GitHub REST calls the reviewer
mention service makes: reading a pull request's diff and files, reading
the commit history of a path, and commenting on the pull request.

Design Decisions:
- Use httpx for async HTTP requests
- Integrate with the auth service for automatic token management
- Retry transport errors and rate limiting with exponential backoff
- Support pagination for large result sets
"""

import asyncio
import time
from typing import Dict, List, Optional

import httpx
from aiolimiter import AsyncLimiter
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from reviewer_mention.config import get_settings
from reviewer_mention.logging_config import get_logger
from reviewer_mention.models import CommitRecord
from reviewer_mention.services.github_auth import GitHubAuthError, get_github_auth

logger = get_logger(__name__)

DIFF_MEDIA_TYPE = "application/vnd.github.diff"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors."""
    def __init__(self, message: str, status_code: int = None, response_body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubRateLimitError(GitHubAPIError):
    """Exception raised when GitHub rate limit is exceeded."""
    pass


# Singleton instance
_rate_limiter: Optional[AsyncLimiter] = None


def get_rate_limiter() -> AsyncLimiter:
    """Get the process-wide limiter for GitHub API requests."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = AsyncLimiter(
            max_rate=get_settings().github_rate_limit,
            time_period=3600
        )
    return _rate_limiter


class GitHubClient:
    """
    Async GitHub API client with authentication and rate limiting.

    Usage:
        client = GitHubClient(installation_id=123)
        commits = await client.list_commits("owner/repo", "main", "src/app.py")
    """

    PER_PAGE = 100

    def __init__(
        self,
        installation_id: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the GitHub client.

        Args:
            installation_id: GitHub App installation ID, None in token mode
            transport: Optional httpx transport, used in place of the network
        """
        self.installation_id = installation_id
        self.settings = get_settings()
        self.auth = get_github_auth()
        self._transport = transport

        # Shared by every client so the hourly budget covers the whole service
        self._rate_limiter = get_rate_limiter()

    async def _get_headers(self, accept: str) -> Dict[str, str]:
        """Get authenticated headers for API requests."""
        token = await self.auth.get_installation_token(self.installation_id)
        return {
            "Authorization": f"token {token}",
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _handle_rate_limit(self, response: httpx.Response) -> None:
        """
        Handle rate limit headers from GitHub response.

        Warns when the remaining budget runs low and waits for the reset
        once it is exhausted.
        """
        remaining = response.headers.get("x-ratelimit-remaining")
        reset_time = response.headers.get("x-ratelimit-reset")

        if not remaining:
            return

        remaining_int = int(remaining)
        if remaining_int < 100:
            logger.warning(
                "GitHub API rate limit running low",
                remaining=remaining_int,
                reset_at=reset_time
            )

        if remaining_int == 0 and reset_time and response.status_code in (403, 429):
            sleep_time = max(0, int(reset_time) - int(time.time())) + 5
            logger.warning(
                "Rate limit exceeded, waiting for reset",
                sleep_seconds=sleep_time
            )
            await asyncio.sleep(sleep_time)
            raise GitHubRateLimitError("Rate limit exceeded", status_code=response.status_code)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type((httpx.TransportError, GitHubRateLimitError)),
        reraise=True
    )
    async def _request(
        self,
        method: str,
        endpoint: str,
        accept: str = JSON_MEDIA_TYPE,
        **kwargs
    ) -> httpx.Response:
        """
        Make an authenticated request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            accept: Media type requested from GitHub
            **kwargs: Additional arguments to pass to httpx

        Returns:
            httpx.Response object

        Raises:
            GitHubAPIError: If GitHub answers with an error status
            GitHubAuthError: If the token was rejected
        """
        async with self._rate_limiter:
            headers = await self._get_headers(accept)
            url = f"{self.settings.github_api_url}{endpoint}"

            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, **kwargs)

            await self._handle_rate_limit(response)

            if response.status_code == 401:
                self.auth.invalidate_token(self.installation_id)
                raise GitHubAuthError("Authentication failed, token invalidated")

            if response.status_code >= 400:
                error_body = response.text
                logger.error(
                    "GitHub API error",
                    status_code=response.status_code,
                    endpoint=endpoint,
                    error=error_body[:500]
                )
                raise GitHubAPIError(
                    f"GitHub API error: {response.status_code}",
                    status_code=response.status_code,
                    response_body=error_body
                )

            return response

    async def get_pr_diff(self, owner: str, repo: str, pr_number: int) -> str:
        """
        Fetch the unified diff of a pull request.

        GitHub answers 406 when the diff is too large to render.
        """
        logger.info("Fetching PR diff", owner=owner, repo=repo, pr_number=pr_number)

        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{pr_number}",
            accept=DIFF_MEDIA_TYPE
        )
        return response.text

    async def get_pr_files(self, owner: str, repo: str, pr_number: int) -> List[str]:
        """
        Fetch the paths of all files changed in a pull request.

        Handles pagination for PRs with many files.

        Returns:
            File paths in the order GitHub lists them
        """
        logger.info("Fetching PR files", owner=owner, repo=repo, pr_number=pr_number)

        filenames: List[str] = []
        page = 1

        while True:
            response = await self._request(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{pr_number}/files",
                params={"page": page, "per_page": self.PER_PAGE}
            )

            files_data = response.json()
            if not files_data:
                break

            filenames.extend(file_data["filename"] for file_data in files_data)

            if len(files_data) < self.PER_PAGE:
                break
            page += 1

        logger.info("Fetched PR files", total_files=len(filenames), pr_number=pr_number)
        return filenames

    async def list_commits(
        self,
        repo_slug: str,
        branch: str,
        path: str,
        limit: Optional[int] = None
    ) -> List[CommitRecord]:
        """
        Fetch the commits touching a path on a branch, newest first.

        Args:
            repo_slug: Repository in owner/name form
            branch: Branch name the history is read from
            path: File path in the repository
            limit: Maximum commits to return, defaults to max_commits_per_file

        Returns:
            CommitRecord list; author_login is None for commits not
            attributed to a GitHub account
        """
        limit = limit or self.settings.max_commits_per_file
        per_page = min(self.PER_PAGE, limit)

        commits: List[CommitRecord] = []
        page = 1

        while len(commits) < limit:
            response = await self._request(
                "GET",
                f"/repos/{repo_slug}/commits",
                params={"sha": branch, "path": path, "page": page, "per_page": per_page}
            )

            commits_data = response.json()
            if not commits_data:
                break

            for commit_data in commits_data:
                author = commit_data.get("author") or {}
                commits.append(CommitRecord(
                    sha=commit_data.get("sha", ""),
                    author_login=author.get("login")
                ))

            if len(commits_data) < per_page:
                break
            page += 1

        logger.debug(
            "Fetched file history",
            repo=repo_slug,
            branch=branch,
            path=path,
            num_commits=min(len(commits), limit)
        )

        return commits[:limit]

    async def create_issue_comment(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        body: str
    ) -> None:
        """Post a conversation comment on a pull request."""
        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{pr_number}/comments",
            json={"body": body}
        )

        logger.info(
            "Comment posted successfully",
            owner=owner,
            repo=repo,
            pr_number=pr_number
        )
