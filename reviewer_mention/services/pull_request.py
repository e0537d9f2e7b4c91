"""
GitHub Pull Request Adapter

Binds a GitHubClient to one pull request and exposes it through the
mention pipeline's collaborator interfaces: changed files, file
history and the comment sink.
"""

from typing import List

import httpx

from reviewer_mention.config import get_settings
from reviewer_mention.logging_config import get_logger
from reviewer_mention.mention.errors import HistoryQueryError, SourceUnavailableError
from reviewer_mention.models import CommitRecord, PRContext
from reviewer_mention.services.diff_parser import DiffParser, DiffParserError, get_diff_parser
from reviewer_mention.services.github_auth import GitHubAuthError
from reviewer_mention.services.github_client import GitHubAPIError, GitHubClient

logger = get_logger(__name__)

# Status GitHub returns when a diff is too large to generate
DIFF_TOO_LARGE = 406


class GitHubPullRequest:
    """
    GitHub-backed DiffSource, CommitHistoryPort and CommentSink.

    Usage:
        pull_request = GitHubPullRequest(pr_context)
        files = await pull_request.list_changed_files()
    """

    def __init__(
        self,
        pr_context: PRContext,
        client: GitHubClient = None,
        diff_parser: DiffParser = None
    ):
        self.pr_context = pr_context
        self.settings = get_settings()
        self.client = client or GitHubClient(pr_context.installation_id)
        self.diff_parser = diff_parser or get_diff_parser()

    async def list_changed_files(self) -> List[str]:
        """
        Return the pull request's changed paths in diff order.

        Raises:
            SourceUnavailableError: If neither the diff nor the file
                listing can be read
        """
        ctx = self.pr_context

        try:
            diff = await self.client.get_pr_diff(ctx.owner, ctx.repo, ctx.pr_number)
            return self.diff_parser.parse_changed_files(diff)

        except GitHubAPIError as e:
            if e.status_code != DIFF_TOO_LARGE:
                raise SourceUnavailableError(f"Failed to fetch PR diff: {e}") from e

            logger.info(
                "PR diff too large, falling back to file listing",
                repo=ctx.full_repo_name,
                pr_number=ctx.pr_number
            )

        except DiffParserError as e:
            raise SourceUnavailableError(f"Failed to parse PR diff: {e}") from e

        except (GitHubAuthError, httpx.HTTPError) as e:
            raise SourceUnavailableError(f"Failed to fetch PR diff: {e}") from e

        try:
            return await self.client.get_pr_files(ctx.owner, ctx.repo, ctx.pr_number)
        except (GitHubAPIError, GitHubAuthError, httpx.HTTPError) as e:
            raise SourceUnavailableError(f"Failed to fetch PR files: {e}") from e

    async def query_commits(self, repo_slug: str, branch: str, path: str) -> List[CommitRecord]:
        """
        Return the commits touching a path on a branch.

        Raises:
            HistoryQueryError: If GitHub answers with an error status
        """
        try:
            return await self.client.list_commits(repo_slug, branch, path)
        except GitHubAPIError as e:
            raise HistoryQueryError(
                f"Failed to fetch history of {path}: {e}",
                path=path,
                status_code=e.status_code
            ) from e

    async def publish(self, message: str) -> None:
        """Post the recommendation as a pull request comment."""
        ctx = self.pr_context

        if not self.settings.enable_github_comments:
            logger.info(
                "GitHub comments disabled, skipping mention comment",
                repo=ctx.full_repo_name,
                pr_number=ctx.pr_number
            )
            return

        await self.client.create_issue_comment(ctx.owner, ctx.repo, ctx.pr_number, message)
