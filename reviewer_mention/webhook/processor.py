"""
Reviewer Mention Processor Module

This module orchestrates one reviewer recommendation run for a pull
request: select changed files, tally their commit authors, rank the
authors and mention the winners in a comment.

Design Decisions:
- Single pass per invocation, no retries
- Fail before any query when the file blacklist is malformed
- An empty file selection or candidate list ends the run silently
"""

from typing import Optional, Sequence

from reviewer_mention.config import get_settings
from reviewer_mention.logging_config import get_logger
from reviewer_mention.mention.aggregator import CommitAggregator
from reviewer_mention.mention.errors import MentionError
from reviewer_mention.mention.message import format_mention_message
from reviewer_mention.mention.ports import (
    CommentSink,
    CommitHistoryPort,
    DiffSource,
    PullRequestContext,
)
from reviewer_mention.mention.ranker import rank
from reviewer_mention.mention.selector import select_files
from reviewer_mention.models import PRContext
from reviewer_mention.services.pull_request import GitHubPullRequest

logger = get_logger(__name__)


class MentionProcessorError(Exception):
    """Custom exception for unexpected failures during a mention run."""
    pass


class MentionProcessor:
    """
    Orchestrates the reviewer mention pipeline.

    Usage:
        processor = MentionProcessor(pr_context, diff_source, history, sink)
        message = await processor.run(3, ["Pods/.*"], ["bot"])
    """

    def __init__(
        self,
        pull_request: PullRequestContext,
        diff_source: DiffSource,
        history: CommitHistoryPort,
        comment_sink: CommentSink,
        history_concurrency: Optional[int] = None
    ):
        """
        Initialize the processor.

        Args:
            pull_request: Facts about the pull request
            diff_source: Supplies the changed file list
            history: Supplies per-file commit history
            comment_sink: Receives the recommendation message
            history_concurrency: Maximum concurrent history queries
        """
        self.pull_request = pull_request
        self.diff_source = diff_source
        self.history = history
        self.comment_sink = comment_sink
        self.history_concurrency = history_concurrency or get_settings().history_query_concurrency

    async def run(
        self,
        max_reviewers: int = 3,
        file_blacklist: Sequence[str] = (),
        user_blacklist: Sequence[str] = ()
    ) -> Optional[str]:
        """
        Recommend reviewers and publish the recommendation.

        Args:
            max_reviewers: Maximum number of reviewers to mention
            file_blacklist: Regexes of files excluded from analysis
            user_blacklist: Logins that are never mentioned

        Returns:
            The published message, or None when nobody was recommended

        Raises:
            ConfigurationError: If a file blacklist pattern is invalid
            SourceUnavailableError: If the changed files cannot be read
            MentionProcessorError: On any other failure
        """
        repo_slug = self.pull_request.full_repo_name
        pr_author = self.pull_request.author_login

        logger.info(
            "Starting reviewer mention run",
            repo=repo_slug,
            branch=self.pull_request.target_branch,
            author=pr_author,
            max_reviewers=max_reviewers
        )

        try:
            changed_files = await self.diff_source.list_changed_files()
            files = select_files(changed_files, file_blacklist)
            if not files:
                logger.info("No files left to analyze", repo=repo_slug, changed=len(changed_files))
                return None

            aggregator = CommitAggregator(
                self.history,
                repo_slug,
                self.pull_request.target_branch,
                concurrency=self.history_concurrency
            )
            tally = await aggregator.aggregate(files)

            logger.debug("Commit tally", tally=tally)
            reviewers = rank(tally, user_blacklist, pr_author, max_reviewers)
            if not reviewers:
                logger.info("No reviewer candidates found", repo=repo_slug, authors=len(tally))
                return None

            message = format_mention_message(reviewers)
            await self.comment_sink.publish(message)

            logger.info("Mentioned potential reviewers", repo=repo_slug, reviewers=reviewers)
            return message

        except MentionError:
            raise

        except Exception as e:
            logger.error(
                "Reviewer mention run failed",
                repo=repo_slug,
                error=str(e),
                error_type=type(e).__name__
            )
            raise MentionProcessorError(f"Reviewer mention failed: {e}") from e


async def process_pr_mention(pr_context: PRContext) -> Optional[str]:
    """
    Run the reviewer mention for a pull request using the configured policy.

    This is the main entry point for background task processing.

    Args:
        pr_context: Pull request to recommend reviewers for

    Returns:
        The published message, or None when nobody was recommended
    """
    settings = get_settings()
    github_pr = GitHubPullRequest(pr_context)

    processor = MentionProcessor(
        pull_request=pr_context,
        diff_source=github_pr,
        history=github_pr,
        comment_sink=github_pr,
        history_concurrency=settings.history_query_concurrency
    )

    return await processor.run(
        max_reviewers=settings.mention_max_reviewers,
        file_blacklist=settings.mention_file_blacklist,
        user_blacklist=settings.user_blacklist_list
    )
