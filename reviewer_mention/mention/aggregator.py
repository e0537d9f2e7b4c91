"""
Commit Aggregation Module

Tallies, per author, the commits touching each selected file on the
pull request's target branch.

Design Decisions:
- Issue the per-file history queries concurrently, bounded by a semaphore
- Merge results in one loop after every query has settled
- A failed query only drops that file's contribution
"""

import asyncio
from typing import Dict, List, Optional, Sequence

from reviewer_mention.logging_config import get_logger
from reviewer_mention.mention.errors import HistoryQueryError
from reviewer_mention.mention.ports import CommitHistoryPort
from reviewer_mention.models import CommitRecord

logger = get_logger(__name__)


class CommitAggregator:
    """
    Builds the author -> commit count tally for a set of files.

    Usage:
        aggregator = CommitAggregator(history, "owner/repo", "main")
        tally = await aggregator.aggregate(["src/app.py"])
    """

    def __init__(
        self,
        history: CommitHistoryPort,
        repo_slug: str,
        branch: str,
        concurrency: int = 3
    ):
        """
        Initialize the aggregator.

        Args:
            history: Commit history source
            repo_slug: Repository in owner/name form
            branch: Target branch whose history is queried
            concurrency: Maximum number of queries in flight
        """
        self.history = history
        self.repo_slug = repo_slug
        self.branch = branch
        self._semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _query_file(self, path: str) -> List[CommitRecord]:
        async with self._semaphore:
            return await self.history.query_commits(self.repo_slug, self.branch, path)

    async def aggregate(self, files: Sequence[str]) -> Dict[str, int]:
        """
        Count commits per author across all files.

        Args:
            files: Selected file paths

        Returns:
            Mapping of author login to commit count

        Raises:
            Exception: Any failure other than HistoryQueryError, re-raised
                once all queries have settled
        """
        results = await asyncio.gather(
            *(self._query_file(path) for path in files),
            return_exceptions=True
        )

        tally: Dict[str, int] = {}
        fatal: Optional[BaseException] = None

        for path, result in zip(files, results):
            if isinstance(result, HistoryQueryError):
                logger.warning(
                    "Partial history failure, skipping file",
                    repo=self.repo_slug,
                    branch=self.branch,
                    path=path,
                    error=str(result)
                )
                continue

            if isinstance(result, BaseException):
                if fatal is None:
                    fatal = result
                continue

            skipped = 0
            for commit in result:
                if not commit.has_author:
                    skipped += 1
                    continue
                if commit.author_login in tally:
                    tally[commit.author_login] += 1
                else:
                    tally[commit.author_login] = 1

            logger.debug(
                "Tallied file history",
                path=path,
                commits=len(result),
                unattributed=skipped
            )

        if fatal is not None:
            raise fatal

        logger.info(
            "Aggregated commit authors",
            repo=self.repo_slug,
            branch=self.branch,
            files=len(files),
            authors=len(tally)
        )

        return tally
