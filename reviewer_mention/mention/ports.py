"""
Collaborator interfaces of the mention pipeline.

The pipeline only talks to the hosting service through these
protocols; services.pull_request provides the GitHub implementation.
"""

from typing import List, Protocol

from reviewer_mention.models import CommitRecord


class PullRequestContext(Protocol):
    """Read-only facts about the pull request being processed."""

    @property
    def author_login(self) -> str: ...

    @property
    def full_repo_name(self) -> str: ...

    @property
    def target_branch(self) -> str: ...


class DiffSource(Protocol):
    async def list_changed_files(self) -> List[str]:
        """
        Return the changed file paths in diff order.

        Raises:
            SourceUnavailableError: If the file list cannot be obtained
        """
        ...


class CommitHistoryPort(Protocol):
    async def query_commits(self, repo_slug: str, branch: str, path: str) -> List[CommitRecord]:
        """
        Return the commits touching `path` on `branch`, newest first.

        Raises:
            HistoryQueryError: If this file's history cannot be retrieved
        """
        ...


class CommentSink(Protocol):
    async def publish(self, message: str) -> None: ...
