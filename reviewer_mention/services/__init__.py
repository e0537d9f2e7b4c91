"""
Services Package

This package contains the GitHub-facing service modules:
- github_auth: GitHub App and token authentication
- github_client: GitHub API client
- diff_parser: Changed file extraction from diffs
- pull_request: Per-PR adapter used by the mention pipeline
"""

from reviewer_mention.services.diff_parser import DiffParser, DiffParserError, get_diff_parser
from reviewer_mention.services.github_auth import GitHubAppAuth, GitHubAuthError, get_github_auth
from reviewer_mention.services.github_client import GitHubAPIError, GitHubClient, get_rate_limiter
from reviewer_mention.services.pull_request import GitHubPullRequest


__all__ = [
    "get_github_auth",
    "GitHubAppAuth",
    "GitHubAuthError",
    "GitHubClient",
    "GitHubAPIError",
    "get_rate_limiter",
    "get_diff_parser",
    "DiffParser",
    "DiffParserError",
    "GitHubPullRequest",
]
