"""
Data Models Module

This module defines the Pydantic models used throughout the application.

Design Decisions:
- Use Pydantic models for all data transfer objects
- Clear separation between GitHub webhook models and internal models
- Internal models carry only what the mention pipeline reads
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class PRAction(str, Enum):
    """Pull request actions that trigger a reviewer mention."""
    OPENED = "opened"
    REOPENED = "reopened"
    READY_FOR_REVIEW = "ready_for_review"


# =============================================================================
# GitHub Webhook Models
# =============================================================================

class GitHubUser(BaseModel):
    """GitHub user information."""
    login: str
    id: int
    type: str = "User"


class GitHubRepository(BaseModel):
    """GitHub repository information."""
    id: int
    name: str
    full_name: str
    private: bool
    owner: GitHubUser
    html_url: str
    default_branch: str = "main"


class GitHubPullRequestHead(BaseModel):
    """PR head (source branch) information."""
    ref: str
    sha: str
    repo: Optional[GitHubRepository] = None


class GitHubPullRequestBase(BaseModel):
    """PR base (target branch) information."""
    ref: str
    sha: str
    repo: Optional[GitHubRepository] = None


class GitHubPullRequest(BaseModel):
    """Pull request information from webhook."""
    id: int
    number: int
    state: str
    title: str
    body: Optional[str] = None
    user: GitHubUser
    html_url: str
    head: GitHubPullRequestHead
    base: GitHubPullRequestBase
    merged: bool = False
    draft: bool = False
    created_at: datetime
    updated_at: datetime


class GitHubInstallation(BaseModel):
    """GitHub App installation information."""
    id: int
    account: Optional[GitHubUser] = None


class PullRequestWebhookPayload(BaseModel):
    """
    Pull request webhook payload.

    The installation is absent when the webhook is configured directly
    on a repository rather than delivered to a GitHub App.
    """
    action: str
    number: int
    pull_request: GitHubPullRequest
    repository: GitHubRepository
    sender: GitHubUser
    installation: Optional[GitHubInstallation] = None


# =============================================================================
# History Models
# =============================================================================

class CommitRecord(BaseModel):
    """
    One commit from a file's history.

    Attributes:
        sha: Commit SHA
        author_login: Login of the GitHub account the commit is attributed
            to, or None when the author email is not linked to an account
    """
    sha: str
    author_login: Optional[str] = None

    @property
    def has_author(self) -> bool:
        return bool(self.author_login)


class RankedCandidate(BaseModel):
    """A reviewer candidate with the number of commits it authored."""
    login: str
    commits: int = Field(ge=0)


# =============================================================================
# Internal Processing Models
# =============================================================================

class PRContext(BaseModel):
    """
    Context for recommending reviewers on one pull request.

    Read-only for the duration of a run.
    """
    owner: str
    repo: str
    pr_number: int
    base_ref: str
    head_sha: str
    author: str
    installation_id: Optional[int] = None
    title: str = ""

    @property
    def full_repo_name(self) -> str:
        """Get the full repository name (owner/repo)."""
        return f"{self.owner}/{self.repo}"

    @property
    def target_branch(self) -> str:
        """Branch the pull request merges into."""
        return self.base_ref

    @property
    def author_login(self) -> str:
        """Login of the pull request opener."""
        return self.author
