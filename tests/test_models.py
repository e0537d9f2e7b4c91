"""
Tests for Data Models and Settings
"""

import pytest
from pydantic import ValidationError

from reviewer_mention.config import Settings
from reviewer_mention.models import (
    CommitRecord,
    GitHubUser,
    PRAction,
    PRContext,
    PullRequestWebhookPayload,
    RankedCandidate,
)


class TestGitHubModels:
    """Tests for GitHub-related models."""

    def test_github_user(self):
        user = GitHubUser(login="testuser", id=123)

        assert user.login == "testuser"
        assert user.type == "User"

    def test_payload_parses(self, sample_pr_payload):
        payload = PullRequestWebhookPayload(**sample_pr_payload)

        assert payload.pull_request.base.ref == "develop"
        assert payload.installation.id == 987654

    def test_pr_action_values(self):
        assert {a.value for a in PRAction} == {"opened", "reopened", "ready_for_review"}


class TestHistoryModels:
    """Tests for commit history models."""

    def test_commit_with_author(self):
        assert CommitRecord(sha="1", author_login="alice").has_author

    @pytest.mark.parametrize("login", [None, ""])
    def test_commit_without_author(self, login):
        assert not CommitRecord(sha="1", author_login=login).has_author

    def test_ranked_candidate_rejects_negative_count(self):
        with pytest.raises(ValidationError):
            RankedCandidate(login="alice", commits=-1)


class TestPRContext:
    """Tests for PRContext model."""

    def test_pull_request_facts(self):
        context = PRContext(
            owner="myowner",
            repo="myrepo",
            pr_number=123,
            base_ref="release",
            head_sha="abc123",
            author="testuser"
        )

        assert context.full_repo_name == "myowner/myrepo"
        assert context.target_branch == "release"
        assert context.author_login == "testuser"
        assert context.installation_id is None


class TestSettings:
    """Tests for Settings parsing."""

    def test_mention_policy_defaults(self):
        settings = Settings(github_webhook_secret="s", github_token="t")

        assert settings.mention_max_reviewers == 3
        assert settings.mention_file_blacklist == []

    def test_user_blacklist_list(self):
        settings = Settings(
            github_webhook_secret="s",
            github_token="t",
            mention_user_blacklist=" wojteklu, danger ,,"
        )

        assert settings.user_blacklist_list == ["wojteklu", "danger"]

    def test_file_blacklist_from_environment(self, monkeypatch):
        monkeypatch.setenv("MENTION_FILE_BLACKLIST", '["Pods/.*", "\\\\.lock$"]')

        settings = Settings(github_webhook_secret="s")

        assert settings.mention_file_blacklist == ["Pods/.*", "\\.lock$"]

    def test_credentials_required(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        settings = Settings(github_webhook_secret="s", github_token=None)

        with pytest.raises(ValueError):
            settings.validate_credentials()

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(github_webhook_secret="s", log_level="LOUD")
