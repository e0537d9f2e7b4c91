"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

import os

# Settings are read on first import of the application
os.environ.setdefault("GITHUB_WEBHOOK_SECRET", "test_secret")
os.environ.setdefault("GITHUB_TOKEN", "test-static-token")
os.environ.setdefault("LOG_JSON_FORMAT", "false")

from typing import Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from reviewer_mention.main import app
from reviewer_mention.mention.errors import HistoryQueryError
from reviewer_mention.models import CommitRecord, PRContext


class FakeDiffSource:
    """DiffSource returning a fixed file list, or raising a given error."""

    def __init__(self, files: List[str], error: Optional[Exception] = None):
        self.files = files
        self.error = error
        self.calls = 0

    async def list_changed_files(self) -> List[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.files)


class FakeHistory:
    """
    CommitHistoryPort backed by a dict of path -> author logins.

    A path mapped to an exception raises it when queried.
    """

    def __init__(self, histories: Dict[str, object]):
        self.histories = histories
        self.queries: List[tuple] = []

    async def query_commits(self, repo_slug: str, branch: str, path: str) -> List[CommitRecord]:
        self.queries.append((repo_slug, branch, path))
        history = self.histories.get(path, [])
        if isinstance(history, Exception):
            raise history
        return [
            CommitRecord(sha=f"{path}-{i}", author_login=login)
            for i, login in enumerate(history)
        ]


class FakeSink:
    """CommentSink that records published messages."""

    def __init__(self):
        self.messages: List[str] = []

    async def publish(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for synchronous tests."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pr_context() -> PRContext:
    """Pull request opened by carol against main."""
    return PRContext(
        owner="octo",
        repo="widgets",
        pr_number=7,
        base_ref="main",
        head_sha="abc123",
        author="carol",
        installation_id=987654,
        title="Add widget sizing"
    )


@pytest.fixture
def fake_sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def make_history():
    return FakeHistory


@pytest.fixture
def make_diff_source():
    return FakeDiffSource


@pytest.fixture
def history_failure():
    def _failure(path: str, status_code: int = 404) -> HistoryQueryError:
        return HistoryQueryError(f"history of {path} unavailable", path=path, status_code=status_code)
    return _failure


@pytest.fixture
def sample_pr_payload() -> dict:
    """Sample pull request webhook payload."""
    return {
        "action": "opened",
        "number": 42,
        "pull_request": {
            "id": 123456789,
            "number": 42,
            "state": "open",
            "title": "Add new feature",
            "body": "This PR adds a new feature to the application.",
            "user": {
                "login": "testuser",
                "id": 12345,
                "type": "User"
            },
            "html_url": "https://github.com/owner/repo/pull/42",
            "head": {
                "ref": "feature-branch",
                "sha": "abc123def456",
                "repo": None
            },
            "base": {
                "ref": "develop",
                "sha": "xyz789abc012",
                "repo": None
            },
            "merged": False,
            "draft": False,
            "created_at": "2024-01-15T10:00:00Z",
            "updated_at": "2024-01-15T10:00:00Z"
        },
        "repository": {
            "id": 111,
            "name": "repo",
            "full_name": "owner/repo",
            "private": False,
            "owner": {
                "login": "owner",
                "id": 1,
                "type": "User"
            },
            "html_url": "https://github.com/owner/repo",
            "default_branch": "main"
        },
        "sender": {
            "login": "testuser",
            "id": 12345,
            "type": "User"
        },
        "installation": {
            "id": 987654
        }
    }


@pytest.fixture
def sample_diff() -> str:
    """Unified diff of a pull request touching three files."""
    return '''diff --git a/src/main.rb b/src/main.rb
index 83db48f..bf269f4 100644
--- a/src/main.rb
+++ b/src/main.rb
@@ -1,3 +1,4 @@
 require 'json'
+require 'yaml'

 puts 'hello'
diff --git a/Pods/Alamofire.rb b/Pods/Alamofire.rb
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/Pods/Alamofire.rb
@@ -0,0 +1 @@
+# vendored
diff --git a/lib/old_name.rb b/lib/new_name.rb
similarity index 90%
rename from lib/old_name.rb
rename to lib/new_name.rb
'''
