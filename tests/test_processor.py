"""
Tests for the Reviewer Mention Processor

Tests the end-to-end pipeline against in-memory collaborators.
"""

import httpx
import pytest

from reviewer_mention.mention.errors import ConfigurationError, SourceUnavailableError
from reviewer_mention.webhook.processor import MentionProcessor, MentionProcessorError


def build_processor(pr_context, diff_source, history, sink):
    return MentionProcessor(
        pull_request=pr_context,
        diff_source=diff_source,
        history=history,
        comment_sink=sink,
        history_concurrency=3
    )


@pytest.mark.asyncio
class TestMentionProcessor:
    """Test suite for MentionProcessor.run."""

    async def test_publishes_top_reviewers(self, pr_context, make_diff_source, make_history, fake_sink):
        history = make_history({
            "a.rb": ["alice", "bob", "carol"],
            "b.rb": ["alice", "carol", "carol"],
        })
        processor = build_processor(pr_context, make_diff_source(["a.rb", "b.rb"]), history, fake_sink)

        message = await processor.run(max_reviewers=3)

        expected = (
            "By analyzing the blame information on this pull request, "
            "we identified @alice, @bob to be potential reviewers."
        )
        assert message == expected
        assert fake_sink.messages == [expected]

    async def test_queries_target_branch_of_pull_request(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"a.rb": ["alice"]})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        await processor.run()

        assert history.queries == [("octo/widgets", "main", "a.rb")]

    async def test_only_first_three_files_are_queried(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"d.rb": ["dave"]})
        diff_source = make_diff_source(["a.rb", "b.rb", "c.rb", "d.rb"])
        processor = build_processor(pr_context, diff_source, history, fake_sink)

        message = await processor.run()

        assert sorted(q[2] for q in history.queries) == ["a.rb", "b.rb", "c.rb"]
        assert message is None
        assert fake_sink.messages == []

    async def test_single_reviewer_message(self, pr_context, make_diff_source, make_history, fake_sink):
        history = make_history({"a.rb": ["alice", "bob", "alice"]})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        message = await processor.run(max_reviewers=1)

        assert message.endswith("we identified @alice to be potential reviewer.")

    async def test_empty_tally_publishes_nothing(self, pr_context, make_diff_source, make_history, fake_sink):
        history = make_history({"a.rb": [None, None]})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        assert await processor.run() is None
        assert fake_sink.messages == []

    async def test_only_author_and_blacklisted_users_publishes_nothing(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"a.rb": ["carol", "ci-bot", "carol"]})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        assert await processor.run(user_blacklist=["ci-bot"]) is None
        assert fake_sink.messages == []

    async def test_all_files_excluded_publishes_nothing(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"Pods/a.rb": ["alice"]})
        processor = build_processor(pr_context, make_diff_source(["Pods/a.rb"]), history, fake_sink)

        assert await processor.run(file_blacklist=["Pods/.*"]) is None
        assert history.queries == []
        assert fake_sink.messages == []

    async def test_no_changed_files_publishes_nothing(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        processor = build_processor(pr_context, make_diff_source([]), make_history({}), fake_sink)

        assert await processor.run() is None
        assert fake_sink.messages == []

    async def test_zero_max_reviewers_publishes_nothing(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"a.rb": ["alice"]})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        assert await processor.run(max_reviewers=0) is None
        assert fake_sink.messages == []

    async def test_invalid_pattern_fails_before_queries(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"a.rb": ["alice"]})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        with pytest.raises(ConfigurationError):
            await processor.run(file_blacklist=["*.rb"])

        assert history.queries == []
        assert fake_sink.messages == []

    async def test_source_unavailable_aborts_run(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        diff_source = make_diff_source([], error=SourceUnavailableError("diff unavailable"))
        history = make_history({})
        processor = build_processor(pr_context, diff_source, history, fake_sink)

        with pytest.raises(SourceUnavailableError):
            await processor.run()

        assert history.queries == []
        assert fake_sink.messages == []

    async def test_partial_history_failure_still_publishes(
        self, pr_context, make_diff_source, make_history, fake_sink, history_failure
    ):
        history = make_history({
            "a.rb": history_failure("a.rb"),
            "b.rb": ["bob"],
        })
        processor = build_processor(pr_context, make_diff_source(["a.rb", "b.rb"]), history, fake_sink)

        message = await processor.run()

        assert "@bob" in message
        assert len(fake_sink.messages) == 1

    async def test_unreachable_history_fails_run(
        self, pr_context, make_diff_source, make_history, fake_sink
    ):
        history = make_history({"a.rb": httpx.ConnectError("unreachable")})
        processor = build_processor(pr_context, make_diff_source(["a.rb"]), history, fake_sink)

        with pytest.raises(MentionProcessorError):
            await processor.run()

        assert fake_sink.messages == []
