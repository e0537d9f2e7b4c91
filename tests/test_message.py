"""
Tests for Recommendation Message Formatting
"""

import pytest

from reviewer_mention.mention.message import format_mention_message


def test_single_reviewer_uses_singular():
    message = format_mention_message(["alice"])

    assert message == (
        "By analyzing the blame information on this pull request, "
        "we identified @alice to be potential reviewer."
    )


def test_multiple_reviewers_use_plural_and_commas():
    message = format_mention_message(["alice", "bob", "dave"])

    assert message == (
        "By analyzing the blame information on this pull request, "
        "we identified @alice, @bob, @dave to be potential reviewers."
    )


def test_empty_reviewers_rejected():
    with pytest.raises(ValueError):
        format_mention_message([])
