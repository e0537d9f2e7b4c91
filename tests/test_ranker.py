"""
Tests for Reviewer Ranking

Tests exclusion, ordering, tie-breaking and truncation.
"""

import pytest

from reviewer_mention.mention.ranker import rank, rank_candidates


class TestRank:
    """Test suite for rank."""

    def test_excludes_pr_author_and_breaks_ties_by_login(self):
        tally = {"bob": 5, "alice": 5, "carol": 2}

        result = rank(tally, [], "carol", 2)

        assert result == ["alice", "bob"]

    def test_pr_author_excluded_without_blacklist(self):
        tally = {"carol": 50, "alice": 1}

        assert rank(tally, [], "carol", 3) == ["alice"]

    def test_blacklisted_users_excluded(self):
        tally = {"alice": 9, "danger-bot": 20, "bob": 3}

        assert rank(tally, ["danger-bot"], "carol", 3) == ["alice", "bob"]

    def test_orders_by_count_descending(self):
        tally = {"low": 1, "high": 10, "mid": 5}

        assert rank(tally, [], "nobody", 3) == ["high", "mid", "low"]

    def test_counts_never_increase_along_result(self):
        tally = {"a": 3, "b": 7, "c": 7, "d": 1, "e": 4, "f": 4}

        result = rank(tally, [], "nobody", 10)

        counts = [tally[login] for login in result]
        assert counts == sorted(counts, reverse=True)

    @pytest.mark.parametrize("max_reviewers", [0, -1, -10])
    def test_non_positive_max_returns_empty(self, max_reviewers):
        assert rank({"alice": 3}, [], "carol", max_reviewers) == []

    def test_large_max_returns_all_candidates(self):
        tally = {"alice": 3, "bob": 2}

        assert rank(tally, [], "carol", 1000) == ["alice", "bob"]

    @pytest.mark.parametrize("max_reviewers", [1, 2, 3, 5])
    def test_result_length_bounded_by_max(self, max_reviewers):
        tally = {f"user{i}": i for i in range(1, 5)}

        assert len(rank(tally, [], "carol", max_reviewers)) <= max_reviewers

    def test_empty_tally(self):
        assert rank({}, [], "carol", 3) == []

    def test_blacklist_is_not_mutated(self):
        blacklist = ["bot"]

        rank({"alice": 1, "carol": 2}, blacklist, "carol", 3)

        assert blacklist == ["bot"]

    def test_order_independent_of_tally_insertion_order(self):
        first = rank({"bob": 2, "alice": 2, "dave": 2}, [], "carol", 3)
        second = rank({"dave": 2, "alice": 2, "bob": 2}, [], "carol", 3)

        assert first == second == ["alice", "bob", "dave"]


class TestRankCandidates:
    """Test suite for rank_candidates."""

    def test_keeps_commit_counts(self):
        candidates = rank_candidates({"alice": 4, "bob": 6}, [], "carol")

        assert [(c.login, c.commits) for c in candidates] == [("bob", 6), ("alice", 4)]

    def test_accepts_any_iterable_blacklist(self):
        candidates = rank_candidates({"alice": 4, "bob": 6}, ("bob",), "carol")

        assert [c.login for c in candidates] == ["alice"]
