"""
Reviewer Ranking Module

Turns the author tally into an ordered, bounded list of reviewers.
"""

from typing import Iterable, List, Mapping

from reviewer_mention.models import RankedCandidate


def rank_candidates(
    tally: Mapping[str, int],
    blacklist: Iterable[str],
    pr_author: str
) -> List[RankedCandidate]:
    """
    Order eligible authors by commit count.

    The pull request author is always excluded, whether or not it is
    in the blacklist. Ties are broken by login so the order does not
    depend on the tally's insertion order.

    Args:
        tally: Author login -> commit count
        blacklist: Logins that must never be suggested
        pr_author: Login of the pull request opener

    Returns:
        Candidates sorted by commits descending, then login ascending
    """
    excluded = {pr_author} | set(blacklist)

    candidates = [
        RankedCandidate(login=login, commits=count)
        for login, count in tally.items()
        if login not in excluded
    ]
    candidates.sort(key=lambda c: (-c.commits, c.login))

    return candidates


def rank(
    tally: Mapping[str, int],
    blacklist: Iterable[str],
    pr_author: str,
    max_reviewers: int = 3
) -> List[str]:
    """
    Select at most `max_reviewers` reviewer logins from the tally.

    A non-positive `max_reviewers` yields an empty list; there is no
    upper bound.
    """
    if max_reviewers <= 0:
        return []

    candidates = rank_candidates(tally, blacklist, pr_author)
    return [candidate.login for candidate in candidates[:max_reviewers]]
