"""Formatting of the reviewer recommendation comment."""

from typing import Sequence

MENTION_PREFIX = "@"

MESSAGE_TEMPLATE = (
    "By analyzing the blame information on this pull request, "
    "we identified {mentions} to be potential reviewer{plural}."
)


def format_mention_message(reviewers: Sequence[str]) -> str:
    """
    Build the comment mentioning the recommended reviewers.

    Args:
        reviewers: Non-empty ordered reviewer logins

    Returns:
        One sentence, pluralized when more than one reviewer is named

    Raises:
        ValueError: If no reviewers are given
    """
    if not reviewers:
        raise ValueError("At least one reviewer is required")

    mentions = ", ".join(f"{MENTION_PREFIX}{login}" for login in reviewers)
    return MESSAGE_TEMPLATE.format(
        mentions=mentions,
        plural="s" if len(reviewers) > 1 else ""
    )
