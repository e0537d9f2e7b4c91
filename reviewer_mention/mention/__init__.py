"""
Mention Package

The reviewer selection pipeline:
- selector: changed file filtering
- aggregator: per-author commit tallies
- ranker: reviewer ordering and truncation
- message: recommendation comment formatting
"""

from reviewer_mention.mention.aggregator import CommitAggregator
from reviewer_mention.mention.errors import (
    ConfigurationError,
    HistoryQueryError,
    MentionError,
    SourceUnavailableError,
)
from reviewer_mention.mention.message import format_mention_message
from reviewer_mention.mention.ranker import rank, rank_candidates
from reviewer_mention.mention.selector import (
    MAX_SELECTED_FILES,
    compile_exclusions,
    is_excluded,
    select_files,
)

__all__ = [
    "CommitAggregator",
    "ConfigurationError",
    "HistoryQueryError",
    "MentionError",
    "SourceUnavailableError",
    "format_mention_message",
    "rank",
    "rank_candidates",
    "MAX_SELECTED_FILES",
    "compile_exclusions",
    "is_excluded",
    "select_files",
]
