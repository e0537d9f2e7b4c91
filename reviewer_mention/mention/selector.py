"""
File Selection Module

Chooses which changed files have their history analyzed. Files matching
any exclusion pattern are dropped and only the first few survivors are
kept, which bounds the number of history queries per pull request.
"""

import re
from typing import List, Sequence

from reviewer_mention.logging_config import get_logger
from reviewer_mention.mention.errors import ConfigurationError

logger = get_logger(__name__)

# Independent of the number of reviewers requested
MAX_SELECTED_FILES = 3


def compile_exclusions(patterns: Sequence[str]) -> List[re.Pattern]:
    """
    Compile exclusion patterns.

    Each pattern is compiled on its own, so group names, group numbers
    and inline flags of one pattern never affect another.

    Args:
        patterns: Regular expressions matched anywhere in a file path

    Returns:
        Compiled patterns in configured order, empty when there is
        nothing to exclude

    Raises:
        ConfigurationError: If any pattern is not a valid regular expression
    """
    compiled = []

    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigurationError(
                f"Invalid file exclusion pattern {pattern!r}: {e}",
                pattern=pattern
            ) from e

    return compiled


def is_excluded(path: str, exclusions: Sequence[re.Pattern]) -> bool:
    """Check whether any compiled exclusion pattern matches the path."""
    return any(pattern.search(path) for pattern in exclusions)


def select_files(
    changed_files: Sequence[str],
    exclusion_patterns: Sequence[str]
) -> List[str]:
    """
    Filter changed files against the exclusion patterns.

    Args:
        changed_files: Changed file paths in diff order
        exclusion_patterns: Regular expressions of files to ignore

    Returns:
        At most MAX_SELECTED_FILES paths that match no pattern,
        in their original order

    Raises:
        ConfigurationError: If an exclusion pattern does not compile
    """
    exclusions = compile_exclusions(exclusion_patterns)

    survivors = [path for path in changed_files if not is_excluded(path, exclusions)]
    selected = survivors[:MAX_SELECTED_FILES]

    logger.debug(
        "Selected files for history analysis",
        changed=len(changed_files),
        excluded=len(changed_files) - len(survivors),
        selected=selected
    )

    return selected
