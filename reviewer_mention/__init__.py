"""
GitHub Pull Request Reviewer Mention Service

Recommends reviewers for a pull request by tallying who authored the
commits touching the files it changes, then mentions them in a comment.
"""

__version__ = "1.0.0"
__author__ = "Reviewer Mention Team"
