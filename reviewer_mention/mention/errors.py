"""Errors raised by the reviewer mention pipeline."""


class MentionError(Exception):
    """Base class for reviewer mention errors."""
    pass


class ConfigurationError(MentionError):
    """A configured file exclusion pattern is not a valid regular expression."""

    def __init__(self, message: str, pattern: str = None):
        super().__init__(message)
        self.pattern = pattern


class SourceUnavailableError(MentionError):
    """The pull request's changed files could not be obtained."""
    pass


class HistoryQueryError(MentionError):
    """The commit history of a single file could not be retrieved."""

    def __init__(self, message: str, path: str = None, status_code: int = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code
