"""Error kinds raised while locating a repository and walking its history."""

from typing import Optional


class CommitLogError(Exception):
    """Base class for every commitlog failure."""

    def __init__(self, message: str, generation: Optional[int] = None):
        super().__init__(message)
        self.generation = generation


class NotARepository(CommitLogError):
    pass


class HistoryExhausted(CommitLogError):
    """Raised by a commit source when the requested generation does not exist.

    Not a failure: the walker treats it as the normal end of history.
    """


class SourceUnavailable(CommitLogError):
    """git could not be started, timed out, or failed for an unrecognized reason."""


class CommitParseError(CommitLogError):
    pass


class MalformedAuthorLine(CommitParseError):
    pass


class MalformedCommitterLine(CommitParseError):
    pass


class MissingTreeError(CommitParseError):
    pass


class DuplicateCommitError(CommitLogError, ValueError):
    """The same commit hash was inserted into one log twice."""
