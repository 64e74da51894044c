# readings/exceptions.py


class ReadingError(Exception):
    """Base class for errors raised by the reading services."""


class InvalidSubmission(ReadingError, ValueError):
    """Unknown book, empty selection or a chapter outside the book."""


class LogNotFound(ReadingError, LookupError):
    """The reading log does not exist or belongs to another user."""


class StoreUnavailable(ReadingError):
    """
    The database could not be reached or a query failed.
    Nothing from the failed call was committed; the caller may retry.
    """


class ScorePending(ReadingError):
    """
    The logs were written (or deleted) but the score recount failed.
    Not retry-worthy: the stored score is settled by the next submission
    or session start. `result` carries the SubmissionResult when there is one.
    """

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result
