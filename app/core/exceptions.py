"""
Domain exceptions for the job board.

Raised by the SQL compilers and the CRUD layer, and translated into HTTP
responses by the exception handler registered in main.py.
"""


class JobBoardError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(JobBoardError):
    """Caller supplied unusable input (e.g. an empty partial update)."""

    status_code = 400


class NotFoundError(JobBoardError):
    """Requested record does not exist."""

    status_code = 404
