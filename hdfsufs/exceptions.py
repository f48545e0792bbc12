"""
Exceptions raised by the hdfsufs adapter.

Failures coming from the underlying filesystem client are plain
:class:`OSError` (or :class:`FileNotFoundError`) and are propagated as-is.
The classes below cover failures the adapter itself decides on. They all
derive from :class:`OSError` so that callers handling I/O failures keep
catching them.
"""

from typing import Optional


class UnderFileSystemError(OSError):
    """ Base class of all errors raised by the adapter itself. """


class RetriesExhaustedError(UnderFileSystemError):
    """
    Raised when a retrying operation failed on every allowed attempt.

    The last failure of the underlying client is available as ``last_error``
    and is also chained as ``__cause__``.
    """

    def __init__(self, message: str, attempts: int, last_error: Optional[BaseException] = None) -> None:
        """
        Initialize the exception.

        Args:
            message (str): Error message.
            attempts (int): Number of attempts consumed.
            last_error (Optional[BaseException]): Last failure recorded by the retry loop.
        """
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class DirectoryDepthExceededError(UnderFileSystemError):
    """ Raised when mkdirs walks more ancestors than allowed without finding an existing one. """


class LoginError(UnderFileSystemError):
    """ Raised when the keytab login of a process role fails. """


class IdentityConflictError(LoginError):
    """ Raised when a login is attempted with a principal other than the one already installed. """
