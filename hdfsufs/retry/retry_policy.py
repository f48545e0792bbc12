"""
Retry policies for remote filesystem calls.

Every retrying operation of the adapter builds a fresh policy at the start of
the call and runs the same loop:

.. code-block:: python

    policy = CountingRetry(5)
    while policy.attempt_retry():
        try:
            return client.exists(path)
        except OSError as e:
            last_error = e

:func:`retry_call` packages this loop. Attempts are issued back-to-back: the
policy only counts, it never sleeps. Remote failures it targets (timeouts,
stale handles) are expected to clear on an immediate retry.

Note:
    A policy instance belongs to one operation call. It must not be shared
    across calls or threads.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, TypeVar
import hdfsufs.config as config
from hdfsufs.exceptions import RetriesExhaustedError, UnderFileSystemError
from hdfsufs.logger import logger

T = TypeVar("T")


class RetryPolicy(ABC):
    """
    Abstract retry policy.

    Warning:
        The `RetryPolicy` class is an abstract class not intented to be used.
    """

    @abstractmethod
    def attempt_retry(self) -> bool:
        """
        Consume one attempt if any is left.

        Returns:
            bool: True if the caller may issue one more attempt, False otherwise.
        """
        raise NotImplementedError("attempt_retry() must be implemented in a subclass")

    @property
    @abstractmethod
    def retry_count(self) -> int:
        """ Number of attempts consumed so far. """
        raise NotImplementedError("retry_count must be implemented in a subclass")


class CountingRetry(RetryPolicy):
    """
    Retry policy allowing a fixed number of attempts.

    Attributes:
        max_attempts (int): Total number of attempts allowed.
    """

    def __init__(self, max_attempts: Optional[int] = None) -> None:
        """
        Initialize the policy.

        Args:
            max_attempts (Optional[int]): Total number of attempts allowed.
                Defaults to ``UFS_MAX_RETRIES`` from the configuration.

        Raises:
            ValueError: If `max_attempts` is lower than 1.
        """
        if max_attempts is None:
            max_attempts = int(config.UFS_MAX_RETRIES)
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self._attempts_used = 0

    def attempt_retry(self) -> bool:
        """ Consume one attempt while attempts remain. """
        if self._attempts_used < self.max_attempts:
            self._attempts_used += 1
            return True
        return False

    @property
    def retry_count(self) -> int:
        return self._attempts_used


def retry_call(operation: Callable[[], T],
               description: str,
               policy: Optional[RetryPolicy] = None) -> T:
    """
    Run `operation` until it succeeds or the retry policy is exhausted.

    Any :class:`OSError` raised by `operation` is logged together with the
    attempt count and recorded. :class:`FileNotFoundError`, errors of the
    adapter itself and non-I/O exceptions propagate immediately.

    Args:
        operation (Callable[[], T]): Zero-argument callable issuing the remote call.
        description (str): Human readable description used in log messages.
        policy (Optional[RetryPolicy]): Policy to use. A fresh :class:`CountingRetry`
            is built when omitted.

    Returns:
        T: The result of the first successful attempt.

    Raises:
        RetriesExhaustedError: If every allowed attempt failed. The last failure is chained.
    """
    if policy is None:
        policy = CountingRetry()
    last_error: Optional[OSError] = None
    while policy.attempt_retry():
        try:
            return operation()
        except (UnderFileSystemError, FileNotFoundError):
            # adapter decisions and absent paths are final, only client failures are retried
            raise
        except OSError as e:
            logger.error("Retry count %s : failed to %s : %s", policy.retry_count, description, e, exc_info=True)
            last_error = e
    raise RetriesExhaustedError(
        f"Failed to {description} after {policy.retry_count} attempts",
        attempts=policy.retry_count,
        last_error=last_error
    ) from last_error
