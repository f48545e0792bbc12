""" Retry policies applied to calls against the underlying filesystem client. """
from .retry_policy import RetryPolicy, CountingRetry, retry_call

__all__ = [
    'RetryPolicy',
    'CountingRetry',
    'retry_call',
]
