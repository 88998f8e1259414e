"""
retryfetch - Retry Logic.

Retry policy, exponential backoff and the retry engine.
"""

from .config import RetryPolicy
from .backoff import (
    backoff_waits,
    retry,
    async_retry,
    with_retry,
    async_with_retry,
)

__all__ = [
    "RetryPolicy",
    "backoff_waits",
    "retry",
    "async_retry",
    "with_retry",
    "async_with_retry",
]
