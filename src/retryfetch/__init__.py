"""
retryfetch - Retriable remote HTTP requests.

Retry a transiently failing operation with exponential backoff, honoring
cooperative cancellation, and GET helpers that classify HTTP failures for it.
"""

from .context import Context, with_client, get_client, get_async_client
from .clients import (
    get,
    async_get,
    get_retry,
    async_get_retry,
    fetch_json,
    async_fetch_json,
    response_ok,
    response_retriable,
)
from .exceptions import (
    FetchError,
    RetriableError,
    HTTPStatusError,
    RequestError,
    DecodeError,
    PermanentError,
    RetriesExhaustedError,
    ContextCancelledError,
    DeadlineExceededError,
    is_retriable,
    is_retriable_or_network,
)
from .retries import RetryPolicy, backoff_waits, retry, async_retry, with_retry, async_with_retry

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Context
    "Context",
    "with_client",
    "get_client",
    "get_async_client",
    # Requests
    "get",
    "async_get",
    "get_retry",
    "async_get_retry",
    "fetch_json",
    "async_fetch_json",
    "response_ok",
    "response_retriable",
    # Exceptions
    "FetchError",
    "RetriableError",
    "HTTPStatusError",
    "RequestError",
    "DecodeError",
    "PermanentError",
    "RetriesExhaustedError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "is_retriable",
    "is_retriable_or_network",
    # Retry
    "RetryPolicy",
    "backoff_waits",
    "retry",
    "async_retry",
    "with_retry",
    "async_with_retry",
]
