"""
retryfetch - Exception Hierarchy.

Custom exceptions for fetch operations with retry-awareness.
"""

from .base import (
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

__all__ = [
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
]
