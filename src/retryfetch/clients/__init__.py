"""
retryfetch - HTTP Requests.

GET requests whose failures are classified for the retry engine.
"""

from .base import default_client, response_ok, response_retriable
from .http import (
    get,
    async_get,
    get_retry,
    async_get_retry,
    fetch_json,
    async_fetch_json,
    decode_json,
)

__all__ = [
    "default_client",
    "response_ok",
    "response_retriable",
    "get",
    "async_get",
    "get_retry",
    "async_get_retry",
    "fetch_json",
    "async_fetch_json",
    "decode_json",
]
